"""Prize distribution and draw subsystem."""

from .distribution import (
    PrizeDistribution,
    PrizeDistributionCalculator,
    calculate_distribution,
)
from .engine import DrawEngine
from .results import LotteryResults, PlayerWinSummary
from .rng import (
    RandomSource,
    ScriptedRandomSource,
    SeededRandomSource,
    create_random_source,
)

__all__ = [
    "DrawEngine",
    "LotteryResults",
    "PlayerWinSummary",
    "PrizeDistribution",
    "PrizeDistributionCalculator",
    "RandomSource",
    "ScriptedRandomSource",
    "SeededRandomSource",
    "calculate_distribution",
    "create_random_source",
]
