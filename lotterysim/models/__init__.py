from .base import Base

# import models so metadata.create_all sees every mapper
from .game import GameState, LotteryGame  # noqa: F401
from .player import Player  # noqa: F401
from .ticket import PrizeTier, Ticket  # noqa: F401

__all__ = [
    "Base",
    "GameState",
    "LotteryGame",
    "Player",
    "PrizeTier",
    "Ticket",
]
