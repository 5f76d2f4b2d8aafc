"""Turn pooled revenue into tiered prize amounts and winner counts."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Union

from ..config import PrizeConfiguration
from ..errors import InvalidArgumentError

Amount = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class PrizeDistribution:
    """Prize amounts and winner counts computed once per draw.

    Attributes
    ----------
    grand_prize_amount : Decimal
        Amount paid to the single grand prize winner.
    second_tier_total_amount : Decimal
        Pool shared by the second tier winners.
    second_tier_prize_per_winner : Decimal
        ``second_tier_total_amount`` divided by ``second_tier_winner_count``.
    third_tier_total_amount : Decimal
        Pool shared by the third tier winners.
    third_tier_prize_per_winner : Decimal
        ``third_tier_total_amount`` divided by ``third_tier_winner_count``.
    second_tier_winner_count : int
        Configured number of second tier winners; at least 1.
    third_tier_winner_count : int
        Configured number of third tier winners; at least 1.
    expected_house_profit : Decimal
        Revenue left after the three tier pools. Informational only: the
        realized profit reported by the draw is authoritative and is higher
        when there are too few tickets to pay every configured winner.
    """

    grand_prize_amount: Decimal
    second_tier_total_amount: Decimal
    second_tier_prize_per_winner: Decimal
    third_tier_total_amount: Decimal
    third_tier_prize_per_winner: Decimal
    second_tier_winner_count: int
    third_tier_winner_count: int
    expected_house_profit: Decimal

    @property
    def total_prize_pool(self) -> Decimal:
        return (
            self.grand_prize_amount
            + self.second_tier_total_amount
            + self.third_tier_total_amount
        )


def _to_decimal(value: Amount, name: str) -> Decimal:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be a number, not a bool")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}") from exc


def _winner_count(total_ticket_count: int, winner_percentage: Decimal) -> int:
    """``max(1, round(tickets * percentage))`` with banker's rounding."""
    raw = Decimal(total_ticket_count) * winner_percentage
    return max(1, int(raw.to_integral_value(rounding=ROUND_HALF_EVEN)))


def calculate_distribution(
    total_revenue: Amount,
    total_ticket_count: int,
    prize_config: PrizeConfiguration,
) -> PrizeDistribution:
    """Compute the :class:`PrizeDistribution` for a draw.

    Parameters
    ----------
    total_revenue : Decimal
        Revenue pooled from ticket sales. ``int`` and numeric ``str`` values
        are accepted; ``float`` values are converted through ``str``.
    total_ticket_count : int
        Number of tickets in the pool.
    prize_config : PrizeConfiguration
        Tier and winner percentages. Assumed to be validated already.

    Returns
    -------
    PrizeDistribution
        Tier amounts, winner counts and per-winner amounts.

    Notes
    -----
    Tier amounts are plain proportional shares of the revenue. Per-winner
    amounts use the current :mod:`decimal` context, so an uneven split such as
    ``10.00 / 3`` leaves a remainder that is not redistributed.

    Raises
    ------
    InvalidArgumentError
        If ``total_revenue`` or ``total_ticket_count`` is not positive.
    """

    revenue = _to_decimal(total_revenue, "total_revenue")
    if isinstance(total_ticket_count, bool) or not isinstance(total_ticket_count, int):
        raise InvalidArgumentError("total_ticket_count must be an integer")
    if not revenue.is_finite() or revenue <= 0 or total_ticket_count <= 0:
        raise InvalidArgumentError("Total revenue and ticket count must be positive")

    grand_prize_amount = revenue * prize_config.grand_prize_percentage
    second_tier_total_amount = revenue * prize_config.second_tier_percentage
    third_tier_total_amount = revenue * prize_config.third_tier_percentage

    second_tier_winner_count = _winner_count(
        total_ticket_count, prize_config.second_tier_winner_percentage
    )
    third_tier_winner_count = _winner_count(
        total_ticket_count, prize_config.third_tier_winner_percentage
    )

    expected_house_profit = revenue - (
        grand_prize_amount + second_tier_total_amount + third_tier_total_amount
    )

    return PrizeDistribution(
        grand_prize_amount=grand_prize_amount,
        second_tier_total_amount=second_tier_total_amount,
        second_tier_prize_per_winner=second_tier_total_amount / second_tier_winner_count,
        third_tier_total_amount=third_tier_total_amount,
        third_tier_prize_per_winner=third_tier_total_amount / third_tier_winner_count,
        second_tier_winner_count=second_tier_winner_count,
        third_tier_winner_count=third_tier_winner_count,
        expected_house_profit=expected_house_profit,
    )


class PrizeDistributionCalculator:
    """Calculator bound to a prize configuration."""

    def __init__(self, prize_config: PrizeConfiguration) -> None:
        if prize_config is None:
            raise InvalidArgumentError("prize_config is required")
        self._prize_config = prize_config

    @property
    def prize_config(self) -> PrizeConfiguration:
        return self._prize_config

    def calculate(self, total_revenue: Amount, total_ticket_count: int) -> PrizeDistribution:
        """Delegate to :func:`calculate_distribution` with the bound configuration."""
        return calculate_distribution(total_revenue, total_ticket_count, self._prize_config)


__all__ = [
    "PrizeDistribution",
    "PrizeDistributionCalculator",
    "calculate_distribution",
]
