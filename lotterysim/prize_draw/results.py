"""Value objects describing the outcome of a draw."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import Player, Ticket


@dataclass
class PlayerWinSummary:
    """Winnings of one player across all tiers."""

    player: "Player"
    winning_ticket_count: int
    total_winnings: Decimal


@dataclass
class LotteryResults:
    """Output of :meth:`DrawEngine.conduct_draw`.

    Attributes
    ----------
    grand_prize_winners : list[Ticket]
        Grand prize ticket; empty only for an empty pool.
    second_tier_winners : list[Ticket]
        Second tier tickets in the order they were drawn.
    third_tier_winners : list[Ticket]
        Third tier tickets in the order they were drawn.
    total_revenue : Decimal
        Ticket count multiplied by the ticket price.
    house_profit : Decimal
        ``total_revenue`` minus everything actually paid out.
    """

    grand_prize_winners: list["Ticket"] = field(default_factory=list)
    second_tier_winners: list["Ticket"] = field(default_factory=list)
    third_tier_winners: list["Ticket"] = field(default_factory=list)
    total_revenue: Decimal = Decimal("0")
    house_profit: Decimal = Decimal("0")

    @property
    def all_winners(self) -> list["Ticket"]:
        """Winning tickets in draw order: grand, then second, then third tier."""
        return [
            *self.grand_prize_winners,
            *self.second_tier_winners,
            *self.third_tier_winners,
        ]

    @property
    def total_paid(self) -> Decimal:
        return sum((t.win_amount for t in self.all_winners), Decimal("0"))

    def player_summaries(self) -> list[PlayerWinSummary]:
        """Group winning tickets by owner, richest first.

        Players with equal winnings keep the order of their first win.
        """
        summaries: dict[int, PlayerWinSummary] = {}
        for ticket in self.all_winners:
            key = id(ticket.owner)
            summary = summaries.get(key)
            if summary is None:
                summary = PlayerWinSummary(
                    player=ticket.owner,
                    winning_ticket_count=0,
                    total_winnings=Decimal("0"),
                )
                summaries[key] = summary
            summary.winning_ticket_count += 1
            summary.total_winnings += ticket.win_amount
        return sorted(summaries.values(), key=lambda s: s.total_winnings, reverse=True)


__all__ = ["LotteryResults", "PlayerWinSummary"]
