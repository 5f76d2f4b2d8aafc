"""Database model for a single lottery round."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .money_type import Money

if TYPE_CHECKING:
    from .player import Player
    from .ticket import Ticket


class GameState(str, Enum):
    """Lifecycle of a game: each round moves forward through these states once."""

    NOT_STARTED = "not_started"
    INITIALIZED = "initialized"
    TICKETS_PURCHASED = "tickets_purchased"
    DRAW_COMPLETED = "draw_completed"


class LotteryGame(Base):
    """One round of the lottery: its players, the ticket pool and the outcome."""

    def __init__(
        self,
        state: GameState = GameState.NOT_STARTED,
        created_at: Optional[datetime] = None,
    ):
        """Create a new :class:`LotteryGame`.

        Parameters
        ----------
        state : GameState, optional
            Initial state. Defaults to ``GameState.NOT_STARTED``.
        created_at : datetime, optional
            Explicit creation timestamp.
        """

        self.state = GameState(state).value
        self.total_revenue = Decimal("0")
        self.house_profit = Decimal("0")
        self.ticket_sequence = 0
        self.created_at = created_at or datetime.now(timezone.utc)

    __tablename__ = "lottery_games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    state: Mapped[str] = mapped_column(
        String(32), nullable=False, default=GameState.NOT_STARTED.value
    )
    total_revenue: Mapped[Decimal] = mapped_column(
        Money(), nullable=False, default=Decimal("0")
    )
    """Ticket count multiplied by the ticket price once purchases close."""

    house_profit: Mapped[Decimal] = mapped_column(
        Money(), nullable=False, default=Decimal("0")
    )
    """Realized profit recorded after the draw."""

    ticket_sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """Last ticket number handed out in this game."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        default=lambda: datetime.now(timezone.utc),
    )

    # relationships
    players: Mapped[list["Player"]] = relationship(
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="Player.seat",
    )
    tickets: Mapped[list["Ticket"]] = relationship(
        back_populates="game",
        order_by="Ticket.number",
    )

    __table_args__ = (
        CheckConstraint(
            "state IN ('not_started','initialized','tickets_purchased','draw_completed')",
            name="state_enum",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<LotteryGame(id={self.id}, state='{self.state}', "
            f"players={len(self.players)}, tickets={len(self.tickets)}, "
            f"total_revenue={self.total_revenue})>"
        )

    @property
    def human_player(self) -> Optional["Player"]:
        """Return the human player, if one has been seated."""
        return next((p for p in self.players if p.is_human), None)

    def allocate_ticket_number(self) -> int:
        """Hand out the next ticket number for this game.

        Numbers start at 1 for every game, so two games never share a sequence.
        """
        self.ticket_sequence += 1
        return self.ticket_sequence

    def update_after_ticket_purchases(self, ticket_price: Decimal) -> None:
        """Close ticket sales: compute revenue and move to ``TICKETS_PURCHASED``."""
        self.total_revenue = len(self.tickets) * ticket_price
        self.state = GameState.TICKETS_PURCHASED.value
