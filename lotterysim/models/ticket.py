from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .money_type import Money

if TYPE_CHECKING:
    from .game import LotteryGame
    from .player import Player


class PrizeTier(str, Enum):
    """Mutually exclusive prize categories, in draw priority order."""

    GRAND = "grand"
    SECOND_TIER = "second_tier"
    THIRD_TIER = "third_tier"

    @property
    def label(self) -> str:
        return {
            PrizeTier.GRAND: "Grand Prize",
            PrizeTier.SECOND_TIER: "Second Tier",
            PrizeTier.THIRD_TIER: "Third Tier",
        }[self]


class Ticket(Base):
    """A ticket bought by a player; the draw may turn it into a winner once."""

    def __init__(
        self,
        owner: "Player",
        number: int,
        game: Optional["LotteryGame"] = None,
        purchased_at: Optional[datetime] = None,
    ):
        """Create a new :class:`Ticket`.

        Parameters
        ----------
        owner : Player
            Player who bought the ticket.
        number : int
            Identifier allocated by the game, see
            :meth:`LotteryGame.allocate_ticket_number`.
        game : LotteryGame, optional
            Game the ticket belongs to. Defaults to the owner's game.
        purchased_at : datetime, optional
            Explicit purchase timestamp.
        """

        if owner is None:
            raise ValueError("Ticket must have an owner")

        self.number = number
        self.purchased_at = purchased_at or datetime.now(timezone.utc)
        self.is_winner = False
        self.prize_tier = None
        self.win_amount = Decimal("0")

        # Append through the parent collections so a ticket bought by a player
        # that is already in a session is cascaded into that session.
        game = game if game is not None else owner.game
        if game is not None:
            game.tickets.append(self)
        owner.tickets.append(self)

    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(
        ForeignKey("lottery_games.id", ondelete="CASCADE"), nullable=False, index=True
    )
    player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True
    )
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    purchased_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    is_winner: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    prize_tier: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    win_amount: Mapped[Decimal] = mapped_column(
        Money(), nullable=False, default=Decimal("0")
    )

    # relationships
    owner: Mapped["Player"] = relationship(back_populates="tickets")
    game: Mapped["LotteryGame"] = relationship(back_populates="tickets")

    __table_args__ = (
        UniqueConstraint("game_id", "number", name="uq_game_ticket_number"),
        CheckConstraint(
            "prize_tier IS NULL OR prize_tier IN ('grand','second_tier','third_tier')",
            name="prize_tier_enum",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Ticket(id={self.id}, number={self.number}, player_id={self.player_id}, "
            f"is_winner={self.is_winner}, prize_tier='{self.prize_tier}', "
            f"win_amount={self.win_amount})>"
        )

    def __str__(self) -> str:
        if self.is_winner:
            status = f"WINNER - {PrizeTier(self.prize_tier).label} (${self.win_amount:.2f})"
        else:
            status = "Not a winner"
        return f"Ticket #{self.number} - Owner: {self.owner.name} - {status}"

    def mark_as_winner(self, prize_tier: PrizeTier, win_amount: Decimal) -> None:
        """Record that this ticket won ``win_amount`` in ``prize_tier``.

        A ticket can only win once.

        Raises
        ------
        ValueError
            If the ticket already won or ``win_amount`` is negative.
        TypeError
            If ``win_amount`` is not a :class:`~decimal.Decimal`.
        """
        if self.is_winner:
            raise ValueError(f"Ticket #{self.number} has already been drawn as a winner")
        if not isinstance(win_amount, Decimal):
            raise TypeError("win_amount must be a Decimal")
        if win_amount < 0:
            raise ValueError("win_amount must not be negative")

        self.is_winner = True
        self.prize_tier = PrizeTier(prize_tier).value
        self.win_amount = win_amount
