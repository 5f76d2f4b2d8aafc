from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .money_type import Money
from .ticket import Ticket

if TYPE_CHECKING:
    from .game import LotteryGame

DEFAULT_STARTING_BALANCE = Decimal("10.00")
DEFAULT_TICKET_PRICE = Decimal("1.00")
MAX_TICKETS_PER_PLAYER = 10


class Player(Base):
    """A participant in a lottery game, either the human or a CPU opponent."""

    def __init__(
        self,
        seat: int,
        starting_balance: Decimal = DEFAULT_STARTING_BALANCE,
        is_human: bool = False,
        game: Optional["LotteryGame"] = None,
    ):
        """Create a new :class:`Player`.

        Parameters
        ----------
        seat : int
            1-based position at the table. The human always sits in seat 1.
        starting_balance : Decimal, optional
            Balance available for buying tickets. Defaults to ``10.00``.
        is_human : bool, optional
            Whether the player is controlled from the console.
        game : LotteryGame, optional
            Game the player joins.
        """

        self.seat = seat
        self.name = "Player 1" if is_human else f"Player {seat}"
        self.balance = Decimal(starting_balance)
        self.is_human = is_human
        if game is not None:
            game.players.append(self)

    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(
        ForeignKey("lottery_games.id", ondelete="CASCADE"), nullable=False, index=True
    )
    seat: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    balance: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    is_human: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # relationships
    game: Mapped["LotteryGame"] = relationship(back_populates="players")
    tickets: Mapped[list["Ticket"]] = relationship(
        back_populates="owner",
        cascade="all, delete-orphan",
        order_by="Ticket.number",
    )

    __table_args__ = (UniqueConstraint("game_id", "seat", name="uq_game_seat"),)

    def __repr__(self) -> str:
        return (
            f"<Player(id={self.id}, seat={self.seat}, name='{self.name}', "
            f"balance={self.balance}, tickets={len(self.tickets)})>"
        )

    def __str__(self) -> str:
        return f"{self.name} - Balance: ${self.balance:.2f}, Tickets: {len(self.tickets)}"

    def can_purchase_tickets(
        self,
        ticket_count: int,
        ticket_price: Decimal = DEFAULT_TICKET_PRICE,
        max_tickets: int = MAX_TICKETS_PER_PLAYER,
    ) -> bool:
        """Return whether the player may buy ``ticket_count`` more tickets.

        The count must be between 1 and ``max_tickets``, the player's holding
        must stay within ``max_tickets``, and the balance must cover the cost.
        """
        if ticket_count < 1 or ticket_count > max_tickets:
            return False
        if len(self.tickets) + ticket_count > max_tickets:
            return False
        return self.balance >= ticket_count * ticket_price

    def purchase_tickets(
        self,
        ticket_count: int,
        ticket_price: Decimal = DEFAULT_TICKET_PRICE,
        max_tickets: int = MAX_TICKETS_PER_PLAYER,
    ) -> list[Ticket]:
        """Buy ``ticket_count`` tickets and debit the balance.

        Parameters
        ----------
        ticket_count : int
            Number of tickets to buy.
        ticket_price : Decimal, optional
            Price of a single ticket.
        max_tickets : int, optional
            Maximum number of tickets a player may hold.

        Returns
        -------
        list[Ticket]
            The newly created tickets, or an empty list when the purchase is
            not allowed (nothing is debited in that case).

        Raises
        ------
        ValueError
            If the player has not joined a game, since ticket numbers are
            allocated by the game.
        """
        if not self.can_purchase_tickets(ticket_count, ticket_price, max_tickets):
            return []
        if self.game is None:
            raise ValueError("Player must join a game before purchasing tickets")

        self.balance -= ticket_count * ticket_price

        purchased: list[Ticket] = []
        for _ in range(ticket_count):
            # The ticket appends itself to ``game.tickets`` and ``self.tickets``.
            ticket = Ticket(owner=self, number=self.game.allocate_ticket_number())
            purchased.append(ticket)
        return purchased

    def get_max_purchasable_tickets(
        self,
        ticket_price: Decimal = DEFAULT_TICKET_PRICE,
        max_tickets: int = MAX_TICKETS_PER_PLAYER,
    ) -> int:
        """Return how many more tickets the balance and holding limit allow."""
        max_by_balance = int(self.balance // ticket_price)
        max_by_limit = max_tickets - len(self.tickets)
        return min(max_by_balance, max_by_limit)

    def add_winnings(self, amount: Decimal) -> None:
        """Credit ``amount`` to the balance. Non-positive amounts are ignored."""
        if amount > 0:
            self.balance += amount
