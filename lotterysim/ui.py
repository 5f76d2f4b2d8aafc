"""Console rendering and input for a lottery round."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional, TextIO

from .config import GameConfiguration
from .models import PrizeTier

if TYPE_CHECKING:
    from .models import LotteryGame, Player
    from .prize_draw.results import LotteryResults, PlayerWinSummary

RULE = "=" * 63
CLEAR_SCREEN = "\033[2J\033[H"


class ConsoleUI:
    """Text user interface bound to a pair of streams.

    Parameters
    ----------
    config : GameConfiguration
        Configuration shown in the rules and used for purchase validation.
    stdin : Optional[TextIO], default: None
        Input stream. Defaults to :data:`sys.stdin`.
    stdout : Optional[TextIO], default: None
        Output stream. Defaults to :data:`sys.stdout`.
    """

    def __init__(
        self,
        config: GameConfiguration,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        self._config = config
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout

    # -------- low level --------
    def _write_line(self, message: str = "") -> None:
        self._stdout.write(message + "\n")

    def _write(self, message: str) -> None:
        self._stdout.write(message)
        self._stdout.flush()

    def _read_line(self) -> str:
        line = self._stdin.readline()
        if line == "":
            raise EOFError("input stream closed")
        return line.strip()

    def _header(self, title: str) -> None:
        self._write_line(RULE)
        self._write_line(title.center(63).rstrip())
        self._write_line(RULE)

    # -------- phases --------
    def display_welcome(self) -> None:
        cfg = self._config
        if cfg.display.clear_screen_between_phases:
            self._write(CLEAR_SCREEN)

        self._header("LOTTERY GAME")
        self._write_line()
        self._write_line("Welcome to the Simplified Lottery Game!")
        self._write_line()
        self._write_line("GAME RULES:")
        self._write_line(
            f"- Players: {cfg.players.minimum_count}-{cfg.players.maximum_count} "
            "total (you + CPU players)"
        )
        self._write_line(f"- Starting balance: ${cfg.players.starting_balance:.2f} per player")
        self._write_line(f"- Ticket price: ${cfg.tickets.price:.2f} each")
        self._write_line(
            f"- Ticket limit: {cfg.players.min_tickets_per_player}-"
            f"{cfg.players.max_tickets_per_player} tickets per player"
        )
        self._write_line()
        prizes = cfg.prizes
        self._write_line("PRIZE DISTRIBUTION:")
        self._write_line(
            f"- Grand Prize: 1 ticket wins {prizes.grand_prize_percentage:.0%} of total revenue"
        )
        self._write_line(
            f"- Second Tier: {prizes.second_tier_winner_percentage:.0%} of tickets share "
            f"{prizes.second_tier_percentage:.0%} of revenue"
        )
        self._write_line(
            f"- Third Tier: {prizes.third_tier_winner_percentage:.0%} of tickets share "
            f"{prizes.third_tier_percentage:.0%} of revenue"
        )
        self._write_line(f"- House keeps remaining {prizes.house_profit_percentage:.0%}")
        self._write_line()

    def display_player_count(self, player_count: int) -> None:
        self._write_line()
        self._header("PLAYER SETUP")
        self._write_line(f"Randomly selected {player_count} players for this game!")
        self._write_line(
            f"   (Range: {self._config.players.minimum_count}-"
            f"{self._config.players.maximum_count} players)"
        )
        self._write_line()

    def get_human_ticket_count(self, player: "Player") -> int:
        """Prompt until the human enters a count they may buy.

        Raises
        ------
        EOFError
            If the input stream ends before a valid count is entered.
        """
        limits = self._config.players
        price = self._config.tickets.price

        self._write_line()
        self._write_line(f"Player 1 (You) - Balance: ${player.balance:.2f}")
        self._write_line(
            f"You can purchase between {limits.min_tickets_per_player} and "
            f"{player.get_max_purchasable_tickets(price, limits.max_tickets_per_player)} tickets."
        )
        self._write_line()

        while True:
            self._write("How many tickets would you like to purchase? ")
            raw = self._read_line()
            try:
                ticket_count = int(raw)
            except ValueError:
                self.display_error("Please enter a valid number.")
                continue

            if (
                ticket_count < limits.min_tickets_per_player
                or ticket_count > limits.max_tickets_per_player
            ):
                self.display_error(
                    f"You must purchase between {limits.min_tickets_per_player} and "
                    f"{limits.max_tickets_per_player} tickets."
                )
            elif not player.can_purchase_tickets(
                ticket_count, price, limits.max_tickets_per_player
            ):
                affordable = player.get_max_purchasable_tickets(
                    price, limits.max_tickets_per_player
                )
                self.display_error(
                    f"You can only afford {affordable} tickets with your current balance."
                )
            else:
                return ticket_count

    def display_game_state(self, game: "LotteryGame") -> None:
        self._write_line()
        self._header("GAME STATE")
        for player in sorted(game.players, key=lambda p: p.seat):
            self._write_line(
                f"{player.name}: {len(player.tickets)} tickets, Balance: ${player.balance:.2f}"
            )
        self._write_line()
        self._write_line(f"Total tickets sold: {len(game.tickets)}")
        self._write_line(f"Total revenue: ${game.total_revenue:.2f}")
        self._write_line()

    def display_results(
        self,
        game: "LotteryGame",
        results: "LotteryResults",
        summaries: list["PlayerWinSummary"],
    ) -> None:
        self._header("LOTTERY RESULTS")
        self._write_line()
        self._write_line(f"Total tickets sold: {len(game.tickets)}")
        self._write_line(f"Total revenue: ${results.total_revenue:.2f}")
        self._write_line()

        self._display_tiers(results)
        self._display_player_summary(summaries)
        self._write_line(f"House profit: ${results.house_profit:.2f}")
        self._write_line()

        if self._config.display.show_prize_breakdown:
            self._display_prize_breakdown(results)

    def _display_tiers(self, results: "LotteryResults") -> None:
        self._write_line("PRIZE BREAKDOWN BY TIER:")
        self._write_line()
        tiers = (
            (PrizeTier.GRAND, results.grand_prize_winners, ""),
            (PrizeTier.SECOND_TIER, results.second_tier_winners, " each"),
            (PrizeTier.THIRD_TIER, results.third_tier_winners, " each"),
        )
        for tier, winners, suffix in tiers:
            if not winners:
                continue
            self._write_line(f"{tier.label.upper()} (${winners[0].win_amount:.2f}{suffix}):")
            for ticket in winners:
                self._write_line(f"   {ticket.owner.name} - Ticket #{ticket.number}")
            self._write_line()

    def _display_player_summary(self, summaries: list["PlayerWinSummary"]) -> None:
        self._write_line("PLAYER SUMMARY:")
        self._write_line()
        if not summaries:
            self._write_line("No winners in this draw.")
            self._write_line()
            return

        price = self._config.tickets.price
        for summary in summaries:
            bought = len(summary.player.tickets)
            net = summary.total_winnings - bought * price
            self._write_line(f"{summary.player.name}:")
            self._write_line(f"   Tickets purchased: {bought}")
            self._write_line(f"   Winning tickets: {summary.winning_ticket_count}")
            self._write_line(f"   Total winnings: ${summary.total_winnings:.2f}")
            self._write_line(f"   Net result: ${net:.2f}")
            self._write_line()

    def _display_prize_breakdown(self, results: "LotteryResults") -> None:
        def _paid(winners) -> str:
            return f"${sum((t.win_amount for t in winners), 0):.2f}"

        self._write_line("PRIZE BREAKDOWN:")
        self._write_line(
            f"- Grand Prize: {_paid(results.grand_prize_winners)} "
            f"({len(results.grand_prize_winners)} winner)"
        )
        self._write_line(
            f"- Second Tier: {_paid(results.second_tier_winners)} "
            f"({len(results.second_tier_winners)} winners)"
        )
        self._write_line(
            f"- Third Tier: {_paid(results.third_tier_winners)} "
            f"({len(results.third_tier_winners)} winners)"
        )
        self._write_line(f"- Total Revenue: ${results.total_revenue:.2f}")

    def display_error(self, message: str) -> None:
        self._write_line(f"ERROR: {message}")

    def wait_for_continue(self) -> None:
        """Pause until the user presses Enter; skipped when pauses are disabled."""
        if not self._config.display.pause_between_phases:
            return
        self._write_line()
        self._write("Press Enter to continue...")
        # A closed input stream simply stops pausing.
        self._stdin.readline()
        self._write_line()
