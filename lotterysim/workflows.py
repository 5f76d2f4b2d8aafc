import logging
from typing import TYPE_CHECKING, Optional

from sqlalchemy.orm import Session

from .config import GameConfiguration
from .errors import GameStateError, InvalidArgumentError, LotteryError
from .models import GameState, LotteryGame, Player
from .prize_draw.distribution import calculate_distribution
from .prize_draw.engine import DrawEngine
from .prize_draw.results import LotteryResults, PlayerWinSummary
from .prize_draw.rng import RandomSource

if TYPE_CHECKING:
    from .ui import ConsoleUI

logger = logging.getLogger(__name__)


def create_players(config: GameConfiguration, total_players: int) -> list[Player]:
    """Seat ``total_players`` players: the human in seat 1, CPUs after.

    Raises
    ------
    InvalidArgumentError
        If ``total_players`` is outside the configured range.
    """
    minimum = config.players.minimum_count
    maximum = config.players.maximum_count
    if total_players < minimum or total_players > maximum:
        raise InvalidArgumentError(
            f"Total players must be between {minimum} and {maximum}"
        )

    balance = config.players.starting_balance
    players = [Player(seat=1, starting_balance=balance, is_human=True)]
    for seat in range(2, total_players + 1):
        players.append(Player(seat=seat, starting_balance=balance, is_human=False))
    return players


def initialize_game(
    session: Session, config: GameConfiguration, total_players: int
) -> LotteryGame:
    """Create a game with its players and move it to ``INITIALIZED``.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session.
    config : GameConfiguration
        Validated game configuration.
    total_players : int
        Number of players, including the human.

    Returns
    -------
    LotteryGame
        The flushed game with its players seated.
    """
    game = LotteryGame()
    for player in create_players(config, total_players):
        game.players.append(player)
    game.state = GameState.INITIALIZED.value

    session.add(game)
    session.flush()

    logger.info("Initialized game %s with %d players", game.id, len(game.players))
    return game


def validate_human_ticket_purchase(
    config: GameConfiguration, player: Optional[Player], ticket_count: int
) -> bool:
    """Return whether the human ``player`` may buy ``ticket_count`` tickets."""
    if player is None or not player.is_human:
        return False
    limits = config.players
    if (
        ticket_count < limits.min_tickets_per_player
        or ticket_count > limits.max_tickets_per_player
    ):
        return False
    return player.can_purchase_tickets(
        ticket_count, config.tickets.price, limits.max_tickets_per_player
    )


def process_human_ticket_purchase(
    session: Session, game: LotteryGame, config: GameConfiguration, ticket_count: int
) -> bool:
    """Buy tickets for the human player.

    Returns ``False`` without changing anything when the game is not
    ``INITIALIZED``, there is no human player, or the purchase is not allowed.
    """
    if game.state != GameState.INITIALIZED:
        return False

    human = game.human_player
    if not validate_human_ticket_purchase(config, human, ticket_count):
        return False

    purchased = human.purchase_tickets(
        ticket_count, config.tickets.price, config.players.max_tickets_per_player
    )
    session.flush()

    logger.info("%s bought %d tickets", human.name, len(purchased))
    return len(purchased) == ticket_count


def process_cpu_ticket_purchases(
    session: Session,
    game: LotteryGame,
    config: GameConfiguration,
    random_source: RandomSource,
) -> None:
    """Let every CPU player buy a random number of tickets and close sales.

    Each CPU player with a positive allowance buys between 1 and
    ``min(allowance, max_tickets_per_player)`` tickets. Afterwards the game's
    revenue is computed and the game moves to ``TICKETS_PURCHASED``.

    Raises
    ------
    GameStateError
        If the game is not ``INITIALIZED``.
    """
    if game.state != GameState.INITIALIZED:
        raise GameStateError(
            "Game must be initialized before processing CPU purchases"
        )

    price = config.tickets.price
    max_per_player = config.players.max_tickets_per_player
    for player in game.players:
        if player.is_human:
            continue
        allowance = player.get_max_purchasable_tickets(price, max_per_player)
        if allowance > 0:
            count = random_source.next_in_range(1, min(allowance, max_per_player) + 1)
            player.purchase_tickets(count, price, max_per_player)
            logger.debug("%s bought %d tickets", player.name, count)

    game.update_after_ticket_purchases(price)
    session.flush()

    logger.info(
        "Ticket sales closed: %d tickets, revenue %s",
        len(game.tickets),
        game.total_revenue,
    )


def conduct_draw(
    session: Session,
    game: LotteryGame,
    config: GameConfiguration,
    random_source: RandomSource,
) -> LotteryResults:
    """Run the draw for ``game`` and move it to ``DRAW_COMPLETED``.

    The prize distribution is computed from the game's revenue and ticket
    count, then :class:`DrawEngine` picks and pays the winners. The realized
    house profit is stored on the game.

    Raises
    ------
    GameStateError
        If ticket sales have not closed, or no tickets were sold.
    """
    if game.state != GameState.TICKETS_PURCHASED:
        raise GameStateError("Tickets must be purchased before conducting draw")

    tickets = list(game.tickets)
    if not tickets:
        raise GameStateError("No tickets available for draw")

    distribution = calculate_distribution(game.total_revenue, len(tickets), config.prizes)
    logger.info(
        "Prize distribution: grand %s, second %d x %s, third %d x %s, expected profit %s",
        distribution.grand_prize_amount,
        distribution.second_tier_winner_count,
        distribution.second_tier_prize_per_winner,
        distribution.third_tier_winner_count,
        distribution.third_tier_prize_per_winner,
        distribution.expected_house_profit,
    )

    engine = DrawEngine(random_source, config.tickets.price)
    results = engine.conduct_draw(tickets, distribution)

    game.house_profit = results.house_profit
    game.state = GameState.DRAW_COMPLETED.value
    session.flush()

    return results


def get_player_win_summaries(results: Optional[LotteryResults]) -> list[PlayerWinSummary]:
    """Return per-player winnings, richest first; empty before a draw."""
    if results is None:
        return []
    return results.player_summaries()


def run_game(
    session: Session,
    config: GameConfiguration,
    ui: "ConsoleUI",
    random_source: RandomSource,
    player_count: Optional[int] = None,
) -> Optional[LotteryResults]:
    """Play one full round through ``ui``.

    The flow is: welcome, player setup, the human's ticket purchase, CPU
    purchases, the game state, the draw, and the results. When
    ``player_count`` is omitted it is drawn uniformly from the configured
    range.

    Returns
    -------
    Optional[LotteryResults]
        The draw results, or ``None`` when the round was abandoned because of
        a :class:`LotteryError` (the error is shown through ``ui``).
    """
    try:
        ui.display_welcome()
        ui.wait_for_continue()

        if player_count is None:
            player_count = random_source.next_in_range(
                config.players.minimum_count, config.players.maximum_count + 1
            )
        ui.display_player_count(player_count)

        game = initialize_game(session, config, player_count)

        human = game.human_player
        ticket_count = ui.get_human_ticket_count(human)
        if not process_human_ticket_purchase(session, game, config, ticket_count):
            ui.display_error("Failed to purchase tickets. Please try again.")
            return None

        process_cpu_ticket_purchases(session, game, config, random_source)

        ui.display_game_state(game)
        ui.wait_for_continue()

        ui.display_welcome()
        results = conduct_draw(session, game, config, random_source)

        ui.display_results(game, results, get_player_win_summaries(results))
        ui.wait_for_continue()
        return results
    except LotteryError as exc:
        logger.warning("Game aborted: %s", exc)
        ui.display_error(f"An unexpected error occurred: {exc}")
        ui.wait_for_continue()
        return None
