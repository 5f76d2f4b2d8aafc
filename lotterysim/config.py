"""Environment-based game configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

PERCENTAGE_TOLERANCE = Decimal("0.001")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class PlayerConfiguration:
    """Table size, starting balance and per-player ticket limits."""

    minimum_count: int = 10
    maximum_count: int = 15
    starting_balance: Decimal = Decimal("10.00")
    min_tickets_per_player: int = 1
    max_tickets_per_player: int = 10

    def validate(self) -> None:
        if (
            self.minimum_count <= 0
            or self.maximum_count <= 0
            or self.minimum_count > self.maximum_count
        ):
            raise ConfigurationError("Invalid player count configuration")
        if self.starting_balance <= 0:
            raise ConfigurationError("Starting balance must be positive")
        if (
            self.min_tickets_per_player <= 0
            or self.max_tickets_per_player <= 0
            or self.min_tickets_per_player > self.max_tickets_per_player
        ):
            raise ConfigurationError("Invalid ticket count configuration")


@dataclass(frozen=True)
class TicketConfiguration:
    price: Decimal = Decimal("1.00")

    def validate(self) -> None:
        if self.price <= 0:
            raise ConfigurationError("Ticket price must be positive")


@dataclass(frozen=True)
class PrizeConfiguration:
    """Share of revenue per tier and share of tickets that win each lower tier.

    The four tier percentages must add up to 1. The winner percentages are the
    fraction of all tickets that win the second and third tier respectively.
    """

    grand_prize_percentage: Decimal = Decimal("0.50")
    second_tier_percentage: Decimal = Decimal("0.30")
    third_tier_percentage: Decimal = Decimal("0.10")
    house_profit_percentage: Decimal = Decimal("0.10")
    second_tier_winner_percentage: Decimal = Decimal("0.10")
    third_tier_winner_percentage: Decimal = Decimal("0.20")

    def validate(self) -> None:
        total = (
            self.grand_prize_percentage
            + self.second_tier_percentage
            + self.third_tier_percentage
            + self.house_profit_percentage
        )
        if abs(total - Decimal("1")) > PERCENTAGE_TOLERANCE:
            raise ConfigurationError("Prize percentages must sum to 100%")
        if not 0 < self.second_tier_winner_percentage <= 1:
            raise ConfigurationError(
                "Second tier winner percentage must be between 0 and 1"
            )
        if not 0 < self.third_tier_winner_percentage <= 1:
            raise ConfigurationError(
                "Third tier winner percentage must be between 0 and 1"
            )


@dataclass(frozen=True)
class DisplayConfiguration:
    show_prize_breakdown: bool = True
    clear_screen_between_phases: bool = True
    pause_between_phases: bool = True


@dataclass(frozen=True)
class GameConfiguration:
    """Complete configuration for one game."""

    players: PlayerConfiguration = field(default_factory=PlayerConfiguration)
    tickets: TicketConfiguration = field(default_factory=TicketConfiguration)
    prizes: PrizeConfiguration = field(default_factory=PrizeConfiguration)
    display: DisplayConfiguration = field(default_factory=DisplayConfiguration)
    seed: Optional[int] = None
    log_level: str = "WARNING"

    def validate(self) -> "GameConfiguration":
        """Validate every section and return ``self`` for chaining."""
        self.players.validate()
        self.tickets.validate()
        self.prizes.validate()
        return self


def _env_int(environ: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _env_decimal(environ: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise ConfigurationError(f"{name} must be a decimal number, got {raw!r}") from exc
    if not value.is_finite():
        raise ConfigurationError(f"{name} must be a finite number, got {raw!r}")
    return value


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}")


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    *,
    env_file: Optional[str] = None,
) -> GameConfiguration:
    """Build a validated :class:`GameConfiguration` from environment variables.

    Parameters
    ----------
    environ : Optional[Mapping[str, str]], default: None
        Variables to read. When omitted, a ``.env`` file is loaded into the
        process environment first (without overriding variables that are
        already set) and ``os.environ`` is used.
    env_file : Optional[str], default: None
        Path of the ``.env`` file to load. Ignored when ``environ`` is given.

    Returns
    -------
    GameConfiguration
        The parsed configuration. Unset variables keep their defaults.

    Raises
    ------
    ConfigurationError
        If a variable cannot be parsed or the resulting configuration is
        inconsistent.
    """

    if environ is None:
        load_dotenv(env_file)
        environ = os.environ

    players_default = PlayerConfiguration()
    tickets_default = TicketConfiguration()
    prizes_default = PrizeConfiguration()
    display_default = DisplayConfiguration()

    config = GameConfiguration(
        players=PlayerConfiguration(
            minimum_count=_env_int(environ, "LOTTERY_MIN_PLAYERS", players_default.minimum_count),
            maximum_count=_env_int(environ, "LOTTERY_MAX_PLAYERS", players_default.maximum_count),
            starting_balance=_env_decimal(
                environ, "LOTTERY_STARTING_BALANCE", players_default.starting_balance
            ),
            min_tickets_per_player=_env_int(
                environ,
                "LOTTERY_MIN_TICKETS_PER_PLAYER",
                players_default.min_tickets_per_player,
            ),
            max_tickets_per_player=_env_int(
                environ,
                "LOTTERY_MAX_TICKETS_PER_PLAYER",
                players_default.max_tickets_per_player,
            ),
        ),
        tickets=TicketConfiguration(
            price=_env_decimal(environ, "LOTTERY_TICKET_PRICE", tickets_default.price),
        ),
        prizes=PrizeConfiguration(
            grand_prize_percentage=_env_decimal(
                environ, "LOTTERY_GRAND_PRIZE_PERCENTAGE", prizes_default.grand_prize_percentage
            ),
            second_tier_percentage=_env_decimal(
                environ, "LOTTERY_SECOND_TIER_PERCENTAGE", prizes_default.second_tier_percentage
            ),
            third_tier_percentage=_env_decimal(
                environ, "LOTTERY_THIRD_TIER_PERCENTAGE", prizes_default.third_tier_percentage
            ),
            house_profit_percentage=_env_decimal(
                environ, "LOTTERY_HOUSE_PROFIT_PERCENTAGE", prizes_default.house_profit_percentage
            ),
            second_tier_winner_percentage=_env_decimal(
                environ,
                "LOTTERY_SECOND_TIER_WINNER_PERCENTAGE",
                prizes_default.second_tier_winner_percentage,
            ),
            third_tier_winner_percentage=_env_decimal(
                environ,
                "LOTTERY_THIRD_TIER_WINNER_PERCENTAGE",
                prizes_default.third_tier_winner_percentage,
            ),
        ),
        display=DisplayConfiguration(
            show_prize_breakdown=_env_bool(
                environ, "LOTTERY_SHOW_PRIZE_BREAKDOWN", display_default.show_prize_breakdown
            ),
            clear_screen_between_phases=_env_bool(
                environ, "LOTTERY_CLEAR_SCREEN", display_default.clear_screen_between_phases
            ),
            pause_between_phases=_env_bool(
                environ, "LOTTERY_PAUSE", display_default.pause_between_phases
            ),
        ),
        seed=_env_int(environ, "LOTTERY_SEED", None),
        log_level=(environ.get("LOG_LEVEL") or "WARNING").strip().upper(),
    )
    return config.validate()
