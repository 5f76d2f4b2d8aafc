"""Exception types raised by the lottery simulation."""

from __future__ import annotations


class LotteryError(Exception):
    """Base class for errors raised by this package."""


class InvalidArgumentError(LotteryError, ValueError):
    """An operation received an argument it cannot work with.

    Raised synchronously, before any state is mutated.
    """


class ConfigurationError(LotteryError, ValueError):
    """Game configuration is malformed or inconsistent."""


class GameStateError(LotteryError, RuntimeError):
    """A game operation was requested in the wrong lifecycle state."""
