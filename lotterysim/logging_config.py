"""Logging configuration."""

from __future__ import annotations

import logging

DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure root logging for console runs.

    The default level stays above INFO so log lines do not interleave with the
    game's console output. Unknown level names fall back to WARNING.
    """

    level_name = str(level or DEFAULT_LOG_LEVEL).upper()
    resolved = logging.getLevelName(level_name)
    if not isinstance(resolved, int):
        resolved = logging.WARNING

    logging.basicConfig(level=resolved, format=LOG_FORMAT)

    # SQL echo from the in-memory game database would drown the draw logs,
    # even when the game itself runs at DEBUG.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
