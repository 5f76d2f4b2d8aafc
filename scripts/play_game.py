"""Play one round of the lottery on the console.

Usage:
  python scripts/play_game.py [--seed 42] [--players 12] [--env-file .env]
                              [--log-level INFO] [--no-pause]

Configuration is read from ``LOTTERY_*`` environment variables (see
``lotterysim/config.py``); a ``.env`` file is loaded when present.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import Optional, Sequence

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from lotterysim.config import load_config  # noqa: E402
from lotterysim.db.engine import get_sessionmaker, make_engine  # noqa: E402
from lotterysim.errors import ConfigurationError  # noqa: E402
from lotterysim.logging_config import configure_logging  # noqa: E402
from lotterysim.prize_draw.rng import create_random_source  # noqa: E402
from lotterysim.ui import ConsoleUI  # noqa: E402
from lotterysim.workflows import run_game  # noqa: E402


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play a single lottery round.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible game")
    parser.add_argument(
        "--players", type=int, default=None, help="Number of players (default: random)"
    )
    parser.add_argument("--env-file", default=None, help="Path to a .env file")
    parser.add_argument("--log-level", default=None, help="Logging level, e.g. INFO")
    parser.add_argument(
        "--no-pause", action="store_true", help="Do not wait for Enter between phases"
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load configuration, play one game in an in-memory database, and report."""
    args = _parse_args(argv)

    try:
        config = load_config(env_file=args.env_file)
    except ConfigurationError as exc:
        print(f"Game configuration validation failed: {exc}", file=sys.stderr)
        return 2

    if args.no_pause:
        config = dataclasses.replace(
            config,
            display=dataclasses.replace(config.display, pause_between_phases=False),
        )
    configure_logging(args.log_level or config.log_level)

    seed = args.seed if args.seed is not None else config.seed
    engine = make_engine()
    Session = get_sessionmaker(engine)
    try:
        with Session.begin() as session:
            results = run_game(
                session,
                config,
                ConsoleUI(config),
                create_random_source(seed),
                player_count=args.players,
            )
    except (EOFError, KeyboardInterrupt):
        print("\nAborted.", file=sys.stderr)
        return 1
    finally:
        engine.dispose()

    return 0 if results is not None else 1


if __name__ == "__main__":
    sys.exit(main())
