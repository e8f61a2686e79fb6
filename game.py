# /// script
# requires-python = ">=3.12"
# dependencies = [
#     "pydantic>=2.0",
# ]
# ///
"""Pitch-by-pitch baseball game simulator -- main entry point.

Run with:  uv run game.py --home Sharks --away Comets            # random seed
           uv run game.py --home Sharks --away Comets --seed 42  # replay a game
           uv run game.py --seed 42 --json                       # JSON result
           uv run game.py --rosters data/sample_rosters.json     # named players

The seed falls back to DIAMONDSIM_SEED, then to a fresh random seed.
Exit codes: 0 on success, 2 on usage errors, 1 if the simulation fails.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from config import DEFAULT_AWAY_TEAM, DEFAULT_HOME_TEAM, configure_logging, get_seed
from lineup import load_rosters
from models import SimulationError
from rng import new_seed
from simulation import GameSimulator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate a baseball game pitch by pitch."
    )
    parser.add_argument(
        "--home", default=DEFAULT_HOME_TEAM,
        help=f"Home team name (default: {DEFAULT_HOME_TEAM}).",
    )
    parser.add_argument(
        "--away", default=DEFAULT_AWAY_TEAM,
        help=f"Away team name (default: {DEFAULT_AWAY_TEAM}).",
    )
    parser.add_argument(
        "--seed", type=int, default=None, metavar="N",
        help="Random seed. Falls back to DIAMONDSIM_SEED, then a random seed.",
    )
    parser.add_argument(
        "--rosters", default=None, metavar="PATH",
        help="Roster JSON file with named lineups and pitchers for both teams.",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Print the full game result as JSON instead of the text report.",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Log every plate appearance (DEBUG).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.seed is not None and args.seed < 0:
        parser.error("--seed must be non-negative")
    if not args.home.strip() or not args.away.strip():
        parser.error("team names must not be empty")

    try:
        configure_logging(verbose=args.verbose)
        seed = args.seed if args.seed is not None else get_seed()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    if seed is None:
        seed = new_seed()

    try:
        rosters = load_rosters(args.rosters) if args.rosters else None
    except (OSError, KeyError, ValueError, ValidationError) as e:
        print(f"Error loading rosters from {args.rosters}: {e}", file=sys.stderr)
        return 1

    try:
        result = GameSimulator(args.home, args.away, seed, rosters=rosters).run_game()
    except SimulationError as e:
        logger.error("Simulation failed (seed %d): %s", seed, e)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(result.format_report())
    return 0


if __name__ == "__main__":
    sys.exit(main())
