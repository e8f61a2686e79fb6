# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Centralized configuration for environment variables."""

import logging
import os

SEED_ENV = "DIAMONDSIM_SEED"
LOG_LEVEL_ENV = "DIAMONDSIM_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_HOME_TEAM = "Home"
DEFAULT_AWAY_TEAM = "Away"

LOG_FORMAT = "%(levelname)s: %(message)s"


def get_seed() -> int | None:
    """Return the seed from the environment, or None if not set.

    Raises ValueError if the variable is set but is not a non-negative integer.
    """
    raw = os.environ.get(SEED_ENV, "").strip()
    if not raw:
        return None
    try:
        seed = int(raw)
    except ValueError:
        raise ValueError(f"{SEED_ENV} must be an integer, got {raw!r}") from None
    if seed < 0:
        raise ValueError(f"{SEED_ENV} must be non-negative, got {seed}")
    return seed


def get_log_level() -> str:
    """Return the configured log level name, defaulting to WARNING."""
    level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    if level not in logging.getLevelNamesMapping():
        raise ValueError(f"{LOG_LEVEL_ENV} is not a valid log level: {level!r}")
    return level


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging; ``verbose`` forces DEBUG."""
    level = "DEBUG" if verbose else get_log_level()
    logging.basicConfig(level=level, format=LOG_FORMAT)
