# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Random-source capability shared by every sampler in a game.

The engine only needs one operation: a uniform draw in [0, 1). Any object
with a ``random()`` method satisfies ``RandomSource``, so a seeded
``random.Random`` is used directly for real games and tests can substitute
a source that replays a fixed list of draws.
"""

from __future__ import annotations

import random
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    def random(self) -> float:
        """Return a uniformly distributed float in [0, 1)."""
        ...


def make_rng(seed: int | None = None) -> random.Random:
    """Create the single random source for one game.

    A missing seed is drawn from system entropy; callers that need to
    report the seed should pick it themselves with ``new_seed()``.
    """
    return random.Random(seed)


def new_seed() -> int:
    return random.SystemRandom().randint(0, 2**31 - 1)
