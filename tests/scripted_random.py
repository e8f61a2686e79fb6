# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Scripted random source for deterministic tests.

Any object with a ``random()`` method satisfies ``rng.RandomSource``; this
one replays a fixed list of draws so a test controls every roll.
"""

from typing import Iterable


class ScriptedRandom:
    """Deterministic source that returns a pre-recorded sequence of draws.

    With ``cycle=True`` the sequence repeats forever; otherwise running out
    of values raises ``IndexError`` so a test notices an unexpected draw.
    """

    def __init__(self, values: Iterable[float], cycle: bool = False):
        self._values = [float(v) for v in values]
        for v in self._values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"scripted draw {v} outside [0, 1)")
        if cycle and not self._values:
            raise ValueError("cannot cycle an empty sequence")
        self._cycle = cycle
        self._index = 0

    @property
    def draws(self) -> int:
        """Number of values handed out so far."""
        return self._index

    def random(self) -> float:
        if self._cycle:
            value = self._values[self._index % len(self._values)]
        else:
            if self._index >= len(self._values):
                raise IndexError(
                    f"ScriptedRandom exhausted after {len(self._values)} draws"
                )
            value = self._values[self._index]
        self._index += 1
        return value
