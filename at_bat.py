# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Pitch-by-pitch at-bat simulation.

Each pitch is resolved as a short chain of Bernoulli trials against the
live count:

1. hit-by-pitch (constant, checked first)
2. in zone? (pitcher control)
3. swing? (in-zone rate is flat, chase rate falls with batter patience)
4. contact? (batter contact vs pitcher stuff, adjusted by count)
5. foul or in play? (more fouls with two strikes)

The at-bat ends on a strikeout, walk, hit-by-pitch or ball in play.
Rates are calibrated so an average-vs-average matchup lands near
K% 18-28, BB% 7-12 and BIP% 55-70.
"""

from __future__ import annotations

import logging

from models import (
    AtBatResult,
    AtBatTerminal,
    BatterRatings,
    Count,
    PitchOutcome,
    PitcherRatings,
)
from rng import RandomSource

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Probability knobs
# ---------------------------------------------------------------------------

# Zone decision (pitcher control), 57.5% in zone at control 50
BASE_IN_ZONE_RATE = 0.575
CONTROL_ADJUSTMENT = 0.14  # +/- at control 100 / 0

# Swing decision (batter patience)
IN_ZONE_SWING_RATE = 0.72
OUT_OF_ZONE_SWING_RATE = 0.228  # chase rate at patience 50
PATIENCE_ADJUSTMENT = 0.22

# Contact (ratings relative to 50 = average)
BASE_CONTACT = 0.78
CONTACT_PER_BATTER_POINT = 0.0020
CONTACT_PER_STUFF_POINT = -0.0020

# Contact shifts by count; counts not listed are neutral
COUNT_CONTACT_ADJUST: dict[tuple[int, int], float] = {
    (0, 0): 0.00,
    (0, 1): -0.03,
    (0, 2): -0.12,
    (1, 0): +0.02,
    (2, 0): +0.05,
    (3, 0): +0.08,
    (3, 2): -0.03,
}

# Foul vs in play once contact is made
FOUL_RATE_TWO_STRIKES = 0.58
FOUL_RATE_OTHER_COUNTS = 0.43

HIT_BY_PITCH_RATE = 0.01

MAX_PITCHES_PER_AT_BAT = 50


# ---------------------------------------------------------------------------
# Probability helpers
# ---------------------------------------------------------------------------

def _clamp(v: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, v))


def in_zone_rate(control: int) -> float:
    """Probability a pitch lands in the strike zone."""
    return _clamp(BASE_IN_ZONE_RATE + (control - 50) * (CONTROL_ADJUSTMENT / 50.0))


def chase_rate(patience: int) -> float:
    """Probability of swinging at a pitch outside the zone."""
    return _clamp(OUT_OF_ZONE_SWING_RATE - (patience - 50) * (PATIENCE_ADJUSTMENT / 50.0))


def count_contact_adjust(balls: int, strikes: int) -> float:
    return COUNT_CONTACT_ADJUST.get((balls, strikes), 0.0)


def contact_from_ratings(batter: BatterRatings, pitcher: PitcherRatings) -> float:
    """Contact probability on a swing at 0-0."""
    batter_delta = (batter.contact - 50) * CONTACT_PER_BATTER_POINT
    pitcher_delta = (pitcher.stuff - 50) * CONTACT_PER_STUFF_POINT
    return _clamp(BASE_CONTACT + batter_delta + pitcher_delta)


def contact_probability(batter: BatterRatings, pitcher: PitcherRatings,
                        balls: int, strikes: int) -> float:
    return _clamp(contact_from_ratings(batter, pitcher) + count_contact_adjust(balls, strikes))


def foul_rate(strikes: int) -> float:
    return FOUL_RATE_TWO_STRIKES if strikes == 2 else FOUL_RATE_OTHER_COUNTS


# ---------------------------------------------------------------------------
# Simulator
# ---------------------------------------------------------------------------

class AtBatSimulator:
    """Simulates complete at-bats against a shared random source."""

    def __init__(self, rng: RandomSource):
        self.rng = rng

    def pitch(self, pitcher: PitcherRatings, batter: BatterRatings,
              count: Count) -> PitchOutcome:
        """Resolve a single pitch.

        Draw order is fixed (HBP, zone, swing, contact, foul) and the later
        draws are skipped when an earlier one settles the pitch.
        """
        if self.rng.random() < HIT_BY_PITCH_RATE:
            return PitchOutcome.HIT_BY_PITCH

        in_zone = self.rng.random() < in_zone_rate(pitcher.control)

        swing_rate = IN_ZONE_SWING_RATE if in_zone else chase_rate(batter.patience)
        swings = self.rng.random() < swing_rate

        if not swings:
            return PitchOutcome.CALLED_STRIKE if in_zone else PitchOutcome.BALL

        contact = contact_probability(batter, pitcher, count.balls, count.strikes)
        if self.rng.random() >= contact:
            return PitchOutcome.SWINGING_STRIKE

        if self.rng.random() < foul_rate(count.strikes):
            return PitchOutcome.FOUL
        return PitchOutcome.IN_PLAY

    def simulate(self, pitcher: PitcherRatings, batter: BatterRatings) -> AtBatResult:
        """Simulate one at-bat from 0-0 to its terminal outcome."""
        count = Count()
        pitches: list[PitchOutcome] = []

        while len(pitches) < MAX_PITCHES_PER_AT_BAT:
            outcome = self.pitch(pitcher, batter, count)
            pitches.append(outcome)

            if outcome == PitchOutcome.HIT_BY_PITCH:
                return self._result(AtBatTerminal.HIT_BY_PITCH, count.balls, count.strikes, pitches)

            if outcome == PitchOutcome.IN_PLAY:
                return self._result(AtBatTerminal.BALL_IN_PLAY, count.balls, count.strikes, pitches)

            if outcome == PitchOutcome.BALL:
                if count.balls == 3:
                    return self._result(AtBatTerminal.WALK, 4, count.strikes, pitches)
                count = count.add_ball()

            elif outcome in (PitchOutcome.CALLED_STRIKE, PitchOutcome.SWINGING_STRIKE):
                if count.strikes == 2:
                    return self._result(AtBatTerminal.STRIKEOUT, count.balls, 3, pitches)
                count = count.add_strike()

            elif outcome == PitchOutcome.FOUL:
                count = count.add_foul()

        # Only reachable with a probability model that fouls off forever.
        # Ball four returns inside the loop, so the count implies a strikeout.
        terminal = AtBatTerminal.STRIKEOUT
        logger.warning(
            "At-bat hit the %d-pitch cap at count %s; forcing %s",
            MAX_PITCHES_PER_AT_BAT, count, terminal.value,
        )
        return self._result(terminal, count.balls, 3, pitches)

    @staticmethod
    def _result(terminal: AtBatTerminal, balls: int, strikes: int,
                pitches: list[PitchOutcome]) -> AtBatResult:
        return AtBatResult(
            terminal=terminal,
            balls=balls,
            strikes=strikes,
            pitch_count=len(pitches),
            pitches=pitches,
        )
