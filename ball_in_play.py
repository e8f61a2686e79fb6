# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Ball-in-play outcome sampler.

Turns a ball put in play into Out / Single / Double / Triple / HomeRun.
Batter power moves probability mass toward extra-base hits; pitcher stuff
moves mass from every hit type toward outs. The adjusted distribution is
clamped, renormalised and sampled with a single uniform draw.
"""

from __future__ import annotations

from models import BipOutcome
from rng import RandomSource


# ---------------------------------------------------------------------------
# Base rates for an average batter vs an average pitcher (sum = 1.000)
# ---------------------------------------------------------------------------

BASE_RATES: dict[BipOutcome, float] = {
    BipOutcome.OUT: 0.702,
    BipOutcome.SINGLE: 0.195,
    BipOutcome.DOUBLE: 0.060,
    BipOutcome.TRIPLE: 0.004,
    BipOutcome.HOME_RUN: 0.039,
}

# Sampling order for the cumulative distribution
OUTCOME_ORDER: tuple[BipOutcome, ...] = (
    BipOutcome.OUT,
    BipOutcome.SINGLE,
    BipOutcome.DOUBLE,
    BipOutcome.TRIPLE,
    BipOutcome.HOME_RUN,
)

POWER_ADJUSTMENT_FACTOR = 0.30
STUFF_ADJUSTMENT_FACTOR = 0.20

# How strongly power feeds each extra-base hit type
POWER_WEIGHTS: dict[BipOutcome, float] = {
    BipOutcome.HOME_RUN: 2.0,
    BipOutcome.DOUBLE: 1.0,
    BipOutcome.TRIPLE: 0.3,
}

# Where the extra-base boost is taken from
POWER_COST_SINGLE_SHARE = 0.4
POWER_COST_OUT_SHARE = 0.6

HIT_OUTCOMES = (BipOutcome.SINGLE, BipOutcome.DOUBLE, BipOutcome.TRIPLE, BipOutcome.HOME_RUN)


def _check_rating(name: str, value: int) -> None:
    if not 0 <= value <= 100:
        raise ValueError(f"{name} must be between 0 and 100, got {value}")


def _apply_power(probs: dict[BipOutcome, float], power: float) -> None:
    delta = power - 0.5
    total_boost = 0.0
    for outcome, weight in POWER_WEIGHTS.items():
        boost = delta * POWER_ADJUSTMENT_FACTOR * weight
        probs[outcome] += boost
        total_boost += boost
    probs[BipOutcome.SINGLE] -= total_boost * POWER_COST_SINGLE_SHARE
    probs[BipOutcome.OUT] -= total_boost * POWER_COST_OUT_SHARE


def _apply_stuff(probs: dict[BipOutcome, float], stuff: float) -> None:
    out_boost = (stuff - 0.5) * STUFF_ADJUSTMENT_FACTOR
    total_hit = sum(probs[o] for o in HIT_OUTCOMES)
    probs[BipOutcome.OUT] += out_boost
    # Shrink hits proportionally so their relative mix is unchanged
    if total_hit > 0:
        factor = out_boost / total_hit
        for outcome in HIT_OUTCOMES:
            probs[outcome] -= probs[outcome] * factor


def _normalize(probs: dict[BipOutcome, float]) -> None:
    for outcome in probs:
        probs[outcome] = max(0.0, probs[outcome])
    total = sum(probs.values())
    if total > 0:
        for outcome in probs:
            probs[outcome] /= total


def bip_distribution(power: int, stuff: int) -> dict[BipOutcome, float]:
    """Return the normalised outcome distribution for a power/stuff matchup."""
    _check_rating("power", power)
    _check_rating("stuff", stuff)

    probs = dict(BASE_RATES)
    _apply_power(probs, power / 100.0)
    _apply_stuff(probs, stuff / 100.0)
    _normalize(probs)
    return probs


def resolve_ball_in_play(power: int, stuff: int, rng: RandomSource) -> BipOutcome:
    """Sample the result of a ball in play with one draw from ``rng``."""
    probs = bip_distribution(power, stuff)
    roll = rng.random()
    cumulative = 0.0
    for outcome in OUTCOME_ORDER[:-1]:
        cumulative += probs[outcome]
        if roll < cumulative:
            return outcome
    return BipOutcome.HOME_RUN
