# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Runner advancement for a completed plate appearance.

``resolve`` maps an at-bat terminal (plus the ball-in-play result, if any)
and the current bases/outs to a ``PaResolution``: outs added, runs scored,
the new bases, RBI, error flags and one ``RunnerMove`` per runner that
advanced. It never touches game state; the only randomness is the
reach-on-error, double-play and sacrifice-fly rolls on an out.

Scoring rules encoded here:
- ROE: no RBI, all runs unearned
- double play: no RBI even when a run scores
- sacrifice fly: always 1 RBI
- bases-loaded walk / HBP: 1 RBI
- hits: RBI equals runs scored
"""

from __future__ import annotations

from typing import Callable, Optional

from models import (
    AtBatTerminal,
    BaseState,
    BipOutcome,
    InvariantViolation,
    OutcomeTag,
    PaFlags,
    PaResolution,
    PaType,
    RunnerMove,
)
from rng import RandomSource


# ---------------------------------------------------------------------------
# Probability knobs
# ---------------------------------------------------------------------------

ROE_RATE = 0.05  # share of outs that become reach-on-error
DP_RATE = 0.15  # runner on 1st, fewer than 2 outs
SF_RATE = 0.30  # runner on 3rd, fewer than 2 outs


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _third_out_snapshot(bases: BaseState, outs: int, outs_added: int) -> Optional[BaseState]:
    """Bases at the moment of the third out, or None if the half continues."""
    return bases if outs + outs_added >= 3 else None


def _forced_bases(bases: BaseState) -> set[int]:
    """Bases whose runner is forced when the batter takes first."""
    forced: set[int] = set()
    if bases.on_first:
        forced.add(1)
        if bases.on_second:
            forced.add(2)
            if bases.on_third:
                forced.add(3)
    return forced


def _occupied(bases: BaseState) -> list[int]:
    """Occupied bases, lead runner first."""
    return [b for b, on in ((3, bases.on_third), (2, bases.on_second), (1, bases.on_first)) if on]


# ---------------------------------------------------------------------------
# Non-contact terminals
# ---------------------------------------------------------------------------

def _resolve_strikeout(bases: BaseState, outs: int) -> PaResolution:
    return PaResolution(
        outs_added=1,
        runs_scored=0,
        new_bases=bases,
        pa_type=PaType.K,
        tag=OutcomeTag.K,
        bases_at_third_out=_third_out_snapshot(bases, outs, 1),
    )


def _award_first_base(bases: BaseState, pa_type: PaType, tag: OutcomeTag) -> PaResolution:
    """Walk or hit-by-pitch: batter to first, forced runners move up one."""
    forced = _forced_bases(bases)
    moves = [RunnerMove(from_base=0, to_base=1, was_forced=True)]
    for base in sorted(forced, reverse=True):
        moves.append(RunnerMove(from_base=base, to_base=base + 1,
                                scored=base == 3, was_forced=True))

    runs = 1 if 3 in forced else 0
    new_bases = BaseState(
        on_first=True,
        on_second=bases.on_second or 1 in forced,
        on_third=bases.on_third or 2 in forced,
    )
    return PaResolution(
        outs_added=0,
        runs_scored=runs,
        new_bases=new_bases,
        pa_type=pa_type,
        tag=tag,
        rbi_for_batter=runs,
        moves=moves,
    )


def _resolve_walk(bases: BaseState, outs: int) -> PaResolution:
    return _award_first_base(bases, PaType.BB, OutcomeTag.BB)


def _resolve_hit_by_pitch(bases: BaseState, outs: int) -> PaResolution:
    return _award_first_base(bases, PaType.HBP, OutcomeTag.HBP)


# ---------------------------------------------------------------------------
# Outs in play
# ---------------------------------------------------------------------------

def _resolve_out(bases: BaseState, outs: int, rng: RandomSource) -> PaResolution:
    # Error roll comes first on every out
    if rng.random() < ROE_RATE:
        return _resolve_reach_on_error(bases)

    if bases.on_first and outs < 2 and rng.random() < DP_RATE:
        return _resolve_double_play(bases, outs)

    if bases.on_third and outs < 2 and rng.random() < SF_RATE:
        return _resolve_sacrifice_fly(bases, outs)

    return PaResolution(
        outs_added=1,
        runs_scored=0,
        new_bases=bases,
        pa_type=PaType.IN_PLAY_OUT,
        tag=OutcomeTag.IN_PLAY_OUT,
        bases_at_third_out=_third_out_snapshot(bases, outs, 1),
    )


def _resolve_reach_on_error(bases: BaseState) -> PaResolution:
    """Batter safe at first, every runner takes one base on the error."""
    moves = [RunnerMove(from_base=0, to_base=1)]
    for base in _occupied(bases):
        moves.append(RunnerMove(from_base=base, to_base=base + 1, scored=base == 3))

    return PaResolution(
        outs_added=0,
        runs_scored=1 if bases.on_third else 0,
        new_bases=BaseState(on_first=True, on_second=bases.on_first, on_third=bases.on_second),
        pa_type=PaType.REACH_ON_ERROR,
        tag=OutcomeTag.ROE,
        had_error=True,
        rbi_for_batter=0,
        advance_on_error=None if bases.is_empty else bases,
        moves=moves,
    )


def _resolve_double_play(bases: BaseState, outs: int) -> PaResolution:
    """Batter and the runner from first are out; trailing runners move up."""
    moves = []
    third_scores = bases.on_third and outs == 0
    if third_scores:
        moves.append(RunnerMove(from_base=3, to_base=4, scored=True))
    if bases.on_second:
        moves.append(RunnerMove(from_base=2, to_base=3))

    return PaResolution(
        outs_added=2,
        runs_scored=1 if third_scores else 0,
        new_bases=BaseState(
            on_first=False,
            on_second=False,
            on_third=bases.on_second or (bases.on_third and not third_scores),
        ),
        pa_type=PaType.IN_PLAY_OUT,
        tag=OutcomeTag.DP,
        flags=PaFlags(is_double_play=True),
        rbi_for_batter=0,
        bases_at_third_out=_third_out_snapshot(bases, outs, 2),
        moves=moves,
    )


def _resolve_sacrifice_fly(bases: BaseState, outs: int) -> PaResolution:
    """Runner tags from third and scores; everyone else holds."""
    return PaResolution(
        outs_added=1,
        runs_scored=1,
        new_bases=BaseState(on_first=bases.on_first, on_second=bases.on_second, on_third=False),
        pa_type=PaType.IN_PLAY_OUT,
        tag=OutcomeTag.SF,
        flags=PaFlags(is_sac_fly=True),
        rbi_for_batter=1,
        bases_at_third_out=_third_out_snapshot(bases, outs, 1),
        moves=[RunnerMove(from_base=3, to_base=4, scored=True)],
    )


# ---------------------------------------------------------------------------
# Hits
# ---------------------------------------------------------------------------

def _resolve_hit(bases: BaseState, batter_to: int, pa_type: PaType,
                 tag: OutcomeTag) -> PaResolution:
    """Every runner advances ``batter_to`` bases, as does the batter."""
    forced = _forced_bases(bases)
    moves = [RunnerMove(from_base=0, to_base=batter_to, scored=batter_to == 4)]
    runs = 1 if batter_to == 4 else 0
    landed: set[int] = set() if batter_to == 4 else {batter_to}

    for base in _occupied(bases):
        target = min(base + batter_to, 4)
        moves.append(RunnerMove(from_base=base, to_base=target,
                                scored=target == 4, was_forced=base in forced))
        if target == 4:
            runs += 1
        else:
            landed.add(target)

    return PaResolution(
        outs_added=0,
        runs_scored=runs,
        new_bases=BaseState(on_first=1 in landed, on_second=2 in landed, on_third=3 in landed),
        pa_type=pa_type,
        tag=tag,
        rbi_for_batter=runs,
        moves=moves,
    )


def _resolve_single(bases: BaseState, outs: int) -> PaResolution:
    return _resolve_hit(bases, 1, PaType.SINGLE, OutcomeTag.SINGLE)


def _resolve_double(bases: BaseState, outs: int) -> PaResolution:
    return _resolve_hit(bases, 2, PaType.DOUBLE, OutcomeTag.DOUBLE)


def _resolve_triple(bases: BaseState, outs: int) -> PaResolution:
    return _resolve_hit(bases, 3, PaType.TRIPLE, OutcomeTag.TRIPLE)


def _resolve_home_run(bases: BaseState, outs: int) -> PaResolution:
    return _resolve_hit(bases, 4, PaType.HOME_RUN, OutcomeTag.HR)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

_TERMINAL_RESOLVERS: dict[AtBatTerminal, Callable[[BaseState, int], PaResolution]] = {
    AtBatTerminal.STRIKEOUT: _resolve_strikeout,
    AtBatTerminal.WALK: _resolve_walk,
    AtBatTerminal.HIT_BY_PITCH: _resolve_hit_by_pitch,
}

_HIT_RESOLVERS: dict[BipOutcome, Callable[[BaseState, int], PaResolution]] = {
    BipOutcome.SINGLE: _resolve_single,
    BipOutcome.DOUBLE: _resolve_double,
    BipOutcome.TRIPLE: _resolve_triple,
    BipOutcome.HOME_RUN: _resolve_home_run,
}


def resolve(terminal: AtBatTerminal, bip_outcome: Optional[BipOutcome],
            bases: BaseState, outs: int, rng: RandomSource) -> PaResolution:
    """Resolve the effect of a plate appearance on the bases.

    Args:
        terminal: How the at-bat ended.
        bip_outcome: Ball-in-play result; required for BALL_IN_PLAY.
        bases: Base occupancy before the play.
        outs: Outs before the play (0-2).
        rng: Shared random source, used only on outs in play.

    Raises:
        InvariantViolation: for a ball in play without an outcome, an
            impossible out count, or a terminal/outcome with no resolver.
    """
    if not 0 <= outs <= 2:
        raise InvariantViolation(f"cannot resolve a play with {outs} outs")

    if terminal == AtBatTerminal.BALL_IN_PLAY:
        if bip_outcome is None:
            raise InvariantViolation("ball in play resolved without a BIP outcome")
        if bip_outcome == BipOutcome.OUT:
            return _resolve_out(bases, outs, rng)
        handler = _HIT_RESOLVERS.get(bip_outcome)
        if handler is None:
            raise InvariantViolation(f"no resolver for BIP outcome {bip_outcome!r}")
        return handler(bases, outs)

    handler = _TERMINAL_RESOLVERS.get(terminal)
    if handler is None:
        raise InvariantViolation(f"no resolver for at-bat terminal {terminal!r}")
    return handler(bases, outs)
