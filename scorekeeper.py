# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Inning and game state engine.

``InningScorekeeper.apply`` takes the current ``GameState`` and the
``PaResolution`` of one plate appearance and returns the next state. It never
draws random numbers. Along the way it applies the walk-off clamp, credits
RBI and earned/unearned runs, updates the box score, records left-on-base
and drives half-inning transitions, including the skipped bottom half when
the home team already leads after the top of the 9th or later.
"""

from __future__ import annotations

import logging
from typing import Callable

from box_score import BatterGameStats, BoxScore, LineScore, PitcherGameStats
from models import (
    EMPTY_BASES,
    ApplyResult,
    GameState,
    Half,
    InvariantViolation,
    PaResolution,
    PaType,
    Team,
)

logger = logging.getLogger(__name__)

MAX_INNINGS = 99
REGULATION_INNINGS = 9


# ---------------------------------------------------------------------------
# Box score updates per plate-appearance type
# ---------------------------------------------------------------------------

def _batter_strikeout(b: BatterGameStats) -> None:
    b.ab += 1
    b.k += 1


def _batter_walk(b: BatterGameStats) -> None:
    b.bb += 1


def _batter_hbp(b: BatterGameStats) -> None:
    b.hbp += 1


def _batter_out(b: BatterGameStats) -> None:
    b.ab += 1


def _batter_single(b: BatterGameStats) -> None:
    b.ab += 1
    b.hits += 1
    b.singles += 1


def _batter_double(b: BatterGameStats) -> None:
    b.ab += 1
    b.hits += 1
    b.doubles += 1


def _batter_triple(b: BatterGameStats) -> None:
    b.ab += 1
    b.hits += 1
    b.triples += 1


def _batter_home_run(b: BatterGameStats) -> None:
    b.ab += 1
    b.hits += 1
    b.hr += 1
    # Runners carry no identity, so only the batter's own run is attributable
    b.runs += 1


_BATTER_UPDATES: dict[PaType, Callable[[BatterGameStats], None]] = {
    PaType.K: _batter_strikeout,
    PaType.BB: _batter_walk,
    PaType.HBP: _batter_hbp,
    PaType.IN_PLAY_OUT: _batter_out,
    PaType.SINGLE: _batter_single,
    PaType.DOUBLE: _batter_double,
    PaType.TRIPLE: _batter_triple,
    PaType.HOME_RUN: _batter_home_run,
    PaType.REACH_ON_ERROR: _batter_out,
}

_HIT_TYPES = frozenset({PaType.SINGLE, PaType.DOUBLE, PaType.TRIPLE, PaType.HOME_RUN})


# ---------------------------------------------------------------------------
# Scorekeeper
# ---------------------------------------------------------------------------

class InningScorekeeper:
    """Applies plate-appearance resolutions to the game state.

    Owns the line score, the box score and the per-half left-on-base lists;
    those accumulate across calls while every ``GameState`` stays immutable.
    """

    def __init__(self, line_score: LineScore | None = None,
                 box_score: BoxScore | None = None):
        self.line_score = line_score or LineScore()
        self.box_score = box_score or BoxScore()
        self.away_lob: list[int] = []
        self.home_lob: list[int] = []
        self._half_runs = 0

    # -- accessors ----------------------------------------------------------

    def lob(self, team: Team) -> list[int]:
        return self.away_lob if team == Team.AWAY else self.home_lob

    def total_lob(self, team: Team) -> int:
        return sum(self.lob(team))

    @property
    def current_half_runs(self) -> int:
        return self._half_runs

    # -- main entry point ---------------------------------------------------

    def apply(self, state: GameState, resolution: PaResolution) -> ApplyResult:
        """Apply one plate appearance and return the resulting state."""
        if state.is_final:
            raise InvariantViolation("cannot apply a play to a finished game")
        if resolution.runs_scored > state.bases.occupied_count + 1:
            raise InvariantViolation(
                f"{resolution.runs_scored} runs scored with only "
                f"{state.bases.occupied_count} runners on base"
            )

        offense = state.offense
        outs = state.outs + resolution.outs_added

        # The snapshot is present exactly when the play records the third out
        has_snapshot = resolution.bases_at_third_out is not None
        if outs >= 3 and not has_snapshot:
            raise InvariantViolation(
                f"third out in {state.half.value} {state.inning} without a base snapshot"
            )
        if outs < 3 and has_snapshot:
            raise InvariantViolation(
                f"base snapshot on a play that leaves {outs} out(s) in "
                f"{state.half.value} {state.inning}"
            )

        # 1. Walk-off clamp
        runs, is_walkoff = self._clamp_walkoff(state, resolution, outs)

        # 2. Score and running half-inning total
        away_score = state.away_score + (runs if offense == Team.AWAY else 0)
        home_score = state.home_score + (runs if offense == Team.HOME else 0)
        self._half_runs += runs

        # 3. Bases
        bases = EMPTY_BASES if is_walkoff else resolution.new_bases

        # 4-5. RBI and earned/unearned split
        rbi = self._credit_rbi(state, resolution, runs)
        earned, unearned = self._classify_runs(resolution, runs)

        # 6. Box score and batting order
        slot = state.batting_index
        self._update_box_score(state, resolution, slot, runs, rbi, earned)
        next_slot = (slot + 1) % 9

        changes: dict = {
            "away_score": away_score,
            "home_score": home_score,
            "bases": bases,
        }
        if offense == Team.AWAY:
            changes["away_batting_index"] = next_slot
            changes["away_earned_runs"] = state.away_earned_runs + earned
            changes["away_unearned_runs"] = state.away_unearned_runs + unearned
        else:
            changes["home_batting_index"] = next_slot
            changes["home_earned_runs"] = state.home_earned_runs + earned
            changes["home_unearned_runs"] = state.home_unearned_runs + unearned

        logger.debug(
            "%s %d: %s slot %d -> %s, +%d out(s), %d run(s), %d RBI",
            state.half.value, state.inning, offense.value, slot + 1,
            resolution.tag.value, resolution.outs_added, runs, rbi,
        )

        # 7. Walk-off ends the game mid-half
        if is_walkoff:
            self.line_score.record(offense, state.inning, self._half_runs)
            self.lob(offense).append(0)
            self._half_runs = 0
            state_after = state.evolve(outs=outs, is_final=True, **changes)
            logger.info("Walk-off in the bottom of the %d: away %d, home %d",
                        state.inning, away_score, home_score)
            return ApplyResult(
                state_after=state_after, is_walkoff=True, outs_after=outs,
                runs_scored=runs, rbi=rbi, earned_runs=earned,
                unearned_runs=unearned, left_on_base=0,
            )

        # 8. Mid-half or half-inning transition
        if outs < 3:
            return ApplyResult(
                state_after=state.evolve(outs=outs, **changes), outs_after=outs,
                runs_scored=runs, rbi=rbi, earned_runs=earned, unearned_runs=unearned,
            )

        left_on_base = self._close_half(state, resolution)
        state_after = self._transition(state, away_score, home_score, changes)
        return ApplyResult(
            state_after=state_after, outs_after=3, runs_scored=runs, rbi=rbi,
            earned_runs=earned, unearned_runs=unearned, left_on_base=left_on_base,
        )

    # -- steps --------------------------------------------------------------

    @staticmethod
    def _clamp_walkoff(state: GameState, resolution: PaResolution,
                       outs: int) -> tuple[int, bool]:
        """Return (credited runs, walk-off?) for this play.

        A home run is a dead-ball play: every runner scores and it is a
        walk-off only if that total takes the lead. Any other play stops
        at the winning run.
        """
        runs = resolution.runs_scored
        if not state.is_walkoff_situation() or outs >= 3:
            return runs, False

        needed = state.away_score - state.home_score + 1
        if resolution.pa_type == PaType.HOME_RUN:
            return runs, runs >= needed
        if runs >= needed:
            return needed, True
        return runs, False

    @staticmethod
    def _credit_rbi(state: GameState, resolution: PaResolution, runs: int) -> int:
        if resolution.rbi_for_batter:
            return min(resolution.rbi_for_batter, runs)

        if resolution.pa_type == PaType.REACH_ON_ERROR or resolution.is_double_play:
            return 0
        if resolution.is_sac_fly:
            return min(1, runs)
        if resolution.pa_type in (PaType.BB, PaType.HBP):
            return min(1, runs) if state.bases.is_loaded else 0
        return runs

    @staticmethod
    def _classify_runs(resolution: PaResolution, runs: int) -> tuple[int, int]:
        """Split this play's runs into (earned, unearned)."""
        if resolution.pa_type == PaType.REACH_ON_ERROR:
            return 0, runs
        advanced = resolution.advance_on_error
        if resolution.had_error and advanced is not None and not advanced.is_empty:
            return 0, runs
        return runs, 0

    def _update_box_score(self, state: GameState, resolution: PaResolution,
                          slot: int, runs: int, rbi: int, earned: int) -> None:
        update = _BATTER_UPDATES.get(resolution.pa_type)
        if update is None:
            raise InvariantViolation(f"no box-score rule for {resolution.pa_type!r}")

        batter = self.box_score.batter(state.offense, slot)
        if resolution.is_sac_fly:
            batter.sf += 1
        else:
            update(batter)
        batter.rbi += rbi

        pitcher: PitcherGameStats = self.box_score.pitcher(state.defense)
        pitcher.batters_faced += 1
        pitcher.ip_outs += min(resolution.outs_added, 3 - state.outs)
        pitcher.runs += runs
        pitcher.earned_runs += earned
        if resolution.pa_type in _HIT_TYPES:
            pitcher.hits += 1
        if resolution.pa_type == PaType.HOME_RUN:
            pitcher.hr_allowed += 1
        elif resolution.pa_type == PaType.K:
            pitcher.k += 1
        elif resolution.pa_type == PaType.BB:
            pitcher.bb += 1
        elif resolution.pa_type == PaType.HBP:
            pitcher.hbp += 1

    def _close_half(self, state: GameState, resolution: PaResolution) -> int:
        """Record runs and left-on-base for the half that just ended."""
        left_on_base = resolution.bases_at_third_out.occupied_count
        self.line_score.record(state.offense, state.inning, self._half_runs)
        self.lob(state.offense).append(left_on_base)
        logger.debug(
            "End of %s %d: %d run(s), %d LOB", state.half.value, state.inning,
            self._half_runs, left_on_base,
        )
        self._half_runs = 0
        return left_on_base

    def _transition(self, state: GameState, away_score: int, home_score: int,
                    changes: dict) -> GameState:
        """Build the state that follows a completed half-inning."""
        reset = {**changes, "outs": 0, "bases": EMPTY_BASES}

        if state.half == Half.TOP:
            if state.inning >= REGULATION_INNINGS and home_score > away_score:
                self.line_score.mark_skipped(Team.HOME, state.inning)
                logger.info("Home team leads after the top of the %d; bottom half skipped",
                            state.inning)
                return state.evolve(is_final=True, **reset)
            return state.evolve(half=Half.BOTTOM, offense=Team.HOME,
                                defense=Team.AWAY, **reset)

        if state.inning >= REGULATION_INNINGS and away_score > home_score:
            logger.info("Away team wins after the bottom of the %d", state.inning)
            return state.evolve(is_final=True, **reset)

        next_inning = state.inning + 1
        if next_inning > MAX_INNINGS:
            raise InvariantViolation(f"game exceeded the {MAX_INNINGS}-inning cap")
        return state.evolve(inning=next_inning, half=Half.TOP, offense=Team.AWAY,
                            defense=Team.HOME, **reset)
