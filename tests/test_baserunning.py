# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for the runner-advancement resolver.

Validates:
  1. Strikeouts and walks/HBP (forced cascade, bases-loaded RBI)
  2. Outs in play: reach-on-error, double play, sacrifice fly, regular out
  3. Hits: single, double, triple, home run
  4. RBI exceptions and the runs <= runners + 1 bound over every situation
  5. Third-out base snapshot
  6. Invariant violations
"""

import itertools
import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from baserunning import resolve
from models import (
    AtBatTerminal,
    BaseState,
    BipOutcome,
    InvariantViolation,
    OutcomeTag,
    PaType,
    RunnerMove,
)
from scripted_random import ScriptedRandom


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

EMPTY = BaseState()
LOADED = BaseState(on_first=True, on_second=True, on_third=True)
ALL_BASES = [BaseState(on_first=a, on_second=b, on_third=c)
             for a, b, c in itertools.product([False, True], repeat=3)]

NO_ERROR = 0.5  # above the ROE rate
ROLL_YES = 0.01  # below every DP / SF / ROE rate
ROLL_NO = 0.9


def bases(first=False, second=False, third=False):
    return BaseState(on_first=first, on_second=second, on_third=third)


def no_draws():
    """Random source that fails the test if anything draws from it."""
    return ScriptedRandom([])


def hit(outcome, b, outs=0):
    return resolve(AtBatTerminal.BALL_IN_PLAY, outcome, b, outs, no_draws())


def out_in_play(b, outs, draws):
    rng = ScriptedRandom(draws)
    res = resolve(AtBatTerminal.BALL_IN_PLAY, BipOutcome.OUT, b, outs, rng)
    return res, rng.draws


# ---------------------------------------------------------------------------
# Step 1: Strikeouts, walks and HBP
# ---------------------------------------------------------------------------

class TestStep1NonContact:
    def test_strikeout(self):
        b = bases(first=True)
        res = resolve(AtBatTerminal.STRIKEOUT, None, b, 0, no_draws())
        assert res.outs_added == 1
        assert res.runs_scored == 0
        assert res.new_bases == b
        assert res.tag == OutcomeTag.K
        assert res.moves == []

    def test_walk_bases_empty(self):
        res = resolve(AtBatTerminal.WALK, None, EMPTY, 0, no_draws())
        assert res.new_bases == bases(first=True)
        assert res.runs_scored == 0
        assert res.rbi_for_batter == 0
        assert res.tag == OutcomeTag.BB
        assert res.moves == [RunnerMove(from_base=0, to_base=1, was_forced=True)]

    def test_walk_runner_on_second_not_forced(self):
        res = resolve(AtBatTerminal.WALK, None, bases(second=True), 1, no_draws())
        assert res.new_bases == bases(first=True, second=True)
        assert [m.from_base for m in res.moves] == [0]

    def test_walk_runners_on_corners(self):
        res = resolve(AtBatTerminal.WALK, None, bases(first=True, third=True), 1, no_draws())
        assert res.new_bases == LOADED
        assert res.runs_scored == 0
        assert [(m.from_base, m.to_base) for m in res.moves] == [(0, 1), (1, 2)]

    def test_walk_first_and_second(self):
        res = resolve(AtBatTerminal.WALK, None, bases(first=True, second=True), 0, no_draws())
        assert res.new_bases == LOADED
        assert [(m.from_base, m.to_base) for m in res.moves] == [(0, 1), (2, 3), (1, 2)]

    def test_bases_loaded_walk_forces_in_run(self):
        res = resolve(AtBatTerminal.WALK, None, LOADED, 2, no_draws())
        assert res.runs_scored == 1
        assert res.rbi_for_batter == 1
        assert res.new_bases == LOADED
        assert RunnerMove(from_base=3, to_base=4, scored=True, was_forced=True) in res.moves

    def test_bases_loaded_hbp(self):
        res = resolve(AtBatTerminal.HIT_BY_PITCH, None, LOADED, 0, no_draws())
        assert res.pa_type == PaType.HBP
        assert res.tag == OutcomeTag.HBP
        assert res.runs_scored == 1
        assert res.rbi_for_batter == 1


# ---------------------------------------------------------------------------
# Step 2: Outs in play
# ---------------------------------------------------------------------------

class TestStep2OutsInPlay:
    def test_reach_on_error_is_rolled_first(self):
        res, draws = out_in_play(bases(third=True), 0, [ROLL_YES])
        assert draws == 1
        assert res.pa_type == PaType.REACH_ON_ERROR
        assert res.tag == OutcomeTag.ROE
        assert res.had_error
        assert res.outs_added == 0
        assert res.runs_scored == 1
        assert res.rbi_for_batter == 0
        assert res.new_bases == bases(first=True)

    def test_reach_on_error_advances_every_runner(self):
        res, _ = out_in_play(bases(first=True, second=True), 1, [ROLL_YES])
        assert res.new_bases == LOADED
        assert res.runs_scored == 0
        assert res.advance_on_error == bases(first=True, second=True)

    def test_reach_on_error_bases_empty(self):
        res, _ = out_in_play(EMPTY, 2, [ROLL_YES])
        assert res.new_bases == bases(first=True)
        assert res.advance_on_error is None

    def test_double_play_bases_loaded_no_outs(self):
        res, draws = out_in_play(LOADED, 0, [NO_ERROR, ROLL_YES])
        assert draws == 2
        assert res.is_double_play
        assert res.tag == OutcomeTag.DP
        assert res.outs_added == 2
        assert res.runs_scored == 1
        assert res.rbi_for_batter == 0
        assert res.new_bases == bases(third=True)
        assert res.bases_at_third_out is None

    def test_double_play_one_out_ends_inning_without_run(self):
        res, _ = out_in_play(LOADED, 1, [NO_ERROR, ROLL_YES])
        assert res.outs_added == 2
        assert res.runs_scored == 0
        assert res.bases_at_third_out == LOADED

    def test_no_double_play_roll_with_two_outs(self):
        res, draws = out_in_play(bases(first=True), 2, [NO_ERROR])
        assert draws == 1
        assert res.tag == OutcomeTag.IN_PLAY_OUT
        assert res.bases_at_third_out == bases(first=True)

    def test_sacrifice_fly(self):
        res, draws = out_in_play(bases(third=True), 0, [NO_ERROR, ROLL_YES])
        assert draws == 2  # no runner on first, so no DP roll
        assert res.is_sac_fly
        assert res.tag == OutcomeTag.SF
        assert res.outs_added == 1
        assert res.runs_scored == 1
        assert res.rbi_for_batter == 1
        assert res.new_bases == EMPTY

    def test_sacrifice_fly_other_runners_hold(self):
        res, draws = out_in_play(bases(first=True, third=True), 1, [NO_ERROR, ROLL_NO, ROLL_YES])
        assert draws == 3
        assert res.is_sac_fly
        assert res.new_bases == bases(first=True)
        assert res.moves == [RunnerMove(from_base=3, to_base=4, scored=True)]

    def test_regular_out_no_advancement(self):
        b = bases(second=True, third=True)
        res, draws = out_in_play(b, 0, [NO_ERROR, ROLL_NO])
        assert draws == 2
        assert res.tag == OutcomeTag.IN_PLAY_OUT
        assert res.outs_added == 1
        assert res.runs_scored == 0
        assert res.new_bases == b
        assert res.bases_at_third_out is None


# ---------------------------------------------------------------------------
# Step 3: Hits
# ---------------------------------------------------------------------------

class TestStep3Hits:
    def test_single_advances_everyone_one_base(self):
        res = hit(BipOutcome.SINGLE, LOADED)
        assert res.runs_scored == 1
        assert res.rbi_for_batter == 1
        assert res.new_bases == LOADED
        assert res.tag == OutcomeTag.SINGLE

    def test_single_runner_on_second(self):
        res = hit(BipOutcome.SINGLE, bases(second=True))
        assert res.new_bases == bases(first=True, third=True)
        assert res.runs_scored == 0

    def test_double_first_to_third(self):
        res = hit(BipOutcome.DOUBLE, bases(first=True))
        assert res.new_bases == bases(second=True, third=True)
        assert res.runs_scored == 0

    def test_double_scores_second_and_third(self):
        res = hit(BipOutcome.DOUBLE, LOADED)
        assert res.runs_scored == 2
        assert res.new_bases == bases(second=True, third=True)

    def test_triple_clears_runners(self):
        res = hit(BipOutcome.TRIPLE, LOADED)
        assert res.runs_scored == 3
        assert res.rbi_for_batter == 3
        assert res.new_bases == bases(third=True)

    def test_grand_slam(self):
        res = hit(BipOutcome.HOME_RUN, LOADED)
        assert res.runs_scored == 4
        assert res.rbi_for_batter == 4
        assert res.new_bases == EMPTY
        assert res.pa_type == PaType.HOME_RUN
        assert [m.scored for m in res.moves] == [True] * 4

    def test_solo_home_run(self):
        res = hit(BipOutcome.HOME_RUN, EMPTY)
        assert res.runs_scored == 1
        assert res.moves == [RunnerMove(from_base=0, to_base=4, scored=True)]

    def test_move_list_covers_every_runner(self):
        res = hit(BipOutcome.SINGLE, bases(first=True, third=True))
        assert [(m.from_base, m.to_base) for m in res.moves] == [(0, 1), (3, 4), (1, 2)]
        assert res.moves[2].was_forced
        assert not res.moves[1].was_forced


# ---------------------------------------------------------------------------
# Step 4: Bounds and RBI exceptions across every situation
# ---------------------------------------------------------------------------

def test_runs_never_exceed_runners_plus_batter():
    rng = random.Random(11)
    terminals = [(AtBatTerminal.STRIKEOUT, None), (AtBatTerminal.WALK, None),
                 (AtBatTerminal.HIT_BY_PITCH, None)]
    terminals += [(AtBatTerminal.BALL_IN_PLAY, o) for o in BipOutcome]
    for _ in range(20):
        for b, outs, (terminal, bip) in itertools.product(ALL_BASES, range(3), terminals):
            res = resolve(terminal, bip, b, outs, rng)
            assert res.runs_scored <= b.occupied_count + 1
            assert res.runs_scored == sum(1 for m in res.moves if m.scored)
            if res.pa_type == PaType.REACH_ON_ERROR or res.is_double_play:
                assert res.rbi_for_batter == 0
            if res.is_sac_fly:
                assert res.rbi_for_batter == 1
            if outs + res.outs_added >= 3:
                assert res.bases_at_third_out == b
            else:
                assert res.bases_at_third_out is None


def test_forced_rolls_over_many_outs():
    """Every out branch shows up over enough rolls with a runner on 1st and 3rd."""
    rng = random.Random(3)
    tags = set()
    for _ in range(2000):
        res = resolve(AtBatTerminal.BALL_IN_PLAY, BipOutcome.OUT,
                      bases(first=True, third=True), 0, rng)
        tags.add(res.tag)
    assert tags == {OutcomeTag.ROE, OutcomeTag.DP, OutcomeTag.SF, OutcomeTag.IN_PLAY_OUT}


# ---------------------------------------------------------------------------
# Step 5: Invariant violations
# ---------------------------------------------------------------------------

def test_ball_in_play_requires_outcome():
    with pytest.raises(InvariantViolation):
        resolve(AtBatTerminal.BALL_IN_PLAY, None, EMPTY, 0, no_draws())


def test_three_outs_rejected():
    with pytest.raises(InvariantViolation):
        resolve(AtBatTerminal.STRIKEOUT, None, EMPTY, 3, no_draws())
