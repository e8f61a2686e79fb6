# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Data models for the pitch-by-pitch game simulator.

Every value that crosses a component boundary is a frozen Pydantic model:
ratings, the ball-strike count, base occupancy, the resolved effect of a
plate appearance and the authoritative game state. Models validate their
ranges at construction, so an out-of-range count or an impossible game state
never exists in memory.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class SimulationError(Exception):
    """Base class for errors raised by the simulation engine."""


class InvariantViolation(SimulationError):
    """Raised when the engine reaches a state that indicates a modelling bug.

    These are never recoverable: the current game run is aborted.
    """


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Half(str, Enum):
    TOP = "TOP"
    BOTTOM = "BOTTOM"


class Team(str, Enum):
    AWAY = "AWAY"
    HOME = "HOME"


class PitchOutcome(str, Enum):
    BALL = "BALL"
    CALLED_STRIKE = "CALLED_STRIKE"
    SWINGING_STRIKE = "SWINGING_STRIKE"
    FOUL = "FOUL"
    IN_PLAY = "IN_PLAY"
    HIT_BY_PITCH = "HIT_BY_PITCH"


class AtBatTerminal(str, Enum):
    STRIKEOUT = "STRIKEOUT"
    WALK = "WALK"
    HIT_BY_PITCH = "HIT_BY_PITCH"
    BALL_IN_PLAY = "BALL_IN_PLAY"


class BipOutcome(str, Enum):
    OUT = "OUT"
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    TRIPLE = "TRIPLE"
    HOME_RUN = "HOME_RUN"


class PaType(str, Enum):
    """Box-score category of a plate appearance."""
    K = "K"
    BB = "BB"
    HBP = "HBP"
    IN_PLAY_OUT = "IN_PLAY_OUT"
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    TRIPLE = "TRIPLE"
    HOME_RUN = "HOME_RUN"
    REACH_ON_ERROR = "REACH_ON_ERROR"


class OutcomeTag(str, Enum):
    """Scorebook tag of a plate appearance, used for narration."""
    K = "K"
    BB = "BB"
    HBP = "HBP"
    SINGLE = "1B"
    DOUBLE = "2B"
    TRIPLE = "3B"
    HR = "HR"
    ROE = "ROE"
    SF = "SF"
    DP = "DP"
    IN_PLAY_OUT = "OUT"


# ---------------------------------------------------------------------------
# Player ratings
# ---------------------------------------------------------------------------

class BatterRatings(BaseModel):
    """Batting ratings on a 0-100 scale, 50 = league average."""
    model_config = ConfigDict(frozen=True)

    contact: int = Field(ge=0, le=100, description="Bat-to-ball skill (0-100)")
    power: int = Field(ge=0, le=100, description="Extra-base power (0-100)")
    patience: int = Field(ge=0, le=100, description="Plate discipline (0-100)")
    speed: int = Field(ge=0, le=100, description="Sprint speed (0-100)")

    @classmethod
    def average(cls) -> BatterRatings:
        return cls(contact=50, power=50, patience=50, speed=50)


class PitcherRatings(BaseModel):
    """Pitching ratings on a 0-100 scale, 50 = league average."""
    model_config = ConfigDict(frozen=True)

    control: int = Field(ge=0, le=100, description="Strike-throwing ability (0-100)")
    stuff: int = Field(ge=0, le=100, description="Pitch quality (0-100)")
    stamina: int = Field(ge=0, le=100, description="Endurance (0-100)")
    speed: int = Field(ge=0, le=100, description="Fielding quickness off the mound (0-100)")

    @classmethod
    def average(cls) -> PitcherRatings:
        return cls(control=50, stuff=50, stamina=50, speed=50)


class Batter(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    ratings: BatterRatings = Field(default_factory=BatterRatings.average)


class Pitcher(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    ratings: PitcherRatings = Field(default_factory=PitcherRatings.average)


# ---------------------------------------------------------------------------
# Count and bases
# ---------------------------------------------------------------------------

class Count(BaseModel):
    """Live ball-strike count inside one at-bat.

    A fourth ball or third strike ends the at-bat, so neither is a valid
    count value.
    """
    model_config = ConfigDict(frozen=True)

    balls: int = Field(default=0, ge=0, le=3)
    strikes: int = Field(default=0, ge=0, le=2)

    def add_ball(self) -> Count:
        return Count(balls=self.balls + 1, strikes=self.strikes)

    def add_strike(self) -> Count:
        return Count(balls=self.balls, strikes=self.strikes + 1)

    def add_foul(self) -> Count:
        """A foul ball never produces the third strike."""
        if self.strikes < 2:
            return self.add_strike()
        return self

    def __str__(self) -> str:
        return f"{self.balls}-{self.strikes}"


class BaseState(BaseModel):
    """Base occupancy. Runners carry no identity."""
    model_config = ConfigDict(frozen=True)

    on_first: bool = False
    on_second: bool = False
    on_third: bool = False

    @property
    def occupied_count(self) -> int:
        return int(self.on_first) + int(self.on_second) + int(self.on_third)

    @property
    def is_loaded(self) -> bool:
        return self.on_first and self.on_second and self.on_third

    @property
    def is_empty(self) -> bool:
        return not (self.on_first or self.on_second or self.on_third)


EMPTY_BASES = BaseState()


# ---------------------------------------------------------------------------
# At-bat result
# ---------------------------------------------------------------------------

class AtBatResult(BaseModel):
    """Terminal outcome of one at-bat.

    ``balls`` reaches 4 only on a walk and ``strikes`` reaches 3 only on a
    strikeout, so this records the count the at-bat ended on rather than a
    live ``Count``.
    """
    model_config = ConfigDict(frozen=True)

    terminal: AtBatTerminal
    balls: int = Field(ge=0, le=4)
    strikes: int = Field(ge=0, le=3)
    pitch_count: int = Field(ge=1, le=50)
    pitches: list[PitchOutcome] = Field(default_factory=list)

    @property
    def final_count(self) -> str:
        return f"{self.balls}-{self.strikes}"


# ---------------------------------------------------------------------------
# Plate appearance resolution
# ---------------------------------------------------------------------------

class RunnerMove(BaseModel):
    """One runner's movement on a play. Base 0 is the batter, 4 is home."""
    model_config = ConfigDict(frozen=True)

    from_base: int = Field(ge=0, le=3)
    to_base: int = Field(ge=1, le=4)
    scored: bool = False
    was_forced: bool = False

    @model_validator(mode="after")
    def _check_direction(self) -> RunnerMove:
        if self.to_base <= self.from_base:
            raise ValueError(
                f"runner must advance: from_base={self.from_base}, to_base={self.to_base}"
            )
        if self.scored != (self.to_base == 4):
            raise ValueError("scored must be set exactly when to_base is home (4)")
        return self


class PaFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_double_play: bool = False
    is_sac_fly: bool = False


class PaResolution(BaseModel):
    """Complete, self-consistent effect of one plate appearance.

    Produced by the runner-advancement resolver and consumed by the
    scorekeeper. ``bases_at_third_out`` is the pre-play base occupancy and
    is present exactly when the play records the third out of the half.
    """
    model_config = ConfigDict(frozen=True)

    outs_added: int = Field(ge=0, le=3)
    runs_scored: int = Field(ge=0, le=4)
    new_bases: BaseState
    pa_type: PaType
    tag: OutcomeTag
    flags: Optional[PaFlags] = None
    had_error: bool = False
    rbi_for_batter: int = Field(default=0, ge=0, le=4)
    advance_on_error: Optional[BaseState] = None
    bases_at_third_out: Optional[BaseState] = None
    moves: list[RunnerMove] = Field(default_factory=list)

    @property
    def is_double_play(self) -> bool:
        return self.flags is not None and self.flags.is_double_play

    @property
    def is_sac_fly(self) -> bool:
        return self.flags is not None and self.flags.is_sac_fly


# ---------------------------------------------------------------------------
# Game state
# ---------------------------------------------------------------------------

class GameState(BaseModel):
    """Authoritative game situation between plate appearances.

    Frozen: each plate appearance produces a new instance through
    ``evolve``. Three outs cannot be represented; the scorekeeper performs
    the half-inning transition in the same update that records the out.
    """
    model_config = ConfigDict(frozen=True)

    inning: int = Field(default=1, ge=1)
    half: Half = Half.TOP
    outs: int = Field(default=0, ge=0, le=2)
    bases: BaseState = Field(default_factory=BaseState)
    away_score: int = Field(default=0, ge=0)
    home_score: int = Field(default=0, ge=0)
    away_earned_runs: int = Field(default=0, ge=0)
    away_unearned_runs: int = Field(default=0, ge=0)
    home_earned_runs: int = Field(default=0, ge=0)
    home_unearned_runs: int = Field(default=0, ge=0)
    away_batting_index: int = Field(default=0, ge=0, le=8)
    home_batting_index: int = Field(default=0, ge=0, le=8)
    offense: Team = Team.AWAY
    defense: Team = Team.HOME
    is_final: bool = False

    @model_validator(mode="after")
    def _check_sides(self) -> GameState:
        if self.offense == self.defense:
            raise ValueError("offense and defense must be different teams")
        expected = Team.AWAY if self.half == Half.TOP else Team.HOME
        if self.offense != expected:
            raise ValueError(f"{self.half.value} half must have {expected.value} batting")
        return self

    @classmethod
    def new_game(cls) -> GameState:
        """Top of the 1st, no score, bases empty."""
        return cls()

    def evolve(self, **changes) -> GameState:
        """Return a validated copy with ``changes`` applied."""
        return type(self).model_validate({**self.model_dump(), **changes})

    # -- convenience accessors --------------------------------------------

    @property
    def batting_index(self) -> int:
        """Lineup slot (0-8) of the team currently at bat."""
        if self.offense == Team.AWAY:
            return self.away_batting_index
        return self.home_batting_index

    def is_walkoff_situation(self) -> bool:
        """Home batting in the 9th or later without the lead."""
        return (
            self.inning >= 9
            and self.half == Half.BOTTOM
            and self.offense == Team.HOME
            and self.home_score <= self.away_score
        )


class ApplyResult(BaseModel):
    """What applying one resolution did to the game."""
    model_config = ConfigDict(frozen=True)

    state_after: GameState
    is_walkoff: bool = False
    outs_after: int = Field(ge=0, le=3)
    runs_scored: int = Field(default=0, ge=0)
    rbi: int = Field(default=0, ge=0)
    earned_runs: int = Field(default=0, ge=0)
    unearned_runs: int = Field(default=0, ge=0)
    left_on_base: Optional[int] = Field(default=None, ge=0, le=3)
