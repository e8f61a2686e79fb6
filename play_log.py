# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Play-by-play narration.

Turns a resolved plate appearance into one log line such as::

    [Bot 9] Home 4 vs Away P - Walk-off: Single to CF. R3 scores.
    [Top 3] Away 7 vs Home P - Grounds into DP 6-4-3. R2 to 3B. 2 outs.

Narration only reads the resolution; it never re-derives an outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from models import Half, OutcomeTag, PaResolution, RunnerMove


# ---------------------------------------------------------------------------
# Phrases
# ---------------------------------------------------------------------------

WALK = "Walk"
HIT_BY_PITCH = "HBP"
WALKOFF_PREFIX = "Walk-off: "


def strikeout(looking: bool) -> str:
    return "K looking" if looking else "K swinging"


def single(field: str) -> str:
    return f"Single to {field}"


def double(field: str) -> str:
    return f"Double to {field}"


def triple(field: str) -> str:
    return f"Triple to {field}"


def home_run(field: str) -> str:
    return f"Home run to {field}"


def groundout(positions: str) -> str:
    return f"Groundout {positions}"


def reach_on_error(position: int) -> str:
    return f"Reaches on E{position}"


def sacrifice_fly(field: str) -> str:
    return f"Sacrifice fly to {field}"


def grounds_into_dp(positions: str) -> str:
    return f"Grounds into DP {positions}"


def outs_phrase(outs: int) -> str:
    return "1 out." if outs == 1 else f"{outs} outs."


# No fielder modelling: every ball is hit to the same spots
_OUTCOME_PHRASES = {
    OutcomeTag.BB: lambda looking: WALK,
    OutcomeTag.HBP: lambda looking: HIT_BY_PITCH,
    OutcomeTag.K: strikeout,
    OutcomeTag.SINGLE: lambda looking: single("CF"),
    OutcomeTag.DOUBLE: lambda looking: double("CF"),
    OutcomeTag.TRIPLE: lambda looking: triple("CF"),
    OutcomeTag.HR: lambda looking: home_run("CF"),
    OutcomeTag.ROE: lambda looking: reach_on_error(6),
    OutcomeTag.SF: lambda looking: sacrifice_fly("CF"),
    OutcomeTag.DP: lambda looking: grounds_into_dp("6-4-3"),
    OutcomeTag.IN_PLAY_OUT: lambda looking: groundout("6-3"),
}


def describe_outcome(tag: OutcomeTag, looking: bool = True) -> str:
    return _OUTCOME_PHRASES[tag](looking)


def describe_moves(moves: list[RunnerMove], max_scoring: Optional[int] = None) -> str:
    """Join runner movements, skipping the batter's non-scoring advance.

    ``max_scoring`` ends the narration once that many runs have scored, for
    walk-offs where the play stops at the winning run.
    """
    parts = []
    scored = 0
    for move in moves:
        if move.scored:
            scored += 1
            label = "Batter" if move.from_base == 0 else f"R{move.from_base}"
            parts.append(f"{label} scores")
            if max_scoring is not None and scored >= max_scoring:
                break
        elif move.from_base > 0:
            parts.append(f"R{move.from_base} to {move.to_base}B")
    return ", ".join(parts)


# ---------------------------------------------------------------------------
# Log entry
# ---------------------------------------------------------------------------

@dataclass
class PlayLogEntry:
    inning: int
    half: Half
    batter_name: str
    pitching_team: str
    resolution: PaResolution
    is_walkoff: bool = False
    outs_after: int = 0
    runs_credited: Optional[int] = None  # after the walk-off clamp
    strikeout_looking: bool = True

    def to_play_log_string(self) -> str:
        half_str = "Top" if self.half == Half.TOP else "Bot"
        prefix = WALKOFF_PREFIX if self.is_walkoff else ""
        outcome = describe_outcome(self.resolution.tag, self.strikeout_looking)

        max_scoring = self.runs_credited if self.is_walkoff else None
        moves = describe_moves(self.resolution.moves, max_scoring)

        text = f"[{half_str} {self.inning}] {self.batter_name} vs {self.pitching_team} P - {prefix}{outcome}."
        if moves:
            text += f" {moves}."
        if self.resolution.outs_added > 0:
            text += " " + outs_phrase(self.outs_after)
        return text

    def hash_line(self) -> str:
        """Stable line used when hashing the play log."""
        return (
            f"{self.inning}|{self.half.value}|{self.batter_name}|"
            f"{self.pitching_team}|{self.resolution.tag.value}|{self.outs_after}"
        )

    def to_dict(self) -> dict:
        return {
            "inning": self.inning,
            "half": self.half.value,
            "batter": self.batter_name,
            "pitching_team": self.pitching_team,
            "tag": self.resolution.tag.value,
            "outs_after": self.outs_after,
            "is_walkoff": self.is_walkoff,
            "runs_scored": (
                self.runs_credited if self.runs_credited is not None
                else self.resolution.runs_scored
            ),
            "text": self.to_play_log_string(),
        }
