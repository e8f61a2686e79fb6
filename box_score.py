# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Box-score and line-score accumulators.

These are the only mutable objects in a game. The scorekeeper owns them and
updates them once per plate appearance; the orchestrator hands them out in
the final ``GameResult``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from models import InvariantViolation, Team


# ---------------------------------------------------------------------------
# In-game stat tracking
# ---------------------------------------------------------------------------

@dataclass
class BatterGameStats:
    ab: int = 0
    hits: int = 0
    singles: int = 0
    doubles: int = 0
    triples: int = 0
    hr: int = 0
    runs: int = 0
    rbi: int = 0
    bb: int = 0
    k: int = 0
    hbp: int = 0
    sf: int = 0

    @property
    def pa(self) -> int:
        return self.ab + self.bb + self.hbp + self.sf

    @property
    def total_bases(self) -> int:
        return self.singles + 2 * self.doubles + 3 * self.triples + 4 * self.hr

    def to_dict(self) -> dict:
        return {
            "PA": self.pa, "AB": self.ab, "H": self.hits, "R": self.runs,
            "RBI": self.rbi, "BB": self.bb, "K": self.k, "HBP": self.hbp,
            "1B": self.singles, "2B": self.doubles, "3B": self.triples,
            "HR": self.hr, "TB": self.total_bases, "SF": self.sf,
        }


@dataclass
class PitcherGameStats:
    ip_outs: int = 0  # outs recorded (3 = 1.0 IP)
    hits: int = 0
    runs: int = 0
    earned_runs: int = 0
    bb: int = 0
    k: int = 0
    hbp: int = 0
    pitches: int = 0
    batters_faced: int = 0
    hr_allowed: int = 0

    @property
    def ip(self) -> float:
        full = self.ip_outs // 3
        partial = self.ip_outs % 3
        return full + partial / 10.0

    def to_dict(self) -> dict:
        return {
            "IP": self.ip, "H": self.hits, "R": self.runs,
            "ER": self.earned_runs, "BB": self.bb, "K": self.k,
            "HBP": self.hbp, "pitches": self.pitches, "HR": self.hr_allowed,
            "batters_faced": self.batters_faced, "outs": self.ip_outs,
        }


# ---------------------------------------------------------------------------
# Line score
# ---------------------------------------------------------------------------

SKIPPED_MARKER = "X"
UNPLAYED_MARKER = "-"


@dataclass
class LineScore:
    """Runs per half-inning for both teams.

    An inning the home team never bats (already ahead after the top of the
    9th or later) is recorded as skipped and renders as ``X``.
    """

    away: list[int] = field(default_factory=list)
    home: list[int] = field(default_factory=list)
    skipped: set[tuple[Team, int]] = field(default_factory=set)

    def _runs(self, team: Team) -> list[int]:
        return self.away if team == Team.AWAY else self.home

    def record(self, team: Team, inning: int, runs: int) -> None:
        """Record the runs a team scored in a completed (or walk-off) half."""
        if runs < 0:
            raise InvariantViolation(f"negative runs for {team.value} in inning {inning}")
        row = self._runs(team)
        while len(row) < inning:
            row.append(0)
        row[inning - 1] = runs

    def mark_skipped(self, team: Team, inning: int) -> None:
        row = self._runs(team)
        while len(row) < inning:
            row.append(0)
        self.skipped.add((team, inning))

    def is_skipped(self, team: Team, inning: int) -> bool:
        return (team, inning) in self.skipped

    @property
    def innings(self) -> int:
        return max(len(self.away), len(self.home))

    def runs_in(self, team: Team, inning: int) -> int:
        row = self._runs(team)
        return row[inning - 1] if inning <= len(row) else 0

    def total(self, team: Team) -> int:
        return sum(self._runs(team))

    def display(self, team: Team) -> list[str]:
        """Per-inning cells: runs, ``X`` for a skipped half, ``-`` if unplayed."""
        row = self._runs(team)
        cells = []
        for inning in range(1, self.innings + 1):
            if self.is_skipped(team, inning):
                cells.append(SKIPPED_MARKER)
            elif inning > len(row):
                cells.append(UNPLAYED_MARKER)
            else:
                cells.append(str(row[inning - 1]))
        return cells

    def validate(self, away_score: int, home_score: int) -> None:
        """Raise InvariantViolation unless line-score totals match the score."""
        if self.total(Team.AWAY) != away_score or self.total(Team.HOME) != home_score:
            raise InvariantViolation(
                f"line score {self.total(Team.AWAY)}-{self.total(Team.HOME)} "
                f"does not match game score {away_score}-{home_score}"
            )

    def to_dict(self) -> dict:
        return {
            "away": self.display(Team.AWAY),
            "home": self.display(Team.HOME),
            "totals": {"away": self.total(Team.AWAY), "home": self.total(Team.HOME)},
        }


# ---------------------------------------------------------------------------
# Box score
# ---------------------------------------------------------------------------

def _nine_slots() -> list[BatterGameStats]:
    return [BatterGameStats() for _ in range(9)]


@dataclass
class BoxScore:
    """Batting lines per lineup slot and one pitching line per team.

    Pitchers are keyed by the team they pitch for; with no substitutions
    each team uses a single pitcher for the whole game.
    """

    away_batting: list[BatterGameStats] = field(default_factory=_nine_slots)
    home_batting: list[BatterGameStats] = field(default_factory=_nine_slots)
    away_pitching: PitcherGameStats = field(default_factory=PitcherGameStats)
    home_pitching: PitcherGameStats = field(default_factory=PitcherGameStats)

    def batting(self, team: Team) -> list[BatterGameStats]:
        return self.away_batting if team == Team.AWAY else self.home_batting

    def batter(self, team: Team, slot: int) -> BatterGameStats:
        if not 0 <= slot <= 8:
            raise InvariantViolation(f"lineup slot {slot} out of range")
        return self.batting(team)[slot]

    def pitcher(self, team: Team) -> PitcherGameStats:
        """Pitching line for the pitcher working for ``team``."""
        return self.away_pitching if team == Team.AWAY else self.home_pitching

    def team_hits(self, team: Team) -> int:
        return sum(b.hits for b in self.batting(team))

    def defensive_outs(self, team: Team) -> int:
        """Outs recorded while ``team`` was in the field."""
        return self.pitcher(team).ip_outs

    def to_dict(self) -> dict:
        return {
            side.value.lower(): {
                "batting": [b.to_dict() for b in self.batting(side)],
                "pitching": self.pitcher(side).to_dict(),
                "hits": self.team_hits(side),
                "defensive_outs": self.defensive_outs(side),
            }
            for side in (Team.AWAY, Team.HOME)
        }
