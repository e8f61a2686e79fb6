# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Baseball game simulation engine.

Runs a full game pitch by pitch. One seeded random source is created per
game and shared, in a fixed order, by lineup generation, the at-bat
simulator, the ball-in-play sampler and the runner-advancement resolver, so
a seed replays the same game bit for bit.

Per plate appearance:

1. simulate the at-bat to a terminal outcome
2. sample the ball-in-play result, if the ball was put in play
3. resolve runner advancement into a ``PaResolution``
4. apply it to the immutable ``GameState`` through the scorekeeper
5. append a ``PlayLogEntry``
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from at_bat import AtBatSimulator
from ball_in_play import resolve_ball_in_play
from baserunning import resolve
from box_score import BoxScore, LineScore
from lineup import LineupSupplier, TeamLineup, generate_lineup
from models import (
    AtBatTerminal,
    GameState,
    PitchOutcome,
    SimulationError,
    Team,
)
from play_log import PlayLogEntry
from rng import RandomSource, make_rng
from scorekeeper import InningScorekeeper

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Game result
# ---------------------------------------------------------------------------

@dataclass
class GameMetadata:
    home_team: str
    away_team: str
    seed: int
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "home_team": self.home_team,
            "away_team": self.away_team,
            "seed": self.seed,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class GameResult:
    """Everything a finished game produced."""
    metadata: GameMetadata
    box_score: BoxScore
    line_score: LineScore
    play_log: list[PlayLogEntry]
    final_state: GameState
    home_lineup: TeamLineup
    away_lineup: TeamLineup
    home_lob: list[int] = field(default_factory=list)
    away_lob: list[int] = field(default_factory=list)

    @property
    def home_total_lob(self) -> int:
        return sum(self.home_lob)

    @property
    def away_total_lob(self) -> int:
        return sum(self.away_lob)

    @property
    def winner(self) -> Optional[str]:
        s = self.final_state
        if s.home_score > s.away_score:
            return self.metadata.home_team
        if s.away_score > s.home_score:
            return self.metadata.away_team
        return None

    @property
    def log_hash(self) -> str:
        """SHA-256 over the play log and final score.

        Two runs with the same seed and lineups produce the same hash.
        """
        lines = [entry.hash_line() for entry in self.play_log]
        lines.append(f"FINAL:{self.final_state.away_score}-{self.final_state.home_score}")
        return hashlib.sha256("\n".join(lines).encode()).hexdigest()

    def to_dict(self) -> dict:
        s = self.final_state
        return {
            "metadata": self.metadata.to_dict(),
            "final_score": {"away": s.away_score, "home": s.home_score},
            "winner": self.winner,
            "innings": s.inning,
            "line_score": self.line_score.to_dict(),
            "box_score": self.box_score.to_dict(),
            "lineups": {
                "away": self.away_lineup.to_dict(),
                "home": self.home_lineup.to_dict(),
            },
            "left_on_base": {
                "away": {"by_half": self.away_lob, "total": self.away_total_lob},
                "home": {"by_half": self.home_lob, "total": self.home_total_lob},
            },
            "earned_runs": {"away": s.away_earned_runs, "home": s.home_earned_runs},
            "unearned_runs": {"away": s.away_unearned_runs, "home": s.home_unearned_runs},
            "play_log": [e.to_dict() for e in self.play_log],
            "log_hash": self.log_hash,
        }

    def format_report(self, include_play_log: bool = True) -> str:
        """Generate a formatted box score string."""
        s = self.final_state
        lines = []

        lines.append("=" * 72)
        lines.append(f"FINAL: {self.metadata.away_team} at {self.metadata.home_team}")
        lines.append("=" * 72)

        # Line score
        header = f"{'Team':<20}"
        for i in range(1, self.line_score.innings + 1):
            header += f" {i:>3}"
        header += "  |   R   H LOB"
        lines.append(header)
        lines.append("-" * len(header))

        rows = (
            (Team.AWAY, self.metadata.away_team, s.away_score, self.away_total_lob),
            (Team.HOME, self.metadata.home_team, s.home_score, self.home_total_lob),
        )
        for team, name, runs, lob in rows:
            row = f"{name:<20}"
            for cell in self.line_score.display(team):
                row += f" {cell:>3}"
            row += f"  | {runs:>3} {self.box_score.team_hits(team):>3} {lob:>3}"
            lines.append(row)

        lines.append("")
        lines.append(f"Winner: {self.winner or 'none'}")
        lines.append(f"Seed: {self.metadata.seed}")
        lines.append(f"Log hash: {self.log_hash}")

        # Batting lines
        for team, lineup in ((Team.AWAY, self.away_lineup), (Team.HOME, self.home_lineup)):
            lines.append(f"\n{lineup.team_name} Batting:")
            lines.append(f"  {'Name':<20} {'PA':>3} {'AB':>3} {'H':>3} {'R':>3} {'RBI':>4} {'BB':>3} {'K':>3} {'HR':>3}")
            lines.append(f"  {'-'*20} {'-'*3} {'-'*3} {'-'*3} {'-'*3} {'-'*4} {'-'*3} {'-'*3} {'-'*3}")
            for batter, stats in zip(lineup.batters, self.box_score.batting(team)):
                b = stats.to_dict()
                lines.append(
                    f"  {batter.name:<20} {b['PA']:>3} {b['AB']:>3} {b['H']:>3} "
                    f"{b['R']:>3} {b['RBI']:>4} {b['BB']:>3} {b['K']:>3} {b['HR']:>3}"
                )

        # Pitching lines; a team's pitcher works against the other lineup
        for team, lineup in ((Team.AWAY, self.away_lineup), (Team.HOME, self.home_lineup)):
            p = self.box_score.pitcher(team).to_dict()
            lines.append(f"\n{lineup.team_name} Pitching:")
            lines.append(f"  {'Name':<20} {'IP':>5} {'H':>3} {'R':>3} {'ER':>3} {'BB':>3} {'K':>3} {'HR':>3} {'P':>4}")
            lines.append(f"  {'-'*20} {'-'*5} {'-'*3} {'-'*3} {'-'*3} {'-'*3} {'-'*3} {'-'*3} {'-'*4}")
            lines.append(
                f"  {lineup.pitcher_or_default().name:<20} {p['IP']:>5.1f} {p['H']:>3} {p['R']:>3} "
                f"{p['ER']:>3} {p['BB']:>3} {p['K']:>3} {p['HR']:>3} {p['pitches']:>4}"
            )

        if include_play_log:
            lines.append("\nPlay-by-play:")
            for entry in self.play_log:
                lines.append(f"  {entry.to_play_log_string()}")

        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Simulator
# ---------------------------------------------------------------------------

class GameSimulator:
    """Runs one complete game from a seed.

    Args:
        home: Home team name.
        away: Away team name.
        seed: Seed for the game's single random source.
        lineup_supplier: Called as ``supplier(team_name, rng)`` for each team,
            home first. Defaults to ``generate_lineup``.
        rosters: Pre-built lineups keyed by ``Team``; when given, no lineup
            draws are made and the roster team names are used.
    """

    def __init__(self, home: str, away: str, seed: int,
                 lineup_supplier: LineupSupplier | None = None,
                 rosters: dict[Team, TeamLineup] | None = None):
        self.home = home
        self.away = away
        self.seed = seed
        self.rng: RandomSource = make_rng(seed)
        self.lineup_supplier = lineup_supplier or generate_lineup
        self.rosters = rosters
        self.at_bat = AtBatSimulator(self.rng)
        self.scorekeeper = InningScorekeeper()
        self.lineups: dict[Team, TeamLineup] = {}
        self._played = False

    # -- setup --------------------------------------------------------------

    def _build_lineups(self) -> dict[Team, TeamLineup]:
        if self.rosters is not None:
            return {Team.HOME: self.rosters[Team.HOME], Team.AWAY: self.rosters[Team.AWAY]}

        # Draw order is part of the replay contract: home, then away
        home_batters = self.lineup_supplier(self.home, self.rng)
        away_batters = self.lineup_supplier(self.away, self.rng)
        return {
            Team.HOME: TeamLineup(team_name=self.home, batters=home_batters),
            Team.AWAY: TeamLineup(team_name=self.away, batters=away_batters),
        }

    def team_name(self, team: Team) -> str:
        return self.lineups[team].team_name

    # -- game loop ----------------------------------------------------------

    def run_game(self) -> GameResult:
        """Simulate until the game is final and return the result."""
        if self._played:
            raise SimulationError("a GameSimulator runs exactly one game")
        self._played = True

        self.lineups = self._build_lineups()
        logger.info("Starting %s at %s (seed %d)",
                    self.team_name(Team.AWAY), self.team_name(Team.HOME), self.seed)

        state = GameState.new_game()
        play_log: list[PlayLogEntry] = []
        while not state.is_final:
            state = self.simulate_plate_appearance(state, play_log)

        self.scorekeeper.line_score.validate(state.away_score, state.home_score)
        logger.info("Final after %d: %s %d, %s %d", state.inning,
                    self.team_name(Team.AWAY), state.away_score,
                    self.team_name(Team.HOME), state.home_score)

        return GameResult(
            metadata=GameMetadata(
                home_team=self.team_name(Team.HOME),
                away_team=self.team_name(Team.AWAY),
                seed=self.seed,
            ),
            box_score=self.scorekeeper.box_score,
            line_score=self.scorekeeper.line_score,
            play_log=play_log,
            final_state=state,
            home_lineup=self.lineups[Team.HOME],
            away_lineup=self.lineups[Team.AWAY],
            home_lob=list(self.scorekeeper.home_lob),
            away_lob=list(self.scorekeeper.away_lob),
        )

    def simulate_plate_appearance(self, state: GameState,
                                  play_log: list[PlayLogEntry]) -> GameState:
        """Play one plate appearance and return the next state."""
        batter = self.lineups[state.offense].batter_at(state.batting_index)
        pitcher = self.lineups[state.defense].pitcher_or_default()

        at_bat = self.at_bat.simulate(pitcher.ratings, batter.ratings)

        bip_outcome = None
        if at_bat.terminal == AtBatTerminal.BALL_IN_PLAY:
            bip_outcome = resolve_ball_in_play(batter.ratings.power, pitcher.ratings.stuff, self.rng)

        resolution = resolve(at_bat.terminal, bip_outcome, state.bases, state.outs, self.rng)
        applied = self.scorekeeper.apply(state, resolution)
        self.scorekeeper.box_score.pitcher(state.defense).pitches += at_bat.pitch_count

        play_log.append(PlayLogEntry(
            inning=state.inning,
            half=state.half,
            batter_name=batter.name,
            pitching_team=self.team_name(state.defense),
            resolution=resolution,
            is_walkoff=applied.is_walkoff,
            outs_after=applied.outs_after,
            runs_credited=applied.runs_scored,
            strikeout_looking=bool(at_bat.pitches) and at_bat.pitches[-1] == PitchOutcome.CALLED_STRIKE,
        ))
        logger.debug("%s", play_log[-1].to_play_log_string())
        return applied.state_after
