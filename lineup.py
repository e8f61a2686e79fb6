# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Lineups: the default generator and roster-file loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from models import Batter, BatterRatings, Pitcher, PitcherRatings, Team
from rng import RandomSource

LINEUP_SIZE = 9

# (team_name, rng) -> nine batters in batting order
LineupSupplier = Callable[[str, RandomSource], list[Batter]]

_ROSTER_PATH = Path(__file__).resolve().parent / "data" / "sample_rosters.json"


class TeamLineup(BaseModel):
    """A team's batting order and its pitcher for the game."""
    model_config = ConfigDict(frozen=True)

    team_name: str = Field(min_length=1)
    batters: list[Batter] = Field(min_length=LINEUP_SIZE, max_length=LINEUP_SIZE)
    pitcher: Optional[Pitcher] = None

    def batter_at(self, slot: int) -> Batter:
        return self.batters[slot]

    def pitcher_or_default(self) -> Pitcher:
        return self.pitcher or default_pitcher(self.team_name)

    def to_dict(self) -> dict:
        return {
            "team_name": self.team_name,
            "lineup": [b.name for b in self.batters],
            "pitcher": self.pitcher_or_default().name,
        }


def default_pitcher(team_name: str) -> Pitcher:
    return Pitcher(name=f"{team_name} P", ratings=PitcherRatings.average())


def generate_lineup(team_name: str, rng: RandomSource) -> list[Batter]:
    """Nine league-average batters in a shuffled batting order.

    Batters are named "<team> 1" through "<team> 9" and shuffled with
    Fisher-Yates, drawing from ``rng`` so the order replays with the seed.
    """
    batters = [
        Batter(name=f"{team_name} {i}", ratings=BatterRatings.average())
        for i in range(1, LINEUP_SIZE + 1)
    ]
    for i in range(len(batters) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        batters[i], batters[j] = batters[j], batters[i]
    return batters


def load_rosters(path: Path | str | None = None) -> dict[Team, TeamLineup]:
    """Load both teams from a roster JSON file.

    Expected shape::

        {"home": {"team_name": ..., "lineup": [9 batters], "pitcher": {...}},
         "away": {...}}

    Raises ``ValueError`` when the file or either side is not a JSON object,
    ``pydantic.ValidationError`` for a malformed team and ``KeyError`` if
    either side is missing.
    """
    p = Path(path) if path is not None else _ROSTER_PATH
    with open(p) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"roster file must hold a JSON object, got {type(data).__name__}")

    rosters = {}
    for team in (Team.HOME, Team.AWAY):
        key = team.value.lower()
        side = data[key]
        if not isinstance(side, dict):
            raise ValueError(f"roster entry {key!r} must be a JSON object, got {type(side).__name__}")
        rosters[team] = TeamLineup.model_validate({
            "team_name": side["team_name"],
            "batters": side["lineup"],
            "pitcher": side.get("pitcher"),
        })
    return rosters
