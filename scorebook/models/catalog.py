from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from scorebook.models.match import generate_id, utc_now


@dataclass
class SavedPlayer:
    """A name remembered for autocomplete across matches"""
    name: str
    team: Optional[str] = None
    matches_played: int = 0
    total_runs: int = 0
    total_balls: int = 0
    total_wickets: int = 0
    total_runs_conceded: int = 0
    total_balls_bowled: int = 0
    highest_score: int = 0
    best_bowling: str = "0/0"
    created_at: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=generate_id)


@dataclass
class TeamRoster:
    """A named team with its usual players"""
    name: str
    players: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=generate_id)
