from scorebook.models.match import (
    Match, Innings, BallEntry, BatsmanStats, BowlerStats, Extras,
    MatchStatus, TossChoice, ExtraType, ShotZone, InningsPhase,
)
from scorebook.models.catalog import SavedPlayer, TeamRoster

__all__ = [
    "Match",
    "Innings",
    "BallEntry",
    "BatsmanStats",
    "BowlerStats",
    "Extras",
    "MatchStatus",
    "TossChoice",
    "ExtraType",
    "ShotZone",
    "InningsPhase",
    "SavedPlayer",
    "TeamRoster",
]
