"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from enum import Enum

from scorebook.models.match import ExtraType, MatchStatus, ShotZone, TossChoice


# Enums
class TossChoiceEnum(str, Enum):
    BAT = "bat"
    BOWL = "bowl"


class ExtraTypeEnum(str, Enum):
    WIDE = "wide"
    NO_BALL = "no-ball"
    BYE = "bye"
    LEG_BYE = "leg-bye"


class ShotZoneEnum(str, Enum):
    OFF = "off"
    COVER = "cover"
    STRAIGHT = "straight"
    MIDWICKET = "midwicket"
    LEG = "leg"
    FINE = "fine"


class MatchStatusEnum(str, Enum):
    LIVE = "live"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


# Match setup
class CustomStartRequest(BaseModel):
    runs: int = 0
    wickets: int = 0
    overs: int = 0


class CreateMatchRequest(BaseModel):
    team1: str
    team2: str
    total_overs: Optional[int] = None
    toss_winner: Optional[str] = None
    toss_choice: Optional[TossChoiceEnum] = None
    venue: Optional[str] = None
    custom_start: Optional[CustomStartRequest] = None


class EditMatchRequest(BaseModel):
    team1: Optional[str] = None
    team2: Optional[str] = None
    venue: Optional[str] = None


class NoteRequest(BaseModel):
    note: str


class MVPRequest(BaseModel):
    name: str


# Players in an innings
class PlayerNameRequest(BaseModel):
    name: str
    innings_index: Optional[int] = None  # defaults to the current innings


class SwitchBowlerRequest(BaseModel):
    bowler_id: str


class RetireRequest(BaseModel):
    batsman_id: str
    is_hurt: bool = False


# Scoring
class BallRequest(BaseModel):
    runs: int = 0
    is_wicket: bool = False
    extra_type: Optional[ExtraTypeEnum] = None
    wicket_type: Optional[str] = None  # bowled, caught, lbw, run out, stumped, hit wicket
    shot_zone: Optional[ShotZoneEnum] = None


class ShotZoneRequest(BaseModel):
    zone: ShotZoneEnum


class DLSRequest(BaseModel):
    team1_score: int
    team1_overs_used: float
    max_overs: int
    team2_overs_available: float
    team2_wickets_lost: int = 0


class DLSResponse(BaseModel):
    target: int


# Match state
class BallEntryResponse(BaseModel):
    id: str
    over: int
    ball: int
    runs: int
    extras: int
    is_wicket: bool
    extra_type: Optional[ExtraType] = None
    wicket_type: Optional[str] = None
    striker_id: str
    non_striker_id: Optional[str] = None
    bowler_id: str
    out_batsman_id: Optional[str] = None
    shot_zone: Optional[ShotZone] = None
    timestamp: datetime

    class Config:
        from_attributes = True


class BatsmanResponse(BaseModel):
    id: str
    name: str
    runs: int
    balls: int
    fours: int
    sixes: int
    is_out: bool
    how_out: Optional[str] = None
    bowler_name: Optional[str] = None

    class Config:
        from_attributes = True


class BowlerResponse(BaseModel):
    id: str
    name: str
    overs: int
    balls: int
    maidens: int
    runs: int
    wickets: int
    extras: int
    overs_display: str

    class Config:
        from_attributes = True


class ExtrasResponse(BaseModel):
    wides: int
    no_balls: int
    byes: int
    leg_byes: int
    total: int

    class Config:
        from_attributes = True


class InningsResponse(BaseModel):
    batting_team: str
    bowling_team: str
    total_runs: int
    total_wickets: int
    total_balls: int
    extras: ExtrasResponse
    ball_log: list[BallEntryResponse]
    batsmen: dict[str, BatsmanResponse]
    bowlers: dict[str, BowlerResponse]
    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    bowler_id: Optional[str] = None
    is_complete: bool

    class Config:
        from_attributes = True


class MatchBrief(BaseModel):
    id: str
    team1: str
    team2: str
    total_overs: int
    status: MatchStatus
    venue: Optional[str] = None
    result: Optional[str] = None
    date: datetime

    class Config:
        from_attributes = True


class MatchResponse(MatchBrief):
    toss_winner: str
    toss_choice: TossChoice
    innings: list[InningsResponse]
    current_innings: int
    notes: Optional[str] = None
    mvp: Optional[str] = None
    target: Optional[int] = None
    created_at: datetime


class PartnershipResponse(BaseModel):
    runs: int
    balls: int
    batsman1_name: str
    batsman2_name: str

    class Config:
        from_attributes = True


class ScoreboardResponse(BaseModel):
    match_id: str
    status: MatchStatus
    innings: int  # 1 or 2
    batting_team: str
    bowling_team: str
    runs: int
    wickets: int
    overs: str
    run_rate: str
    target: Optional[int] = None
    required_rate: Optional[str] = None
    balls_remaining: int
    phase: str

    striker: Optional[BatsmanResponse] = None
    non_striker: Optional[BatsmanResponse] = None
    bowler: Optional[BowlerResponse] = None
    unavailable_bowler_id: Optional[str] = None  # bowled the previous over

    this_over: list[str]
    partnership: PartnershipResponse
    result: Optional[str] = None


class OverSummaryResponse(BaseModel):
    over_number: int
    balls: list[str]
    runs: int
    wickets: int
    bowler_name: str

    class Config:
        from_attributes = True


class PhaseStatsResponse(BaseModel):
    runs: int
    wickets: int
    balls: int
    overs: str

    class Config:
        from_attributes = True


class SpellResponse(BaseModel):
    over_start: int
    over_end: int
    runs: int
    wickets: int
    balls: int

    class Config:
        from_attributes = True


class MVPResponse(BaseModel):
    name: str
    score: int
    runs: int
    wickets: int
    fours: int
    sixes: int

    class Config:
        from_attributes = True


# Career statistics
class PlayerAggregateResponse(BaseModel):
    name: str
    matches: int
    runs: int
    balls: int
    fours: int
    sixes: int
    high_score: int
    wickets: int
    runs_conceded: int
    balls_bowled: int
    best_bowling: str
    strike_rate: str
    average: str
    economy: str

    class Config:
        from_attributes = True


class PlayerInningsResponse(BaseModel):
    match_id: str
    match_date: datetime
    opponent: str
    venue: Optional[str] = None
    runs: int
    balls: int
    fours: int
    sixes: int
    is_out: bool
    how_out: Optional[str] = None
    strike_rate: str
    wickets: int
    runs_conceded: int
    overs_bowled: str
    economy: str

    class Config:
        from_attributes = True


class TeamRecordResponse(BaseModel):
    name: str
    played: int
    wins: int
    losses: int
    ties: int
    abandoned: int
    total_runs: int
    total_wickets: int

    class Config:
        from_attributes = True


class HeadToHeadResponse(BaseModel):
    total_played: int
    team1_wins: int
    team2_wins: int
    ties: int
    no_results: int
    matches: list[MatchBrief]

    class Config:
        from_attributes = True


# Saved players and rosters
class SavedPlayerRequest(BaseModel):
    name: str
    team: Optional[str] = None


class SavedPlayerUpdate(BaseModel):
    name: Optional[str] = None
    team: Optional[str] = None


class SavedPlayerResponse(BaseModel):
    id: str
    name: str
    team: Optional[str] = None
    matches_played: int
    total_runs: int
    total_wickets: int
    highest_score: int
    best_bowling: str
    created_at: datetime

    class Config:
        from_attributes = True


class RosterRequest(BaseModel):
    name: str
    players: list[str] = []


class RosterUpdate(BaseModel):
    name: Optional[str] = None
    players: Optional[list[str]] = None


class RosterResponse(BaseModel):
    id: str
    name: str
    players: list[str]
    created_at: datetime

    class Config:
        from_attributes = True
