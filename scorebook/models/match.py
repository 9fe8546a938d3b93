import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


BALLS_PER_OVER = 6
MAX_WICKETS = 10


def generate_id() -> str:
    """Short random id for matches, players and ball entries"""
    return uuid.uuid4().hex[:12]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MatchStatus(enum.Enum):
    LIVE = "live"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class TossChoice(enum.Enum):
    BAT = "bat"
    BOWL = "bowl"


class ExtraType(enum.Enum):
    WIDE = "wide"
    NO_BALL = "no-ball"
    BYE = "bye"
    LEG_BYE = "leg-bye"


class ShotZone(enum.Enum):
    OFF = "off"
    COVER = "cover"
    STRAIGHT = "straight"
    MIDWICKET = "midwicket"
    LEG = "leg"
    FINE = "fine"


class InningsPhase(enum.Enum):
    AWAITING_PLAYERS = "awaiting-players"
    ACTIVE = "active"
    AWAITING_NEW_BATSMAN = "awaiting-new-batsman"
    AWAITING_BOWLER = "awaiting-bowler"
    COMPLETE = "complete"


@dataclass
class BallEntry:
    """A single delivery as it was recorded"""
    over: int
    ball: int
    runs: int  # off the bat, or run as byes / leg-byes
    extras: int  # runs credited to the extras bucket
    is_wicket: bool
    striker_id: str
    bowler_id: str
    non_striker_id: Optional[str] = None  # pre-ball, used by undo
    extra_type: Optional[ExtraType] = None
    wicket_type: Optional[str] = None
    out_batsman_id: Optional[str] = None
    completed_maiden: bool = False
    shot_zone: Optional[ShotZone] = None
    timestamp: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=generate_id)

    @property
    def is_legal(self) -> bool:
        return self.extra_type not in (ExtraType.WIDE, ExtraType.NO_BALL)

    @property
    def total_runs(self) -> int:
        """Contribution of this ball to the innings total"""
        if self.is_legal:
            return self.runs
        return self.runs + 1

    @property
    def bowler_runs(self) -> int:
        """Runs charged against the bowler (byes and leg-byes are not)"""
        if self.extra_type in (ExtraType.BYE, ExtraType.LEG_BYE):
            return 0
        return self.total_runs


@dataclass
class BatsmanStats:
    id: str
    name: str
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False
    how_out: Optional[str] = None
    bowler_name: Optional[str] = None

    @property
    def has_batted(self) -> bool:
        return self.balls > 0 or self.runs > 0


@dataclass
class BowlerStats:
    id: str
    name: str
    overs: int = 0
    balls: int = 0  # 0-5, legal balls into the current over
    maidens: int = 0
    runs: int = 0
    wickets: int = 0
    extras: int = 0

    @property
    def total_balls(self) -> int:
        return self.overs * BALLS_PER_OVER + self.balls

    @property
    def overs_display(self) -> str:
        return f"{self.overs}.{self.balls}"

    @property
    def has_bowled(self) -> bool:
        return self.overs > 0 or self.balls > 0


@dataclass
class Extras:
    wides: int = 0
    no_balls: int = 0
    byes: int = 0
    leg_byes: int = 0
    total: int = 0


@dataclass
class Innings:
    """Running state of one innings"""
    batting_team: str
    bowling_team: str
    total_runs: int = 0
    total_wickets: int = 0
    total_balls: int = 0  # legal balls only
    extras: Extras = field(default_factory=Extras)
    ball_log: list[BallEntry] = field(default_factory=list)

    batsmen: dict[str, BatsmanStats] = field(default_factory=dict)  # id -> BatsmanStats
    bowlers: dict[str, BowlerStats] = field(default_factory=dict)  # id -> BowlerStats

    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    bowler_id: Optional[str] = None
    is_complete: bool = False

    @property
    def overs_completed(self) -> int:
        return self.total_balls // BALLS_PER_OVER

    @property
    def striker(self) -> Optional[BatsmanStats]:
        return self.batsmen.get(self.striker_id) if self.striker_id else None

    @property
    def non_striker(self) -> Optional[BatsmanStats]:
        return self.batsmen.get(self.non_striker_id) if self.non_striker_id else None

    @property
    def current_bowler(self) -> Optional[BowlerStats]:
        return self.bowlers.get(self.bowler_id) if self.bowler_id else None

    @property
    def last_ball(self) -> Optional[BallEntry]:
        return self.ball_log[-1] if self.ball_log else None

    def swap_strike(self):
        self.striker_id, self.non_striker_id = self.non_striker_id, self.striker_id

    def __repr__(self):
        return f"<Innings {self.batting_team}: {self.total_runs}/{self.total_wickets} ({self.overs_completed}.{self.total_balls % BALLS_PER_OVER})>"


@dataclass
class Match:
    team1: str
    team2: str
    total_overs: int
    toss_winner: str
    toss_choice: TossChoice
    innings: list[Innings] = field(default_factory=list)  # first, then second once created
    current_innings: int = 0
    status: MatchStatus = MatchStatus.LIVE
    venue: Optional[str] = None
    result: Optional[str] = None
    notes: Optional[str] = None
    mvp: Optional[str] = None
    date: datetime = field(default_factory=utc_now)
    created_at: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=generate_id)

    @property
    def active_innings(self) -> Optional[Innings]:
        if self.current_innings < len(self.innings):
            return self.innings[self.current_innings]
        return None

    @property
    def first_innings(self) -> Optional[Innings]:
        return self.innings[0] if self.innings else None

    @property
    def second_innings(self) -> Optional[Innings]:
        return self.innings[1] if len(self.innings) > 1 else None

    @property
    def max_balls(self) -> int:
        return self.total_overs * BALLS_PER_OVER

    @property
    def target(self) -> Optional[int]:
        """Runs the chasing side needs, once the second innings exists"""
        if self.second_innings is None:
            return None
        return self.innings[0].total_runs + 1

    def __repr__(self):
        return f"<Match {self.team1} vs {self.team2} ({self.status.value})>"
