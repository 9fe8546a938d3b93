"""
Derived statistics computed from an innings or match.

Everything here is pure: nothing mutates its arguments and every value is
recomputed from the ball log on each call.
"""
from dataclasses import dataclass, field
from typing import Optional

from scorebook.models.match import (
    BALLS_PER_OVER, ExtraType, Innings, Match, MatchStatus,
)


@dataclass
class OverSummary:
    over_number: int  # 1-based
    balls: list[str] = field(default_factory=list)
    runs: int = 0
    wickets: int = 0
    bowler_name: str = "Unknown"


@dataclass
class Partnership:
    runs: int = 0
    balls: int = 0
    batsman1_name: str = ""
    batsman2_name: str = ""


@dataclass
class PhaseStats:
    runs: int = 0
    wickets: int = 0
    balls: int = 0

    @property
    def overs(self) -> str:
        return overs_string(self.balls)


@dataclass
class Spell:
    over_start: int  # 1-based
    over_end: int
    runs: int = 0
    wickets: int = 0
    balls: int = 0


@dataclass
class MVPCandidate:
    name: str
    score: int = 0
    runs: int = 0
    wickets: int = 0
    fours: int = 0
    sixes: int = 0


def overs_string(balls: int) -> str:
    return f"{balls // BALLS_PER_OVER}.{balls % BALLS_PER_OVER}"


def strike_rate(runs: int, balls: int) -> str:
    if balls == 0:
        return "0.00"
    return f"{runs / balls * 100:.1f}"


def economy_rate(runs: int, balls: int) -> str:
    if balls == 0:
        return "0.00"
    return f"{runs / balls * BALLS_PER_OVER:.1f}"


def run_rate(runs: int, balls: int) -> str:
    if balls == 0:
        return "0.00"
    return f"{runs / balls * BALLS_PER_OVER:.2f}"


def required_run_rate(target: int, current_runs: int, balls_remaining: int) -> str:
    if balls_remaining <= 0:
        return "0.00"
    return f"{(target - current_runs) / balls_remaining * BALLS_PER_OVER:.2f}"


def balls_remaining(match: Match, innings: Innings) -> int:
    return max(0, match.max_balls - innings.total_balls)


def ball_token(ball) -> str:
    """Scoreboard token for one delivery: W, 4, 1Wd, Nb, 2B, 1Lb"""
    if ball.is_wicket:
        return "W"
    if ball.extra_type == ExtraType.WIDE:
        return f"{ball.runs}Wd" if ball.runs > 0 else "Wd"
    if ball.extra_type == ExtraType.NO_BALL:
        return f"{ball.runs}Nb" if ball.runs > 0 else "Nb"
    if ball.extra_type == ExtraType.BYE:
        return f"{ball.runs}B"
    if ball.extra_type == ExtraType.LEG_BYE:
        return f"{ball.runs}Lb"
    return str(ball.runs)


def over_by_over_summary(innings: Innings) -> list[OverSummary]:
    """Group the ball log into overs of six legal balls, plus any partial over"""
    overs = []
    current: Optional[OverSummary] = None
    legal_in_over = 0

    for ball in innings.ball_log:
        if current is None:
            bowler = innings.bowlers.get(ball.bowler_id)
            current = OverSummary(
                over_number=len(overs) + 1,
                bowler_name=bowler.name if bowler else "Unknown",
            )

        current.balls.append(ball_token(ball))
        current.runs += ball.total_runs
        if ball.is_wicket:
            current.wickets += 1

        if ball.is_legal:
            legal_in_over += 1
            if legal_in_over == BALLS_PER_OVER:
                overs.append(current)
                current = None
                legal_in_over = 0

    if current is not None and current.balls:
        overs.append(current)

    return overs


def current_over(innings: Innings) -> list[str]:
    """Tokens of the over in progress, or of the last full over between overs"""
    overs = over_by_over_summary(innings)
    return overs[-1].balls if overs else []


def partnership(innings: Innings) -> Partnership:
    """Runs and legal balls since the last wicket fell"""
    start = 0
    for i in range(len(innings.ball_log) - 1, -1, -1):
        if innings.ball_log[i].is_wicket:
            start = i + 1
            break

    result = Partnership()
    for ball in innings.ball_log[start:]:
        result.runs += ball.total_runs
        if ball.is_legal:
            result.balls += 1

    striker = innings.striker
    non_striker = innings.non_striker
    result.batsman1_name = striker.name if striker else ""
    result.batsman2_name = non_striker.name if non_striker else ""
    return result


def phase_stats(innings: Innings, max_overs: int) -> dict[str, PhaseStats]:
    """
    Split the innings into powerplay, middle and death overs.

    Powerplay is the first min(6, max_overs) overs; death starts at
    max(powerplay end, max_overs - 4); middle is whatever lies between.
    """
    pp_end = min(6, max_overs)
    death_start = max(pp_end, max_overs - 4)
    phases = {
        "powerplay": PhaseStats(),
        "middle": PhaseStats(),
        "death": PhaseStats(),
    }

    legal_balls = 0
    for ball in innings.ball_log:
        over_index = legal_balls // BALLS_PER_OVER
        if over_index < pp_end:
            phase = phases["powerplay"]
        elif over_index >= death_start:
            phase = phases["death"]
        else:
            phase = phases["middle"]

        phase.runs += ball.total_runs
        if ball.is_wicket:
            phase.wickets += 1
        if ball.is_legal:
            phase.balls += 1
            legal_balls += 1

    return phases


def bowler_spells(innings: Innings, bowler_id: str) -> list[Spell]:
    """A new spell starts whenever the bowler skips at least one over"""
    spells = []
    current: Optional[Spell] = None
    legal_balls = 0
    over_index = 0
    last_bowler_over = -2

    for ball in innings.ball_log:
        if ball.bowler_id == bowler_id:
            if current is None or over_index > last_bowler_over + 1:
                if current is not None:
                    spells.append(current)
                current = Spell(over_start=over_index + 1, over_end=over_index + 1)

            current.over_end = over_index + 1
            current.runs += ball.total_runs
            if ball.is_legal:
                current.balls += 1
            if ball.is_wicket:
                current.wickets += 1
            last_bowler_over = over_index

        if ball.is_legal:
            legal_balls += 1
            if legal_balls % BALLS_PER_OVER == 0:
                over_index += 1

    if current is not None:
        spells.append(current)
    return spells


def calculate_mvp(match: Match) -> Optional[MVPCandidate]:
    """
    Best all-round performance of a completed match.

    Batting: 1 per run, +1 per four, +2 per six, +10 for a strike rate
    over 150, +20 for a fifty or +10 for thirty.
    Bowling: 25 per wicket, +15 for economy under 6 or +5 under 8,
    +10 per maiden, +20 for three or more wickets.
    Ties go to the player seen first.
    """
    if match.status != MatchStatus.COMPLETED:
        return None

    scores: dict[str, MVPCandidate] = {}

    for inn in match.innings:
        for b in inn.batsmen.values():
            if not b.has_batted:
                continue
            candidate = scores.setdefault(b.name.lower(), MVPCandidate(name=b.name))
            candidate.runs += b.runs
            candidate.fours += b.fours
            candidate.sixes += b.sixes
            candidate.score += b.runs + b.fours + b.sixes * 2
            if b.balls > 0 and b.runs / b.balls * 100 > 150:
                candidate.score += 10
            if b.runs >= 50:
                candidate.score += 20
            elif b.runs >= 30:
                candidate.score += 10

        for b in inn.bowlers.values():
            if not b.has_bowled:
                continue
            candidate = scores.setdefault(b.name.lower(), MVPCandidate(name=b.name))
            candidate.wickets += b.wickets
            candidate.score += b.wickets * 25
            economy = b.runs / b.total_balls * BALLS_PER_OVER
            if economy < 6:
                candidate.score += 15
            elif economy < 8:
                candidate.score += 5
            candidate.score += b.maidens * 10
            if b.wickets >= 3:
                candidate.score += 20

    # sorted() is stable, so equal scores keep first-seen order
    ranked = sorted(scores.values(), key=lambda c: c.score, reverse=True)
    return ranked[0] if ranked else None
