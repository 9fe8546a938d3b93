"""
Match lifecycle operations that are not driven by a delivery: setting up
a match from the toss, rematches, abandoning, renaming, adding players,
retirements and ending an innings early.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from scorebook.engine.scoring import complete_innings
from scorebook.models.match import (
    BALLS_PER_OVER, BatsmanStats, BowlerStats, Innings, Match, MatchStatus,
    TossChoice, generate_id,
)

logger = logging.getLogger(__name__)

ABANDONED_RESULT = "Match Abandoned"
RETIRED_HURT = "retired hurt"
RETIRED_OUT = "retired out"


@dataclass
class CustomStart:
    """Score to resume a match from, already validated by the caller"""
    runs: int = 0
    wickets: int = 0
    overs: int = 0


def batting_order(team1: str, team2: str, toss_winner: str, toss_choice: TossChoice) -> tuple[str, str]:
    """(batting first, bowling first) from the toss"""
    if toss_choice == TossChoice.BAT:
        batting_first = toss_winner
    else:
        batting_first = team2 if toss_winner == team1 else team1
    bowling_first = team2 if batting_first == team1 else team1
    return batting_first, bowling_first


def create_match(
    team1: str,
    team2: str,
    total_overs: int,
    toss_winner: str,
    toss_choice: TossChoice,
    venue: Optional[str] = None,
    custom_start: Optional[CustomStart] = None,
) -> Match:
    """New live match with an empty first innings"""
    batting_first, bowling_first = batting_order(team1, team2, toss_winner, toss_choice)
    first_innings = Innings(batting_team=batting_first, bowling_team=bowling_first)

    if custom_start:
        first_innings.total_runs = custom_start.runs
        first_innings.total_wickets = custom_start.wickets
        first_innings.total_balls = custom_start.overs * BALLS_PER_OVER
        logger.info("Custom start applied: %s", custom_start)

    match = Match(
        team1=team1,
        team2=team2,
        total_overs=total_overs,
        toss_winner=toss_winner,
        toss_choice=toss_choice,
        venue=venue,
        innings=[first_innings],
    )
    logger.info("Match created: %s (%s vs %s, %d overs)", match.id, team1, team2, total_overs)
    return match


def duplicate_match(previous: Match) -> Match:
    """Rematch with the same sides, overs and toss, and no statistics"""
    match = create_match(
        previous.team1,
        previous.team2,
        previous.total_overs,
        previous.toss_winner,
        previous.toss_choice,
        venue=previous.venue,
    )
    logger.info("Match %s duplicated from %s", match.id, previous.id)
    return match


def abandon_match(match: Match):
    match.status = MatchStatus.ABANDONED
    match.result = ABANDONED_RESULT
    logger.info("Match %s abandoned", match.id)


def _rename_team(match: Match, old: str, new: str):
    for inn in match.innings:
        if inn.batting_team == old:
            inn.batting_team = new
        if inn.bowling_team == old:
            inn.bowling_team = new
    if match.toss_winner == old:
        match.toss_winner = new


def edit_match_details(
    match: Match,
    team1: Optional[str] = None,
    team2: Optional[str] = None,
    venue: Optional[str] = None,
):
    """Rename teams everywhere they appear, and/or change the venue"""
    if team1 is not None:
        old = match.team1
        match.team1 = team1
        _rename_team(match, old, team1)
    if team2 is not None:
        old = match.team2
        match.team2 = team2
        _rename_team(match, old, team2)
    if venue is not None:
        match.venue = venue


def _innings_at(match: Match, innings_index: Optional[int]) -> Optional[Innings]:
    idx = match.current_innings if innings_index is None else innings_index
    if 0 <= idx < len(match.innings):
        return match.innings[idx]
    return None


def _name_taken(players, name: str) -> bool:
    lowered = name.lower()
    return any(p.name.lower() == lowered for p in players)


def add_batsman(match: Match, name: str, innings_index: Optional[int] = None) -> Optional[BatsmanStats]:
    """
    Add a batsman to an innings and put them in the first empty slot.

    Returns None if the innings does not exist or the name is already used
    by a batsman in that innings.
    """
    innings = _innings_at(match, innings_index)
    if innings is None or _name_taken(innings.batsmen.values(), name):
        return None

    batsman = BatsmanStats(id=generate_id(), name=name)
    innings.batsmen[batsman.id] = batsman

    if innings.striker_id is None:
        innings.striker_id = batsman.id
    elif innings.non_striker_id is None:
        innings.non_striker_id = batsman.id
    return batsman


def add_bowler(match: Match, name: str, innings_index: Optional[int] = None) -> Optional[BowlerStats]:
    """Add a bowler to an innings; they take the ball if nobody has it"""
    innings = _innings_at(match, innings_index)
    if innings is None or _name_taken(innings.bowlers.values(), name):
        return None

    bowler = BowlerStats(id=generate_id(), name=name)
    innings.bowlers[bowler.id] = bowler

    if innings.bowler_id is None:
        innings.bowler_id = bowler.id
    return bowler


def previous_over_bowler(innings: Innings) -> Optional[str]:
    """Bowler of the over that just finished, while a new bowler is awaited"""
    last = innings.last_ball
    if last is None or innings.bowler_id is not None:
        return None
    if innings.total_balls > 0 and innings.total_balls % BALLS_PER_OVER == 0:
        return last.bowler_id
    return None


def switch_bowler(match: Match, bowler_id: str) -> bool:
    """Hand the ball to a bowler already in the innings"""
    innings = match.active_innings
    if innings is None or bowler_id not in innings.bowlers:
        return False
    if bowler_id == previous_over_bowler(innings):
        return False
    innings.bowler_id = bowler_id
    return True


def swap_strike(match: Match) -> bool:
    innings = match.active_innings
    if innings is None:
        return False
    innings.swap_strike()
    return True


def retire_batsman(match: Match, batsman_id: str, is_hurt: bool) -> bool:
    """Take a batsman off without crediting a dismissal to any bowler"""
    innings = match.active_innings
    if innings is None:
        return False
    batsman = innings.batsmen.get(batsman_id)
    if batsman is None:
        return False

    batsman.is_out = True
    batsman.how_out = RETIRED_HURT if is_hurt else RETIRED_OUT

    if innings.striker_id == batsman_id:
        innings.striker_id = None
    elif innings.non_striker_id == batsman_id:
        innings.non_striker_id = None
    return True


def end_innings(match: Match) -> bool:
    """Close the current innings early, then carry on as if it ended naturally"""
    innings = match.active_innings
    if innings is None or match.status != MatchStatus.LIVE:
        return False
    complete_innings(match)
    return True


def set_notes(match: Match, note: str):
    match.notes = note


def set_mvp(match: Match, name: str):
    match.mvp = name
