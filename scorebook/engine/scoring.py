"""
Ball-by-ball state machine.

Applies one delivery at a time to the active innings of a match, keeps the
running totals, rotates strike, cycles bowlers at the end of each over and
detects innings and match completion. Every applied ball can be reverted
exactly with undo_last_ball.

Commands that cannot apply (no striker, no bowler, innings over, nothing
to undo) return False and leave the match untouched.
"""
import logging
from typing import Optional

from scorebook.engine.stats import calculate_mvp
from scorebook.models.match import (
    BALLS_PER_OVER, MAX_WICKETS, BallEntry, BatsmanStats, BowlerStats,
    ExtraType, Innings, InningsPhase, Match, MatchStatus, ShotZone,
)

logger = logging.getLogger(__name__)

TIED_RESULT = "Match Tied"


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def _extras_for(extra_type: Optional[ExtraType], runs: int) -> int:
    """Runs that go into the extras bucket for this ball"""
    if extra_type == ExtraType.WIDE:
        return runs + 1
    if extra_type == ExtraType.NO_BALL:
        return 1
    if extra_type in (ExtraType.BYE, ExtraType.LEG_BYE):
        return runs
    return 0


def _rotates_strike(extra_type: Optional[ExtraType], runs: int) -> bool:
    # Only runs actually run between the wickets on a legal ball change ends
    return extra_type not in (ExtraType.WIDE, ExtraType.NO_BALL) and runs % 2 != 0


def innings_phase(innings: Innings) -> InningsPhase:
    """Which input the innings is waiting for"""
    if innings.is_complete:
        return InningsPhase.COMPLETE
    missing_batsman = innings.striker_id is None or innings.non_striker_id is None
    if not innings.ball_log and (missing_batsman or innings.bowler_id is None):
        return InningsPhase.AWAITING_PLAYERS
    if missing_batsman:
        return InningsPhase.AWAITING_NEW_BATSMAN
    if innings.bowler_id is None:
        return InningsPhase.AWAITING_BOWLER
    return InningsPhase.ACTIVE


def can_score(match: Match) -> bool:
    innings = match.active_innings
    if innings is None or innings.is_complete or match.status != MatchStatus.LIVE:
        return False
    if innings.total_wickets >= MAX_WICKETS or innings.total_balls >= match.max_balls:
        return False
    return innings.striker is not None and innings.current_bowler is not None


def match_result(match: Match) -> str:
    """Result line once the second innings is over"""
    first, second = match.innings[0], match.innings[1]
    if second.total_runs > first.total_runs:
        return f"{second.batting_team} won by {_plural(MAX_WICKETS - second.total_wickets, 'wicket')}"
    if second.total_runs < first.total_runs:
        return f"{first.batting_team} won by {_plural(first.total_runs - second.total_runs, 'run')}"
    return TIED_RESULT


def complete_innings(match: Match):
    """
    Close the active innings and move the match on.

    After the first innings the sides swap and an empty second innings
    becomes current. After the second the result and MVP are settled.
    """
    innings = match.active_innings
    if innings is None:
        return
    innings.is_complete = True

    if match.current_innings == 0:
        match.innings[1:] = [Innings(batting_team=innings.bowling_team, bowling_team=innings.batting_team)]
        match.current_innings = 1
        logger.info(
            "Match %s: first innings closed at %d/%d, target %d",
            match.id, innings.total_runs, innings.total_wickets, innings.total_runs + 1,
        )
        return

    match.result = match_result(match)
    match.status = MatchStatus.COMPLETED
    mvp = calculate_mvp(match)
    match.mvp = mvp.name if mvp else None
    logger.info("Match %s completed: %s", match.id, match.result)


def _check_innings_complete(match: Match, innings: Innings):
    if innings.total_balls >= match.max_balls or innings.total_wickets >= MAX_WICKETS:
        innings.is_complete = True
    if match.current_innings == 1 and innings.total_runs >= match.target:
        innings.is_complete = True

    if innings.is_complete:
        complete_innings(match)


def _add_legal_ball(innings: Innings, bowler: BowlerStats):
    innings.total_balls += 1
    bowler.balls += 1
    if bowler.balls == BALLS_PER_OVER:
        bowler.overs += 1
        bowler.balls = 0


def _remove_legal_ball(innings: Innings, bowler: BowlerStats):
    innings.total_balls -= 1
    bowler.balls -= 1
    if bowler.balls < 0:
        bowler.overs -= 1
        bowler.balls = BALLS_PER_OVER - 1


def _credit_bat(batsman: BatsmanStats, runs: int, sign: int = 1):
    batsman.runs += sign * runs
    batsman.balls += sign
    if runs == 4:
        batsman.fours += sign
    if runs == 6:
        batsman.sixes += sign


def _is_maiden(innings: Innings, entry: BallEntry) -> bool:
    """True when the over closed by entry was bowled entirely by one bowler for no runs"""
    this_over = [b for b in innings.ball_log if b.over == entry.over]
    return all(b.bowler_id == entry.bowler_id and b.bowler_runs == 0 for b in this_over)


def record_ball(
    match: Match,
    runs: int,
    is_wicket: bool,
    extra_type: Optional[ExtraType] = None,
    wicket_type: Optional[str] = None,
    shot_zone: Optional[ShotZone] = None,
) -> bool:
    """Apply one delivery to the active innings"""
    if runs < 0 or not can_score(match):
        return False

    innings = match.active_innings
    batsman = innings.striker
    bowler = innings.current_bowler
    is_scoring_shot = extra_type is None and not is_wicket and runs > 0

    entry = BallEntry(
        over=innings.total_balls // BALLS_PER_OVER,
        ball=innings.total_balls % BALLS_PER_OVER,
        runs=runs,
        extras=_extras_for(extra_type, runs),
        is_wicket=is_wicket,
        striker_id=batsman.id,
        non_striker_id=innings.non_striker_id,
        bowler_id=bowler.id,
        extra_type=extra_type,
        wicket_type=wicket_type,
        out_batsman_id=batsman.id if is_wicket else None,
        shot_zone=shot_zone if is_scoring_shot else None,
    )
    innings.ball_log.append(entry)

    innings.total_runs += entry.total_runs
    bowler.runs += entry.bowler_runs

    if extra_type == ExtraType.WIDE:
        innings.extras.wides += entry.extras
        innings.extras.total += entry.extras
        bowler.extras += entry.extras
    elif extra_type == ExtraType.NO_BALL:
        innings.extras.no_balls += entry.extras
        innings.extras.total += entry.extras
        bowler.extras += entry.extras
        _credit_bat(batsman, runs)
    elif extra_type in (ExtraType.BYE, ExtraType.LEG_BYE):
        if extra_type == ExtraType.BYE:
            innings.extras.byes += runs
        else:
            innings.extras.leg_byes += runs
        innings.extras.total += runs
        batsman.balls += 1
        _add_legal_ball(innings, bowler)
    else:
        _credit_bat(batsman, runs)
        _add_legal_ball(innings, bowler)

    # Wicket
    if is_wicket:
        innings.total_wickets += 1
        batsman.is_out = True
        batsman.how_out = wicket_type or "out"
        batsman.bowler_name = bowler.name
        bowler.wickets += 1
        if innings.striker_id == batsman.id:
            innings.striker_id = None
        elif innings.non_striker_id == batsman.id:
            innings.non_striker_id = None

    if _rotates_strike(extra_type, runs):
        innings.swap_strike()

    # End of over
    end_of_over = entry.is_legal and innings.total_balls > 0 and innings.total_balls % BALLS_PER_OVER == 0
    if end_of_over:
        innings.swap_strike()
        if _is_maiden(innings, entry):
            entry.completed_maiden = True
            bowler.maidens += 1

    _check_innings_complete(match, innings)

    if end_of_over and not innings.is_complete:
        innings.bowler_id = None

    logger.debug("Match %s: ball %d.%d recorded (%s)", match.id, entry.over, entry.ball + 1, entry.total_runs)
    return True


def undo_last_ball(match: Match) -> bool:
    """Exact inverse of the most recent ball in the active innings"""
    innings = match.active_innings
    if innings is None or not innings.ball_log or match.status == MatchStatus.ABANDONED:
        return False

    entry = innings.ball_log[-1]
    batsman = innings.batsmen.get(entry.striker_id)
    bowler = innings.bowlers.get(entry.bowler_id)
    if batsman is None or bowler is None:
        return False
    innings.ball_log.pop()

    innings.total_runs -= entry.total_runs
    bowler.runs -= entry.bowler_runs

    if entry.extra_type == ExtraType.WIDE:
        innings.extras.wides -= entry.extras
        innings.extras.total -= entry.extras
        bowler.extras -= entry.extras
    elif entry.extra_type == ExtraType.NO_BALL:
        innings.extras.no_balls -= entry.extras
        innings.extras.total -= entry.extras
        bowler.extras -= entry.extras
        _credit_bat(batsman, entry.runs, sign=-1)
    elif entry.extra_type in (ExtraType.BYE, ExtraType.LEG_BYE):
        if entry.extra_type == ExtraType.BYE:
            innings.extras.byes -= entry.runs
        else:
            innings.extras.leg_byes -= entry.runs
        innings.extras.total -= entry.runs
        batsman.balls -= 1
        _remove_legal_ball(innings, bowler)
    else:
        _credit_bat(batsman, entry.runs, sign=-1)
        _remove_legal_ball(innings, bowler)

    if entry.completed_maiden:
        bowler.maidens -= 1

    if entry.is_wicket:
        innings.total_wickets -= 1
        batsman.is_out = False
        batsman.how_out = None
        batsman.bowler_name = None
        bowler.wickets -= 1

    # Put everyone back where they stood before the ball
    innings.striker_id = entry.striker_id
    innings.non_striker_id = entry.non_striker_id
    innings.bowler_id = entry.bowler_id
    innings.is_complete = False

    if match.status == MatchStatus.COMPLETED:
        match.status = MatchStatus.LIVE
        match.result = None
        match.mvp = None
        logger.info("Match %s reopened by undo", match.id)

    return True


def update_last_ball_shot_zone(innings: Innings, zone: ShotZone) -> bool:
    """Tag where the last scoring shot went"""
    entry = innings.last_ball
    if entry is None or entry.extra_type is not None or entry.is_wicket or entry.runs <= 0:
        return False
    entry.shot_zone = zone
    return True
