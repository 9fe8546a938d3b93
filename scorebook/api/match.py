"""
Match API - setup, ball-by-ball scoring and per-match views

Responses are built from live matches, so every endpoint builds them
inside `book.reading()`.
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from typing import Optional

from scorebook.api.deps import get_scorebook
from scorebook.api.schemas import (
    CreateMatchRequest, EditMatchRequest, NoteRequest, MVPRequest,
    PlayerNameRequest, SwitchBowlerRequest, RetireRequest, BallRequest, ShotZoneRequest,
    MatchStatusEnum, MatchBrief, MatchResponse, ScoreboardResponse, BatsmanResponse,
    BowlerResponse, OverSummaryResponse, PartnershipResponse, PhaseStatsResponse,
    SpellResponse, MVPResponse,
)
from scorebook.engine.lifecycle import CustomStart, previous_over_bowler
from scorebook.engine.scoring import innings_phase
from scorebook.engine.stats import (
    balls_remaining, bowler_spells, calculate_mvp, current_over, over_by_over_summary,
    overs_string, partnership, phase_stats, required_run_rate, run_rate,
)
from scorebook.models.match import (
    ExtraType, Innings, Match, MatchStatus, ShotZone, TossChoice,
)
from scorebook.store import Scorebook
from scorebook.validators.match_validator import MatchSetupValidator, PlayerNameValidator

router = APIRouter(prefix="/matches", tags=["Matches"])


def _get_match(book: Scorebook, match_id: str) -> Match:
    match = book.get_match(match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")
    return match


def _get_innings(match: Match, innings_number: int) -> Innings:
    """innings_number is 1-based as shown on the scorecard"""
    if innings_number < 1 or innings_number > len(match.innings):
        raise HTTPException(status_code=404, detail="Innings not found")
    return match.innings[innings_number - 1]


def _get_scoreboard_response(match: Match) -> ScoreboardResponse:
    innings = match.active_innings
    remaining = balls_remaining(match, innings)

    required = None
    if match.target is not None and innings is match.second_innings:
        required = required_run_rate(match.target, innings.total_runs, remaining)

    return ScoreboardResponse(
        match_id=match.id,
        status=match.status,
        innings=match.current_innings + 1,
        batting_team=innings.batting_team,
        bowling_team=innings.bowling_team,
        runs=innings.total_runs,
        wickets=innings.total_wickets,
        overs=overs_string(innings.total_balls),
        run_rate=run_rate(innings.total_runs, innings.total_balls),
        target=match.target,
        required_rate=required,
        balls_remaining=remaining,
        phase=innings_phase(innings).value,
        striker=BatsmanResponse.model_validate(innings.striker) if innings.striker else None,
        non_striker=BatsmanResponse.model_validate(innings.non_striker) if innings.non_striker else None,
        bowler=BowlerResponse.model_validate(innings.current_bowler) if innings.current_bowler else None,
        unavailable_bowler_id=previous_over_bowler(innings),
        this_over=current_over(innings),
        partnership=PartnershipResponse.model_validate(partnership(innings)),
        result=match.result,
    )


# ---- matches ----

@router.get("", response_model=list[MatchBrief])
def list_matches(status: Optional[MatchStatusEnum] = None, book: Scorebook = Depends(get_scorebook)):
    """All matches, newest first, optionally filtered by status"""
    with book.reading():
        matches = book.matches
        if status is not None:
            matches = [m for m in matches if m.status == MatchStatus(status.value)]
        return [MatchBrief.model_validate(m) for m in matches]


@router.post("", response_model=MatchResponse)
def create_match(request: CreateMatchRequest, book: Scorebook = Depends(get_scorebook)):
    """Start a new live match from the toss"""
    team1, team2 = request.team1.strip(), request.team2.strip()
    toss_winner = request.toss_winner.strip() if request.toss_winner else None

    validation = MatchSetupValidator.validate(
        team1,
        team2,
        request.total_overs,
        toss_winner,
        request.toss_choice.value if request.toss_choice else None,
        request.custom_start.model_dump() if request.custom_start else None,
    )
    if not validation["valid"]:
        raise HTTPException(status_code=400, detail="; ".join(validation["errors"]))

    custom_start = None
    if request.custom_start:
        custom_start = CustomStart(**request.custom_start.model_dump())

    with book.reading():
        match = book.create_match(
            team1,
            team2,
            request.total_overs,
            toss_winner,
            TossChoice(request.toss_choice.value),
            venue=request.venue or None,
            custom_start=custom_start,
        )
        return MatchResponse.model_validate(match)


@router.delete("")
def delete_all_matches(book: Scorebook = Depends(get_scorebook)):
    book.delete_all_matches()
    return {"success": True}


@router.get("/{match_id}", response_model=MatchResponse)
def get_match(match_id: str, book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        return MatchResponse.model_validate(_get_match(book, match_id))


@router.delete("/{match_id}")
def delete_match(match_id: str, book: Scorebook = Depends(get_scorebook)):
    if not book.delete_match(match_id):
        raise HTTPException(status_code=404, detail="Match not found")
    return {"success": True}


@router.patch("/{match_id}", response_model=MatchResponse)
def edit_match(match_id: str, request: EditMatchRequest, book: Scorebook = Depends(get_scorebook)):
    """Rename teams (propagated to innings and toss) or change the venue"""
    with book.reading():
        if not book.edit_match_details(match_id, team1=request.team1, team2=request.team2, venue=request.venue):
            raise HTTPException(status_code=404, detail="Match not found")
        return MatchResponse.model_validate(book.get_match(match_id))


@router.post("/{match_id}/duplicate", response_model=MatchResponse)
def duplicate_match(match_id: str, book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        match = book.duplicate_match(match_id)
        if not match:
            raise HTTPException(status_code=404, detail="Match not found")
        return MatchResponse.model_validate(match)


@router.post("/{match_id}/abandon", response_model=MatchResponse)
def abandon_match(match_id: str, book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        if not book.abandon_match(match_id):
            raise HTTPException(status_code=404, detail="Match not found")
        return MatchResponse.model_validate(book.get_match(match_id))


@router.put("/{match_id}/notes")
def set_notes(match_id: str, request: NoteRequest, book: Scorebook = Depends(get_scorebook)):
    if not book.add_match_note(match_id, request.note):
        raise HTTPException(status_code=404, detail="Match not found")
    return {"success": True}


@router.put("/{match_id}/mvp")
def set_mvp(match_id: str, request: MVPRequest, book: Scorebook = Depends(get_scorebook)):
    """Override the automatically chosen MVP"""
    if not book.set_match_mvp(match_id, request.name):
        raise HTTPException(status_code=404, detail="Match not found")
    return {"success": True}


@router.get("/{match_id}/mvp", response_model=Optional[MVPResponse])
def get_mvp_candidate(match_id: str, book: Scorebook = Depends(get_scorebook)):
    """Computed MVP of a completed match (null while live)"""
    with book.reading():
        mvp = calculate_mvp(_get_match(book, match_id))
    return MVPResponse.model_validate(mvp) if mvp else None


@router.get("/{match_id}/scoreboard", response_model=ScoreboardResponse)
def get_scoreboard(match_id: str, book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        return _get_scoreboard_response(_get_match(book, match_id))


# ---- players in the innings ----

def _target_innings(match: Match, innings_index: Optional[int]) -> Optional[Innings]:
    if innings_index is not None and 0 <= innings_index < len(match.innings):
        return match.innings[innings_index]
    return match.active_innings


@router.post("/{match_id}/batsmen", response_model=BatsmanResponse)
def add_batsman(match_id: str, request: PlayerNameRequest, book: Scorebook = Depends(get_scorebook)):
    """Add a batsman; they fill the first empty crease slot"""
    with book.reading():
        innings = _target_innings(_get_match(book, match_id), request.innings_index)
        existing = [b.name for b in innings.batsmen.values()] if innings else []

        validation = PlayerNameValidator.validate(request.name, existing, role="batsman")
        if not validation["valid"]:
            raise HTTPException(status_code=400, detail="; ".join(validation["errors"]))

        batsman = book.add_batsman_to_innings(match_id, request.name.strip(), request.innings_index)
        if not batsman:
            raise HTTPException(status_code=409, detail="Could not add batsman to this innings")
        return BatsmanResponse.model_validate(batsman)


@router.post("/{match_id}/bowlers", response_model=BowlerResponse)
def add_bowler(match_id: str, request: PlayerNameRequest, book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        innings = _target_innings(_get_match(book, match_id), request.innings_index)
        existing = [b.name for b in innings.bowlers.values()] if innings else []

        validation = PlayerNameValidator.validate(request.name, existing, role="bowler")
        if not validation["valid"]:
            raise HTTPException(status_code=400, detail="; ".join(validation["errors"]))

        bowler = book.add_bowler_to_innings(match_id, request.name.strip(), request.innings_index)
        if not bowler:
            raise HTTPException(status_code=409, detail="Could not add bowler to this innings")
        return BowlerResponse.model_validate(bowler)


@router.post("/{match_id}/bowler", response_model=ScoreboardResponse)
def switch_bowler(match_id: str, request: SwitchBowlerRequest, book: Scorebook = Depends(get_scorebook)):
    """Give the ball to a bowler already in the innings"""
    with book.reading():
        match = _get_match(book, match_id)
        if not book.switch_bowler(match_id, request.bowler_id):
            raise HTTPException(status_code=409, detail="Bowler cannot bowl this over")
        return _get_scoreboard_response(match)


@router.post("/{match_id}/swap-strike", response_model=ScoreboardResponse)
def swap_strike(match_id: str, book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        match = _get_match(book, match_id)
        if not book.swap_strike(match_id):
            raise HTTPException(status_code=409, detail="No innings in progress")
        return _get_scoreboard_response(match)


@router.post("/{match_id}/retire", response_model=ScoreboardResponse)
def retire_batsman(match_id: str, request: RetireRequest, book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        match = _get_match(book, match_id)
        if not book.retire_batsman(match_id, request.batsman_id, request.is_hurt):
            raise HTTPException(status_code=409, detail="Batsman not found in this innings")
        return _get_scoreboard_response(match)


@router.post("/{match_id}/end-innings", response_model=ScoreboardResponse)
def end_innings(match_id: str, book: Scorebook = Depends(get_scorebook)):
    """Close the current innings early"""
    with book.reading():
        match = _get_match(book, match_id)
        if not book.end_innings(match_id):
            raise HTTPException(status_code=409, detail="Match is not live")
        return _get_scoreboard_response(match)


# ---- scoring ----

@router.post("/{match_id}/balls", response_model=ScoreboardResponse)
def record_ball(match_id: str, request: BallRequest, book: Scorebook = Depends(get_scorebook)):
    """Record one delivery"""
    with book.reading():
        match = _get_match(book, match_id)
        if request.runs < 0:
            raise HTTPException(status_code=400, detail="Runs cannot be negative")

        recorded = book.record_ball(
            match_id,
            request.runs,
            request.is_wicket,
            extra_type=ExtraType(request.extra_type.value) if request.extra_type else None,
            wicket_type=request.wicket_type,
            shot_zone=ShotZone(request.shot_zone.value) if request.shot_zone else None,
        )
        if not recorded:
            raise HTTPException(status_code=409, detail="Cannot record a ball: check striker, bowler and match status")
        return _get_scoreboard_response(match)


@router.post("/{match_id}/undo", response_model=ScoreboardResponse)
def undo_last_ball(match_id: str, book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        match = _get_match(book, match_id)
        if not book.undo_last_ball(match_id):
            raise HTTPException(status_code=409, detail="Nothing to undo")
        return _get_scoreboard_response(match)


@router.put("/{match_id}/balls/last/zone")
def set_last_ball_zone(match_id: str, request: ShotZoneRequest, book: Scorebook = Depends(get_scorebook)):
    """Tag where the last scoring shot went"""
    _get_match(book, match_id)
    if not book.update_last_ball_zone(match_id, ShotZone(request.zone.value)):
        raise HTTPException(status_code=409, detail="Last ball was not a scoring shot")
    return {"success": True}


# ---- innings views ----

@router.get("/{match_id}/innings/{innings_number}/overs", response_model=list[OverSummaryResponse])
def get_overs(match_id: str, innings_number: int, book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        innings = _get_innings(_get_match(book, match_id), innings_number)
        return [OverSummaryResponse.model_validate(o) for o in over_by_over_summary(innings)]


@router.get("/{match_id}/innings/{innings_number}/partnership", response_model=PartnershipResponse)
def get_partnership(match_id: str, innings_number: int, book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        innings = _get_innings(_get_match(book, match_id), innings_number)
        return PartnershipResponse.model_validate(partnership(innings))


@router.get("/{match_id}/innings/{innings_number}/phases", response_model=dict[str, PhaseStatsResponse])
def get_phases(match_id: str, innings_number: int, book: Scorebook = Depends(get_scorebook)):
    """Powerplay, middle and death overs"""
    with book.reading():
        match = _get_match(book, match_id)
        phases = phase_stats(_get_innings(match, innings_number), match.total_overs)
        return {name: PhaseStatsResponse.model_validate(p) for name, p in phases.items()}


@router.get("/{match_id}/innings/{innings_number}/bowlers/{bowler_id}/spells", response_model=list[SpellResponse])
def get_spells(match_id: str, innings_number: int, bowler_id: str, book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        innings = _get_innings(_get_match(book, match_id), innings_number)
        if bowler_id not in innings.bowlers:
            raise HTTPException(status_code=404, detail="Bowler not found")
        return [SpellResponse.model_validate(s) for s in bowler_spells(innings, bowler_id)]


# ---- export ----

@router.get("/{match_id}/export.csv", response_class=PlainTextResponse)
def export_csv(match_id: str, book: Scorebook = Depends(get_scorebook)):
    csv_text = book.get_match_csv(match_id)
    if csv_text is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return PlainTextResponse(
        csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="match-{match_id}.csv"'},
    )


@router.get("/{match_id}/summary", response_class=PlainTextResponse)
def export_summary(match_id: str, book: Scorebook = Depends(get_scorebook)):
    text = book.get_match_summary_text(match_id)
    if text is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return text
