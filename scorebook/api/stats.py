"""
Statistics API - career numbers across all stored matches, and the rain-rule calculator
"""
from fastapi import APIRouter, Depends, HTTPException

from scorebook.api.deps import get_scorebook
from scorebook.api.schemas import (
    PlayerAggregateResponse, PlayerInningsResponse, TeamRecordResponse,
    HeadToHeadResponse, MatchBrief, DLSRequest, DLSResponse,
)
from scorebook.engine.dls import calculate_dls_target
from scorebook.store import Scorebook

router = APIRouter(prefix="/stats", tags=["Statistics"])


@router.get("/players", response_model=list[PlayerAggregateResponse])
def get_player_stats(book: Scorebook = Depends(get_scorebook)):
    """Batting and bowling totals per player, most runs first"""
    return [PlayerAggregateResponse.model_validate(p) for p in book.get_player_stats()]


@router.get("/players/{name}/innings", response_model=list[PlayerInningsResponse])
def get_player_innings(name: str, book: Scorebook = Depends(get_scorebook)):
    """Match-by-match record for one player, newest first"""
    return [PlayerInningsResponse.model_validate(r) for r in book.get_player_innings_history(name)]


@router.get("/teams", response_model=list[TeamRecordResponse])
def get_team_stats(book: Scorebook = Depends(get_scorebook)):
    return [TeamRecordResponse.model_validate(t) for t in book.get_team_stats()]


@router.get("/teams/names", response_model=list[str])
def get_team_names(book: Scorebook = Depends(get_scorebook)):
    return book.get_all_team_names()


@router.get("/head-to-head", response_model=HeadToHeadResponse)
def get_head_to_head(team1: str, team2: str, book: Scorebook = Depends(get_scorebook)):
    if team1.strip().lower() == team2.strip().lower():
        raise HTTPException(status_code=400, detail="Pick two different teams")
    with book.reading():
        h2h = book.get_head_to_head(team1, team2)
        return HeadToHeadResponse(
            total_played=h2h.total_played,
            team1_wins=h2h.team1_wins,
            team2_wins=h2h.team2_wins,
            ties=h2h.ties,
            no_results=h2h.no_results,
            matches=[MatchBrief.model_validate(m) for m in h2h.matches],
        )


@router.post("/dls", response_model=DLSResponse)
def dls_target(request: DLSRequest):
    """Revised target for a rain-shortened chase (simplified, not the official tables)"""
    if request.max_overs < 1:
        raise HTTPException(status_code=400, detail="Max overs must be at least 1")
    target = calculate_dls_target(
        request.team1_score,
        request.team1_overs_used,
        request.max_overs,
        request.team2_overs_available,
        request.team2_wickets_lost,
    )
    return DLSResponse(target=target)
