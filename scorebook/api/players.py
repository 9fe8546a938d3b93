"""
Saved players and team rosters used for name autocomplete
"""
from fastapi import APIRouter, Depends, HTTPException

from scorebook.api.deps import get_scorebook
from scorebook.api.schemas import (
    SavedPlayerRequest, SavedPlayerUpdate, SavedPlayerResponse,
    RosterRequest, RosterUpdate, RosterResponse,
)
from scorebook.store import Scorebook

router = APIRouter(prefix="/players", tags=["Saved Players"])
roster_router = APIRouter(prefix="/rosters", tags=["Rosters"])


@router.get("", response_model=list[SavedPlayerResponse])
def list_saved_players(book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        return [SavedPlayerResponse.model_validate(p) for p in book.saved_players]


@router.post("", response_model=SavedPlayerResponse)
def add_saved_player(request: SavedPlayerRequest, book: Scorebook = Depends(get_scorebook)):
    """Save a player name; an existing name (any case) is returned unchanged"""
    if not request.name.strip():
        raise HTTPException(status_code=400, detail="Please enter a player name.")
    with book.reading():
        player = book.add_saved_player(request.name.strip(), request.team)
        return SavedPlayerResponse.model_validate(player)


@router.patch("/{player_id}")
def edit_saved_player(player_id: str, request: SavedPlayerUpdate, book: Scorebook = Depends(get_scorebook)):
    if not book.edit_saved_player(player_id, name=request.name, team=request.team):
        raise HTTPException(status_code=404, detail="Player not found")
    return {"success": True}


@router.delete("/{player_id}")
def delete_saved_player(player_id: str, book: Scorebook = Depends(get_scorebook)):
    if not book.delete_saved_player(player_id):
        raise HTTPException(status_code=404, detail="Player not found")
    return {"success": True}


@roster_router.get("", response_model=list[RosterResponse])
def list_rosters(book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        return [RosterResponse.model_validate(r) for r in book.rosters]


@roster_router.post("", response_model=RosterResponse)
def add_roster(request: RosterRequest, book: Scorebook = Depends(get_scorebook)):
    """Save a team with its players; the player names are saved too"""
    if not request.name.strip():
        raise HTTPException(status_code=400, detail="Please enter a team name.")
    players = [p.strip() for p in request.players if p.strip()]
    with book.reading():
        return RosterResponse.model_validate(book.add_roster(request.name.strip(), players))


@roster_router.get("/{roster_id}", response_model=RosterResponse)
def get_roster(roster_id: str, book: Scorebook = Depends(get_scorebook)):
    with book.reading():
        roster = book.get_roster(roster_id)
        if not roster:
            raise HTTPException(status_code=404, detail="Roster not found")
        return RosterResponse.model_validate(roster)


@roster_router.patch("/{roster_id}")
def edit_roster(roster_id: str, request: RosterUpdate, book: Scorebook = Depends(get_scorebook)):
    if not book.edit_roster(roster_id, name=request.name, players=request.players):
        raise HTTPException(status_code=404, detail="Roster not found")
    return {"success": True}


@roster_router.delete("/{roster_id}")
def delete_roster(roster_id: str, book: Scorebook = Depends(get_scorebook)):
    if not book.delete_roster(roster_id):
        raise HTTPException(status_code=404, detail="Roster not found")
    return {"success": True}
