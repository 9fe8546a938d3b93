"""
Scorebook - the in-memory match book the application talks to.

Holds every match, saved player and roster, applies commands through the
scoring and lifecycle engines, and writes the affected collection back to
its repository after each change. In-memory state always updates first;
a failed write is logged and never undoes it.
"""
import json
import logging
import threading
from contextlib import contextmanager
from typing import Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from scorebook.engine import aggregates, lifecycle, scoring
from scorebook.engine.lifecycle import CustomStart
from scorebook.export import match_summary_text, match_to_csv
from scorebook.models.catalog import SavedPlayer, TeamRoster
from scorebook.models.match import (
    BatsmanStats, BowlerStats, ExtraType, Match, MatchStatus, ShotZone, TossChoice,
)
from scorebook.repository import MATCHES, PLAYERS, ROSTERS, SnapshotRepository

logger = logging.getLogger(__name__)

_matches_adapter = TypeAdapter(list[Match])
_players_adapter = TypeAdapter(list[SavedPlayer])
_rosters_adapter = TypeAdapter(list[TeamRoster])


class Scorebook:
    """
    Single-writer store for matches, saved players and rosters.

    Every command runs under one re-entrant lock, so a match is never
    modified by two callers at once (scoring depends on strict ball order).
    """

    def __init__(self, repository: SnapshotRepository):
        self.repository = repository
        self._lock = threading.RLock()
        self.matches: list[Match] = self._load(MATCHES, _matches_adapter)
        self.saved_players: list[SavedPlayer] = self._load(PLAYERS, _players_adapter)
        self.rosters: list[TeamRoster] = self._load(ROSTERS, _rosters_adapter)

    # ---- persistence ----

    def _load(self, collection: str, adapter: TypeAdapter) -> list:
        try:
            return adapter.validate_python(self.repository.load_all(collection))
        except (SQLAlchemyError, ValidationError, json.JSONDecodeError):
            logger.exception("Error loading %s, starting empty", collection)
            return []

    def _save(self, collection: str, adapter: TypeAdapter, items: list):
        try:
            self.repository.save_all(collection, adapter.dump_python(items, mode="json"))
        except SQLAlchemyError:
            logger.exception("Error saving %s", collection)

    def _save_matches(self):
        self._save(MATCHES, _matches_adapter, self.matches)

    def _save_players(self):
        self._save(PLAYERS, _players_adapter, self.saved_players)

    def _save_rosters(self):
        self._save(ROSTERS, _rosters_adapter, self.rosters)

    @contextmanager
    def _editing(self, match_id: str):
        """Yield the match (or None) under the lock, then persist"""
        with self._lock:
            match = self.get_match(match_id)
            yield match
            if match is not None:
                self._save_matches()

    # ---- match queries ----

    @contextmanager
    def reading(self):
        """Hold the lock while a caller builds a view (API response) from live state"""
        with self._lock:
            yield self

    def get_match(self, match_id: str) -> Optional[Match]:
        with self._lock:
            return next((m for m in self.matches if m.id == match_id), None)

    def _with_status(self, status: MatchStatus) -> list[Match]:
        with self._lock:
            return [m for m in self.matches if m.status == status]

    @property
    def live_matches(self) -> list[Match]:
        return self._with_status(MatchStatus.LIVE)

    @property
    def completed_matches(self) -> list[Match]:
        return self._with_status(MatchStatus.COMPLETED)

    @property
    def abandoned_matches(self) -> list[Match]:
        return self._with_status(MatchStatus.ABANDONED)

    # ---- match commands ----

    def create_match(
        self,
        team1: str,
        team2: str,
        total_overs: int,
        toss_winner: str,
        toss_choice: TossChoice,
        venue: Optional[str] = None,
        custom_start: Optional[CustomStart] = None,
    ) -> Match:
        match = lifecycle.create_match(team1, team2, total_overs, toss_winner, toss_choice, venue, custom_start)
        with self._lock:
            self.matches.insert(0, match)
            self._save_matches()
        return match

    def duplicate_match(self, match_id: str) -> Optional[Match]:
        with self._lock:
            previous = self.get_match(match_id)
            if previous is None:
                return None
            match = lifecycle.duplicate_match(previous)
            self.matches.insert(0, match)
            self._save_matches()
        return match

    def delete_match(self, match_id: str) -> bool:
        with self._lock:
            match = self.get_match(match_id)
            if match is None:
                return False
            self.matches.remove(match)
            self._save_matches()
        return True

    def delete_all_matches(self):
        with self._lock:
            self.matches = []
            self._save_matches()

    def edit_match_details(self, match_id: str, team1: Optional[str] = None,
                           team2: Optional[str] = None, venue: Optional[str] = None) -> bool:
        with self._editing(match_id) as match:
            if match is None:
                return False
            lifecycle.edit_match_details(match, team1=team1, team2=team2, venue=venue)
            return True

    def abandon_match(self, match_id: str) -> bool:
        with self._editing(match_id) as match:
            if match is None:
                return False
            lifecycle.abandon_match(match)
            return True

    def add_match_note(self, match_id: str, note: str) -> bool:
        with self._editing(match_id) as match:
            if match is None:
                return False
            lifecycle.set_notes(match, note)
            return True

    def set_match_mvp(self, match_id: str, name: str) -> bool:
        with self._editing(match_id) as match:
            if match is None:
                return False
            lifecycle.set_mvp(match, name)
            return True

    def add_batsman_to_innings(self, match_id: str, name: str,
                               innings_index: Optional[int] = None) -> Optional[BatsmanStats]:
        with self._editing(match_id) as match:
            if match is None:
                return None
            batsman = lifecycle.add_batsman(match, name, innings_index)
        if batsman:
            self.auto_save_player(name)
        return batsman

    def add_bowler_to_innings(self, match_id: str, name: str,
                              innings_index: Optional[int] = None) -> Optional[BowlerStats]:
        with self._editing(match_id) as match:
            if match is None:
                return None
            bowler = lifecycle.add_bowler(match, name, innings_index)
        if bowler:
            self.auto_save_player(name)
        return bowler

    def switch_bowler(self, match_id: str, bowler_id: str) -> bool:
        with self._editing(match_id) as match:
            return match is not None and lifecycle.switch_bowler(match, bowler_id)

    def swap_strike(self, match_id: str) -> bool:
        with self._editing(match_id) as match:
            return match is not None and lifecycle.swap_strike(match)

    def retire_batsman(self, match_id: str, batsman_id: str, is_hurt: bool) -> bool:
        with self._editing(match_id) as match:
            return match is not None and lifecycle.retire_batsman(match, batsman_id, is_hurt)

    def end_innings(self, match_id: str) -> bool:
        with self._editing(match_id) as match:
            return match is not None and lifecycle.end_innings(match)

    def record_ball(
        self,
        match_id: str,
        runs: int,
        is_wicket: bool,
        extra_type: Optional[ExtraType] = None,
        wicket_type: Optional[str] = None,
        shot_zone: Optional[ShotZone] = None,
    ) -> bool:
        with self._editing(match_id) as match:
            return match is not None and scoring.record_ball(match, runs, is_wicket, extra_type, wicket_type, shot_zone)

    def undo_last_ball(self, match_id: str) -> bool:
        with self._editing(match_id) as match:
            return match is not None and scoring.undo_last_ball(match)

    def update_last_ball_zone(self, match_id: str, zone: ShotZone) -> bool:
        with self._editing(match_id) as match:
            if match is None or match.active_innings is None:
                return False
            return scoring.update_last_ball_shot_zone(match.active_innings, zone)

    # ---- statistics ----

    def get_player_stats(self) -> list[aggregates.PlayerAggregate]:
        with self._lock:
            return aggregates.get_player_stats(self.matches)

    def get_team_stats(self) -> list[aggregates.TeamRecord]:
        with self._lock:
            return aggregates.get_team_stats(self.matches)

    def get_head_to_head(self, team1: str, team2: str) -> aggregates.HeadToHead:
        with self._lock:
            return aggregates.get_head_to_head(self.matches, team1, team2)

    def get_player_innings_history(self, name: str) -> list[aggregates.PlayerInningsRecord]:
        with self._lock:
            return aggregates.get_player_innings_history(self.matches, name)

    def get_all_team_names(self) -> list[str]:
        with self._lock:
            return aggregates.get_all_team_names(self.matches)

    # ---- export ----

    def get_match_csv(self, match_id: str) -> Optional[str]:
        with self._lock:
            match = self.get_match(match_id)
            return match_to_csv(match) if match else None

    def get_match_summary_text(self, match_id: str) -> Optional[str]:
        with self._lock:
            match = self.get_match(match_id)
            return match_summary_text(match) if match else None

    # ---- saved players ----

    def find_saved_player(self, name: str) -> Optional[SavedPlayer]:
        lowered = name.lower()
        with self._lock:
            return next((p for p in self.saved_players if p.name.lower() == lowered), None)

    def add_saved_player(self, name: str, team: Optional[str] = None) -> SavedPlayer:
        """Returns the existing entry when the name is already saved"""
        with self._lock:
            existing = self.find_saved_player(name)
            if existing:
                return existing
            player = SavedPlayer(name=name, team=team)
            self.saved_players.append(player)
            self._save_players()
        return player

    def auto_save_player(self, name: str):
        self.add_saved_player(name)

    def edit_saved_player(self, player_id: str, name: Optional[str] = None, team: Optional[str] = None) -> bool:
        with self._lock:
            player = next((p for p in self.saved_players if p.id == player_id), None)
            if player is None:
                return False
            if name is not None:
                player.name = name
            if team is not None:
                player.team = team
            self._save_players()
        return True

    def delete_saved_player(self, player_id: str) -> bool:
        with self._lock:
            before = len(self.saved_players)
            self.saved_players = [p for p in self.saved_players if p.id != player_id]
            if len(self.saved_players) == before:
                return False
            self._save_players()
        return True

    # ---- rosters ----

    def get_roster(self, roster_id: str) -> Optional[TeamRoster]:
        with self._lock:
            return next((r for r in self.rosters if r.id == roster_id), None)

    def add_roster(self, name: str, players: list[str]) -> TeamRoster:
        with self._lock:
            roster = TeamRoster(name=name, players=list(players))
            self.rosters.append(roster)
            self._save_rosters()
            for p in players:
                self.auto_save_player(p)
        return roster

    def edit_roster(self, roster_id: str, name: Optional[str] = None, players: Optional[list[str]] = None) -> bool:
        with self._lock:
            roster = self.get_roster(roster_id)
            if roster is None:
                return False
            if name is not None:
                roster.name = name
            if players is not None:
                roster.players = list(players)
            self._save_rosters()
            for p in players or []:
                self.auto_save_player(p)
        return True

    def delete_roster(self, roster_id: str) -> bool:
        with self._lock:
            roster = self.get_roster(roster_id)
            if roster is None:
                return False
            self.rosters.remove(roster)
            self._save_rosters()
        return True
