"""
Tests for the Scorebook store and its repositories.
"""
import threading

import pytest
from sqlalchemy.exc import SQLAlchemyError

from scorebook.engine.lifecycle import CustomStart
from scorebook.models.match import ExtraType, MatchStatus, ShotZone, TossChoice
from scorebook.models.snapshot import CollectionSnapshot
from scorebook.repository import MATCHES, PLAYERS, ROSTERS, InMemoryRepository
from scorebook.store import Scorebook


class BrokenRepository(InMemoryRepository):
    """Fails every read and write the way a locked database would"""

    def load_all(self, collection):
        raise SQLAlchemyError("database is locked")

    def save_all(self, collection, items):
        raise SQLAlchemyError("database is locked")


def start(book: Scorebook, overs: int = 2):
    match = book.create_match("Tigers", "Lions", overs, "Tigers", TossChoice.BAT)
    book.add_batsman_to_innings(match.id, "Ravi")
    book.add_batsman_to_innings(match.id, "Sam")
    book.add_bowler_to_innings(match.id, "Ajay")
    book.add_bowler_to_innings(match.id, "Vijay")
    return match


class TestMatchCommands:
    """Commands update memory and persist the collection"""

    def test_create_persists_newest_first(self, book):
        older = book.create_match("A", "B", 5, "A", TossChoice.BAT)
        newer = book.create_match("C", "D", 5, "C", TossChoice.BOWL, venue="Park")
        assert [m.id for m in book.matches] == [newer.id, older.id]

        stored = book.repository.load_all(MATCHES)
        assert [m["id"] for m in stored] == [newer.id, older.id]
        assert stored[0]["toss_choice"] == "bowl"
        assert stored[0]["venue"] == "Park"

    def test_create_with_custom_start(self, book):
        match = book.create_match("A", "B", 5, "A", TossChoice.BAT, custom_start=CustomStart(runs=30, wickets=1, overs=3))
        assert match.active_innings.total_runs == 30
        assert match.active_innings.total_balls == 18

    def test_record_and_undo(self, book):
        match = start(book)
        assert book.record_ball(match.id, 4, False, shot_zone=ShotZone.COVER)
        assert book.record_ball(match.id, 1, False, extra_type=ExtraType.WIDE)
        assert match.active_innings.total_runs == 6

        stored = book.repository.load_all(MATCHES)[0]
        assert len(stored["innings"][0]["ball_log"]) == 2
        assert stored["innings"][0]["ball_log"][1]["extra_type"] == "wide"

        assert book.undo_last_ball(match.id)
        assert match.active_innings.total_runs == 4
        assert len(book.repository.load_all(MATCHES)[0]["innings"][0]["ball_log"]) == 1

    def test_unknown_match(self, book):
        assert book.get_match("missing") is None
        assert not book.record_ball("missing", 1, False)
        assert not book.undo_last_ball("missing")
        assert not book.abandon_match("missing")
        assert not book.delete_match("missing")
        assert book.duplicate_match("missing") is None
        assert book.add_batsman_to_innings("missing", "Ravi") is None
        assert book.get_match_csv("missing") is None
        assert book.get_match_summary_text("missing") is None

    def test_status_lists(self, book):
        live = start(book)
        abandoned = book.create_match("A", "B", 1, "A", TossChoice.BAT)
        book.abandon_match(abandoned.id)
        done = start(book, overs=1)
        book.end_innings(done.id)
        book.end_innings(done.id)

        assert [m.id for m in book.live_matches] == [live.id]
        assert [m.id for m in book.abandoned_matches] == [abandoned.id]
        assert [m.id for m in book.completed_matches] == [done.id]
        assert done.status == MatchStatus.COMPLETED

    def test_delete(self, book):
        keep = book.create_match("A", "B", 1, "A", TossChoice.BAT)
        drop = book.create_match("C", "D", 1, "C", TossChoice.BAT)
        assert book.delete_match(drop.id)
        assert [m.id for m in book.matches] == [keep.id]

        book.delete_all_matches()
        assert book.matches == []
        assert book.repository.load_all(MATCHES) == []

    def test_duplicate_edit_notes_mvp(self, book):
        match = start(book)
        rematch = book.duplicate_match(match.id)
        assert book.matches[0] is rematch

        assert book.edit_match_details(match.id, team2="Lions XI", venue="Maidan")
        assert match.active_innings.bowling_team == "Lions XI"
        assert book.add_match_note(match.id, "Fun game")
        assert book.set_match_mvp(match.id, "Ravi")
        stored = next(m for m in book.repository.load_all(MATCHES) if m["id"] == match.id)
        assert (stored["team2"], stored["venue"], stored["notes"], stored["mvp"]) == ("Lions XI", "Maidan", "Fun game", "Ravi")

    def test_switch_swap_retire(self, book):
        match = start(book)
        innings = match.active_innings
        vijay = next(b.id for b in innings.bowlers.values() if b.name == "Vijay")
        assert book.switch_bowler(match.id, vijay)
        assert innings.bowler_id == vijay
        assert book.swap_strike(match.id)
        assert innings.striker.name == "Sam"
        assert book.retire_batsman(match.id, innings.striker_id, is_hurt=True)
        assert innings.striker_id is None

    def test_last_ball_zone(self, book):
        match = start(book)
        book.record_ball(match.id, 2, False)
        assert book.update_last_ball_zone(match.id, ShotZone.FINE)
        assert match.active_innings.last_ball.shot_zone == ShotZone.FINE

    def test_concurrent_scoring_is_serialised(self, book):
        match = start(book, overs=5)
        threads = [threading.Thread(target=book.record_ball, args=(match.id, 1, False)) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        innings = match.active_innings
        assert innings.total_runs == 5
        assert innings.total_balls == 5
        assert [b.ball for b in innings.ball_log] == [0, 1, 2, 3, 4]

    def test_reads_never_see_a_half_applied_command(self, book):
        match = start(book)
        done = threading.Event()
        errors = []

        def write():
            try:
                for n in range(300):
                    book.add_batsman_to_innings(match.id, f"Sub {n}")
            finally:
                done.set()

        def read():
            while not done.is_set():
                try:
                    book.get_player_stats()
                    book.get_match_csv(match.id)
                    book.get_match_summary_text(match.id)
                except RuntimeError as e:
                    errors.append(e)
                    return

        threads = [threading.Thread(target=write)] + [threading.Thread(target=read) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(match.active_innings.batsmen) == 302

    def test_reading_holds_off_commands(self, book):
        match = start(book)
        with book.reading():
            writer = threading.Thread(target=book.record_ball, args=(match.id, 4, False))
            writer.start()
            writer.join(timeout=0.2)
            assert writer.is_alive()
            assert match.active_innings.total_runs == 0
        writer.join()
        assert match.active_innings.total_runs == 4


class TestPersistence:
    """Loading falls back to empty collections, saving never undoes memory"""

    def test_reload_round_trip(self, book):
        match = start(book)
        book.record_ball(match.id, 4, False, shot_zone=ShotZone.COVER)
        book.record_ball(match.id, 0, True, wicket_type="caught")

        reloaded = Scorebook(book.repository)
        assert reloaded.matches == book.matches
        assert reloaded.get_match(match.id).active_innings.last_ball.wicket_type == "caught"
        assert [p.name for p in reloaded.saved_players] == ["Ravi", "Sam", "Ajay", "Vijay"]

    def test_load_failure_starts_empty(self):
        book = Scorebook(BrokenRepository())
        assert book.matches == []
        assert book.saved_players == []
        assert book.rosters == []

    def test_corrupt_payload_starts_empty(self):
        book = Scorebook(InMemoryRepository({MATCHES: [{"team1": "only"}]}))
        assert book.matches == []

    def test_save_failure_keeps_memory(self):
        book = Scorebook(BrokenRepository())
        match = book.create_match("A", "B", 1, "A", TossChoice.BAT)
        assert book.get_match(match.id) is match


class TestSqlRepository:
    """Collections stored as rows of collection_snapshots"""

    def test_save_and_load(self, sql_repository, test_db):
        sql_repository.save_all(PLAYERS, [{"name": "Ravi"}])
        sql_repository.save_all(PLAYERS, [{"name": "Ravi"}, {"name": "Sam"}])
        assert sql_repository.load_all(PLAYERS) == [{"name": "Ravi"}, {"name": "Sam"}]
        assert sql_repository.load_all(ROSTERS) == []

        session = test_db()
        assert session.query(CollectionSnapshot).count() == 1
        session.close()

    def test_scorebook_over_sql(self, sql_repository):
        book = Scorebook(sql_repository)
        match = start(book)
        book.record_ball(match.id, 6, False)
        book.add_roster("Tigers", ["Ravi", "Kiran"])

        reloaded = Scorebook(sql_repository)
        assert reloaded.get_match(match.id).active_innings.total_runs == 6
        assert reloaded.rosters[0].players == ["Ravi", "Kiran"]


class TestCatalog:
    """Saved players and rosters"""

    def test_players_auto_saved_once(self, book):
        start(book)
        start(book)
        assert [p.name for p in book.saved_players] == ["Ravi", "Sam", "Ajay", "Vijay"]

    def test_add_saved_player_dedupes(self, book):
        first = book.add_saved_player("Ravi", team="Tigers")
        assert book.add_saved_player("RAVI") is first
        assert len(book.saved_players) == 1

    def test_edit_and_delete_player(self, book):
        player = book.add_saved_player("Ravi")
        assert book.edit_saved_player(player.id, name="Ravi K", team="Lions")
        assert (player.name, player.team) == ("Ravi K", "Lions")
        assert book.delete_saved_player(player.id)
        assert not book.delete_saved_player(player.id)
        assert book.repository.load_all(PLAYERS) == []

    def test_rosters(self, book):
        roster = book.add_roster("Tigers", ["Ravi", "Sam"])
        assert {p.name for p in book.saved_players} == {"Ravi", "Sam"}

        assert book.edit_roster(roster.id, players=["Ravi", "Sam", "Kiran"])
        assert book.find_saved_player("kiran") is not None
        assert book.get_roster(roster.id).players == ["Ravi", "Sam", "Kiran"]

        assert book.delete_roster(roster.id)
        assert book.get_roster(roster.id) is None
        assert not book.edit_roster(roster.id, name="Gone")


class TestStatsPassThrough:
    def test_queries(self, book):
        match = start(book, overs=1)
        book.record_ball(match.id, 4, False)
        assert book.get_player_stats()[0].name == "Ravi"
        assert book.get_team_stats()[0].played == 1
        assert book.get_head_to_head("Tigers", "Lions").total_played == 0
        assert book.get_player_innings_history("Ravi")[0].runs == 4
        assert book.get_all_team_names() == ["Lions", "Tigers"]
        assert book.get_match_csv(match.id).startswith("Match Summary")
        assert book.get_match_summary_text(match.id).startswith("Tigers vs Lions")
