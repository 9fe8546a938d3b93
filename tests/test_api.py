"""
API tests against an in-memory scorebook.
"""
import threading
import time

import pytest
from fastapi.testclient import TestClient

from main import app
from scorebook.api import deps
from scorebook.api.deps import get_scorebook
from scorebook.repository import InMemoryRepository
from scorebook.store import Scorebook


@pytest.fixture
def book():
    return Scorebook(InMemoryRepository())


@pytest.fixture
def client(book):
    app.dependency_overrides[get_scorebook] = lambda: book
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def match_id(client):
    """One-over match, Tigers batting with two openers and two bowlers ready"""
    response = client.post("/api/matches", json={
        "team1": "Tigers", "team2": "Lions", "total_overs": 1,
        "toss_winner": "Tigers", "toss_choice": "bat", "venue": "Park",
    })
    assert response.status_code == 200
    match_id = response.json()["id"]
    for name in ("Ravi", "Sam"):
        assert client.post(f"/api/matches/{match_id}/batsmen", json={"name": name}).status_code == 200
    for name in ("Ajay", "Vijay"):
        assert client.post(f"/api/matches/{match_id}/bowlers", json={"name": name}).status_code == 200
    return match_id


class TestHealth:
    def test_root(self, client):
        assert client.get("/").json()["status"] == "running"
        assert client.get("/api/health").json() == {"status": "healthy"}


class TestMatchSetup:
    def test_create(self, client):
        response = client.post("/api/matches", json={
            "team1": "Tigers", "team2": "Lions", "total_overs": 5,
            "toss_winner": "Lions", "toss_choice": "bowl",
        })
        data = response.json()
        assert data["status"] == "live"
        assert data["innings"][0]["batting_team"] == "Tigers"
        assert data["target"] is None

    def test_padded_names_are_trimmed(self, client):
        """A padded toss winner still decides who bats and follows a rename"""
        response = client.post("/api/matches", json={
            "team1": "Tigers ", "team2": " Lions", "total_overs": 5,
            "toss_winner": "Tigers ", "toss_choice": "bowl",
        })
        assert response.status_code == 200
        data = response.json()
        assert (data["team1"], data["team2"], data["toss_winner"]) == ("Tigers", "Lions", "Tigers")
        assert data["innings"][0]["batting_team"] == "Lions"
        assert data["innings"][0]["bowling_team"] == "Tigers"

        renamed = client.patch(f"/api/matches/{data['id']}", json={"team1": "Tigers XI"}).json()
        assert renamed["toss_winner"] == "Tigers XI"
        assert renamed["innings"][0]["bowling_team"] == "Tigers XI"

    def test_invalid_overs(self, client):
        response = client.post("/api/matches", json={
            "team1": "Tigers", "team2": "Lions", "total_overs": 0,
            "toss_winner": "Tigers", "toss_choice": "bat",
        })
        assert response.status_code == 400
        assert "Please enter overs between 1 and" in response.json()["detail"]

    def test_missing_fields(self, client):
        response = client.post("/api/matches", json={"team1": "Tigers", "team2": "Lions"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Please fill in all required fields."

    def test_same_teams(self, client):
        response = client.post("/api/matches", json={
            "team1": "Tigers", "team2": "tigers", "total_overs": 5,
            "toss_winner": "Tigers", "toss_choice": "bat",
        })
        assert response.status_code == 400
        assert "Team names must be different." in response.json()["detail"]

    def test_missing_match(self, client):
        assert client.get("/api/matches/nope").status_code == 404
        assert client.get("/api/matches/nope/scoreboard").status_code == 404
        assert client.post("/api/matches/nope/balls", json={"runs": 1}).status_code == 404

    def test_duplicate_player_name(self, client, match_id):
        response = client.post(f"/api/matches/{match_id}/batsmen", json={"name": "ravi"})
        assert response.status_code == 400

    def test_list_and_filter(self, client, match_id):
        assert [m["id"] for m in client.get("/api/matches").json()] == [match_id]
        assert client.get("/api/matches", params={"status": "completed"}).json() == []

    def test_edit_and_abandon(self, client, match_id):
        edited = client.patch(f"/api/matches/{match_id}", json={"team2": "Lions XI"}).json()
        assert edited["team2"] == "Lions XI"
        assert edited["innings"][0]["bowling_team"] == "Lions XI"

        abandoned = client.post(f"/api/matches/{match_id}/abandon").json()
        assert abandoned["status"] == "abandoned"
        assert client.post(f"/api/matches/{match_id}/balls", json={"runs": 1}).status_code == 409

    def test_delete(self, client, match_id):
        assert client.delete(f"/api/matches/{match_id}").json() == {"success": True}
        assert client.delete(f"/api/matches/{match_id}").status_code == 404


class TestScoring:
    def test_ball_updates_scoreboard(self, client, match_id):
        board = client.post(f"/api/matches/{match_id}/balls", json={"runs": 4, "shot_zone": "cover"}).json()
        assert board["runs"] == 4
        assert board["overs"] == "0.1"
        assert board["striker"]["name"] == "Ravi"
        assert board["striker"]["runs"] == 4
        assert board["bowler"]["overs_display"] == "0.1"
        assert board["this_over"] == ["4"]
        assert board["phase"] == "active"

        board = client.post(f"/api/matches/{match_id}/balls", json={"runs": 1, "extra_type": "wide"}).json()
        assert board["runs"] == 6
        assert board["this_over"] == ["4", "1Wd"]

    def test_negative_runs(self, client, match_id):
        assert client.post(f"/api/matches/{match_id}/balls", json={"runs": -1}).status_code == 400

    def test_undo(self, client, match_id):
        assert client.post(f"/api/matches/{match_id}/undo").status_code == 409
        client.post(f"/api/matches/{match_id}/balls", json={"runs": 3})
        board = client.post(f"/api/matches/{match_id}/undo").json()
        assert board["runs"] == 0
        assert board["striker"]["name"] == "Ravi"

    def test_first_innings_ends_after_last_over(self, client, match_id):
        for _ in range(6):
            board = client.post(f"/api/matches/{match_id}/balls", json={"runs": 0}).json()
        assert board["innings"] == 2
        assert board["target"] == 1
        assert board["phase"] == "awaiting-players"

    def test_switch_bowler_and_swap(self, client, book, match_id):
        innings = book.get_match(match_id).active_innings
        vijay = next(b.id for b in innings.bowlers.values() if b.name == "Vijay")
        board = client.post(f"/api/matches/{match_id}/bowler", json={"bowler_id": vijay}).json()
        assert board["bowler"]["name"] == "Vijay"

        board = client.post(f"/api/matches/{match_id}/swap-strike").json()
        assert board["striker"]["name"] == "Sam"
        assert client.post(f"/api/matches/{match_id}/bowler", json={"bowler_id": "nobody"}).status_code == 409

    def test_last_ball_zone(self, client, match_id):
        client.post(f"/api/matches/{match_id}/balls", json={"runs": 2})
        response = client.put(f"/api/matches/{match_id}/balls/last/zone", json={"zone": "leg"})
        assert response.json() == {"success": True}

    def test_full_match(self, client, match_id):
        client.post(f"/api/matches/{match_id}/balls", json={"runs": 4})
        client.post(f"/api/matches/{match_id}/end-innings")
        board = client.get(f"/api/matches/{match_id}/scoreboard").json()
        assert board["batting_team"] == "Lions"
        assert board["target"] == 5

        client.post(f"/api/matches/{match_id}/end-innings")
        match = client.get(f"/api/matches/{match_id}").json()
        assert match["status"] == "completed"
        assert match["result"] == "Tigers won by 4 runs"
        assert client.get(f"/api/matches/{match_id}/mvp").json()["name"] == "Ravi"
        assert client.post(f"/api/matches/{match_id}/end-innings").status_code == 409


class TestViews:
    def test_overs_and_phases(self, client, match_id):
        client.post(f"/api/matches/{match_id}/balls", json={"runs": 1})
        overs = client.get(f"/api/matches/{match_id}/innings/1/overs").json()
        assert overs == [{"over_number": 1, "balls": ["1"], "runs": 1, "wickets": 0, "bowler_name": "Ajay"}]

        phases = client.get(f"/api/matches/{match_id}/innings/1/phases").json()
        assert phases["powerplay"]["runs"] == 1
        assert client.get(f"/api/matches/{match_id}/innings/3/overs").status_code == 404

    def test_partnership_and_spells(self, client, book, match_id):
        client.post(f"/api/matches/{match_id}/balls", json={"runs": 2})
        partnership = client.get(f"/api/matches/{match_id}/innings/1/partnership").json()
        assert partnership["runs"] == 2

        ajay = next(b.id for b in book.get_match(match_id).active_innings.bowlers.values() if b.name == "Ajay")
        spells = client.get(f"/api/matches/{match_id}/innings/1/bowlers/{ajay}/spells").json()
        assert spells[0]["runs"] == 2
        assert client.get(f"/api/matches/{match_id}/innings/1/bowlers/nobody/spells").status_code == 404

    def test_export(self, client, match_id):
        response = client.get(f"/api/matches/{match_id}/export.csv")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        assert response.text.startswith("Match Summary")

        summary = client.get(f"/api/matches/{match_id}/summary")
        assert summary.text.startswith("Tigers vs Lions\nVenue: Park")


class TestStatsAndCatalog:
    def test_stats(self, client, match_id):
        client.post(f"/api/matches/{match_id}/balls", json={"runs": 6})
        players = client.get("/api/stats/players").json()
        assert players[0]["name"] == "Ravi"
        assert players[0]["sixes"] == 1
        assert client.get("/api/stats/teams/names").json() == ["Lions", "Tigers"]
        assert client.get("/api/stats/players/Ravi/innings").json()[0]["runs"] == 6

        h2h = client.get("/api/stats/head-to-head", params={"team1": "Tigers", "team2": "Lions"}).json()
        assert h2h["total_played"] == 0
        assert len(h2h["matches"]) == 1
        bad = client.get("/api/stats/head-to-head", params={"team1": "Tigers", "team2": "tigers"})
        assert bad.status_code == 400

    def test_dls(self, client):
        response = client.post("/api/stats/dls", json={
            "team1_score": 150, "team1_overs_used": 20, "max_overs": 20, "team2_overs_available": 20,
        })
        assert response.json() == {"target": 151}
        bad = client.post("/api/stats/dls", json={
            "team1_score": 150, "team1_overs_used": 20, "max_overs": 0, "team2_overs_available": 20,
        })
        assert bad.status_code == 400

    def test_players_saved_from_match(self, client, match_id):
        names = [p["name"] for p in client.get("/api/players").json()]
        assert names == ["Ravi", "Sam", "Ajay", "Vijay"]

    def test_rosters(self, client):
        roster = client.post("/api/rosters", json={"name": "Tigers", "players": ["Ravi", " ", "Kiran"]}).json()
        assert roster["players"] == ["Ravi", "Kiran"]
        assert client.get(f"/api/rosters/{roster['id']}").json()["name"] == "Tigers"
        assert client.delete(f"/api/rosters/{roster['id']}").json() == {"success": True}
        assert client.get(f"/api/rosters/{roster['id']}").status_code == 404


class TestScorebookDependency:
    """The process-wide scorebook is built once"""

    def test_concurrent_first_use(self, monkeypatch):
        built = []

        def slow_repository():
            built.append(1)
            time.sleep(0.05)
            return InMemoryRepository()

        monkeypatch.setattr(deps, "_scorebook", None)
        monkeypatch.setattr(deps, "init_db", lambda: None)
        monkeypatch.setattr(deps, "SqlRepository", slow_repository)

        results = []
        threads = [threading.Thread(target=lambda: results.append(deps.get_scorebook())) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(built) == 1
        assert len(results) == 4
        assert all(r is results[0] for r in results)
