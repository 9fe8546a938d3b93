"""
Shared fixtures: match factories, a ball-bowling helper and test databases.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from scorebook.database import Base, init_db
from scorebook.engine import lifecycle, scoring
from scorebook.models.match import TossChoice
from scorebook.repository import InMemoryRepository, SqlRepository
from scorebook.store import Scorebook


def ensure_ready(match):
    """Fill empty crease slots and hand the ball to an eligible bowler"""
    innings = match.active_innings
    while innings.striker_id is None or innings.non_striker_id is None:
        lifecycle.add_batsman(match, f"{innings.batting_team} bat {len(innings.batsmen) + 1}")
    while len(innings.bowlers) < 2:
        lifecycle.add_bowler(match, f"{innings.bowling_team} bowler {len(innings.bowlers) + 1}")
    if innings.bowler_id is None:
        blocked = lifecycle.previous_over_bowler(innings)
        lifecycle.switch_bowler(match, next(b for b in innings.bowlers if b != blocked))


def bowl_ball(match, runs=0, is_wicket=False, extra_type=None, wicket_type=None, shot_zone=None) -> bool:
    ensure_ready(match)
    return scoring.record_ball(match, runs, is_wicket, extra_type, wicket_type, shot_zone)


def bowl_many(match, count, runs=0, **kwargs):
    for _ in range(count):
        assert bowl_ball(match, runs, **kwargs)


def make_match(overs=20, team1="Tigers", team2="Lions", toss_choice=TossChoice.BAT, **kwargs):
    """team1 always wins the toss"""
    return lifecycle.create_match(team1, team2, overs, team1, toss_choice, **kwargs)


@pytest.fixture
def new_match():
    return make_match


@pytest.fixture
def bowl():
    return bowl_ball


@pytest.fixture
def bowl_repeat():
    return bowl_many


@pytest.fixture
def ready_match():
    """Two-over match with openers and two bowlers in place"""
    match = make_match(overs=2)
    ensure_ready(match)
    return match


@pytest.fixture
def book():
    """Scorebook backed by an in-memory repository"""
    return Scorebook(InMemoryRepository())


@pytest.fixture
def test_db():
    """Create an in-memory test database, returning a session factory"""
    engine = create_engine("sqlite:///:memory:")
    init_db(bind=engine)
    factory = sessionmaker(bind=engine)
    yield factory
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def sql_repository(test_db):
    return SqlRepository(session_factory=test_db)
