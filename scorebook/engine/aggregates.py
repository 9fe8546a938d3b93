"""
Career statistics across every stored match.

Players and teams are matched across matches by case-insensitive name.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from scorebook.engine.scoring import TIED_RESULT
from scorebook.engine.stats import economy_rate, overs_string, strike_rate
from scorebook.models.match import BALLS_PER_OVER, Match, MatchStatus


@dataclass
class PlayerAggregate:
    name: str
    matches: int = 0
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    high_score: int = 0
    wickets: int = 0
    runs_conceded: int = 0
    balls_bowled: int = 0
    best_bowling: str = "0/0"
    strike_rate: str = "0.0"
    average: str = "0.0"
    economy: str = "0.0"


@dataclass
class TeamRecord:
    name: str
    played: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    abandoned: int = 0
    total_runs: int = 0
    total_wickets: int = 0


@dataclass
class HeadToHead:
    total_played: int = 0
    team1_wins: int = 0
    team2_wins: int = 0
    ties: int = 0
    no_results: int = 0
    matches: list[Match] = field(default_factory=list)


@dataclass
class PlayerInningsRecord:
    match_id: str
    match_date: datetime
    opponent: str
    venue: Optional[str] = None
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False
    how_out: Optional[str] = None
    strike_rate: str = "0.00"
    wickets: int = 0
    runs_conceded: int = 0
    overs_bowled: str = "0.0"
    economy: str = "0.0"


@dataclass
class _PlayerTally:
    name: str
    match_ids: set = field(default_factory=set)
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    high_score: int = 0
    wickets: int = 0
    runs_conceded: int = 0
    balls_bowled: int = 0
    best_wickets: int = 0
    best_runs: Optional[int] = None


def get_player_stats(matches: list[Match]) -> list[PlayerAggregate]:
    """Batting and bowling totals per player, most runs first"""
    tallies: dict[str, _PlayerTally] = {}

    for match in matches:
        for inn in match.innings:
            for b in inn.batsmen.values():
                if not b.has_batted:
                    continue
                t = tallies.setdefault(b.name.lower(), _PlayerTally(name=b.name))
                t.runs += b.runs
                t.balls += b.balls
                t.fours += b.fours
                t.sixes += b.sixes
                t.match_ids.add(match.id)
                t.high_score = max(t.high_score, b.runs)

            for b in inn.bowlers.values():
                if not b.has_bowled:
                    continue
                t = tallies.setdefault(b.name.lower(), _PlayerTally(name=b.name))
                t.wickets += b.wickets
                t.runs_conceded += b.runs
                t.balls_bowled += b.total_balls
                t.match_ids.add(match.id)
                if b.wickets > t.best_wickets or (
                    b.wickets == t.best_wickets and (t.best_runs is None or b.runs < t.best_runs)
                ):
                    t.best_wickets = b.wickets
                    t.best_runs = b.runs

    results = []
    for t in tallies.values():
        played = len(t.match_ids)
        results.append(PlayerAggregate(
            name=t.name,
            matches=played,
            runs=t.runs,
            balls=t.balls,
            fours=t.fours,
            sixes=t.sixes,
            high_score=t.high_score,
            wickets=t.wickets,
            runs_conceded=t.runs_conceded,
            balls_bowled=t.balls_bowled,
            best_bowling=f"{t.best_wickets}/{t.best_runs or 0}",
            strike_rate=f"{t.runs / t.balls * 100:.1f}" if t.balls > 0 else "0.0",
            average=f"{t.runs / played:.1f}" if played > 0 else "0.0",
            economy=f"{t.runs_conceded / t.balls_bowled * BALLS_PER_OVER:.1f}" if t.balls_bowled > 0 else "0.0",
        ))
    return sorted(results, key=lambda p: p.runs, reverse=True)


def get_team_stats(matches: list[Match]) -> list[TeamRecord]:
    """Win/loss record per team, most wins first"""
    records: dict[str, TeamRecord] = {}

    for match in matches:
        for team in (match.team1, match.team2):
            record = records.setdefault(team.lower(), TeamRecord(name=team))
            record.played += 1

            if match.status == MatchStatus.ABANDONED:
                record.abandoned += 1
            elif match.status == MatchStatus.COMPLETED and match.result:
                if match.result == TIED_RESULT:
                    record.ties += 1
                elif match.result.startswith(f"{team} won"):
                    record.wins += 1
                else:
                    record.losses += 1

            for inn in match.innings:
                if inn.batting_team == team:
                    record.total_runs += inn.total_runs
                    record.total_wickets += inn.total_wickets

    return sorted(records.values(), key=lambda r: r.wins, reverse=True)


def get_head_to_head(matches: list[Match], team1: str, team2: str) -> HeadToHead:
    a, b = team1.lower(), team2.lower()
    h2h = HeadToHead()
    h2h.matches = [
        m for m in matches
        if {m.team1.lower(), m.team2.lower()} == {a, b}
    ]

    for m in h2h.matches:
        if m.status == MatchStatus.COMPLETED and m.result:
            result = m.result.lower()
            if m.result == TIED_RESULT:
                h2h.ties += 1
            elif result.startswith(f"{a} won"):
                h2h.team1_wins += 1
            elif result.startswith(f"{b} won"):
                h2h.team2_wins += 1
        elif m.status == MatchStatus.ABANDONED:
            h2h.no_results += 1

    h2h.total_played = sum(1 for m in h2h.matches if m.status != MatchStatus.LIVE)
    return h2h


def get_player_innings_history(matches: list[Match], player_name: str) -> list[PlayerInningsRecord]:
    """One row per match the player batted or bowled in, newest first"""
    name = player_name.lower()
    records = []

    for match in matches:
        record: Optional[PlayerInningsRecord] = None
        for inn in match.innings:
            bat = next((b for b in inn.batsmen.values() if b.name.lower() == name), None)
            if bat and (bat.has_batted or bat.is_out):
                if record is None:
                    record = PlayerInningsRecord(match_id=match.id, match_date=match.date, opponent=inn.bowling_team, venue=match.venue)
                record.opponent = inn.bowling_team
                record.runs = bat.runs
                record.balls = bat.balls
                record.fours = bat.fours
                record.sixes = bat.sixes
                record.is_out = bat.is_out
                record.how_out = bat.how_out
                record.strike_rate = strike_rate(bat.runs, bat.balls)

            bowl = next((b for b in inn.bowlers.values() if b.name.lower() == name), None)
            if bowl and bowl.has_bowled:
                if record is None:
                    record = PlayerInningsRecord(match_id=match.id, match_date=match.date, opponent=inn.batting_team, venue=match.venue)
                record.wickets = bowl.wickets
                record.runs_conceded = bowl.runs
                record.overs_bowled = overs_string(bowl.total_balls)
                record.economy = economy_rate(bowl.runs, bowl.total_balls)

        if record is not None:
            records.append(record)

    return sorted(records, key=lambda r: r.match_date, reverse=True)


def get_all_team_names(matches: list[Match]) -> list[str]:
    names = set()
    for m in matches:
        names.add(m.team1)
        names.add(m.team2)
    return sorted(names)
