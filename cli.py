#!/usr/bin/env python3
"""
CLI for scoring gully cricket matches from the terminal
"""
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from scorebook.config import settings
from scorebook.database import init_db
from scorebook.engine.dls import calculate_dls_target
from scorebook.engine.lifecycle import CustomStart
from scorebook.engine.scoring import innings_phase
from scorebook.engine.stats import (
    current_over, economy_rate, over_by_over_summary, overs_string,
    partnership, required_run_rate, run_rate, strike_rate, balls_remaining,
)
from scorebook.export import dismissal_text
from scorebook.models.match import ExtraType, ShotZone, TossChoice
from scorebook.repository import SqlRepository
from scorebook.store import Scorebook
from scorebook.validators.match_validator import MatchSetupValidator

console = Console()


def _book() -> Scorebook:
    init_db()
    return Scorebook(SqlRepository())


def _find_match(book: Scorebook, match_id: str):
    """Exact id, or a unique id prefix"""
    match = book.get_match(match_id)
    if match:
        return match
    candidates = [m for m in book.matches if m.id.startswith(match_id)]
    if len(candidates) == 1:
        return candidates[0]
    console.print(f"[red]No unique match found for '{match_id}'.[/red]")
    raise SystemExit(1)


def _print_status(match):
    """One-line score plus what the innings is waiting for"""
    inn = match.active_innings
    line = f"[bold]{inn.batting_team}[/bold] {inn.total_runs}/{inn.total_wickets} ({overs_string(inn.total_balls)} ov, RR {run_rate(inn.total_runs, inn.total_balls)})"
    if match.target is not None and inn is match.second_innings and not match.result:
        remaining = balls_remaining(match, inn)
        need = match.target - inn.total_runs
        line += f"  need {need} from {remaining} (RRR {required_run_rate(match.target, inn.total_runs, remaining)})"
    console.print(line)

    striker, non_striker, bowler = inn.striker, inn.non_striker, inn.current_bowler
    if striker:
        console.print(f"  * {striker.name} {striker.runs}({striker.balls})")
    if non_striker:
        console.print(f"    {non_striker.name} {non_striker.runs}({non_striker.balls})")
    if bowler:
        console.print(f"  Bowling: {bowler.name} {bowler.overs_display}-{bowler.maidens}-{bowler.runs}-{bowler.wickets}")
    p = partnership(inn)
    console.print(f"  This over: {' '.join(current_over(inn)) or '-'}   Partnership: {p.runs} ({p.balls})")

    if match.result:
        console.print(f"[bold green]{match.result}[/bold green]" + (f"  MVP: {match.mvp}" if match.mvp else ""))
    else:
        console.print(f"  [dim]{innings_phase(inn).value}[/dim]")


@click.group()
@click.option("--log-level", default=settings.LOG_LEVEL, help="Logging level")
def cli(log_level: str):
    """Gully Scorebook - ball-by-ball cricket scoring"""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


@cli.command()
@click.argument("team1")
@click.argument("team2")
@click.option("--overs", type=int, required=True, help="Overs per innings")
@click.option("--toss", "toss_winner", required=True, help="Team that won the toss")
@click.option("--elected", type=click.Choice(["bat", "bowl"]), required=True, help="Toss decision")
@click.option("--venue", default=None)
@click.option("--start-runs", type=int, default=None, help="Resume the first innings from this score")
@click.option("--start-wickets", type=int, default=0)
@click.option("--start-overs", type=int, default=0)
def new_match(team1, team2, overs, toss_winner, elected, venue, start_runs, start_wickets, start_overs):
    """Start a new match"""
    team1, team2, toss_winner = team1.strip(), team2.strip(), toss_winner.strip()
    custom = None
    if start_runs is not None:
        custom = {"runs": start_runs, "wickets": start_wickets, "overs": start_overs}

    validation = MatchSetupValidator.validate(team1, team2, overs, toss_winner, elected, custom)
    if not validation["valid"]:
        for error in validation["errors"]:
            console.print(f"[red]{error}[/red]")
        raise SystemExit(1)

    book = _book()
    match = book.create_match(
        team1, team2, overs, toss_winner, TossChoice(elected),
        venue=venue,
        custom_start=CustomStart(**custom) if custom else None,
    )
    inn = match.active_innings
    console.print(Panel(f"[bold]{team1} vs {team2}[/bold]\n{overs} overs, {inn.batting_team} bat first"))
    console.print(f"Match id: [cyan]{match.id}[/cyan]")


@cli.command()
@click.option("--status", type=click.Choice(["live", "completed", "abandoned"]), default=None)
def list_matches(status):
    """List stored matches, newest first"""
    book = _book()
    matches = book.matches
    if status:
        matches = [m for m in matches if m.status.value == status]

    if not matches:
        console.print("[red]No matches found. Run 'new-match' first.[/red]")
        return

    table = Table(title=f"Matches ({len(matches)} total)")
    table.add_column("ID", style="cyan")
    table.add_column("Date")
    table.add_column("Teams")
    table.add_column("Overs", justify="right")
    table.add_column("Status", style="magenta")
    table.add_column("Result")

    for m in matches:
        table.add_row(m.id, m.date.strftime("%d %b %Y"), f"{m.team1} vs {m.team2}",
                      str(m.total_overs), m.status.value, m.result or "")
    console.print(table)


@cli.command()
@click.argument("match_id")
@click.argument("name")
def add_batsman(match_id, name):
    """Add a batsman to the current innings"""
    book = _book()
    match = _find_match(book, match_id)
    if not book.add_batsman_to_innings(match.id, name):
        console.print(f"[red]Could not add '{name}' (name already used in this innings?).[/red]")
        raise SystemExit(1)
    _print_status(match)


@cli.command()
@click.argument("match_id")
@click.argument("name")
def add_bowler(match_id, name):
    """Add a bowler to the current innings, or hand the ball to an existing one"""
    book = _book()
    match = _find_match(book, match_id)
    inn = match.active_innings
    existing = next((b for b in inn.bowlers.values() if b.name.lower() == name.lower()), None)
    if existing:
        if not book.switch_bowler(match.id, existing.id):
            console.print(f"[red]{existing.name} bowled the previous over.[/red]")
            raise SystemExit(1)
    elif not book.add_bowler_to_innings(match.id, name):
        console.print(f"[red]Could not add '{name}'.[/red]")
        raise SystemExit(1)
    _print_status(match)


@cli.command()
@click.argument("match_id")
@click.argument("runs", type=int, default=0)
@click.option("--extra", type=click.Choice([e.value for e in ExtraType]), default=None)
@click.option("--wicket", "how_out", default=None, help="Record a wicket, e.g. --wicket bowled")
@click.option("--zone", type=click.Choice([z.value for z in ShotZone]), default=None)
def ball(match_id, runs, extra, how_out, zone):
    """Record one delivery"""
    book = _book()
    match = _find_match(book, match_id)
    recorded = book.record_ball(
        match.id,
        runs,
        how_out is not None,
        extra_type=ExtraType(extra) if extra else None,
        wicket_type=how_out,
        shot_zone=ShotZone(zone) if zone else None,
    )
    if not recorded:
        console.print(f"[red]Ball not recorded: innings is {innings_phase(match.active_innings).value}.[/red]")
        raise SystemExit(1)
    _print_status(match)


@cli.command()
@click.argument("match_id")
def undo(match_id):
    """Undo the last ball of the current innings"""
    book = _book()
    match = _find_match(book, match_id)
    if not book.undo_last_ball(match.id):
        console.print("[red]Nothing to undo.[/red]")
        raise SystemExit(1)
    _print_status(match)


@cli.command()
@click.argument("match_id")
def end_innings(match_id):
    """Declare or otherwise close the current innings"""
    book = _book()
    match = _find_match(book, match_id)
    if not book.end_innings(match.id):
        console.print("[red]Match is not live.[/red]")
        raise SystemExit(1)
    _print_status(match)


@cli.command()
@click.argument("match_id")
def abandon(match_id):
    """Abandon a match"""
    book = _book()
    match = _find_match(book, match_id)
    book.abandon_match(match.id)
    console.print(f"[yellow]{match.team1} vs {match.team2}: {match.result}[/yellow]")


@cli.command()
@click.argument("match_id")
def scorecard(match_id):
    """Full scorecard for both innings"""
    book = _book()
    match = _find_match(book, match_id)
    console.print(Panel(f"[bold]{match.team1} vs {match.team2}[/bold]  ({match.status.value})"))
    for idx, inn in enumerate(match.innings, start=1):
        console.print(f"\n[bold]Innings {idx}: {inn.batting_team} {inn.total_runs}/{inn.total_wickets} ({overs_string(inn.total_balls)} ov)[/bold]")
        _print_scorecard(inn)
    if match.result:
        console.print(f"\n[bold green]{match.result}[/bold green]")
    if match.mvp:
        console.print(f"[bold]MVP: {match.mvp}[/bold]")


def _print_scorecard(innings):
    """Print innings scorecard"""
    # Batting
    bat_table = Table(title="Batting")
    bat_table.add_column("Batter", style="cyan")
    bat_table.add_column("Dismissal")
    bat_table.add_column("R", justify="right")
    bat_table.add_column("B", justify="right")
    bat_table.add_column("4s", justify="right")
    bat_table.add_column("6s", justify="right")
    bat_table.add_column("SR", justify="right")

    for b in innings.batsmen.values():
        bat_table.add_row(
            b.name,
            dismissal_text(b),
            str(b.runs),
            str(b.balls),
            str(b.fours),
            str(b.sixes),
            strike_rate(b.runs, b.balls),
        )

    console.print(bat_table)
    e = innings.extras
    console.print(f"Extras: {e.total} (wd {e.wides}, nb {e.no_balls}, b {e.byes}, lb {e.leg_byes})")

    # Bowling
    bowl_table = Table(title="Bowling")
    bowl_table.add_column("Bowler", style="magenta")
    bowl_table.add_column("O", justify="right")
    bowl_table.add_column("M", justify="right")
    bowl_table.add_column("R", justify="right")
    bowl_table.add_column("W", justify="right")
    bowl_table.add_column("Econ", justify="right")

    for b in innings.bowlers.values():
        bowl_table.add_row(
            b.name,
            b.overs_display,
            str(b.maidens),
            str(b.runs),
            str(b.wickets),
            economy_rate(b.runs, b.total_balls),
        )

    console.print(bowl_table)


@cli.command()
@click.argument("match_id")
@click.option("--innings", "innings_number", type=int, default=None, help="1 or 2 (default: current)")
def overs(match_id, innings_number):
    """Over-by-over breakdown"""
    book = _book()
    match = _find_match(book, match_id)
    idx = (innings_number - 1) if innings_number else match.current_innings
    if idx < 0 or idx >= len(match.innings):
        console.print("[red]Innings not started.[/red]")
        raise SystemExit(1)

    table = Table(title=f"{match.innings[idx].batting_team} - overs")
    table.add_column("Over", justify="right")
    table.add_column("Bowler", style="magenta")
    table.add_column("Balls")
    table.add_column("R", justify="right")
    table.add_column("W", justify="right")
    for o in over_by_over_summary(match.innings[idx]):
        table.add_row(str(o.over_number), o.bowler_name, " ".join(o.balls), str(o.runs), str(o.wickets))
    console.print(table)


@cli.command()
@click.argument("match_id")
@click.option("--format", "fmt", type=click.Choice(["csv", "text"]), default="csv")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write to a file instead of stdout")
def export(match_id, fmt, output):
    """Export a scorecard as CSV or a shareable text summary"""
    book = _book()
    match = _find_match(book, match_id)
    content = book.get_match_csv(match.id) if fmt == "csv" else book.get_match_summary_text(match.id)
    if output:
        Path(output).write_text(content, encoding="utf-8")
        console.print(f"[green]Saved to {output}[/green]")
    else:
        click.echo(content, nl=False)


@cli.command()
@click.option("--limit", default=20, help="Number of players to show")
def player_stats(limit: int):
    """Career batting and bowling across all matches"""
    book = _book()
    players = book.get_player_stats()
    if not players:
        console.print("[red]No player statistics yet.[/red]")
        return

    table = Table(title=f"Players ({len(players)} total)")
    table.add_column("Name", style="cyan")
    table.add_column("M", justify="right")
    table.add_column("Runs", justify="right", style="green")
    table.add_column("HS", justify="right")
    table.add_column("SR", justify="right")
    table.add_column("Avg", justify="right")
    table.add_column("Wkts", justify="right", style="magenta")
    table.add_column("Best", justify="right")
    table.add_column("Econ", justify="right")
    for p in players[:limit]:
        table.add_row(p.name, str(p.matches), str(p.runs), str(p.high_score), p.strike_rate,
                      p.average, str(p.wickets), p.best_bowling, p.economy)
    console.print(table)


@cli.command()
def team_stats():
    """Win/loss record per team"""
    book = _book()
    teams = book.get_team_stats()
    if not teams:
        console.print("[red]No matches found.[/red]")
        return

    table = Table(title="Teams")
    table.add_column("Team", style="cyan")
    table.add_column("P", justify="right")
    table.add_column("W", justify="right", style="green")
    table.add_column("L", justify="right")
    table.add_column("T", justify="right")
    table.add_column("Ab", justify="right")
    table.add_column("Runs", justify="right")
    for t in teams:
        table.add_row(t.name, str(t.played), str(t.wins), str(t.losses), str(t.ties),
                      str(t.abandoned), str(t.total_runs))
    console.print(table)


@cli.command()
@click.argument("team1")
@click.argument("team2")
def head_to_head(team1, team2):
    """Results between two teams"""
    book = _book()
    h2h = book.get_head_to_head(team1, team2)
    console.print(Panel(f"[bold]{team1} vs {team2}[/bold]"))
    console.print(f"[cyan]Played:[/cyan] {h2h.total_played}")
    console.print(f"[cyan]{team1} wins:[/cyan] {h2h.team1_wins}")
    console.print(f"[cyan]{team2} wins:[/cyan] {h2h.team2_wins}")
    console.print(f"[cyan]Tied:[/cyan] {h2h.ties}   [cyan]No result:[/cyan] {h2h.no_results}")
    for m in h2h.matches:
        console.print(f"  {m.date:%d %b %Y}  {m.result or m.status.value}")


@cli.command()
@click.option("--score", type=int, required=True, help="First-innings score")
@click.option("--overs-used", type=float, required=True, help="Overs the first innings lasted")
@click.option("--max-overs", type=int, required=True, help="Scheduled overs per side")
@click.option("--overs-available", type=float, required=True, help="Overs the chasing side will get")
@click.option("--wickets-lost", type=int, default=0, help="Wickets the chasing side has lost")
def dls(score, overs_used, max_overs, overs_available, wickets_lost):
    """Revised chase target after an interruption (simplified)"""
    target = calculate_dls_target(score, overs_used, max_overs, overs_available, wickets_lost)
    console.print(f"[bold green]Revised target: {target}[/bold green]")


if __name__ == "__main__":
    cli()
