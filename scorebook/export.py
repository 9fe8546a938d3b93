"""
Plain-text and CSV renderings of a match scorecard
"""
import csv
import io

from scorebook.engine.stats import economy_rate, overs_string, strike_rate
from scorebook.models.match import Match


def format_date(value) -> str:
    """e.g. 19 Oct 2026"""
    return f"{value.day} {value:%b %Y}"


def dismissal_text(batsman) -> str:
    if not batsman.is_out:
        return "not out"
    if batsman.bowler_name:
        return f"{batsman.how_out} b {batsman.bowler_name}"
    return batsman.how_out or "out"


def match_summary_text(match: Match) -> str:
    """Short shareable summary of both innings"""
    lines = [f"{match.team1} vs {match.team2}"]
    if match.venue:
        lines.append(f"Venue: {match.venue}")
    lines.append(f"{match.total_overs} overs match")
    lines.append(f"Toss: {match.toss_winner} elected to {match.toss_choice.value}")
    lines.append("")

    for inn in match.innings:
        lines.append(f"{inn.batting_team}: {inn.total_runs}/{inn.total_wickets} ({overs_string(inn.total_balls)} ov)")
        for b in inn.batsmen.values():
            if b.has_batted:
                lines.append(f"  {b.name}: {b.runs}({b.balls}) {b.how_out if b.is_out else 'not out'}")
        lines.append(f"  Extras: {inn.extras.total}")
        lines.append("")

    if match.result:
        lines.append(f"Result: {match.result}")
    if match.mvp:
        lines.append(f"MVP: {match.mvp}")
    if match.notes:
        lines.append("")
        lines.append(f"Notes: {match.notes}")

    return "\n".join(lines) + "\n"


def match_to_csv(match: Match) -> str:
    """Full scorecard: match details, then batting, extras and bowling per innings"""
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")

    writer.writerow(["Match Summary"])
    writer.writerow(["Teams", f"{match.team1} vs {match.team2}"])
    writer.writerow(["Date", format_date(match.date)])
    writer.writerow(["Venue", match.venue or "N/A"])
    writer.writerow(["Overs", match.total_overs])
    writer.writerow(["Toss", f"{match.toss_winner} elected to {match.toss_choice.value}"])
    writer.writerow(["Result", match.result or "In Progress"])
    writer.writerow(["MVP", match.mvp or "N/A"])
    writer.writerow([])

    for idx, inn in enumerate(match.innings, start=1):
        writer.writerow([f"Innings {idx} - {inn.batting_team}"])
        writer.writerow([f"Total: {inn.total_runs}/{inn.total_wickets} ({overs_string(inn.total_balls)} overs)"])
        writer.writerow([])

        writer.writerow(["Batter", "Runs", "Balls", "4s", "6s", "SR", "Dismissal"])
        for b in inn.batsmen.values():
            if b.has_batted or b.is_out:
                writer.writerow([b.name, b.runs, b.balls, b.fours, b.sixes, strike_rate(b.runs, b.balls), dismissal_text(b)])

        e = inn.extras
        writer.writerow(["Extras", e.total, "", "", "", "", f"Wd {e.wides} Nb {e.no_balls} B {e.byes} Lb {e.leg_byes}"])
        writer.writerow([])

        writer.writerow(["Bowler", "Overs", "Maidens", "Runs", "Wickets", "Economy"])
        for b in inn.bowlers.values():
            if b.has_bowled:
                writer.writerow([b.name, b.overs_display, b.maidens, b.runs, b.wickets, economy_rate(b.runs, b.total_balls)])
        writer.writerow([])

    if match.notes:
        writer.writerow(["Notes"])
        writer.writerow([match.notes])

    return out.getvalue()
