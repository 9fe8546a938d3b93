"""
Tests for the CSV scorecard and shareable text summary.
"""
import csv
import io
from datetime import datetime, timezone

import pytest

from scorebook.export import format_date, match_summary_text, match_to_csv


@pytest.fixture
def finished_match(new_match, bowl, bowl_repeat):
    """Tigers 4/1, Lions 0/0 in a one-over game"""
    match = new_match(overs=1, venue="Park")
    bowl(match, 4)
    bowl(match, 0, is_wicket=True, wicket_type="bowled")
    bowl_repeat(match, 4)
    bowl_repeat(match, 6)
    match.date = datetime(2026, 10, 19, tzinfo=timezone.utc)
    return match


class TestCSVExport:
    def test_header_rows(self, finished_match):
        rows = list(csv.reader(io.StringIO(match_to_csv(finished_match))))
        assert rows[0] == ["Match Summary"]
        assert rows[1] == ["Teams", "Tigers vs Lions"]
        assert rows[2] == ["Date", "19 Oct 2026"]
        assert rows[3] == ["Venue", "Park"]
        assert rows[4] == ["Overs", "1"]
        assert rows[5] == ["Toss", "Tigers elected to bat"]
        assert rows[6] == ["Result", "Tigers won by 4 runs"]
        assert rows[7] == ["MVP", "Lions bowler 1"]

    def test_batting_and_bowling_rows(self, finished_match):
        rows = list(csv.reader(io.StringIO(match_to_csv(finished_match))))
        assert ["Innings 1 - Tigers"] in rows
        assert ["Total: 4/1 (1.0 overs)"] in rows
        assert ["Tigers bat 1", "4", "2", "1", "0", "200.0", "bowled b Lions bowler 1"] in rows
        assert ["Tigers bat 3", "0", "4", "0", "0", "0.0", "not out"] in rows
        assert ["Extras", "0", "", "", "", "", "Wd 0 Nb 0 B 0 Lb 0"] in rows
        assert ["Lions bowler 1", "1.0", "0", "4", "1", "4.0"] in rows
        # batsmen who never faced are left out
        assert not any(r and r[0] == "Tigers bat 2" for r in rows)

    def test_live_match_placeholders(self, new_match):
        rows = list(csv.reader(io.StringIO(match_to_csv(new_match()))))
        assert ["Venue", "N/A"] in rows
        assert ["Result", "In Progress"] in rows
        assert ["MVP", "N/A"] in rows

    def test_names_with_commas_are_quoted(self, finished_match):
        finished_match.notes = "Rain, then sun"
        text = match_to_csv(finished_match)
        assert '"Rain, then sun"' in text


class TestSummaryText:
    def test_summary(self, finished_match):
        text = match_summary_text(finished_match)
        assert text == (
            "Tigers vs Lions\n"
            "Venue: Park\n"
            "1 overs match\n"
            "Toss: Tigers elected to bat\n"
            "\n"
            "Tigers: 4/1 (1.0 ov)\n"
            "  Tigers bat 1: 4(2) bowled\n"
            "  Tigers bat 3: 0(4) not out\n"
            "  Extras: 0\n"
            "\n"
            "Lions: 0/0 (1.0 ov)\n"
            "  Lions bat 1: 0(6) not out\n"
            "  Extras: 0\n"
            "\n"
            "Result: Tigers won by 4 runs\n"
            "MVP: Lions bowler 1\n"
        )

    def test_format_date(self):
        assert format_date(datetime(2026, 3, 5)) == "5 Mar 2026"
