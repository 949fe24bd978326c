"""Tests for the jamguide command line."""

import json
from datetime import date
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from jamguide.adapters.file_store import JsonTableStore
from jamguide.adapters.supabase_rest import BackendError
from jamguide.cli import main
from jamguide.config import Config


@pytest.fixture
def data_dir(tmp_path):
    store = JsonTableStore(tmp_path)
    store.write("jams", [
        {
            "id": 1,
            "event_name": "Berkeley Bluegrass Barn Jam",
            "status": "active",
            "city": "Berkeley",
            "region": "East Bay",
            "day_of_week": "Mon",
            "start_time": "19:00:00",
            "frequency": "weekly",
            "primary_genre": "bluegrass",
            "owner_id": "owner",
            "website_url": "https://barn.example.com",
        },
        {
            "id": 2,
            "event_name": "Friday Jazz",
            "status": "active",
            "city": "San Francisco",
            "region": "San Francisco",
            "day_of_week": "Fri",
            "start_time": "20:00:00",
            "frequency": "2nd_4th_monthly",
            "primary_genre": "jazz",
        },
        {"id": 3, "event_name": "Retired Jam", "status": "inactive", "day_of_week": "Mon", "frequency": "weekly"},
    ])
    return tmp_path


@pytest.fixture
def cli(data_dir):
    """Invoke the CLI against the seeded file backend."""
    runner = CliRunner()

    def _invoke(*args):
        with patch("jamguide.cli.load_config", return_value=Config(data_dir=str(data_dir))):
            return runner.invoke(main, list(args))
    return _invoke


class TestList:
    def test_lists_active_jams(self, cli):
        result = cli("list")

        assert result.exit_code == 0
        assert "* [1] Berkeley Bluegrass Barn Jam" in result.output
        assert "  [2] Friday Jazz" in result.output
        assert "Retired Jam" not in result.output

    def test_region_slug(self, cli):
        result = cli("list", "--region", "sf")
        assert "Friday Jazz" in result.output
        assert "Berkeley" not in result.output

    def test_notable_only(self, cli):
        result = cli("list", "--notable", "--json")
        data = json.loads(result.output)
        assert [j["id"] for j in data] == [1]
        assert data[0]["notable"] is True

    def test_no_matches(self, cli):
        result = cli("list", "--genre", "jam_band")
        assert "No jams match these filters." in result.output


class TestCalendar:
    def test_text(self, cli):
        result = cli("calendar", "--year", "2025", "--month", "11")

        assert result.exit_code == 0
        assert "November 2025" in result.output
        assert "Fri 14" in result.output
        assert "20:00 - Friday Jazz" in result.output
        assert "Previous: --year 2025 --month 10" in result.output
        assert "Next: --year 2025 --month 12" in result.output

    def test_json(self, cli):
        result = cli("calendar", "--year", "2025", "--month", "11", "--json")
        data = json.loads(result.output)

        assert data["label"] == "November 2025"
        assert len(data["days"]) == 30
        nov_3 = data["days"][2]
        assert nov_3["date"] == "2025-11-03"
        assert [j["id"] for j in nov_3["jams"]] == [1]

    def test_filtered(self, cli):
        result = cli("calendar", "--year", "2025", "--month", "11", "--genre", "bluegrass", "--json")
        data = json.loads(result.output)
        assert all(j["id"] == 1 for day in data["days"] for j in day["jams"])

    def test_invalid_month_falls_back(self, cli):
        result = cli("calendar", "--year", "2025", "--month", "13")
        expected = date(2025, date.today().month, 1).strftime("%B %Y")
        assert expected in result.output


class TestShow:
    def test_show_with_reviews(self, cli):
        cli("review", "1", "--overall", "5", "--name", "Sam", "--comments", "Great pickers")
        result = cli("show", "1")

        assert result.exit_code == 0
        assert "Berkeley Bluegrass Barn Jam" in result.output
        assert "Website: https://barn.example.com" in result.output
        assert "Overall 5.0" in result.output
        assert "Sam" in result.output
        assert "Great pickers" in result.output

    def test_missing_jam(self, cli):
        result = cli("show", "99")
        assert result.exit_code == 1
        assert "Error: No jam with id 99" in result.output


class TestSubmitAndEdit:
    def test_submit(self, cli):
        result = cli(
            "submit",
            "--field", "event_name=Porch Jam",
            "--field", "city=Oakland",
            "--field", "region=East Bay",
            "--field", "start_time=7 PM",
        )
        assert result.exit_code == 0
        assert "✓ Jam submitted (id 4)" in result.output
        assert "Porch Jam" in cli("list").output

    def test_submit_from_file(self, cli, tmp_path):
        path = tmp_path / "jam.json"
        path.write_text(json.dumps({"event_name": "File Jam", "city": "Napa", "region": "North Bay"}))
        result = cli("submit", "--from-file", str(path))
        assert result.exit_code == 0

    def test_submit_missing_city(self, cli):
        result = cli("submit", "--field", "event_name=Porch Jam")
        assert result.exit_code == 1
        assert "Please include the city and region" in result.output

    def test_submit_bad_pair(self, cli):
        result = cli("submit", "--field", "event_name")
        assert result.exit_code == 2

    def test_owner_edit(self, cli):
        result = cli("edit", "1", "--user", "owner", "--set", "event_name=Barn Jam")
        assert result.exit_code == 0
        assert "✓ Updated Barn Jam" in result.output

    def test_non_owner_edit(self, cli):
        result = cli("edit", "1", "--user", "stranger", "--set", "event_name=Mine")
        assert result.exit_code == 1
        assert "does not own" in result.output


class TestClaims:
    def test_claim_then_approve(self, cli):
        assert cli("claim", "2", "--user", "host", "--phone", "555-0100").exit_code == 0

        listed = cli("claims", "list")
        assert "[1] pending" in listed.output
        assert "Friday Jazz <- host (555-0100)" in listed.output

        approved = cli("claims", "approve", "1")
        assert approved.exit_code == 0
        assert "jam 2 now owned by host" in approved.output

        mine = cli("my-jams", "--user", "host")
        assert "[2] Friday Jazz" in mine.output
        assert "Friday Jazz: approved" in mine.output

    def test_reject(self, cli):
        cli("claim", "2", "--user", "host", "--phone", "555")
        result = cli("claims", "reject", "1")
        assert "✓ Claim 1 rejected" in result.output

    def test_no_claims(self, cli):
        assert "No claims." in cli("claims", "list").output

    def test_claims_json(self, cli):
        cli("claim", "2", "--user", "host", "--phone", "555", "--notes", "I host it")
        data = json.loads(cli("claims", "list", "--json").output)
        assert data[0]["status"] == "pending"
        assert data[0]["notes"] == "I host it"


class TestReview:
    def test_rating_out_of_range(self, cli):
        result = cli("review", "1", "--overall", "6")
        assert result.exit_code == 2

    def test_unknown_jam(self, cli):
        result = cli("review", "99")
        assert result.exit_code == 1

    def test_my_jams_empty(self, cli):
        result = cli("my-jams", "--user", "nobody")
        assert "None yet." in result.output
        assert "None." in result.output


class TestErrorHandling:
    def test_unexpected_error_is_not_masked(self, cli):
        """Only known failures become an Error: line."""
        with patch("jamguide.cli.list_jams", side_effect=ValueError("bug")):
            result = cli("list")

        assert result.exit_code == 1
        assert isinstance(result.exception, ValueError)
        assert "Error: bug" not in result.output

    def test_backend_failure_is_reported(self, cli):
        with patch("jamguide.cli.list_jams", side_effect=BackendError("offline")):
            result = cli("list")

        assert result.exit_code == 1
        assert "Error: offline" in result.output
