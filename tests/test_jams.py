"""Tests for jam records and submissions."""

from datetime import date

import pytest

from jamguide.core.jams import (
    Jam,
    SubmissionError,
    build_submission,
    build_updates,
    is_notable,
    notable_ids,
    parse_time,
)
from jamguide.core.schedule import Frequency


@pytest.fixture
def row():
    return {
        "id": 7,
        "event_name": "Tuesday Bluegrass",
        "venue_name": "The Barn",
        "city": "Berkeley",
        "region": "East Bay",
        "day_of_week": "Thur",
        "start_time": "19:30:00",
        "frequency": "2nd_4th_monthly",
        "weeks_of_month": "2,4",
        "start_date": "2025-01-01",
        "end_date": None,
        "is_festival": None,
        "status": "active",
        "owner_id": "user-1",
        "website_url": "https://example.com",
    }


@pytest.fixture
def form():
    return {
        "event_name": "  New Jam  ",
        "city": "Oakland",
        "region": "East Bay",
        "start_time": "7:00 PM",
        "end_time": "",
        "latitude": "37.8",
        "longitude": "not a number",
        "venue_name": "   ",
        "is_house_jam": "true",
    }


class TestJam:
    def test_from_row(self, row):
        jam = Jam.from_row(row)
        assert jam.id == 7
        assert jam.event_name == "Tuesday Bluegrass"
        assert jam.is_festival is False
        assert jam.row["website_url"] == "https://example.com"

    def test_schedule_is_parsed(self, row):
        schedule = Jam.from_row(row).schedule
        assert schedule.frequency is Frequency.SECOND_FOURTH_MONTHLY
        assert schedule.day_of_week == "Thu"
        assert schedule.weeks_of_month == (2, 4)
        assert schedule.start_date == date(2025, 1, 1)
        assert schedule.end_date is None

    def test_display_name_fallback(self):
        assert Jam(id=1).display_name == "Untitled"

    def test_format_start_time(self, row):
        assert Jam.from_row(row).format_start_time() == "19:30"
        assert Jam(id=1).format_start_time() == ""

    def test_is_owned_by(self, row):
        jam = Jam.from_row(row)
        assert jam.is_owned_by("user-1") is True
        assert jam.is_owned_by("user-2") is False
        assert Jam(id=1).is_owned_by(None) is False

    def test_summary_line(self, row):
        jam = Jam.from_row(row)
        assert jam.summary_line() == "Berkeley • East Bay • The Barn | Thur"

    def test_summary_line_with_recurrence(self):
        jam = Jam(id=1, city="SF", day_of_week="Fri", recurrence_description="2nd & 4th")
        assert jam.summary_line() == "SF | Fri • 2nd & 4th"


class TestNotable:
    @pytest.mark.parametrize("fields,expected", [
        ({"event_name": "Berkeley Bluegrass Barn Jam"}, True),
        ({"event_name": "Graton Grass night"}, True),
        ({"event_name": "Blondie's Jam", "city": "San Francisco"}, True),
        ({"venue_name": "Blondie's Bar", "city": "San Francisco"}, True),
        ({"venue_name": "Blondie's Bar", "city": "Oakland"}, False),
        ({"event_name": "Some Jam"}, False),
        ({}, False),
    ])
    def test_is_notable(self, fields, expected):
        assert is_notable(Jam(id=1, **fields)) is expected

    def test_notable_ids(self):
        jams = [Jam(id=1, event_name="Graton Grass"), Jam(id=2, event_name="Other")]
        ids = notable_ids(jams)
        assert ids == frozenset({1})
        assert isinstance(ids, frozenset)


class TestParseTime:
    @pytest.mark.parametrize("raw,expected", [
        ("19:00", "19:00:00"),
        ("7:05", "07:05:00"),
        ("19:00:30", "19:00:30"),
        ("7:00 PM", "19:00:00"),
        ("7pm", "19:00:00"),
        ("12 am", "00:00:00"),
        ("12:30 pm", "12:30:00"),
        ("", None),
        ("   ", None),
        (None, None),
    ])
    def test_valid(self, raw, expected):
        assert parse_time(raw) == expected

    @pytest.mark.parametrize("raw", ["25:00", "19:60", "seven", "13 pm"])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_time(raw)


class TestBuildSubmission:
    def test_normalizes_fields(self, form):
        payload = build_submission(form, event_id=1234567890123456)

        assert payload["event_name"] == "New Jam"
        assert payload["city"] == "Oakland"
        assert payload["start_time"] == "19:00:00"
        assert payload["end_time"] is None
        assert payload["latitude"] == 37.8
        assert payload["longitude"] is None
        assert payload["venue_name"] is None
        assert payload["is_house_jam"] is True
        assert payload["is_festival"] is False
        assert payload["status"] == "active"
        assert payload["event_id"] == 1234567890123456

    def test_random_event_id(self, form):
        event_id = build_submission(form)["event_id"]
        assert 1_000_000_000_000_000 <= event_id <= 9_007_199_254_740_991

    def test_requires_name(self, form):
        form["event_name"] = " "
        with pytest.raises(SubmissionError, match="jam name"):
            build_submission(form)

    @pytest.mark.parametrize("missing", ["city", "region"])
    def test_requires_city_and_region(self, form, missing):
        del form[missing]
        with pytest.raises(SubmissionError, match="city and region"):
            build_submission(form)

    def test_rejects_bad_time(self, form):
        form["end_time"] = "late"
        with pytest.raises(SubmissionError, match="time format"):
            build_submission(form)


class TestBuildUpdates:
    def test_keeps_editable_fields(self):
        updates = build_updates({"event_name": "Renamed", "start_time": "8 pm"})
        assert updates == {"event_name": "Renamed", "start_time": "20:00:00"}

    def test_rejects_other_fields(self):
        with pytest.raises(SubmissionError, match="owner_id"):
            build_updates({"owner_id": "me", "event_name": "x"})

    def test_rejects_bad_time(self):
        with pytest.raises(SubmissionError):
            build_updates({"end_time": "whenever"})
