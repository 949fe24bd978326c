"""Pure jam record logic - no I/O dependencies."""

import math
import random
import re
from dataclasses import dataclass, field
from typing import Iterable

from .schedule import Schedule

# Columns an owner may change from the edit flow
EDITABLE_FIELDS = (
    "event_name",
    "venue_name",
    "address",
    "city",
    "state",
    "day_of_week",
    "start_time",
    "end_time",
    "event_description",
    "website_url",
    "contact_email",
)

BOOLEAN_FIELDS = (
    "multiple_jams_at_once",
    "includes_dancing",
    "includes_visual_art",
    "is_house_jam",
    "is_festival",
)

NUMERIC_FIELDS = ("latitude", "longitude")

TEXT_FIELDS = (
    "event_kind",
    "primary_genre",
    "secondary_genres",
    "skill_level",
    "venue_name",
    "address",
    "greater_region",
    "state",
    "country",
    "day_of_week",
    "frequency",
    "weeks_of_month",
    "start_date",
    "end_date",
    "recurrence_description",
    "avg_crowd_size",
    "time_of_day",
    "invite_status",
    "cover_charge_type",
    "cover_charge_amount",
    "website_url",
    "facebook_url",
    "instagram_url",
    "other_links",
    "event_description",
    "contact_email",
    "contact_phone",
    "trad_level",
)

# Public event ids are random 16-digit numbers below 2**53
_MIN_EVENT_ID = 1_000_000_000_000_000
_MAX_EVENT_ID = 9_007_199_254_740_991


class SubmissionError(Exception):
    """Raised when a submitted jam is missing required data."""

    pass


@dataclass
class Jam:
    """A jam session record as stored in the jams table."""

    id: int
    event_name: str | None = None
    venue_name: str | None = None
    city: str | None = None
    region: str | None = None
    greater_region: str | None = None
    day_of_week: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    primary_genre: str | None = None
    skill_level: str | None = None
    event_kind: str | None = None
    recurrence_description: str | None = None
    frequency: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    weeks_of_month: str | None = None
    is_festival: bool = False
    status: str | None = None
    owner_id: str | None = None
    row: dict = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_row(cls, data: dict) -> "Jam":
        """Create a Jam from a stored row."""
        return cls(
            id=data["id"],
            event_name=data.get("event_name"),
            venue_name=data.get("venue_name"),
            city=data.get("city"),
            region=data.get("region"),
            greater_region=data.get("greater_region"),
            day_of_week=data.get("day_of_week"),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            primary_genre=data.get("primary_genre"),
            skill_level=data.get("skill_level"),
            event_kind=data.get("event_kind"),
            recurrence_description=data.get("recurrence_description"),
            frequency=data.get("frequency"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            weeks_of_month=data.get("weeks_of_month"),
            is_festival=bool(data.get("is_festival")),
            status=data.get("status"),
            owner_id=data.get("owner_id"),
            row=dict(data),
        )

    @property
    def schedule(self) -> Schedule:
        return Schedule.from_fields(
            frequency=self.frequency,
            day_of_week=self.day_of_week,
            start_date=self.start_date,
            end_date=self.end_date,
            weeks_of_month=self.weeks_of_month,
            is_festival=self.is_festival,
        )

    @property
    def display_name(self) -> str:
        return self.event_name or "Untitled"

    def format_start_time(self) -> str:
        """Trim "19:00:00" to "19:00"; empty when unknown."""
        return (self.start_time or "")[:5]

    def is_owned_by(self, user_id: str | None) -> bool:
        return bool(user_id) and self.owner_id == user_id

    def summary_line(self) -> str:
        """One-line location/schedule summary for listings."""
        place = " • ".join(p for p in (self.city, self.region, self.venue_name) if p)
        when = self.day_of_week or ""
        if self.recurrence_description:
            when = f"{when} • {self.recurrence_description}" if when else self.recurrence_description
        return f"{place} | {when}" if when else place


def is_notable(jam: Jam) -> bool:
    """Hand-picked jams highlighted in listings."""
    name = (jam.event_name or "").lower()
    venue = (jam.venue_name or "").lower()
    city = jam.city or ""

    return (
        "berkeley bluegrass barn" in name
        or "graton grass" in name
        or ("blondie" in name and city == "San Francisco")
        or ("blondie" in venue and city == "San Francisco")
    )


def notable_ids(jams: Iterable[Jam]) -> frozenset[int]:
    """Ids of notable jams, for presentation code to highlight."""
    return frozenset(j.id for j in jams if is_notable(j))


# ============== Submission ==============


_TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_TIME_12H = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(am|pm)$", re.IGNORECASE)


def parse_time(raw: str | None) -> str | None:
    """
    Normalize a time of day to "HH:MM:SS".

    Accepts "19:00", "19:00:30", "7 pm" and "7:30 PM". Returns None for
    empty input and raises ValueError for anything else.
    """
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None

    m = _TIME_24H.match(value)
    if m:
        hours, minutes = int(m.group(1)), int(m.group(2))
        seconds = int(m.group(3)) if m.group(3) else 0
        if hours <= 23 and minutes <= 59 and seconds <= 59:
            return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

    m = _TIME_12H.match(value)
    if m:
        hours = int(m.group(1))
        minutes = int(m.group(2)) if m.group(2) else 0
        if hours == 12:
            hours = 0
        if m.group(3).lower() == "pm":
            hours += 12
        if hours <= 23 and minutes <= 59:
            return f"{hours:02d}:{minutes:02d}:00"

    raise ValueError(f"Invalid time: {raw!r}")


def null_if_empty(value) -> str | None:
    if value is None:
        return None
    trimmed = str(value).strip()
    return trimmed or None


def to_number(value) -> float | None:
    if value is None or value == "":
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None


def _to_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y", "on")
    return bool(value)


def build_submission(form: dict, event_id: int | None = None) -> dict:
    """
    Turn submitted form values into a row for the jams table.

    Submissions are published immediately (status "active").

    Raises:
        SubmissionError: name, city or region missing, or a bad time
    """
    event_name = null_if_empty(form.get("event_name"))
    if not event_name:
        raise SubmissionError("Please add a jam name.")

    city = null_if_empty(form.get("city"))
    region = null_if_empty(form.get("region"))
    if not city or not region:
        raise SubmissionError("Please include the city and region so others can find it.")

    try:
        start_time = parse_time(form.get("start_time"))
        end_time = parse_time(form.get("end_time"))
    except ValueError:
        raise SubmissionError("Please use a valid time format (e.g., 19:00 or 7:00 PM).")

    payload: dict = {"event_name": event_name, "city": city, "region": region}
    for name in TEXT_FIELDS:
        payload[name] = null_if_empty(form.get(name))
    for name in NUMERIC_FIELDS:
        payload[name] = to_number(form.get(name))
    for name in BOOLEAN_FIELDS:
        payload[name] = _to_bool(form.get(name, False))

    payload["start_time"] = start_time
    payload["end_time"] = end_time
    payload["event_id"] = event_id or random.randint(_MIN_EVENT_ID, _MAX_EVENT_ID)
    payload["status"] = "active"
    return payload


def build_updates(changes: dict) -> dict:
    """
    Keep only owner-editable columns from a set of changes.

    Raises:
        SubmissionError: an unknown column or a bad time
    """
    unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
    if unknown:
        raise SubmissionError(f"Cannot edit field(s): {', '.join(unknown)}")

    updates = {}
    for name, value in changes.items():
        if name in ("start_time", "end_time"):
            try:
                updates[name] = parse_time(value)
            except ValueError:
                raise SubmissionError("Please use a valid time format (e.g., 19:00 or 7:00 PM).")
        else:
            updates[name] = value
    return updates
