"""Pure recurrence logic - decides which calendar days a jam falls on."""

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

# Sunday-first, matching the calendar grid columns
DAY_KEYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


class Frequency(Enum):
    """Known frequency kinds, plus an explicit fallback for anything else."""

    ONE_OFF = "one_off"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    FIRST_MONTHLY = "1st_monthly"
    SECOND_MONTHLY = "2nd_monthly"
    THIRD_MONTHLY = "3rd_monthly"
    FOURTH_MONTHLY = "4th_monthly"
    SECOND_FOURTH_MONTHLY = "2nd_4th_monthly"
    FIRST_THIRD_MONTHLY = "1st_3rd_monthly"
    YEARLY = "yearly"
    UNRECOGNIZED = ""

    @classmethod
    def parse(cls, raw: str | None) -> "Frequency":
        """Classify a stored frequency string (case-insensitive)."""
        value = raw.strip().lower() if isinstance(raw, str) else ""
        if not value:
            return cls.UNRECOGNIZED

        if value in _EXACT:
            return _EXACT[value]

        if "monthly" in value:
            # Ordinal prefix decides the week; order matters for "2nd_4th"
            if value.startswith("1st"):
                return cls.FIRST_MONTHLY
            if value.startswith("2nd_4th"):
                return cls.SECOND_FOURTH_MONTHLY
            if value.startswith("2nd"):
                return cls.SECOND_MONTHLY
            if value.startswith("3rd"):
                return cls.THIRD_MONTHLY
            if value.startswith("4th"):
                return cls.FOURTH_MONTHLY
            return cls.MONTHLY

        return cls.UNRECOGNIZED

    @property
    def is_monthly(self) -> bool:
        return self in _DEFAULT_WEEKS

    @property
    def default_weeks(self) -> tuple[int, ...]:
        """Weeks of the month implied by the frequency name alone."""
        return _DEFAULT_WEEKS.get(self, ())


_EXACT = {
    "one_off": Frequency.ONE_OFF,
    "weekly": Frequency.WEEKLY,
    "biweekly": Frequency.BIWEEKLY,
    "yearly": Frequency.YEARLY,
    "monthly": Frequency.MONTHLY,
    # Stored spelling in the source data; the prefix rules would not catch it
    "1nd_3th_monthly": Frequency.FIRST_THIRD_MONTHLY,
    "1st_3rd_monthly": Frequency.FIRST_THIRD_MONTHLY,
}

# FIRST_THIRD_MONTHLY lands on week 1 unless weeks_of_month says otherwise.
# The filter tables file the same value under "biweekly"; see filters.py.
_DEFAULT_WEEKS = {
    Frequency.MONTHLY: (1,),
    Frequency.FIRST_MONTHLY: (1,),
    Frequency.SECOND_MONTHLY: (2,),
    Frequency.THIRD_MONTHLY: (3,),
    Frequency.FOURTH_MONTHLY: (4,),
    Frequency.SECOND_FOURTH_MONTHLY: (2, 4),
    Frequency.FIRST_THIRD_MONTHLY: (1,),
}


# Only the dashed form; compact "20251120" counts as no date
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def day_key(d: date) -> str:
    """Weekday key ("Sun".."Sat") for a date."""
    # date.weekday() is Monday=0
    return DAY_KEYS[(d.weekday() + 1) % 7]


def normalize_day(raw: str | None) -> str | None:
    """Normalize stored weekday spellings ("Thur", "tuesday") to a day key."""
    if not isinstance(raw, str) or not raw.strip():
        return None
    prefix = raw.strip()[:3].lower()
    for key in DAY_KEYS:
        if key.lower() == prefix:
            return key
    return None


def parse_date(raw: str | date | None) -> date | None:
    """Parse a stored "YYYY-MM-DD" value. Unparseable values become None."""
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        return None
    value = raw.strip()[:10]
    if not _ISO_DATE.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_weeks_of_month(raw: str | list | tuple | None) -> tuple[int, ...]:
    """Parse "2,4" (or a list) into ordered week numbers in 1..5."""
    if not raw:
        return ()
    if isinstance(raw, str):
        parts = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        parts = raw
    else:
        parts = (raw,)

    weeks: list[int] = []
    for part in parts:
        try:
            n = int(str(part).strip())
        except ValueError:
            continue
        if 1 <= n <= 5 and n not in weeks:
            weeks.append(n)
    return tuple(weeks)


def week_of_month(d: date) -> int:
    """1-based index of the 7-day bucket a date falls into."""
    return (d.day - 1) // 7 + 1


@dataclass(frozen=True)
class Schedule:
    """Parsed scheduling fields of a jam."""

    frequency: Frequency = Frequency.UNRECOGNIZED
    day_of_week: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    weeks_of_month: tuple[int, ...] = ()
    is_festival: bool = False

    @classmethod
    def from_fields(
        cls,
        frequency: str | None = None,
        day_of_week: str | None = None,
        start_date: str | date | None = None,
        end_date: str | date | None = None,
        weeks_of_month: str | list | None = None,
        is_festival: bool | None = False,
    ) -> "Schedule":
        """Build a schedule from raw stored values."""
        return cls(
            frequency=Frequency.parse(frequency),
            day_of_week=normalize_day(day_of_week),
            start_date=parse_date(start_date),
            end_date=parse_date(end_date),
            weeks_of_month=parse_weeks_of_month(weeks_of_month),
            is_festival=bool(is_festival),
        )

    def in_range(self, d: date) -> bool:
        """Check the inclusive [start_date, end_date] window; absent bounds are open."""
        if self.start_date and d < self.start_date:
            return False
        if self.end_date and d > self.end_date:
            return False
        return True


def occurs_on_date(schedule: Schedule, target: date) -> bool:
    """
    Decide whether a jam with this schedule happens on the target date.

    Pure function - never raises. Missing or invalid fields fall back to
    permissive defaults so incomplete records still show up.
    """
    if not schedule.in_range(target):
        return False

    start = schedule.start_date
    end = schedule.end_date
    freq = schedule.frequency

    if freq is Frequency.ONE_OFF:
        if not start:
            return False
        if schedule.is_festival and end:
            return start <= target <= end
        return target == start

    # Festivals span their whole range regardless of weekday
    if schedule.is_festival and start and end:
        return start <= target <= end

    if not schedule.day_of_week or schedule.day_of_week != day_key(target):
        return False

    if freq is Frequency.BIWEEKLY:
        if not start:
            # Phase unknown: treat as weekly
            return True
        weeks_since = (target - start).days // 7
        return weeks_since % 2 == 0

    if freq.is_monthly:
        weeks = schedule.weeks_of_month or freq.default_weeks
        return week_of_month(target) in weeks

    if freq is Frequency.YEARLY:
        if not start:
            return False
        return (target.month, target.day) == (start.month, start.day)

    # weekly, unrecognized and empty frequencies
    return True
