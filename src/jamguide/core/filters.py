"""Listing filters - query-string parsing and slug to stored-value tables.

Filtering happens before jams reach the calendar logic. Each selected axis
becomes a membership test on one stored column; unselected axes impose no
restriction.
"""

from dataclasses import dataclass, fields
from typing import Mapping


@dataclass(frozen=True)
class FilterOption:
    """One selectable filter value."""

    label: str  # shown to users
    slug: str  # used in URLs and CLI options, e.g. "east_bay"
    db_values: tuple[str, ...]  # values stored in the column


REGION_OPTIONS = (
    FilterOption("San Francisco", "sf", ("San Francisco",)),
    FilterOption("East Bay", "east_bay", ("East Bay",)),
    FilterOption("North Bay", "north_bay", ("Marin County", "Sonoma County")),
    FilterOption("South Bay", "south_bay", ("South Bay",)),
    FilterOption("Peninsula", "peninsula", ("Peninsula",)),
)

# Stored data spells Thursday "Thur"
DAY_OF_WEEK_OPTIONS = (
    FilterOption("Mon", "Mon", ("Mon",)),
    FilterOption("Tue", "Tue", ("Tue",)),
    FilterOption("Wed", "Wed", ("Wed",)),
    FilterOption("Thu", "Thur", ("Thur",)),
    FilterOption("Fri", "Fri", ("Fri",)),
    FilterOption("Sat", "Sat", ("Sat",)),
    FilterOption("Sun", "Sun", ("Sun",)),
)

TIME_OF_DAY_OPTIONS = (
    FilterOption("Daytime", "daytime", ("morning",)),
    FilterOption("Evening", "evening", ("evening",)),
    FilterOption("Nighttime", "nighttime", ("nightime", "late_night")),
)

GENRE_OPTIONS = (
    FilterOption("Bluegrass", "bluegrass", ("bluegrass",)),
    FilterOption("Jazz", "jazz", ("jazz",)),
    FilterOption("Jam Band", "jam_band", ("jam_band",)),
)

SKILL_LEVEL_OPTIONS = (
    FilterOption(
        "Beginner Friendly",
        "beginner_friendly",
        ("Begginer", "Begginer_Intermediate", "all_skill_levels"),
    ),
    FilterOption("Mixed", "mixed", ("Intermediate", "Advanced_Intermediate", "all_skill_levels")),
    FilterOption("Advanced", "advanced", ("Advanced", "Advanced_Intermediate")),
    FilterOption("Pro", "pro", ("Pro",)),
)

# "1nd_3th_monthly" is filed under biweekly here, while the calendar
# treats it as a monthly pattern (Frequency.FIRST_THIRD_MONTHLY).
FREQUENCY_OPTIONS = (
    FilterOption("Weekly", "weekly", ("weekly",)),
    FilterOption("Biweekly", "biweekly", ("1nd_3th_monthly",)),
    FilterOption(
        "Monthly",
        "monthly",
        ("monthly", "1st_monthly", "2nd_monthly", "3rd_monthly", "4th_monthly"),
    ),
    FilterOption("2nd 4th Monthly", "2nd_4th_monthly", ("2nd_4th_monthly",)),
    FilterOption("One Off", "one_off", ("one_off",)),
)


def db_values_for_selected(options, selected_slugs) -> list[str]:
    """Merge stored values of the selected slugs, in option order, without duplicates."""
    selected = set(selected_slugs)
    values: list[str] = []
    for opt in options:
        if opt.slug in selected:
            for v in opt.db_values:
                if v not in values:
                    values.append(v)
    return values


def expand_slugs(options, selected: list[str]) -> list[str]:
    """Like db_values_for_selected, but unknown entries pass through as stored values."""
    known = {opt.slug for opt in options}
    values = db_values_for_selected(options, [s for s in selected if s in known])
    for raw in selected:
        if raw not in known and raw not in values:
            values.append(raw)
    return values


def parse_list_param(raw: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Parse a comma-separated query value; list values use their first item."""
    if not raw:
        return []
    value = raw[0] if isinstance(raw, (list, tuple)) else raw
    return [s.strip() for s in value.split(",") if s.strip()]


def _flag(raw) -> bool:
    if isinstance(raw, (list, tuple)):
        raw = raw[0] if raw else None
    return raw == "1"


# Query parameter -> stored column, for list-valued axes
LIST_PARAMS = {
    "regions": "region",
    "cities": "city",
    "greater_regions": "greater_region",
    "dow": "day_of_week",
    "tod": "time_of_day",
    "genres": "primary_genre",
    "skills": "skill_level",
    "invite": "invite_status",
    "crowd": "avg_crowd_size",
    "cover_type": "cover_charge_type",
    "kind": "event_kind",
    "freq": "frequency",
}

# Query parameter -> stored boolean column, for "=1" flags
FLAG_PARAMS = {
    "is_house_jam": "is_house_jam",
    "dancing": "includes_dancing",
}


@dataclass(frozen=True)
class JamFilters:
    """Selected filter values, keyed by stored column."""

    region: tuple[str, ...] = ()
    city: tuple[str, ...] = ()
    greater_region: tuple[str, ...] = ()
    day_of_week: tuple[str, ...] = ()
    time_of_day: tuple[str, ...] = ()
    primary_genre: tuple[str, ...] = ()
    skill_level: tuple[str, ...] = ()
    invite_status: tuple[str, ...] = ()
    avg_crowd_size: tuple[str, ...] = ()
    cover_charge_type: tuple[str, ...] = ()
    event_kind: tuple[str, ...] = ()
    frequency: tuple[str, ...] = ()
    is_house_jam: bool = False
    includes_dancing: bool = False

    @classmethod
    def from_params(cls, params: Mapping) -> "JamFilters":
        """Build filters from URL-style query parameters."""
        kwargs: dict = {}
        for param, column in LIST_PARAMS.items():
            kwargs[column] = tuple(parse_list_param(params.get(param)))
        for param, column in FLAG_PARAMS.items():
            kwargs[column] = _flag(params.get(param))
        return cls(**kwargs)

    def membership(self) -> dict[str, tuple[str, ...]]:
        """Column -> allowed values, only for axes with a selection."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in LIST_PARAMS.values() and value:
                result[f.name] = value
        return result

    def equality(self) -> dict[str, object]:
        """Column -> required value: always status, plus any set flags."""
        result: dict[str, object] = {"status": "active"}
        for column in FLAG_PARAMS.values():
            if getattr(self, column):
                result[column] = True
        return result

    def matches(self, row: Mapping) -> bool:
        """Apply the filters to a stored row in memory."""
        for column, value in self.equality().items():
            if row.get(column) != value:
                return False
        for column, values in self.membership().items():
            if row.get(column) not in values:
                return False
        return True

    def is_empty(self) -> bool:
        return not self.membership() and self.equality() == {"status": "active"}
