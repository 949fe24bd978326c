"""Month calendar grid - pure, rebuilt on every query."""

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol, Sequence

from .schedule import Schedule, day_key, occurs_on_date

MIN_YEAR = 1970
MAX_YEAR = 2100


class Scheduled(Protocol):
    """Anything carrying a parsed schedule (usually a Jam)."""

    @property
    def schedule(self) -> Schedule: ...


@dataclass
class DayCell:
    """A real day in the grid and the jams happening on it."""

    day: date
    jams: list = field(default_factory=list)
    is_today: bool = False

    @property
    def count(self) -> int:
        return len(self.jams)


@dataclass
class MonthGrid:
    """Week rows of exactly 7 cells; None marks a padding cell."""

    year: int
    month: int
    rows: list[list[DayCell | None]]

    @property
    def label(self) -> str:
        return date(self.year, self.month, 1).strftime("%B %Y")

    def days(self) -> list[DayCell]:
        """All real day cells in order."""
        return [cell for row in self.rows for cell in row if cell is not None]

    def jams_on(self, day: int) -> list:
        """Jams for a day of the month (1-based). Empty if out of range."""
        for cell in self.days():
            if cell.day.day == day:
                return cell.jams
        return []

    def previous_month(self) -> tuple[int, int]:
        if self.month == 1:
            return self.year - 1, 12
        return self.year, self.month - 1

    def next_month(self) -> tuple[int, int]:
        if self.month == 12:
            return self.year + 1, 1
        return self.year, self.month + 1


def first_weekday_index(year: int, month: int) -> int:
    """Column of day 1, with Sunday as 0."""
    return (date(year, month, 1).weekday() + 1) % 7


def build_month_grid(
    year: int,
    month: int,
    jams: Sequence[Scheduled],
    today: date | None = None,
) -> MonthGrid:
    """
    Lay out a month as Sunday-first week rows.

    Every jam is checked against every day of the month; each day keeps
    the jams in their input order.

    Args:
        year: Calendar year
        month: Month number, 1-12
        jams: Jams already filtered by the caller
        today: Date to flag as today (optional)

    Returns:
        MonthGrid with leading and trailing padding cells
    """
    days_in_month = calendar.monthrange(year, month)[1]

    cells: list[DayCell | None] = [None] * first_weekday_index(year, month)
    for n in range(1, days_in_month + 1):
        d = date(year, month, n)
        cells.append(
            DayCell(
                day=d,
                jams=[j for j in jams if occurs_on_date(j.schedule, d)],
                is_today=d == today,
            )
        )

    while len(cells) % 7:
        cells.append(None)

    rows = [cells[i : i + 7] for i in range(0, len(cells), 7)]
    return MonthGrid(year=year, month=month, rows=rows)


def _to_int(raw) -> int | None:
    if raw is None or raw == "":
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def resolve_month(year_param, month_param, today: date) -> tuple[int, int]:
    """
    Pick the month to show from optional query values.

    Missing, non-numeric or out-of-range values fall back to today's
    year/month independently.
    """
    year = _to_int(year_param)
    month = _to_int(month_param)

    if year is None or not MIN_YEAR <= year <= MAX_YEAR:
        year = today.year
    if month is None or not 1 <= month <= 12:
        month = today.month
    return year, month


def render_month_text(grid: MonthGrid, max_per_day: int = 3) -> str:
    """Plain-text agenda of a month grid, one block per day with jams."""
    lines = [grid.label, ""]

    for cell in grid.days():
        if not cell.jams:
            continue
        marker = " (today)" if cell.is_today else ""
        lines.append(f"{day_key(cell.day)} {cell.day.day:2}{marker}")
        for jam in cell.jams[:max_per_day]:
            start = jam.format_start_time()
            prefix = f"{start} - " if start else ""
            lines.append(f"    {prefix}{jam.display_name}")
        if cell.count > max_per_day:
            lines.append(f"    +{cell.count - max_per_day} more")

    if len(lines) == 2:
        lines.append("No jams this month.")
    return "\n".join(lines)
