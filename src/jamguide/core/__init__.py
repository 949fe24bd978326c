"""Functional core - pure business logic with no I/O."""

from .schedule import Frequency, Schedule, occurs_on_date, parse_date, parse_weeks_of_month
from .grid import DayCell, MonthGrid, build_month_grid, resolve_month
from .jams import Jam, SubmissionError, build_submission, build_updates, is_notable, notable_ids
from .filters import FilterOption, JamFilters, db_values_for_selected, parse_list_param
from .reviews import Review, ReviewError, ReviewSummary, build_review, summarize_reviews
from .claims import Claim, ClaimRequestError, ClaimStatus, build_claim

__all__ = [
    # Schedule
    "Frequency",
    "Schedule",
    "occurs_on_date",
    "parse_date",
    "parse_weeks_of_month",
    # Grid
    "DayCell",
    "MonthGrid",
    "build_month_grid",
    "resolve_month",
    # Jams
    "Jam",
    "SubmissionError",
    "build_submission",
    "build_updates",
    "is_notable",
    "notable_ids",
    # Filters
    "FilterOption",
    "JamFilters",
    "db_values_for_selected",
    "parse_list_param",
    # Reviews
    "Review",
    "ReviewError",
    "ReviewSummary",
    "build_review",
    "summarize_reviews",
    # Claims
    "Claim",
    "ClaimRequestError",
    "ClaimStatus",
    "build_claim",
]
