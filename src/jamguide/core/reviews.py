"""Pure review logic - community ratings for a jam."""

from dataclasses import dataclass
from datetime import datetime

RATING_MIN = 1
RATING_MAX = 5

HAPPENED_CHOICES = {"yes": True, "no": False, "unknown": None}


class ReviewError(ValueError):
    """Raised when review input is out of range."""

    pass


@dataclass
class Review:
    """A community review of a jam."""

    id: int
    jam_id: int
    created_at: str | None = None
    display_name: str | None = None
    comments: str | None = None
    overall_rating: int | None = None
    networking_rating: int | None = None
    info_accuracy_rating: int | None = None
    happened: bool | None = None

    @classmethod
    def from_row(cls, data: dict) -> "Review":
        return cls(
            id=data["id"],
            jam_id=data["jam_id"],
            created_at=data.get("created_at"),
            display_name=data.get("display_name"),
            comments=data.get("comments"),
            overall_rating=data.get("overall_rating"),
            networking_rating=data.get("networking_rating"),
            info_accuracy_rating=data.get("info_accuracy_rating"),
            happened=data.get("happened"),
        )

    @property
    def happened_label(self) -> str:
        if self.happened is True:
            return "Happening recently"
        if self.happened is False:
            return "Reported not happening"
        return "Status unknown"

    def format_date(self) -> str:
        """Short date like "Jan 05, 2025"; empty if missing or unparseable."""
        if not self.created_at:
            return ""
        try:
            return datetime.fromisoformat(self.created_at).strftime("%b %d, %Y")
        except ValueError:
            return ""


@dataclass
class ReviewSummary:
    """Aggregate ratings across reviews."""

    count: int
    overall: float | None
    networking: float | None
    accuracy: float | None
    checkins: int
    negative_checkins: int


def average(values) -> float | None:
    """Mean of the numeric values, ignoring missing ones. None if there are none."""
    nums = [v for v in values if isinstance(v, (int, float)) and not isinstance(v, bool)]
    if not nums:
        return None
    return sum(nums) / len(nums)


def format_rating(value: float | None) -> str:
    return "--" if value is None else f"{value:.1f}"


def summarize_reviews(reviews: list[Review]) -> ReviewSummary:
    return ReviewSummary(
        count=len(reviews),
        overall=average(r.overall_rating for r in reviews),
        networking=average(r.networking_rating for r in reviews),
        accuracy=average(r.info_accuracy_rating for r in reviews),
        checkins=sum(1 for r in reviews if r.happened is True),
        negative_checkins=sum(1 for r in reviews if r.happened is False),
    )


def build_review(
    jam_id: int,
    overall: int = 4,
    networking: int = 4,
    accuracy: int = 4,
    happened: str = "yes",
    display_name: str | None = None,
    comments: str | None = None,
) -> dict:
    """
    Row for the jam_reviews table. Ratings default to 4, like the review form.

    Raises:
        ReviewError: rating outside 1-5 or unknown happened choice
    """
    for label, rating in (("overall", overall), ("networking", networking), ("accuracy", accuracy)):
        if not RATING_MIN <= rating <= RATING_MAX:
            raise ReviewError(f"{label} rating must be between {RATING_MIN} and {RATING_MAX}")

    if happened not in HAPPENED_CHOICES:
        raise ReviewError(f"happened must be one of: {', '.join(HAPPENED_CHOICES)}")

    return {
        "jam_id": jam_id,
        "overall_rating": overall,
        "networking_rating": networking,
        "info_accuracy_rating": accuracy,
        "happened": HAPPENED_CHOICES[happened],
        "comments": (comments or "").strip() or None,
        "display_name": (display_name or "").strip() or None,
    }
