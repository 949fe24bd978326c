"""Shared workflow layer between the CLI and any other front end.

Each function takes the repositories it needs, does one round-trip of reads
or writes, and hands the rest to the pure core.
"""

import logging
from dataclasses import dataclass
from datetime import date

from .adapters.file_store import (
    FileClaimRepository,
    FileJamRepository,
    FileReviewRepository,
    JsonTableStore,
)
from .adapters.supabase_rest import (
    BackendError,
    SupabaseClaimRepository,
    SupabaseClient,
    SupabaseJamRepository,
    SupabaseReviewRepository,
    TableMissingError,
)
from .config import Config, load_config
from .core.claims import Claim, ClaimRequestError, ClaimStatus, build_claim
from .core.filters import JamFilters
from .core.grid import MonthGrid, build_month_grid
from .core.jams import Jam, build_submission, build_updates
from .core.reviews import Review, ReviewSummary, build_review, summarize_reviews
from .ports import ClaimRepository, JamRepository, ReviewRepository

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """Raised when a jam or claim id does not exist."""

    pass


class NotAuthorizedError(Exception):
    """Raised when a user changes a jam they do not own."""

    pass


class ClaimError(Exception):
    """Raised when a claim cannot be completed."""

    pass


@dataclass
class Repositories:
    jams: JamRepository
    claims: ClaimRepository
    reviews: ReviewRepository


def get_repositories(config: Config | None = None) -> Repositories:
    """Resolve the configured backend into repositories."""
    config = config or load_config()

    if config.backend == "supabase":
        client = SupabaseClient.from_config(config)
        return Repositories(
            jams=SupabaseJamRepository(client),
            claims=SupabaseClaimRepository(client),
            reviews=SupabaseReviewRepository(client),
        )

    store = JsonTableStore(config.data_path)
    return Repositories(
        jams=FileJamRepository(store),
        claims=FileClaimRepository(store),
        reviews=FileReviewRepository(store),
    )


# ============== Browsing ==============


def list_jams(repos: Repositories, filters: JamFilters | None = None) -> list[Jam]:
    """Active jams matching the filters, ordered by name."""
    return repos.jams.fetch_active(filters)


def month_calendar(
    repos: Repositories,
    year: int,
    month: int,
    filters: JamFilters | None = None,
    today: date | None = None,
) -> MonthGrid:
    """Fetch the filtered jams once and lay them out over a month."""
    jams = repos.jams.fetch_active(filters)
    logger.debug(f"Building {year}-{month:02d} grid from {len(jams)} jams")
    return build_month_grid(year, month, jams, today=today or date.today())


def get_jam(repos: Repositories, jam_id: int) -> Jam:
    jam = repos.jams.fetch(jam_id)
    if jam is None:
        raise NotFoundError(f"No jam with id {jam_id}")
    return jam


@dataclass
class ReviewsView:
    """Reviews for display, or a friendly message when they can't be loaded."""

    reviews: list[Review]
    summary: ReviewSummary
    error: str | None = None


def load_reviews(repos: Repositories, jam_id: int) -> ReviewsView:
    """Load reviews without failing the page when the reviews table is unavailable."""
    try:
        reviews = repos.reviews.fetch_for_jam(jam_id)
        error = None
    except TableMissingError:
        reviews, error = [], "Reviews are not set up yet."
    except BackendError as e:
        logger.warning(f"Could not load reviews for jam {jam_id}: {e}")
        reviews, error = [], "Could not load reviews right now."
    return ReviewsView(reviews=reviews, summary=summarize_reviews(reviews), error=error)


# ============== Changes ==============


def submit_jam(repos: Repositories, form: dict) -> int:
    """Publish a new jam. Returns its id."""
    payload = build_submission(form)
    jam_id = repos.jams.insert(payload)
    logger.info(f"Submitted jam {jam_id}: {payload['event_name']}")
    return jam_id


def update_jam(repos: Repositories, jam_id: int, user_id: str, changes: dict) -> Jam:
    """Apply an owner's edits to a jam and return the updated record."""
    jam = get_jam(repos, jam_id)
    if not jam.is_owned_by(user_id):
        raise NotAuthorizedError(f"User {user_id} does not own jam {jam_id}")

    updates = build_updates(changes)
    repos.jams.update(jam_id, updates)
    logger.info(f"Updated jam {jam_id}: {', '.join(sorted(updates))}")
    return get_jam(repos, jam_id)


def claim_jam(
    repos: Repositories,
    jam_id: int,
    user_id: str,
    phone_number: str,
    notes: str | None = None,
) -> None:
    """File an ownership claim for an admin to review."""
    get_jam(repos, jam_id)
    try:
        payload = build_claim(jam_id, user_id, phone_number, notes)
    except ClaimRequestError as e:
        raise ClaimError(str(e)) from e
    repos.claims.insert(payload)
    logger.info(f"User {user_id} claimed jam {jam_id}")


def _find_claim(repos: Repositories, claim_id: int) -> Claim:
    for claim in repos.claims.fetch_all():
        if claim.id == claim_id:
            return claim
    raise NotFoundError(f"No claim with id {claim_id}")


def approve_claim(repos: Repositories, claim_id: int) -> Claim:
    """
    Approve a claim and hand the jam to the claimant.

    The claim is marked approved first; if the jam's owner can't be updated
    the claim goes back to pending and ClaimError is raised.
    """
    claim = _find_claim(repos, claim_id)
    repos.claims.set_status(claim_id, ClaimStatus.APPROVED)

    try:
        repos.jams.update(claim.jam_id, {"owner_id": claim.user_id})
    except BackendError as e:
        logger.error(f"Owner update failed for claim {claim_id}, reverting: {e}")
        repos.claims.set_status(claim_id, ClaimStatus.PENDING)
        raise ClaimError(f"Claim approved but failed to update jam owner: {e}") from e

    logger.info(f"Approved claim {claim_id}: jam {claim.jam_id} -> {claim.user_id}")
    claim.status = ClaimStatus.APPROVED
    return claim


def reject_claim(repos: Repositories, claim_id: int) -> Claim:
    claim = _find_claim(repos, claim_id)
    repos.claims.set_status(claim_id, ClaimStatus.REJECTED)
    logger.info(f"Rejected claim {claim_id}")
    claim.status = ClaimStatus.REJECTED
    return claim


def add_review(repos: Repositories, jam_id: int, **fields) -> Review:
    """Store a review for an existing jam. Raises ReviewError on bad ratings."""
    get_jam(repos, jam_id)
    return repos.reviews.insert(build_review(jam_id, **fields))


@dataclass
class MyJams:
    owned: list[Jam]
    claims: list[Claim]


def my_jams(repos: Repositories, user_id: str) -> MyJams:
    """Jams a user owns, plus the claims they've filed."""
    return MyJams(
        owned=repos.jams.fetch_owned(user_id),
        claims=repos.claims.fetch_for_user(user_id),
    )
