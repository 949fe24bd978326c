"""Supabase (PostgREST) adapter - HTTP client for jams, claims and reviews."""

import logging

import requests

from jamguide.config import Config, load_config
from jamguide.core.claims import Claim, ClaimStatus
from jamguide.core.filters import JamFilters
from jamguide.core.jams import Jam
from jamguide.core.reviews import Review

logger = logging.getLogger(__name__)

REST_PATH = "/rest/v1"

REVIEW_COLUMNS = (
    "id, jam_id, created_at, display_name, comments, overall_rating, "
    "networking_rating, info_accuracy_rating, happened"
)


class BackendError(Exception):
    """Raised when the backend rejects a request or cannot be reached."""

    pass


class TableMissingError(BackendError):
    """Raised when the backend does not know the requested table."""

    pass


def _encode_value(value) -> str:
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    return str(value)


def _encode_in(values) -> str:
    # Quote every item so commas and spaces inside values survive
    quoted = ",".join('"' + str(v).replace('"', '\\"') + '"' for v in values)
    return f"in.({quoted})"


class SupabaseClient:
    """
    Minimal PostgREST client.

    Handles auth headers, query encoding and error translation. No business
    logic - just I/O.
    """

    def __init__(
        self,
        url: str,
        anon_key: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        if not url or not anon_key:
            raise BackendError("Missing Supabase settings. Set SUPABASE_URL and SUPABASE_ANON_KEY.")
        self.base_url = url.rstrip("/") + REST_PATH
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "apikey": anon_key,
                "Authorization": f"Bearer {anon_key}",
            }
        )

    @classmethod
    def from_config(cls, config: Config | None = None) -> "SupabaseClient":
        config = config or load_config()
        return cls(config.supabase_url, config.supabase_anon_key, timeout=config.request_timeout)

    def _request(self, method: str, table: str, **kwargs) -> requests.Response:
        """Send a request and translate failures into BackendError."""
        url = f"{self.base_url}/{table}"
        logger.debug(f"{method} {url} params={kwargs.get('params')}")
        try:
            resp = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise BackendError(f"Could not reach backend: {e}") from e

        if not resp.ok:
            try:
                message = resp.json().get("message") or resp.text
            except ValueError:
                message = resp.text
            logger.warning(f"{method} {table} failed ({resp.status_code}): {message}")
            if "schema cache" in message:
                raise TableMissingError(f"Table '{table}' is not set up: {message}")
            raise BackendError(message)
        return resp

    def select(
        self,
        table: str,
        columns: str = "*",
        eq: dict | None = None,
        in_: dict | None = None,
        order: str | None = None,
        ascending: bool = True,
    ) -> list[dict]:
        """Read rows matching equality and membership filters."""
        params: list[tuple[str, str]] = [("select", columns)]
        for column, value in (eq or {}).items():
            params.append((column, f"eq.{_encode_value(value)}"))
        for column, values in (in_ or {}).items():
            params.append((column, _encode_in(values)))
        if order:
            params.append(("order", f"{order}.{'asc' if ascending else 'desc'}"))

        return self._request("GET", table, params=params).json()

    def insert(self, table: str, rows: list[dict]) -> list[dict]:
        """Insert rows and return them as stored."""
        resp = self._request(
            "POST",
            table,
            json=rows,
            headers={"Prefer": "return=representation"},
        )
        return resp.json()

    def update(self, table: str, values: dict, eq: dict) -> None:
        """Update rows matching the equality filters."""
        params = [(column, f"eq.{_encode_value(value)}") for column, value in eq.items()]
        self._request("PATCH", table, params=params, json=values)


class SupabaseJamRepository:
    """Implements JamRepository protocol against the jams table."""

    def __init__(self, client: SupabaseClient):
        self.client = client

    def fetch_active(self, filters: JamFilters | None = None) -> list[Jam]:
        filters = filters or JamFilters()
        rows = self.client.select(
            "jams",
            eq=filters.equality(),
            in_=filters.membership(),
            order="event_name",
        )
        return [Jam.from_row(r) for r in rows]

    def fetch(self, jam_id: int) -> Jam | None:
        rows = self.client.select("jams", eq={"id": jam_id})
        return Jam.from_row(rows[0]) if rows else None

    def fetch_owned(self, owner_id: str) -> list[Jam]:
        rows = self.client.select("jams", eq={"owner_id": owner_id}, order="event_name")
        return [Jam.from_row(r) for r in rows]

    def insert(self, payload: dict) -> int:
        rows = self.client.insert("jams", [payload])
        if not rows:
            raise BackendError("Insert returned no rows")
        return rows[0]["id"]

    def update(self, jam_id: int, updates: dict) -> None:
        self.client.update("jams", updates, eq={"id": jam_id})


class SupabaseClaimRepository:
    """Implements ClaimRepository protocol against the jam_claims table."""

    def __init__(self, client: SupabaseClient):
        self.client = client

    def insert(self, payload: dict) -> None:
        self.client.insert("jam_claims", [payload])

    def fetch_all(self) -> list[Claim]:
        rows = self.client.select(
            "jam_claims",
            columns="*, jams(event_name)",
            order="created_at",
            ascending=False,
        )
        return [Claim.from_row(r) for r in rows]

    def fetch_for_user(self, user_id: str) -> list[Claim]:
        rows = self.client.select(
            "jam_claims",
            columns="*, jams(event_name)",
            eq={"user_id": user_id},
            order="created_at",
            ascending=False,
        )
        return [Claim.from_row(r) for r in rows]

    def set_status(self, claim_id: int, status: ClaimStatus) -> None:
        self.client.update("jam_claims", {"status": status.value}, eq={"id": claim_id})


class SupabaseReviewRepository:
    """Implements ReviewRepository protocol against the jam_reviews table."""

    def __init__(self, client: SupabaseClient):
        self.client = client

    def fetch_for_jam(self, jam_id: int) -> list[Review]:
        rows = self.client.select(
            "jam_reviews",
            columns=REVIEW_COLUMNS,
            eq={"jam_id": jam_id},
            order="created_at",
            ascending=False,
        )
        return [Review.from_row(r) for r in rows]

    def insert(self, payload: dict) -> Review:
        rows = self.client.insert("jam_reviews", [payload])
        if not rows:
            raise BackendError("Insert returned no rows")
        return Review.from_row(rows[0])
