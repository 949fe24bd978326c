"""File-based storage adapter - one JSON file per table."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from jamguide.core.claims import Claim, ClaimStatus
from jamguide.core.filters import JamFilters
from jamguide.core.jams import Jam
from jamguide.core.reviews import Review

from .supabase_rest import BackendError

logger = logging.getLogger(__name__)


class JsonTableStore:
    """
    Tables stored as <data_dir>/<table>.json, each a list of row objects.

    Ids are assigned by incrementing the largest existing id.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path_for_table(self, table: str) -> Path:
        return self.data_dir / f"{table}.json"

    def rows(self, table: str) -> list[dict]:
        """All rows of a table. A missing file is an empty table."""
        path = self._path_for_table(table)
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise BackendError(f"Corrupt table file {path}: {e}") from e
        if not isinstance(data, list):
            raise BackendError(f"Table file {path} must hold a list of rows")
        return data

    def write(self, table: str, rows: list[dict]) -> None:
        self._path_for_table(table).write_text(json.dumps(rows, indent=2))

    def insert(self, table: str, row: dict) -> dict:
        """Append a row, stamping id and created_at. Returns the stored row."""
        rows = self.rows(table)
        stored = dict(row)
        stored["id"] = max((r.get("id", 0) for r in rows), default=0) + 1
        stored.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        rows.append(stored)
        self.write(table, rows)
        logger.debug(f"Inserted {table} row {stored['id']}")
        return stored

    def update(self, table: str, row_id: int, values: dict) -> bool:
        """Update one row by id. Returns False if no row has that id."""
        rows = self.rows(table)
        for row in rows:
            if row.get("id") == row_id:
                row.update(values)
                self.write(table, rows)
                return True
        return False


def _newest_first(rows: list[dict]) -> list[dict]:
    return sorted(rows, key=lambda r: r.get("created_at") or "", reverse=True)


def _by_name(rows: list[dict]) -> list[dict]:
    # Nulls last, like the hosted backend's ascending order
    return sorted(rows, key=lambda r: (r.get("event_name") is None, r.get("event_name") or ""))


class FileJamRepository:
    """Implements JamRepository protocol on a JsonTableStore."""

    def __init__(self, store: JsonTableStore):
        self.store = store

    def fetch_active(self, filters: JamFilters | None = None) -> list[Jam]:
        filters = filters or JamFilters()
        rows = [r for r in self.store.rows("jams") if filters.matches(r)]
        return [Jam.from_row(r) for r in _by_name(rows)]

    def fetch(self, jam_id: int) -> Jam | None:
        for row in self.store.rows("jams"):
            if row.get("id") == jam_id:
                return Jam.from_row(row)
        return None

    def fetch_owned(self, owner_id: str) -> list[Jam]:
        rows = [r for r in self.store.rows("jams") if r.get("owner_id") == owner_id]
        return [Jam.from_row(r) for r in _by_name(rows)]

    def insert(self, payload: dict) -> int:
        return self.store.insert("jams", payload)["id"]

    def update(self, jam_id: int, updates: dict) -> None:
        if not self.store.update("jams", jam_id, updates):
            raise BackendError(f"No jam with id {jam_id}")


class FileClaimRepository:
    """Implements ClaimRepository protocol on a JsonTableStore."""

    def __init__(self, store: JsonTableStore):
        self.store = store

    def _with_jam_names(self, rows: list[dict]) -> list[Claim]:
        names = {j.get("id"): j.get("event_name") for j in self.store.rows("jams")}
        claims = []
        for row in _newest_first(rows):
            joined = dict(row, jams={"event_name": names.get(row.get("jam_id"))})
            claims.append(Claim.from_row(joined))
        return claims

    def insert(self, payload: dict) -> None:
        self.store.insert("jam_claims", dict(payload, status=payload.get("status", "pending")))

    def fetch_all(self) -> list[Claim]:
        return self._with_jam_names(self.store.rows("jam_claims"))

    def fetch_for_user(self, user_id: str) -> list[Claim]:
        rows = [r for r in self.store.rows("jam_claims") if r.get("user_id") == user_id]
        return self._with_jam_names(rows)

    def set_status(self, claim_id: int, status: ClaimStatus) -> None:
        if not self.store.update("jam_claims", claim_id, {"status": status.value}):
            raise BackendError(f"No claim with id {claim_id}")


class FileReviewRepository:
    """Implements ReviewRepository protocol on a JsonTableStore."""

    def __init__(self, store: JsonTableStore):
        self.store = store

    def fetch_for_jam(self, jam_id: int) -> list[Review]:
        rows = [r for r in self.store.rows("jam_reviews") if r.get("jam_id") == jam_id]
        return [Review.from_row(r) for r in _newest_first(rows)]

    def insert(self, payload: dict) -> Review:
        return Review.from_row(self.store.insert("jam_reviews", payload))
