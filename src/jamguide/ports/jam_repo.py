"""Jam repository interface."""

from typing import Protocol

from jamguide.core.filters import JamFilters
from jamguide.core.jams import Jam


class JamRepository(Protocol):
    """Interface for reading and writing jams in any backend."""

    def fetch_active(self, filters: JamFilters | None = None) -> list[Jam]:
        """Fetch active jams matching the filters, ordered by name."""
        ...

    def fetch(self, jam_id: int) -> Jam | None:
        """Fetch one jam by id. Returns None if not found."""
        ...

    def fetch_owned(self, owner_id: str) -> list[Jam]:
        """Fetch jams owned by a user."""
        ...

    def insert(self, payload: dict) -> int:
        """Insert a jam row. Returns the new id."""
        ...

    def update(self, jam_id: int, updates: dict) -> None:
        """Update columns of a jam."""
        ...
