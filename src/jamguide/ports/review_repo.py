"""Review repository interface."""

from typing import Protocol

from jamguide.core.reviews import Review


class ReviewRepository(Protocol):
    """Interface for jam reviews."""

    def fetch_for_jam(self, jam_id: int) -> list[Review]:
        """Reviews of a jam, newest first."""
        ...

    def insert(self, payload: dict) -> Review:
        """Store a review and return it as saved."""
        ...
