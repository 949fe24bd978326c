"""Claim repository interface."""

from typing import Protocol

from jamguide.core.claims import Claim, ClaimStatus


class ClaimRepository(Protocol):
    """Interface for ownership claims."""

    def insert(self, payload: dict) -> None:
        """Record a new claim."""
        ...

    def fetch_all(self) -> list[Claim]:
        """All claims, newest first, with the claimed jam's name."""
        ...

    def fetch_for_user(self, user_id: str) -> list[Claim]:
        """Claims made by a user."""
        ...

    def set_status(self, claim_id: int, status: ClaimStatus) -> None:
        """Change a claim's status."""
        ...
