"""Ports - interfaces/protocols for external dependencies."""

from .jam_repo import JamRepository
from .claim_repo import ClaimRepository
from .review_repo import ReviewRepository

__all__ = [
    "JamRepository",
    "ClaimRepository",
    "ReviewRepository",
]
