"""Pure claim logic - requests to take ownership of a listed jam."""

from dataclasses import dataclass
from enum import Enum


class ClaimRequestError(ValueError):
    """Raised when a claim request is missing required details."""

    pass


class ClaimStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class Claim:
    """An ownership claim on a jam, awaiting admin review."""

    id: int
    jam_id: int
    user_id: str
    status: ClaimStatus = ClaimStatus.PENDING
    phone_number: str | None = None
    notes: str | None = None
    created_at: str | None = None
    event_name: str | None = None

    @classmethod
    def from_row(cls, data: dict) -> "Claim":
        """Create a Claim from a stored row, optionally joined with its jam."""
        jam = data.get("jams") or {}
        try:
            status = ClaimStatus(data.get("status") or "pending")
        except ValueError:
            status = ClaimStatus.PENDING
        return cls(
            id=data["id"],
            jam_id=data["jam_id"],
            user_id=data["user_id"],
            status=status,
            phone_number=data.get("phone_number"),
            notes=data.get("notes"),
            created_at=data.get("created_at"),
            event_name=jam.get("event_name") if isinstance(jam, dict) else None,
        )

    @property
    def is_pending(self) -> bool:
        return self.status is ClaimStatus.PENDING


def build_claim(jam_id: int, user_id: str, phone_number: str, notes: str | None = None) -> dict:
    """
    Row for the jam_claims table.

    Raises:
        ClaimRequestError: missing user or phone number
    """
    if not user_id:
        raise ClaimRequestError("A user id is required to claim a jam")
    if not phone_number or not phone_number.strip():
        raise ClaimRequestError("A phone number is required so the claim can be verified")
    return {
        "jam_id": jam_id,
        "user_id": user_id,
        "phone_number": phone_number.strip(),
        "notes": notes or "",
    }


def pending_first(claims: list[Claim]) -> list[Claim]:
    """Pending claims first, otherwise keep the given (newest-first) order."""
    return sorted(claims, key=lambda c: not c.is_pending)
