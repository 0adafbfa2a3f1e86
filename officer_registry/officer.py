"""
Officer Registry: Officer Record

The value type describing one registered compliance officer.
Officers are immutable; the registry hands out copies, and a verification
produces a new record rather than mutating the stored one.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict


class OfficerStatus(str, Enum):
    """Reachable officer states. VERIFIED is terminal."""
    UNVERIFIED = "UNVERIFIED"
    VERIFIED = "VERIFIED"


# Serialized field names, in output order
OFFICER_FIELDS = (
    "id",
    "principal",
    "name",
    "certification",
    "verified",
    "verificationDate",
    "expiryDate",
)


@dataclass(frozen=True)
class Officer:
    """
    A registered compliance officer.

    Fields:
    - id: Sequential identifier, starting at 1
    - principal: Opaque identity of the registrant (unique per registry)
    - name: Display name, fixed at registration
    - certification: Credential label, fixed at registration
    - verified: True once the owner has verified the officer
    - verification_date: Verification time in epoch milliseconds, 0 if unverified
    - expiry_date: Opaque expiry value (block height or epoch), stored only
    """
    id: int
    principal: str
    name: str
    certification: str
    expiry_date: int
    verified: bool = False
    verification_date: int = 0

    def __post_init__(self):
        self._validate()

    def _validate(self):
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id < 1:
            raise ValueError(f"Invalid officer id {self.id!r}: must be a positive integer")

        if not isinstance(self.principal, str):
            raise TypeError("principal must be a string")

        if not isinstance(self.name, str) or not isinstance(self.certification, str):
            raise TypeError("name and certification must be strings")

        if isinstance(self.expiry_date, bool) or not isinstance(self.expiry_date, int):
            raise TypeError("expiry_date must be an integer")

        if self.verified and self.verification_date <= 0:
            raise ValueError("a verified officer must carry a positive verification_date")

    @property
    def status(self) -> OfficerStatus:
        return OfficerStatus.VERIFIED if self.verified else OfficerStatus.UNVERIFIED

    def with_verification(self, verified_at: int) -> 'Officer':
        """Return the verified copy of this officer, stamped at verified_at."""
        return replace(self, verified=True, verification_date=verified_at)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "principal": self.principal,
            "name": self.name,
            "certification": self.certification,
            "verified": self.verified,
            "verificationDate": self.verification_date,
            "expiryDate": self.expiry_date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Officer':
        """Create an Officer from its serialized form."""
        missing = [f for f in OFFICER_FIELDS if f not in data]
        if missing:
            raise ValueError(f"Missing required fields: {missing}")

        return cls(
            id=data["id"],
            principal=data["principal"],
            name=data["name"],
            certification=data["certification"],
            expiry_date=data["expiryDate"],
            verified=bool(data["verified"]),
            verification_date=data["verificationDate"],
        )
