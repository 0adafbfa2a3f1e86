"""
Officer Registry: Error Taxonomy and Results

Every expected failure of a registry write is returned to the caller as a
RegistryResult carrying an ErrorKind. Nothing here is fatal: callers branch
on the result before touching its value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Recoverable failures of registry writes."""
    NOT_OWNER = "NotOwner"                    # mutating call by a non-owner
    ALREADY_REGISTERED = "AlreadyRegistered"  # principal already has an officer
    INVALID_OFFICER = "InvalidOfficer"        # no officer with that id


@dataclass(frozen=True)
class RegistryResult(Generic[T]):
    """Outcome of a registry write: either a value or an ErrorKind, never both."""
    value: Optional[T] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def success(cls, value: T) -> 'RegistryResult[T]':
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind) -> 'RegistryResult[T]':
        return cls(error=error)

    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising RegistryError if this is a failure."""
        if self.error is not None:
            raise RegistryError(self.error)
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"error": self.error.value}
        return {"ok": self.value}


class RegistryError(Exception):
    """Raised by RegistryResult.unwrap() for callers that prefer exceptions."""

    def __init__(self, kind: ErrorKind):
        self.kind = kind
        super().__init__(f"Registry operation rejected: {kind.value}")
