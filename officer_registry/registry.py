"""
Officer Registry

The authority-checked state machine over a set of compliance officers.

Writes (register, verify) are restricted to a single owner identity fixed at
construction and return RegistryResult values; they never raise for
expected outcomes such as an unknown id or an unauthorized caller. Reads
(is_verified, get_officer_by_id, get_officer_by_principal) are public and
return immutable Officer values or None.

Each officer moves through exactly two states:

    UNVERIFIED --verify (owner)--> VERIFIED

There is no way back and no deletion.
"""

import logging
import time
from typing import Callable, List, Optional

from .errors import ErrorKind, RegistryResult
from .journal import EventType, Outcome, RegistryJournal
from .logging_config import RegistryAuditLogger, audit_log
from .officer import Officer
from .store import InMemoryOfficerStore, OfficerStore

logger = logging.getLogger(__name__)

# Stored integers are signed 64-bit, the widest an SQLite INTEGER holds
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


def is_officer_id(value) -> bool:
    """True for an int (not bool) in the storable id range."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 1 <= value <= INT64_MAX
    )


def now_millis() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class OfficerRegistry:
    """
    Registry of compliance officers under a single owner.

    Args:
        owner: The administrator identity allowed to register and verify
        store: State backend (default: a fresh InMemoryOfficerStore)
        clock: Returns the verification timestamp; must be positive
        journal: Optional RegistryJournal receiving every write attempt
        audit: Audit logger (default: the module-wide instance)
    """

    def __init__(
        self,
        owner: str,
        store: Optional[OfficerStore] = None,
        clock: Optional[Callable[[], int]] = None,
        journal: Optional[RegistryJournal] = None,
        audit: Optional[RegistryAuditLogger] = None
    ):
        if not isinstance(owner, str) or not owner:
            raise ValueError("owner must be a non-empty identity string")

        self._owner = owner
        self._store = store if store is not None else InMemoryOfficerStore()
        self._clock = clock or now_millis
        self._journal = journal
        self._audit = audit or audit_log

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def store(self) -> OfficerStore:
        return self._store

    @property
    def journal(self) -> Optional[RegistryJournal]:
        return self._journal

    @property
    def next_id(self) -> int:
        return self._store.next_id()

    def __len__(self) -> int:
        return self._store.count()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        certification: str,
        expiry_date: int,
        caller: str
    ) -> RegistryResult[int]:
        """
        Register caller as a new, unverified officer.

        Returns:
            ok(officer_id), or NotOwner / AlreadyRegistered
        """
        if not isinstance(name, str) or not isinstance(certification, str):
            raise TypeError("name and certification must be strings")
        if isinstance(expiry_date, bool) or not isinstance(expiry_date, int):
            raise TypeError("expiry_date must be an integer")
        if not INT64_MIN <= expiry_date <= INT64_MAX:
            raise ValueError("expiry_date must fit in a signed 64-bit integer")

        denied = self._authorize(EventType.REGISTER, caller)
        if denied is not None:
            return denied

        officer = self._store.create(caller, name, certification, expiry_date)
        if officer is None:
            self._reject(EventType.REGISTER, caller, None, ErrorKind.ALREADY_REGISTERED)
            return RegistryResult.failure(ErrorKind.ALREADY_REGISTERED)

        self._record(EventType.REGISTER, caller, officer.id, Outcome.ACCEPTED)
        self._audit.officer_registered(officer.id, officer.principal)
        return RegistryResult.success(officer.id)

    def verify(self, officer_id: int, caller: str) -> RegistryResult[bool]:
        """
        Mark an officer verified and stamp the verification time.

        Re-verifying an already verified officer is allowed and re-stamps
        the date.

        Returns:
            ok(True), or NotOwner / InvalidOfficer
        """
        denied = self._authorize(EventType.VERIFY, caller, officer_id)
        if denied is not None:
            return denied

        if not is_officer_id(officer_id):
            self._reject(EventType.VERIFY, caller, None, ErrorKind.INVALID_OFFICER)
            return RegistryResult.failure(ErrorKind.INVALID_OFFICER)

        previous = self._store.get(officer_id)
        verified_at = self._clock()
        officer = None
        if previous is not None:
            officer = self._store.mark_verified(officer_id, verified_at)
        if officer is None:
            self._reject(EventType.VERIFY, caller, officer_id, ErrorKind.INVALID_OFFICER)
            return RegistryResult.failure(ErrorKind.INVALID_OFFICER)

        self._record(EventType.VERIFY, caller, officer_id, Outcome.ACCEPTED)
        self._audit.officer_verified(officer_id, verified_at, reverified=previous.verified)
        return RegistryResult.success(True)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def is_verified(self, principal: str) -> bool:
        """True only for a registered and verified principal."""
        officer = self._store.get_by_principal(principal)
        return officer.verified if officer else False

    def get_officer_by_id(self, officer_id: int) -> Optional[Officer]:
        if not is_officer_id(officer_id):
            return None
        return self._store.get(officer_id)

    def get_officer_by_principal(self, principal: str) -> Optional[Officer]:
        return self._store.get_by_principal(principal)

    def list_officers(self) -> List[Officer]:
        return self._store.list_all()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _authorize(
        self,
        event_type: EventType,
        caller: str,
        officer_id: Optional[int] = None
    ) -> Optional[RegistryResult]:
        """Owner guard shared by every write. Returns the failure, or None if allowed."""
        if caller == self._owner:
            return None

        self._reject(event_type, caller, officer_id, ErrorKind.NOT_OWNER)
        self._audit.security_event(
            "NON_OWNER_WRITE",
            severity="medium",
            caller=caller,
            operation=event_type.value,
        )
        return RegistryResult.failure(ErrorKind.NOT_OWNER)

    def _reject(
        self,
        event_type: EventType,
        caller: str,
        officer_id: Optional[int],
        kind: ErrorKind
    ) -> None:
        logger.debug("%s by %s rejected: %s", event_type.value, caller, kind.value)
        self._record(event_type, caller, officer_id, Outcome.REJECTED, kind.value)

        if event_type == EventType.REGISTER:
            self._audit.registration_rejected(caller, kind.value)
        else:
            self._audit.verification_rejected(caller, officer_id, kind.value)

    def _record(
        self,
        event_type: EventType,
        caller: str,
        officer_id: Optional[int],
        outcome: Outcome,
        reason: Optional[str] = None
    ) -> None:
        if self._journal is None:
            return
        self._journal.record(
            event_type, caller, officer_id, outcome, self._clock(), reason
        )
