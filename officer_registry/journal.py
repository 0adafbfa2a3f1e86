"""
Officer Registry: Event Journal

Every write attempt against the registry (accepted or rejected) is recorded
as a JournalEntry. Entries form a hash chain:

    entry_hash[n] = SHA-256(entry_hash[n-1] || payload_hash[n])

so editing, dropping or reordering a recorded entry breaks every later
link. verify_chain() recomputes the chain from the entries alone.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .hashing import canonicalize, chain_entry_hash, sha256_hash


class EventType(str, Enum):
    REGISTER = "REGISTER"
    VERIFY = "VERIFY"


class Outcome(str, Enum):
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class JournalEntry:
    """Immutable record of one write attempt."""
    seq: int
    event_type: EventType
    caller: str
    officer_id: Optional[int]
    outcome: Outcome
    reason: Optional[str]
    timestamp: int
    payload_hash: str
    prev_entry_hash: Optional[str]
    entry_hash: str

    def payload(self) -> Dict[str, Any]:
        return entry_payload(
            self.seq, self.event_type, self.caller, self.officer_id,
            self.outcome, self.reason, self.timestamp
        )

    def to_dict(self) -> Dict[str, Any]:
        d = self.payload()
        d.update({
            "payload_hash": self.payload_hash,
            "prev_entry_hash": self.prev_entry_hash,
            "entry_hash": self.entry_hash,
        })
        return d


def entry_payload(
    seq: int,
    event_type: EventType,
    caller: str,
    officer_id: Optional[int],
    outcome: Outcome,
    reason: Optional[str],
    timestamp: int
) -> Dict[str, Any]:
    """The hashed portion of a journal entry."""
    return {
        "seq": seq,
        "event_type": event_type.value,
        "caller": caller,
        "officer_id": officer_id,
        "outcome": outcome.value,
        "reason": reason,
        "timestamp": timestamp,
    }


class RegistryJournal:
    """
    Thread-safe, in-memory journal of registry write attempts.

    Holds at most max_entries; older entries are trimmed from the front, and
    the chain of what remains still verifies from its first retained link.
    """

    def __init__(self, max_entries: int = 10000):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._entries: List[JournalEntry] = []
        self._lock = threading.Lock()
        self._max_entries = max_entries
        self._seq = 0
        self._head: Optional[str] = None

    def record(
        self,
        event_type: EventType,
        caller: str,
        officer_id: Optional[int],
        outcome: Outcome,
        timestamp: int,
        reason: Optional[str] = None
    ) -> JournalEntry:
        with self._lock:
            self._seq += 1
            payload = entry_payload(
                self._seq, event_type, caller, officer_id, outcome, reason, timestamp
            )
            payload_hash = sha256_hash(canonicalize(payload))
            entry = JournalEntry(
                seq=self._seq,
                event_type=event_type,
                caller=caller,
                officer_id=officer_id,
                outcome=outcome,
                reason=reason,
                timestamp=timestamp,
                payload_hash=payload_hash,
                prev_entry_hash=self._head,
                entry_hash=chain_entry_hash(self._head, payload_hash),
            )
            self._entries.append(entry)
            self._head = entry.entry_hash

            if len(self._entries) > self._max_entries:
                self._entries = self._entries[-self._max_entries:]
            return entry

    @property
    def head(self) -> Optional[str]:
        """Hash of the latest entry, or None for an empty journal."""
        with self._lock:
            return self._head

    def entries(self) -> List[JournalEntry]:
        with self._lock:
            return self._entries[:]

    def query(
        self,
        event_type: Optional[EventType] = None,
        caller: Optional[str] = None,
        outcome: Optional[Outcome] = None,
        officer_id: Optional[int] = None
    ) -> List[JournalEntry]:
        records = self.entries()

        if event_type:
            records = [r for r in records if r.event_type == event_type]
        if caller:
            records = [r for r in records if r.caller == caller]
        if outcome:
            records = [r for r in records if r.outcome == outcome]
        if officer_id is not None:
            records = [r for r in records if r.officer_id == officer_id]

        return records

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def verify_chain(entries: Iterable[Any]) -> Optional[int]:
    """
    Recompute the hash chain over entries.

    Accepts JournalEntry objects or their to_dict() form. The first entry is
    trusted as the anchor for its prev_entry_hash, so a trimmed journal still
    verifies.

    Returns:
        None if the chain is intact, otherwise the seq of the first bad entry
    """
    prev: Optional[str] = None
    first = True

    for entry in entries:
        d = entry.to_dict() if isinstance(entry, JournalEntry) else dict(entry)

        payload = {k: d.get(k) for k in (
            "seq", "event_type", "caller", "officer_id", "outcome", "reason", "timestamp"
        )}
        if sha256_hash(canonicalize(payload)) != d.get("payload_hash"):
            return d.get("seq")

        if first:
            prev = d.get("prev_entry_hash")
            first = False
        elif d.get("prev_entry_hash") != prev:
            return d.get("seq")

        if chain_entry_hash(prev, d["payload_hash"]) != d.get("entry_hash"):
            return d.get("seq")
        prev = d["entry_hash"]

    return None
