"""
Officer Registry: Officer Stores

A store owns the registry state (officers by id, the principal index and the
id counter) and is the atomic boundary for writes. Authorization lives one
layer up, in OfficerRegistry; a store never checks who is calling.

Implementations must be:
- Atomic (an officer insert, its principal index entry and the counter bump
  happen together or not at all)
- Linearizable (two concurrent creates for one principal never both succeed,
  and no id is ever handed out twice)
"""

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from .officer import Officer

logger = logging.getLogger(__name__)


class OfficerStore(ABC):
    """Abstract interface for officer persistence."""

    @abstractmethod
    def create(
        self,
        principal: str,
        name: str,
        certification: str,
        expiry_date: int
    ) -> Optional[Officer]:
        """
        Allocate the next id and store a new, unverified officer.

        Returns:
            The stored Officer, or None if the principal already has one
        """
        pass

    @abstractmethod
    def mark_verified(self, officer_id: int, verified_at: int) -> Optional[Officer]:
        """
        Flag an officer as verified at verified_at.

        Returns:
            The updated Officer, or None if officer_id is unknown
        """
        pass

    @abstractmethod
    def get(self, officer_id: int) -> Optional[Officer]:
        pass

    @abstractmethod
    def id_for_principal(self, principal: str) -> Optional[int]:
        pass

    @abstractmethod
    def next_id(self) -> int:
        """The id the next successful create will receive."""
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def list_all(self) -> List[Officer]:
        """All officers, ordered by id."""
        pass

    def get_by_principal(self, principal: str) -> Optional[Officer]:
        officer_id = self.id_for_principal(principal)
        if officer_id is None:
            return None
        return self.get(officer_id)

    def close(self) -> None:
        """Release any held resources."""


class InMemoryOfficerStore(OfficerStore):
    """
    In-memory officer store.

    State is lost when the process exits. Officers are immutable, so the
    records handed to readers can never alter the stored state.
    """

    def __init__(self):
        self._officers: Dict[int, Officer] = {}
        self._principal_to_id: Dict[str, int] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, principal, name, certification, expiry_date):
        with self._lock:
            if principal in self._principal_to_id:
                return None

            officer = Officer(
                id=self._next_id,
                principal=principal,
                name=name,
                certification=certification,
                expiry_date=expiry_date,
            )
            self._officers[officer.id] = officer
            self._principal_to_id[principal] = officer.id
            self._next_id += 1
            return officer

    def mark_verified(self, officer_id, verified_at):
        with self._lock:
            officer = self._officers.get(officer_id)
            if officer is None:
                return None
            updated = officer.with_verification(verified_at)
            self._officers[officer_id] = updated
            return updated

    def get(self, officer_id):
        with self._lock:
            return self._officers.get(officer_id)

    def id_for_principal(self, principal):
        with self._lock:
            return self._principal_to_id.get(principal)

    def next_id(self):
        with self._lock:
            return self._next_id

    def count(self):
        with self._lock:
            return len(self._officers)

    def list_all(self):
        with self._lock:
            return [self._officers[k] for k in sorted(self._officers)]


class SQLiteOfficerStore(OfficerStore):
    """
    SQLite-backed officer store.

    Every write runs inside a BEGIN IMMEDIATE transaction, so the write lock
    is taken before the counter is read; a UNIQUE constraint on principal
    backs up the one-officer-per-principal rule. A single connection is
    shared between threads and guarded by a lock.
    """

    def __init__(self, path: Union[str, Path] = ":memory:"):
        self._path = str(path)
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.RLock()
        self._conn = sqlite3.connect(
            self._path, check_same_thread=False, isolation_level=None
        )
        self._conn.row_factory = sqlite3.Row
        if self._path != ":memory:":
            self._conn.execute("PRAGMA journal_mode=WAL;")
        self._init_schema()
        logger.debug("Opened officer store at %s", self._path)

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Commit on success, roll back on any failure."""
        with self._lock:
            self._conn.execute("BEGIN IMMEDIATE")
            try:
                yield self._conn
                self._conn.execute("COMMIT")
            except Exception:
                self._conn.execute("ROLLBACK")
                raise

    def _init_schema(self) -> None:
        with self._transaction() as conn:
            conn.execute("""
            CREATE TABLE IF NOT EXISTS officers (
                id INTEGER PRIMARY KEY,
                principal TEXT NOT NULL UNIQUE,
                name TEXT NOT NULL,
                certification TEXT NOT NULL,
                verified INTEGER NOT NULL DEFAULT 0,
                verification_date INTEGER NOT NULL DEFAULT 0,
                expiry_date INTEGER NOT NULL
            );""")
            conn.execute("""
            CREATE TABLE IF NOT EXISTS registry_meta (
                key TEXT PRIMARY KEY,
                value INTEGER NOT NULL
            );""")
            conn.execute(
                "INSERT OR IGNORE INTO registry_meta(key, value) VALUES('next_id', 1)"
            )

    @staticmethod
    def _row_to_officer(row: sqlite3.Row) -> Officer:
        return Officer(
            id=row["id"],
            principal=row["principal"],
            name=row["name"],
            certification=row["certification"],
            expiry_date=row["expiry_date"],
            verified=bool(row["verified"]),
            verification_date=row["verification_date"],
        )

    def create(self, principal, name, certification, expiry_date):
        with self._transaction() as conn:
            cur = conn.execute("SELECT 1 FROM officers WHERE principal=?", (principal,))
            if cur.fetchone() is not None:
                return None

            officer_id = conn.execute(
                "SELECT value FROM registry_meta WHERE key='next_id'"
            ).fetchone()["value"]
            officer = Officer(
                id=officer_id,
                principal=principal,
                name=name,
                certification=certification,
                expiry_date=expiry_date,
            )
            conn.execute(
                "INSERT INTO officers(id, principal, name, certification, verified, "
                "verification_date, expiry_date) VALUES(?,?,?,?,0,0,?)",
                (officer.id, principal, name, certification, expiry_date)
            )
            conn.execute(
                "UPDATE registry_meta SET value=? WHERE key='next_id'",
                (officer_id + 1,)
            )
            return officer

    def mark_verified(self, officer_id, verified_at):
        with self._transaction() as conn:
            cur = conn.execute(
                "UPDATE officers SET verified=1, verification_date=? WHERE id=?",
                (verified_at, officer_id)
            )
            if cur.rowcount != 1:
                return None
            row = conn.execute("SELECT * FROM officers WHERE id=?", (officer_id,)).fetchone()
            return self._row_to_officer(row)

    def get(self, officer_id):
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM officers WHERE id=?", (officer_id,)
            ).fetchone()
        return self._row_to_officer(row) if row else None

    def id_for_principal(self, principal):
        with self._lock:
            row = self._conn.execute(
                "SELECT id FROM officers WHERE principal=?", (principal,)
            ).fetchone()
        return row["id"] if row else None

    def next_id(self):
        with self._lock:
            return self._conn.execute(
                "SELECT value FROM registry_meta WHERE key='next_id'"
            ).fetchone()["value"]

    def count(self):
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) AS cnt FROM officers").fetchone()["cnt"]

    def list_all(self):
        with self._lock:
            rows = self._conn.execute("SELECT * FROM officers ORDER BY id ASC").fetchall()
        return [self._row_to_officer(r) for r in rows]

    def close(self) -> None:
        with self._lock:
            self._conn.close()
