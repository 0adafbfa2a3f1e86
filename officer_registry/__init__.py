"""
Officer Registry

Version: 1.0.0

An authoritative registry of compliance officers. A single owner registers
and verifies officers; anyone may read who is registered, who is verified
and what metadata each officer carries.

Usage:
    from officer_registry import OfficerRegistry, ErrorKind

    registry = OfficerRegistry(owner="SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7")

    result = registry.register("John Doe", "CCP", 1000000, caller=registry.owner)
    if result.ok():
        registry.verify(result.value, caller=registry.owner)

    registry.is_verified(registry.owner)        # True
    registry.get_officer_by_id(999)             # None

    denied = registry.verify(1, caller="SP1234567890ABCDEF")
    denied.error is ErrorKind.NOT_OWNER         # True
"""

__version__ = "1.0.0"

from .officer import Officer, OfficerStatus, OFFICER_FIELDS
from .errors import ErrorKind, RegistryResult, RegistryError
from .hashing import canonicalize, sha256_hash, officer_hash, chain_entry_hash
from .store import OfficerStore, InMemoryOfficerStore, SQLiteOfficerStore
from .journal import (
    RegistryJournal,
    JournalEntry,
    EventType,
    Outcome,
    verify_chain,
)
from .registry import OfficerRegistry, now_millis
from .attestation import AttestationService, AttestationCheck, verify_attestation
from .logging_config import (
    RegistryAuditLogger,
    StructuredFormatter,
    configure_logging,
    set_correlation_id,
    get_correlation_id,
    audit_log,
)
from .config import (
    RegistryConfig,
    create_registry,
    create_store,
    create_attestation_service,
    load_signing_key,
)


__all__ = [
    "__version__",

    # Records
    "Officer",
    "OfficerStatus",
    "OFFICER_FIELDS",

    # Results
    "ErrorKind",
    "RegistryResult",
    "RegistryError",

    # Hashing
    "canonicalize",
    "sha256_hash",
    "officer_hash",
    "chain_entry_hash",

    # Stores
    "OfficerStore",
    "InMemoryOfficerStore",
    "SQLiteOfficerStore",

    # Journal
    "RegistryJournal",
    "JournalEntry",
    "EventType",
    "Outcome",
    "verify_chain",

    # Registry
    "OfficerRegistry",
    "now_millis",

    # Attestations
    "AttestationService",
    "AttestationCheck",
    "verify_attestation",

    # Logging
    "RegistryAuditLogger",
    "StructuredFormatter",
    "configure_logging",
    "set_correlation_id",
    "get_correlation_id",
    "audit_log",

    # Configuration
    "RegistryConfig",
    "create_registry",
    "create_store",
    "create_attestation_service",
    "load_signing_key",
]
