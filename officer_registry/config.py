"""
Configuration module for the Officer Registry.

Centralizes environment variable handling and wires a registry together
from it.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .attestation import AttestationService
from .hashing import b64d
from .journal import RegistryJournal
from .logging_config import configure_logging
from .registry import OfficerRegistry
from .store import InMemoryOfficerStore, OfficerStore, SQLiteOfficerStore

logger = logging.getLogger(__name__)

# ============================================================
# Environment Configuration
# ============================================================

OWNER_ENV = "OFFICER_REGISTRY_OWNER"
DB_PATH_ENV = "OFFICER_REGISTRY_DB_PATH"
LOG_LEVEL_ENV = "OFFICER_REGISTRY_LOG_LEVEL"
LOG_JSON_ENV = "OFFICER_REGISTRY_LOG_JSON"
SIGNING_KEY_PATH_ENV = "OFFICER_REGISTRY_SIGNING_KEY_PATH"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class RegistryConfig:
    """Settings for one registry host process."""
    owner: str
    db_path: str = ""
    log_level: str = "INFO"
    log_json: bool = True
    signing_key_path: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'RegistryConfig':
        """
        Build a config from environment variables.

        Raises:
            ValueError: If the owner is unset or the log level is unknown
        """
        env = os.environ if environ is None else environ

        owner = env.get(OWNER_ENV, "").strip()
        if not owner:
            raise ValueError(f"{OWNER_ENV} must be set to the owner identity")

        log_level = env.get(LOG_LEVEL_ENV, "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid {LOG_LEVEL_ENV} '{log_level}': must be one of {LOG_LEVELS}")

        return cls(
            owner=owner,
            db_path=env.get(DB_PATH_ENV, "").strip(),
            log_level=log_level,
            log_json=_truthy(env.get(LOG_JSON_ENV, "true")),
            signing_key_path=env.get(SIGNING_KEY_PATH_ENV, "").strip(),
        )

    @property
    def persistent(self) -> bool:
        return bool(self.db_path)


def create_store(config: RegistryConfig) -> OfficerStore:
    if config.persistent:
        return SQLiteOfficerStore(config.db_path)
    return InMemoryOfficerStore()


def create_registry(
    config: RegistryConfig,
    setup_logging: bool = True,
    journal: Optional[RegistryJournal] = None
) -> OfficerRegistry:
    """Wire store, journal and logging into a registry for config."""
    if setup_logging:
        configure_logging(level=config.log_level, json_format=config.log_json)

    store = create_store(config)
    registry = OfficerRegistry(
        owner=config.owner,
        store=store,
        journal=journal if journal is not None else RegistryJournal(),
    )
    logger.info(
        "Officer registry ready (store=%s, next_id=%d)",
        type(store).__name__, registry.next_id
    )
    return registry


def load_signing_key(path: str) -> Tuple[str, bytes]:
    """
    Load an attestation signing key.

    The file holds {"kid": ..., "private_key_b64": ...}.

    Returns:
        Tuple of (kid, raw 32-byte seed)
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return raw["kid"], b64d(raw["private_key_b64"])


def create_attestation_service(config: RegistryConfig) -> Optional[AttestationService]:
    """The configured attestation signer, or None when no key path is set."""
    if not config.signing_key_path:
        return None
    kid, seed = load_signing_key(config.signing_key_path)
    return AttestationService(seed, kid)
