"""
Officer Registry: Canonical Encoding and Hashing

Canonical JSON is compact, key-sorted UTF-8. All hashes are SHA-256 with
lowercase hex output and a "sha256:" prefix, so journal entries and
attestations can be recomputed byte-for-byte by an independent verifier.
"""

import base64
import hashlib
import json
from typing import Any, Dict, Optional, Union


def canonicalize(obj: Any) -> bytes:
    """Encode obj as canonical JSON bytes (sorted keys, no whitespace)."""
    return json.dumps(
        obj, sort_keys=True, separators=(',', ':'), ensure_ascii=False
    ).encode('utf-8')


def sha256_hash(data: Union[bytes, str]) -> str:
    """Return "sha256:<hex>" for data."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    return f"sha256:{hashlib.sha256(data).hexdigest()}"


def officer_hash(officer: Dict[str, Any]) -> str:
    """Hash of a serialized Officer."""
    return sha256_hash(canonicalize(officer))


def chain_entry_hash(prev_entry_hash: Optional[str], payload_hash: str) -> str:
    """
    Link a payload hash to the previous entry of a hash chain.

    entry_hash = SHA-256(prev_entry_hash || payload_hash); the first entry
    of a chain has no predecessor and hashes the payload hash alone.
    """
    data = (prev_entry_hash or "").encode("utf-8") + payload_hash.encode("utf-8")
    return sha256_hash(data)


def body_for_signing(document: Dict[str, Any]) -> Dict[str, Any]:
    """Strip the signatures field so the remaining body can be signed or checked."""
    body = dict(document)
    body.pop("signatures", None)
    return body


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode('ascii')


def b64d(s: str) -> bytes:
    return base64.b64decode(s.encode('ascii'))
