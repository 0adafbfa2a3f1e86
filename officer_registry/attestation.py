"""
Officer Registry: Verification Attestations

An attestation is a portable, Ed25519-signed statement that an officer was
verified, so a relying party can check an officer's status without access
to the registry itself.

Attestation layout:

    {
      "attestation_type": "OFFICER_VERIFIED",
      "issued_at": <epoch ms>,
      "officer": <Officer.to_dict()>,
      "officer_hash": "sha256:...",
      "signatures": [{"kid": ..., "alg": "ed25519", "sig_b64": ...}]
    }

The signature covers the canonical JSON of every field except
"signatures". Attestations carry no expiry and cannot be revoked.
"""

import time
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from .hashing import b64d, b64e, body_for_signing, canonicalize, officer_hash
from .officer import Officer

ATTESTATION_TYPE = "OFFICER_VERIFIED"
SIGNATURE_ALG = "ed25519"


class AttestationCheck(str, Enum):
    """Outcome of checking an attestation."""
    VALID = "VALID"
    MISSING_SIGNATURE = "MISSING_SIGNATURE"
    UNKNOWN_KID = "UNKNOWN_KID"
    BAD_SIGNATURE = "BAD_SIGNATURE"
    HASH_MISMATCH = "HASH_MISMATCH"
    NOT_VERIFIED = "NOT_VERIFIED"


class AttestationService:
    """
    Issues signed attestations for verified officers.

    Args:
        signing_key: Raw 32-byte Ed25519 seed, or a nacl SigningKey
        kid: Key identifier published alongside the public key
    """

    def __init__(self, signing_key, kid: str):
        if isinstance(signing_key, SigningKey):
            self._sk = signing_key
        else:
            self._sk = SigningKey(signing_key)
        self._kid = kid

    @classmethod
    def generate(cls, kid: str) -> 'AttestationService':
        """Create a service with a freshly generated key."""
        return cls(SigningKey.generate(), kid)

    @property
    def kid(self) -> str:
        return self._kid

    def public_key_b64(self) -> str:
        return b64e(bytes(self._sk.verify_key))

    def trust_entry(self) -> Dict[str, str]:
        """The {kid: public_key_b64} mapping relying parties verify against."""
        return {self._kid: self.public_key_b64()}

    def issue(self, officer: Officer, issued_at: Optional[int] = None) -> Dict[str, Any]:
        """
        Sign an attestation for a verified officer.

        Raises:
            ValueError: If the officer is not verified
        """
        if not officer.verified:
            raise ValueError(f"Officer {officer.id} is not verified")

        officer_dict = officer.to_dict()
        body = {
            "attestation_type": ATTESTATION_TYPE,
            "issued_at": issued_at if issued_at is not None else int(time.time() * 1000),
            "officer": officer_dict,
            "officer_hash": officer_hash(officer_dict),
        }

        sig = self._sk.sign(canonicalize(body)).signature
        signed = dict(body)
        signed["signatures"] = [{"kid": self._kid, "alg": SIGNATURE_ALG, "sig_b64": b64e(sig)}]
        return signed


def verify_attestation(
    attestation: Mapping[str, Any],
    public_keys: Mapping[str, str]
) -> AttestationCheck:
    """
    Check an attestation against a set of trusted public keys.

    Args:
        attestation: The signed attestation dict
        public_keys: kid -> base64 Ed25519 public key

    Returns:
        AttestationCheck.VALID, or the first failure found
    """
    sigs = attestation.get("signatures") or []
    if not sigs:
        return AttestationCheck.MISSING_SIGNATURE

    s = sigs[0]
    pub = public_keys.get(s.get("kid"))
    if not pub or s.get("alg") != SIGNATURE_ALG:
        return AttestationCheck.UNKNOWN_KID

    body = body_for_signing(dict(attestation))
    try:
        VerifyKey(b64d(pub)).verify(canonicalize(body), b64d(s.get("sig_b64", "")))
    except (BadSignatureError, ValueError):
        return AttestationCheck.BAD_SIGNATURE

    officer = body.get("officer") or {}
    if officer_hash(officer) != body.get("officer_hash"):
        return AttestationCheck.HASH_MISMATCH

    if body.get("attestation_type") != ATTESTATION_TYPE or officer.get("verified") is not True:
        return AttestationCheck.NOT_VERIFIED

    return AttestationCheck.VALID
