"""Sign and verify canonicalized payloads with Ed25519."""

from __future__ import annotations

import hashlib
import logging
from typing import Any, NamedTuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from policycheck.errors import CanonicalizationError, SigningKeyError
from policycheck.signing.canonical import canonicalize
from policycheck.signing.keys import (
    SigningKeyProvider,
    b64url_decode,
    b64url_encode,
    public_key_from_jwk,
)

logger = logging.getLogger(__name__)


class SignatureResult(NamedTuple):
    signature: str
    signed_payload_hash: str


def payload_hash(canonical: bytes) -> str:
    """Audit hash of the canonical bytes, ``sha256:<hex>``."""
    return "sha256:" + hashlib.sha256(canonical).hexdigest()


class Signer:
    """Signs the canonical bytes of a payload. Ed25519 is deterministic: same payload, same signature."""

    def __init__(self, keys: SigningKeyProvider) -> None:
        self._keys = keys

    @property
    def key_id(self) -> str:
        return self._keys.key_id

    def sign(self, payload: Any) -> SignatureResult:
        canonical = canonicalize(payload)
        signature = self._keys.private_key.sign(canonical)
        return SignatureResult(
            signature=b64url_encode(signature),
            signed_payload_hash=payload_hash(canonical),
        )

    def verifier(self) -> Verifier:
        return Verifier(self._keys.public_key, key_id=self._keys.key_id)


class Verifier:
    """
    Answers one question: is this signature valid for this payload?

    Expiry is the caller's concern. Any failure (mismatch, malformed signature,
    wrong key) is ``False``, never an exception.
    """

    def __init__(self, public_key: Ed25519PublicKey, *, key_id: str | None = None) -> None:
        self._public_key = public_key
        self.key_id = key_id

    @classmethod
    def from_jwk(cls, jwk: dict[str, Any]) -> Verifier:
        return cls(public_key_from_jwk(jwk), key_id=jwk.get("kid"))

    @classmethod
    def from_jwks(cls, jwks: dict[str, Any], key_id: str | None = None) -> Verifier:
        """Pick the key with ``kid == key_id`` (or the first key) from a public key set."""
        keys = jwks.get("keys") or []
        for jwk in keys:
            if key_id is None or jwk.get("kid") == key_id:
                return cls.from_jwk(jwk)
        raise SigningKeyError(f"No key {key_id!r} in key set")

    def verify(self, payload: Any, signature: str) -> bool:
        try:
            canonical = canonicalize(payload)
        except CanonicalizationError as e:
            logger.info("Rejected payload that cannot be canonicalized: %s", e)
            return False
        try:
            raw_signature = b64url_decode(signature)
        except (ValueError, TypeError, AttributeError):
            logger.info("Rejected malformed signature")
            return False
        try:
            self._public_key.verify(raw_signature, canonical)
        except InvalidSignature:
            return False
        return True
