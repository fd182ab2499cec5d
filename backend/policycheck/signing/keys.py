"""Ed25519 key material: loading, generation and public key set export."""

from __future__ import annotations

import base64
import logging
import secrets
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from policycheck.core.config import Settings
from policycheck.errors import SigningKeyError

logger = logging.getLogger(__name__)

SEED_BYTES = 32


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(value: str) -> bytes:
    """Decode unpadded base64url. Raises ValueError on malformed input."""
    padded = value + "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def generate_signing_key() -> str:
    """Return a fresh 32-byte Ed25519 seed as hex (suitable for POLICYCHECK_SIGNING_KEY)."""
    return secrets.token_hex(SEED_BYTES)


def public_key_to_jwk(public_key: Ed25519PublicKey, key_id: str) -> dict[str, str]:
    raw = public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return {
        "kty": "OKP",
        "crv": "Ed25519",
        "use": "sig",
        "alg": "EdDSA",
        "kid": key_id,
        "x": b64url_encode(raw),
    }


def public_key_from_jwk(jwk: dict[str, Any]) -> Ed25519PublicKey:
    """Load an Ed25519 public key from a JWK. Raises SigningKeyError if it is not one."""
    if jwk.get("kty") != "OKP" or jwk.get("crv") != "Ed25519" or not jwk.get("x"):
        raise SigningKeyError("JWK is not an Ed25519 public key")
    try:
        return Ed25519PublicKey.from_public_bytes(b64url_decode(str(jwk["x"])))
    except ValueError as e:
        raise SigningKeyError(f"Malformed JWK public key: {e}") from e


class SigningKeyProvider:
    """
    Holds the long-term signing key. Read-only after construction.

    Constructed explicitly and passed to the signer so tests can supply a
    deterministic key.
    """

    def __init__(self, private_key: Ed25519PrivateKey, key_id: str) -> None:
        self._private_key = private_key
        self._public_key = private_key.public_key()
        self.key_id = key_id

    @classmethod
    def from_hex(cls, seed_hex: str, key_id: str) -> SigningKeyProvider:
        try:
            seed = bytes.fromhex(seed_hex.strip())
        except ValueError as e:
            raise SigningKeyError("Signing key is not valid hex") from e
        if len(seed) != SEED_BYTES:
            raise SigningKeyError(f"Signing key must be {SEED_BYTES} bytes, got {len(seed)}")
        return cls(Ed25519PrivateKey.from_private_bytes(seed), key_id)

    @classmethod
    def from_settings(cls, settings: Settings) -> SigningKeyProvider:
        """
        Load the key from POLICYCHECK_SIGNING_KEY.

        In development a missing key is replaced by an ephemeral one so the
        service can start; signatures then do not survive a restart.
        """
        if settings.signing_key:
            return cls.from_hex(settings.signing_key, settings.signing_key_id)
        if settings.environment == "development":
            logger.warning(
                "POLICYCHECK_SIGNING_KEY not set; using an ephemeral signing key (development only)"
            )
            return cls.from_hex(generate_signing_key(), settings.signing_key_id)
        raise SigningKeyError(
            "POLICYCHECK_SIGNING_KEY is not set. Run: python -m policycheck.signing.keys"
        )

    @property
    def private_key(self) -> Ed25519PrivateKey:
        return self._private_key

    @property
    def public_key(self) -> Ed25519PublicKey:
        return self._public_key

    def jwks(self) -> dict[str, list[dict[str, str]]]:
        """Public key set for third-party verification."""
        return {"keys": [public_key_to_jwk(self._public_key, self.key_id)]}


if __name__ == "__main__":
    print(f"POLICYCHECK_SIGNING_KEY={generate_signing_key()}")
