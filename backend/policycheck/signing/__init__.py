"""Canonicalization, Ed25519 signing and verification."""

from policycheck.signing.canonical import canonicalize
from policycheck.signing.keys import SigningKeyProvider, generate_signing_key
from policycheck.signing.signer import SignatureResult, Signer, Verifier

__all__ = [
    "canonicalize",
    "generate_signing_key",
    "SignatureResult",
    "Signer",
    "SigningKeyProvider",
    "Verifier",
]
