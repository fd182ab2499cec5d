"""Unit tests for canonical JSON, Ed25519 signing and key handling."""

import math

import pytest

from fakes import TEST_KEY_ID
from policycheck.core.config import Settings
from policycheck.errors import CanonicalizationError, SigningKeyError
from policycheck.signing import Signer, SigningKeyProvider, Verifier, canonicalize, generate_signing_key
from policycheck.signing.keys import b64url_decode, b64url_encode

PAYLOAD = {"seller": {"domain": "shop.example.com", "url": None}, "risk_score": 20, "flags": ["b", "a"]}


# ---------------------------------------------------------------------------
# Canonical JSON
# ---------------------------------------------------------------------------


class TestCanonicalize:
    def test_sorted_keys_no_whitespace(self):
        assert canonicalize({"b": 1, "a": [2, 1]}) == b'{"a":[2,1],"b":1}'

    def test_insertion_order_irrelevant(self):
        first = {"x": 1, "y": {"b": True, "a": None}}
        second = {"y": {"a": None, "b": True}, "x": 1}
        assert canonicalize(first) == canonicalize(second)

    def test_repeatable(self):
        assert canonicalize(PAYLOAD) == canonicalize(PAYLOAD)

    def test_non_ascii_written_literally(self):
        assert canonicalize({"k": "é"}) == '{"k":"é"}'.encode("utf-8")

    def test_nan_rejected(self):
        with pytest.raises(CanonicalizationError):
            canonicalize({"score": math.nan})

    def test_unserializable_rejected(self):
        with pytest.raises(CanonicalizationError):
            canonicalize({"value": object()})


# ---------------------------------------------------------------------------
# Signer / Verifier
# ---------------------------------------------------------------------------


class TestSigner:
    def test_round_trip(self, signer):
        result = signer.sign(PAYLOAD)
        assert signer.verifier().verify(PAYLOAD, result.signature) is True

    def test_deterministic(self, signer):
        assert signer.sign(PAYLOAD) == signer.sign(dict(reversed(list(PAYLOAD.items()))))

    def test_hash_format(self, signer):
        assert signer.sign(PAYLOAD).signed_payload_hash.startswith("sha256:")

    def test_mutated_payload_fails(self, signer):
        signature = signer.sign(PAYLOAD).signature
        assert signer.verifier().verify({**PAYLOAD, "risk_score": 0}, signature) is False

    def test_malformed_signature_is_false(self, signer):
        assert signer.verifier().verify(PAYLOAD, "not-a-signature!!") is False

    def test_non_finite_payload_is_false(self, signer):
        signature = signer.sign(PAYLOAD).signature
        assert signer.verifier().verify({**PAYLOAD, "risk_score": math.inf}, signature) is False
        assert signer.verifier().verify({**PAYLOAD, "risk_score": math.nan}, signature) is False

    def test_other_key_fails(self, signer):
        other = Signer(SigningKeyProvider.from_hex(generate_signing_key(), "other"))
        signature = other.sign(PAYLOAD).signature
        assert signer.verifier().verify(PAYLOAD, signature) is False

    def test_verify_from_jwks_alone(self, signer, key_provider):
        signature = signer.sign(PAYLOAD).signature
        verifier = Verifier.from_jwks(key_provider.jwks(), TEST_KEY_ID)
        assert verifier.verify(PAYLOAD, signature) is True

    def test_unknown_kid(self, key_provider):
        with pytest.raises(SigningKeyError):
            Verifier.from_jwks(key_provider.jwks(), "missing")


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


class TestKeys:
    def test_jwks_shape(self, key_provider):
        (jwk,) = key_provider.jwks()["keys"]
        assert jwk["kty"] == "OKP"
        assert jwk["crv"] == "Ed25519"
        assert jwk["alg"] == "EdDSA"
        assert jwk["kid"] == TEST_KEY_ID
        assert len(b64url_decode(jwk["x"])) == 32

    def test_b64url_unpadded(self):
        assert b64url_encode(b"\xff\xfe") == "__4"
        assert b64url_decode("__4") == b"\xff\xfe"

    def test_generated_key_is_32_bytes_hex(self):
        assert len(bytes.fromhex(generate_signing_key())) == 32

    @pytest.mark.parametrize("seed", ["zz" * 32, "ab" * 16])
    def test_bad_seed(self, seed):
        with pytest.raises(SigningKeyError):
            SigningKeyProvider.from_hex(seed, "k")

    def test_ephemeral_key_in_development(self, settings):
        keys = SigningKeyProvider.from_settings(settings)
        assert keys.key_id == TEST_KEY_ID

    def test_production_requires_key(self):
        settings = Settings(_env_file=None, environment="production", signing_key=None)
        with pytest.raises(SigningKeyError):
            SigningKeyProvider.from_settings(settings)

    def test_configured_key(self):
        seed = generate_signing_key()
        settings = Settings(_env_file=None, signing_key=seed, signing_key_id="prod-1")
        keys = SigningKeyProvider.from_settings(settings)
        expected = SigningKeyProvider.from_hex(seed, "prod-1")
        assert keys.jwks() == expected.jwks()
