"""Shared fixtures: deterministic signing key, settings and fake collaborators."""

import pytest

from fakes import TERMS_TEXT, TEST_KEY_ID, TEST_SEED_HEX, FakeRedis
from policycheck.core.config import Settings
from policycheck.signing import Signer, SigningKeyProvider


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="development",
        gemini_api_key=None,
        signing_key=None,
        signing_key_id=TEST_KEY_ID,
        cache_enabled=False,
        classify_timeout_seconds=2.0,
    )


@pytest.fixture
def key_provider() -> SigningKeyProvider:
    return SigningKeyProvider.from_hex(TEST_SEED_HEX, TEST_KEY_ID)


@pytest.fixture
def signer(key_provider: SigningKeyProvider) -> Signer:
    return Signer(key_provider)


@pytest.fixture
def terms_text() -> str:
    return TERMS_TEXT


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()
