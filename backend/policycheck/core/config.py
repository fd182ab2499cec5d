"""Application settings via pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Load from environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = "PolicyCheck API"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Classification model
    gemini_api_key: str | None = None
    classifier_model: str = "gemini-2.5-flash"
    classifier_temperature: float = 0.2
    chunk_max_chars: int = Field(6000, ge=1)
    classify_timeout_seconds: float = Field(30.0, gt=0)
    classify_max_concurrency: int = Field(4, ge=1)
    require_successful_chunk: bool = True

    # Attestation
    signing_key: str | None = Field(None, alias="policycheck_signing_key")
    signing_key_id: str = "policycheck-1"
    assessment_ttl_seconds: int = Field(300, ge=1)
    provider_name: str = "policycheck.tools"
    public_base_url: str = "https://policycheck.tools"

    # Valkey-backed analysis cache
    cache_enabled: bool = False
    cache_ttl_seconds: int = Field(3600, ge=1)
    valkey_host: str = "localhost"
    valkey_port: int = 6379
    valkey_password: str | None = None

    # Fetch collaborator
    fetch_use_browser: bool = False
    fetch_timeout_seconds: float = Field(10.0, gt=0)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
