"""Valkey (Redis-compatible) connection management."""

from redis import Redis

from policycheck.core.config import Settings


def connect(settings: Settings) -> Redis:
    """Create a Valkey client (call on app startup). The caller owns and closes it."""
    return Redis(
        host=settings.valkey_host,
        port=settings.valkey_port,
        password=settings.valkey_password or None,
        decode_responses=False,
    )


def close(client: Redis | None) -> None:
    """Close the Valkey connection (call on app shutdown)."""
    if client is not None:
        client.close()
