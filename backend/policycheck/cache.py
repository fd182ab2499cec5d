"""Short-TTL analysis cache (Valkey-backed), keyed by normalized request identity."""

from __future__ import annotations

import json
import logging
from typing import TypeVar

from pydantic import BaseModel, ValidationError
from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

ASSESSMENT_CACHE_PREFIX = "policycheck:analysis:"


class AssessmentCache:
    """
    Expiring key -> JSON store.

    Not a coalescing cache: concurrent requests for the same key may both miss
    and both compute. Backend errors are logged and treated as misses.
    """

    def __init__(self, client: Redis, *, ttl_seconds: int, prefix: str = ASSESSMENT_CACHE_PREFIX) -> None:
        self._client = client
        self._ttl_seconds = ttl_seconds
        self._prefix = prefix

    def key(self, identity: str) -> str:
        return f"{self._prefix}{identity}"

    def set_json(self, identity: str, value: BaseModel) -> None:
        """Store a Pydantic model under *identity* as JSON with the configured TTL."""
        payload = value.model_dump_json().encode("utf-8")
        try:
            self._client.set(self.key(identity), payload, ex=self._ttl_seconds)
        except RedisError as e:
            logger.warning("Cache write failed for %s: %s", identity, e)

    def get_json(self, identity: str, model: type[T]) -> T | None:
        """
        Retrieve a value by identity, parse as JSON, and validate into the given Pydantic model.
        Returns None if the key is missing, unreadable or the backend is unavailable.
        """
        try:
            raw = self._client.get(self.key(identity))
        except RedisError as e:
            logger.warning("Cache lookup failed for %s: %s", identity, e)
            return None
        if raw is None:
            return None
        try:
            data = json.loads(raw.decode("utf-8") if isinstance(raw, bytes) else raw)
            return model.model_validate(data)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            logger.warning("Discarding unreadable cache entry %s: %s", identity, e)
            return None
