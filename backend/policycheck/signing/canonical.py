"""Canonical JSON: the exact byte string that gets signed."""

import json
from typing import Any

from pydantic import BaseModel

from policycheck.errors import CanonicalizationError


def canonicalize(value: Any) -> bytes:
    """
    Serialize a JSON-like value to canonical UTF-8 bytes.

    Object keys are sorted, array order is preserved, there is no whitespace and
    non-ASCII characters are written literally. Two maps with the same entries
    produce identical bytes whatever their insertion order.

    Raises CanonicalizationError for NaN/Infinity or values that are not
    JSON-like.
    """
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    try:
        text = json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise CanonicalizationError(f"Value cannot be canonicalized: {e}") from e
    return text.encode("utf-8")
