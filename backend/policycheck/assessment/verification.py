"""Check a returned envelope: expiry first, then the Ed25519 signature."""

import logging
from datetime import datetime
from typing import Any

from policycheck.assessment.models import VerificationResult
from policycheck.assessment.timestamps import format_timestamp, parse_timestamp, utcnow
from policycheck.signing import Verifier

logger = logging.getLogger(__name__)

REASON_EXPIRED = "Assessment has expired"
REASON_BAD_EXPIRY = "Assessment has no valid expires_at"
REASON_BAD_SIGNATURE = "Signature verification failed"


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def verify_signed_assessment(
    assessment: dict[str, Any],
    signature: str,
    verifier: Verifier,
    *,
    now: datetime | None = None,
) -> VerificationResult:
    """
    Verify an envelope exactly as the caller sent it back.

    Fails closed: a missing or unparseable ``expires_at`` is invalid, an
    expired envelope is invalid even with a good signature. The assessment
    dict is only read, never modified.
    """
    now = now or utcnow()
    assessment_id = _optional_str(assessment.get("assessment_id"))

    expires_raw = assessment.get("expires_at")
    expires_at = parse_timestamp(expires_raw)
    if expires_at is None:
        logger.info("Rejected assessment %s: unreadable expires_at %r", assessment_id, expires_raw)
        return VerificationResult(valid=False, reason=REASON_BAD_EXPIRY, assessment_id=assessment_id)
    if expires_at < now:
        return VerificationResult(
            valid=False,
            reason=REASON_EXPIRED,
            assessment_id=assessment_id,
            expired_at=str(expires_raw),
        )

    if not verifier.verify(assessment, signature):
        logger.info("Rejected assessment %s: signature mismatch", assessment_id)
        return VerificationResult(valid=False, reason=REASON_BAD_SIGNATURE, assessment_id=assessment_id)

    seller = assessment.get("seller")
    return VerificationResult(
        valid=True,
        assessment_id=assessment_id,
        seller_domain=_optional_str(seller.get("domain")) if isinstance(seller, dict) else None,
        expires_at=str(expires_raw),
        verified_at=format_timestamp(now),
    )
