"""Envelope, cache and verification models for signed assessments."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from policycheck.extraction.models import ParsedDocument, RiskFlags
from policycheck.summarizer.models import Clause, Highlight, PageAssessment, Risk

RiskLevel = Literal["low", "medium", "high", "critical"]
Confidence = Literal["high", "medium", "low"]
ENVELOPE_VERSION = "2.0"


class Seller(BaseModel):
    model_config = ConfigDict(frozen=True)

    domain: str
    url: str | None = None


class AnalysisResult(BaseModel):
    """Unsigned analysis of one document; this is what the cache stores."""

    source: Literal["text_provided", "fetched"]
    title: str | None = None
    text_length: int = 0
    content_hash: str | None = None
    parsed: ParsedDocument
    risk_flags: RiskFlags
    page: PageAssessment | None = None
    total_chunks: int = 0
    failed_chunks: int = 0


class SignedAssessment(BaseModel):
    """
    The attested envelope. Frozen: once built it is signed exactly as dumped
    by ``signing_payload`` and never changed afterwards.
    """

    model_config = ConfigDict(frozen=True)

    version: str = ENVELOPE_VERSION
    provider: str
    assessment_id: str
    timestamp: str
    expires_at: str
    seller: Seller
    flags: list[str] = Field(default_factory=list)
    risk_factors_summary: dict[str, int] = Field(default_factory=dict)
    risk_score: int
    risk_level: RiskLevel
    scoring: Literal["classification", "extraction"]
    overall_risk: Risk | None = None
    highlights: list[Highlight] | None = None
    clauses: list[Clause] | None = None
    title: str | None = None
    parsed: ParsedDocument | None = None
    risk_flags: RiskFlags | None = None
    analysis_status: str
    confidence: Confidence

    def signing_payload(self) -> dict[str, Any]:
        """JSON-mode dump without nulls: the exact object that is signed and returned."""
        return self.model_dump(mode="json", exclude_none=True)


class AssessmentResponse(BaseModel):
    signed_assessment: dict[str, Any]
    signature: str
    signed_payload_hash: str
    key_id: str
    verification_url: str
    jwks_url: str


class VerificationResult(BaseModel):
    valid: bool
    reason: str | None = None
    assessment_id: str | None = None
    seller_domain: str | None = None
    expires_at: str | None = None
    expired_at: str | None = None
    verified_at: str | None = None
