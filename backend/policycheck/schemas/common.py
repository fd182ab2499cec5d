"""Common request and response schemas."""

from typing import Any

from pydantic import BaseModel, Field

from policycheck.extraction import ParsedDocument, RiskFlags


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    environment: str = Field(..., description="Current environment")
    signing_key_id: str = Field(..., description="Key id that signs assessments")


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str = Field(..., description="Response message")


class ParseRequest(BaseModel):
    text: str = Field("", description="Raw Terms of Service text")
    product_hint: str | None = Field(None, description="Product name to use instead of detection")


class ParseResponse(BaseModel):
    parsed: ParsedDocument
    risks: RiskFlags


class SummarizeRequest(BaseModel):
    text: str = Field("", description="Policy text to classify clause by clause")


class SignedAssessmentRequest(BaseModel):
    """Either a seller URL to fetch or the policy text itself; text wins when both are given."""

    seller_url: str | None = None
    url: str | None = Field(None, description="Alias of seller_url")
    policy_text: str | None = None
    text: str | None = Field(None, description="Alias of policy_text")
    product_hint: str | None = None
    classify: bool = Field(True, description="Run LLM clause classification in addition to extraction")

    def resolved_url(self) -> str | None:
        return self.seller_url or self.url

    def resolved_text(self) -> str | None:
        return self.policy_text or self.text


class VerifyRequest(BaseModel):
    signed_assessment: dict[str, Any] | None = None
    tap_seller_trust: dict[str, Any] | None = Field(None, description="Legacy name of signed_assessment")
    signature: str | None = None

    def resolved_assessment(self) -> dict[str, Any] | None:
        return self.signed_assessment if self.signed_assessment is not None else self.tap_seller_trust
