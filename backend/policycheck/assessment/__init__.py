"""Build, sign and verify seller assessments."""

from policycheck.assessment.builder import AssessmentBuilder, SummaryRun
from policycheck.assessment.models import (
    AnalysisResult,
    AssessmentResponse,
    Seller,
    SignedAssessment,
    VerificationResult,
)
from policycheck.assessment.verification import verify_signed_assessment

__all__ = [
    "AssessmentBuilder",
    "SummaryRun",
    "AnalysisResult",
    "AssessmentResponse",
    "Seller",
    "SignedAssessment",
    "VerificationResult",
    "verify_signed_assessment",
]
