"""Signed assessment issuance, verification and the public key set."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from policycheck.api.deps import get_builder, get_key_provider, get_verifier
from policycheck.assessment import (
    AssessmentBuilder,
    AssessmentResponse,
    VerificationResult,
    verify_signed_assessment,
)
from policycheck.errors import (
    ClassifierUnavailableError,
    FetchFailedError,
    MissingInputError,
    NoClausesProducedError,
    NothingToAnalyzeError,
)
from policycheck.schemas.common import SignedAssessmentRequest, VerifyRequest
from policycheck.signing import SigningKeyProvider, Verifier

router = APIRouter(prefix="/v1", tags=["assessments"])
jwks_router = APIRouter(tags=["jwks"])
well_known_router = APIRouter(tags=["jwks"])
logger = logging.getLogger(__name__)

JWKS_CACHE_CONTROL = "public, max-age=3600"


@router.post("/signed-assessment", response_model=AssessmentResponse)
async def signed_assessment(
    body: SignedAssessmentRequest,
    builder: AssessmentBuilder = Depends(get_builder),
) -> AssessmentResponse:
    """Analyze a seller's terms (by URL or text) and return an Ed25519-signed, short-lived assessment."""
    try:
        return await builder.assess(
            url=body.resolved_url(),
            text=body.resolved_text(),
            hint=body.product_hint,
            classify=body.classify,
        )
    except (MissingInputError, NothingToAnalyzeError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except NoClausesProducedError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except (FetchFailedError, ClassifierUnavailableError) as e:
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.post("/verify", response_model=VerificationResult, response_model_exclude_none=True)
def verify(body: VerifyRequest, verifier: Verifier = Depends(get_verifier)) -> VerificationResult:
    """Check expiry and signature of an assessment returned by a buyer or agent."""
    assessment = body.resolved_assessment()
    if assessment is None or not body.signature:
        raise HTTPException(status_code=400, detail="Missing signed_assessment or signature")
    result = verify_signed_assessment(assessment, body.signature, verifier)
    logger.info("Verification of %s: valid=%s", result.assessment_id, result.valid)
    return result


def _jwks_response(keys: SigningKeyProvider, response: Response) -> dict:
    response.headers["Cache-Control"] = JWKS_CACHE_CONTROL
    return keys.jwks()


@jwks_router.get("/jwks")
def jwks(response: Response, keys: SigningKeyProvider = Depends(get_key_provider)) -> dict:
    """Public key set for offline verification."""
    return _jwks_response(keys, response)


@well_known_router.get("/.well-known/jwks.json", include_in_schema=False)
def well_known_jwks(response: Response, keys: SigningKeyProvider = Depends(get_key_provider)) -> dict:
    return _jwks_response(keys, response)
