"""Terms parsing (deterministic) and clause summarization (LLM) endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from policycheck.api.deps import get_builder
from policycheck.assessment import AssessmentBuilder
from policycheck.errors import ClassifierUnavailableError, NoClausesProducedError, NothingToAnalyzeError
from policycheck.schemas.common import ParseRequest, ParseResponse, SummarizeRequest
from policycheck.summarizer import PageAssessment

router = APIRouter(tags=["terms"])
logger = logging.getLogger(__name__)


@router.post("/terms/parse", response_model=ParseResponse, response_model_exclude_none=True)
def parse_terms(body: ParseRequest, builder: AssessmentBuilder = Depends(get_builder)) -> ParseResponse:
    """Extract structured sections and risk flags from raw Terms of Service text."""
    if not body.text.strip():
        raise HTTPException(status_code=400, detail="text is required")
    parsed, risks = builder.parse(body.text, body.product_hint)
    return ParseResponse(parsed=parsed, risks=risks)


@router.post("/summarize", response_model=PageAssessment, response_model_exclude_none=True)
async def summarize(body: SummarizeRequest, builder: AssessmentBuilder = Depends(get_builder)) -> PageAssessment:
    """
    Classify the text clause by clause and return the page-level assessment.

    400 for empty text, 422 when every chunk failed, 502 when no model is available.
    """
    try:
        run = await builder.summarize(body.text)
    except NothingToAnalyzeError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except NoClausesProducedError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except ClassifierUnavailableError as e:
        logger.warning("Summarize requested without a classifier: %s", e)
        raise HTTPException(status_code=502, detail=str(e)) from e
    return run.page
