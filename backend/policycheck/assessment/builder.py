"""
Assessment orchestration: extract, classify, score and sign.

The builder owns no global state. Every collaborator (classifier, signer,
fetcher, cache, clock) is handed in, so routes and tests choose their own.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import uuid
from datetime import datetime, timedelta
from typing import Awaitable, Callable, NamedTuple

from policycheck.assessment import scoring
from policycheck.assessment.models import (
    AnalysisResult,
    AssessmentResponse,
    Seller,
    SignedAssessment,
)
from policycheck.assessment.timestamps import format_timestamp, utcnow
from policycheck.cache import AssessmentCache
from policycheck.core.config import Settings
from policycheck.errors import (
    ClassifierUnavailableError,
    FetchFailedError,
    MissingInputError,
    NoClausesProducedError,
    NothingToAnalyzeError,
)
from policycheck.extraction import ParsedDocument, RiskFlags, extract
from policycheck.extraction.patterns import normalize_text
from policycheck.signing import Signer
from policycheck.summarizer import ClassifierClient, Clause, PageAssessment, aggregate_page, chunk_text
from policycheck.utils import FetchedPage, cache_identity, fetch_and_extract, get_hostname

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[FetchedPage]]


class SummaryRun(NamedTuple):
    page: PageAssessment
    total_chunks: int
    failed_chunks: int


class AssessmentBuilder:
    def __init__(
        self,
        *,
        settings: Settings,
        signer: Signer,
        classifier: ClassifierClient | None = None,
        fetcher: Fetcher | None = None,
        cache: AssessmentCache | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._settings = settings
        self._signer = signer
        self._classifier = classifier
        self._fetcher = fetcher or self._default_fetcher
        self._cache = cache
        self._clock = clock

    async def _default_fetcher(self, url: str) -> FetchedPage:
        return await fetch_and_extract(
            url,
            use_browser=self._settings.fetch_use_browser,
            timeout=self._settings.fetch_timeout_seconds,
        )

    # ------------------------------------------------------------------
    # Pipelines
    # ------------------------------------------------------------------

    def parse(self, text: str, hint: str | None = None) -> tuple[ParsedDocument, RiskFlags]:
        return extract(text, hint)

    async def summarize(self, text: str) -> SummaryRun:
        """
        Chunk *text*, classify every chunk concurrently and aggregate.

        Raises NothingToAnalyzeError for empty input, ClassifierUnavailableError
        when no model is configured, and NoClausesProducedError when every
        chunk failed (unless ``require_successful_chunk`` is off).
        """
        normalized = normalize_text(text or "")
        if not normalized:
            raise NothingToAnalyzeError("Text is empty")
        if self._classifier is None:
            raise ClassifierUnavailableError("No classification model is configured")

        chunks = chunk_text(normalized, self._settings.chunk_max_chars)
        results = await self.classify_chunks(chunks)
        failed = sum(1 for r in results if r is None)
        if failed == len(chunks) and self._settings.require_successful_chunk:
            raise NoClausesProducedError(failed)

        clauses = [clause for r in results if r for clause in r]
        page = aggregate_page(clauses)
        logger.info(
            "Summarized %d chunk(s) (%d failed) into %d clause(s), overall %s",
            len(chunks),
            failed,
            len(clauses),
            page.overall_risk.value,
        )
        return SummaryRun(page=page, total_chunks=len(chunks), failed_chunks=failed)

    async def classify_chunks(self, chunks: list[str]) -> list[list[Clause] | None]:
        """Classify chunks with bounded concurrency. Results keep chunk order; None marks a failure."""
        if self._classifier is None:
            raise ClassifierUnavailableError("No classification model is configured")
        classifier = self._classifier
        semaphore = asyncio.Semaphore(self._settings.classify_max_concurrency)
        timeout = self._settings.classify_timeout_seconds
        total = len(chunks)

        async def run(index: int, chunk: str) -> list[Clause] | None:
            async with semaphore:
                try:
                    return await asyncio.wait_for(classifier.aclassify(chunk), timeout=timeout)
                except asyncio.TimeoutError:
                    logger.warning("Chunk %d/%d timed out after %.1fs", index, total, timeout)
                except Exception as e:
                    logger.warning("Chunk %d/%d failed to classify: %s", index, total, e)
                return None

        return list(await asyncio.gather(*(run(i, c) for i, c in enumerate(chunks, start=1))))

    # ------------------------------------------------------------------
    # Signed assessment
    # ------------------------------------------------------------------

    async def assess(
        self,
        *,
        url: str | None = None,
        text: str | None = None,
        hint: str | None = None,
        classify: bool = True,
    ) -> AssessmentResponse:
        """
        Build, sign and return an assessment for *text* (preferred) or the page at *url*.
        """
        url = url.strip() if url and url.strip() else None
        text = text if text and text.strip() else None
        if url is None and text is None:
            raise MissingInputError("Provide seller_url (or url) or policy_text (or text)")

        if text is not None:
            analysis = await self._analyze(text, source="text_provided", hint=hint, classify=classify)
        else:
            analysis = await self._analyze_url(url, hint=hint, classify=classify)

        envelope = self.build_envelope(url, analysis)
        payload = envelope.signing_payload()
        signed = self._signer.sign(payload)
        base = self._settings.public_base_url.rstrip("/")
        logger.info(
            "Signed assessment %s for %s (risk %s, %s)",
            envelope.assessment_id,
            envelope.seller.domain,
            envelope.risk_level,
            envelope.analysis_status,
        )
        return AssessmentResponse(
            signed_assessment=payload,
            signature=signed.signature,
            signed_payload_hash=signed.signed_payload_hash,
            key_id=self._signer.key_id,
            verification_url=f"{base}/api/v1/verify",
            jwks_url=f"{base}/.well-known/jwks.json",
        )

    def build_envelope(self, url: str | None, analysis: AnalysisResult) -> SignedAssessment:
        now = self._clock()
        expires = now + timedelta(seconds=self._settings.assessment_ttl_seconds)
        risk_score, risk_level, source = scoring.score(analysis)
        page = analysis.page
        return SignedAssessment(
            provider=self._settings.provider_name,
            assessment_id=str(uuid.uuid4()),
            timestamp=format_timestamp(now),
            expires_at=format_timestamp(expires),
            seller=Seller(domain=get_hostname(url), url=url),
            flags=scoring.collect_flags(analysis),
            risk_factors_summary=scoring.risk_factors_summary(analysis),
            risk_score=risk_score,
            risk_level=risk_level,
            scoring=source,
            overall_risk=page.overall_risk if page else None,
            highlights=page.highlights if page else None,
            clauses=page.clauses if page else None,
            title=analysis.title or None,
            parsed=analysis.parsed,
            risk_flags=analysis.risk_flags,
            analysis_status=scoring.analysis_status(analysis),
            confidence=scoring.confidence(analysis),
        )

    async def _analyze_url(self, url: str, *, hint: str | None, classify: bool) -> AnalysisResult:
        identity = f"{cache_identity(url)}#{'classified' if classify else 'extracted'}"
        if self._cache is not None:
            cached = self._cache.get_json(identity, AnalysisResult)
            if cached is not None:
                logger.info("Cache hit for %s", identity)
                return cached

        try:
            page = await self._fetcher(url)
        except Exception as e:
            logger.warning("Fetch failed for %s: %s", url, e)
            raise FetchFailedError(f"Could not fetch {url}: {e}") from e

        analysis = await self._analyze(
            page.text,
            source="fetched",
            hint=hint,
            classify=classify,
            title=page.title,
            content_hash=page.content_hash,
        )
        if self._cache is not None and not analysis.failed_chunks:
            self._cache.set_json(identity, analysis)
        return analysis

    async def _analyze(
        self,
        text: str,
        *,
        source: str,
        hint: str | None,
        classify: bool,
        title: str | None = None,
        content_hash: str | None = None,
    ) -> AnalysisResult:
        if not normalize_text(text):
            raise NothingToAnalyzeError("Document has no text to analyze")
        parsed, flags = self.parse(text, hint)
        run = await self.summarize(text) if classify else None
        return AnalysisResult(
            source=source,
            title=title,
            text_length=len(text),
            content_hash=content_hash or "sha256:" + hashlib.sha256(text.encode("utf-8")).hexdigest(),
            parsed=parsed,
            risk_flags=flags,
            page=run.page if run else None,
            total_chunks=run.total_chunks if run else 0,
            failed_chunks=run.failed_chunks if run else 0,
        )
