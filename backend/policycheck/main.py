"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from policycheck.api.router import api_router, well_known_router
from policycheck.assessment import AssessmentBuilder
from policycheck.assessment.builder import Fetcher
from policycheck.cache import AssessmentCache
from policycheck.core.config import Settings, get_settings
from policycheck.db import close as db_close, connect as db_connect
from policycheck.errors import ClassifierUnavailableError
from policycheck.signing import Signer, SigningKeyProvider
from policycheck.summarizer import ClassifierClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_application(
    settings: Settings | None = None,
    *,
    classifier: ClassifierClient | None = None,
    key_provider: SigningKeyProvider | None = None,
    cache: AssessmentCache | None = None,
    fetcher: Fetcher | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI app.

    Collaborators not passed in are built from settings at startup: the Gemini
    classifier (skipped without an API key), the signing key, and the Valkey
    cache when ``cache_enabled`` is set.
    """
    if settings is None:
        settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup and shutdown events."""
        keys = key_provider or SigningKeyProvider.from_settings(settings)
        signer = Signer(keys)

        model = classifier
        if model is None:
            try:
                model = ClassifierClient.from_settings(settings)
            except ClassifierUnavailableError as e:
                logger.warning("Clause classification disabled: %s", e)

        redis_client = None
        assessment_cache = cache
        if assessment_cache is None and settings.cache_enabled:
            redis_client = db_connect(settings)
            assessment_cache = AssessmentCache(redis_client, ttl_seconds=settings.cache_ttl_seconds)

        app.state.key_provider = keys
        app.state.signer = signer
        app.state.verifier = signer.verifier()
        app.state.builder = AssessmentBuilder(
            settings=settings,
            signer=signer,
            classifier=model,
            fetcher=fetcher,
            cache=assessment_cache,
        )
        logger.info("Signing assessments with key %s", keys.key_id)
        try:
            yield
        finally:
            db_close(redis_client)

    app = FastAPI(
        title=settings.app_name,
        description="Terms of Service risk analysis with signed, verifiable assessments.",
        version="0.1.0",
        lifespan=lifespan,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.dependency_overrides[get_settings] = lambda: settings
    app.include_router(api_router, prefix="/api")
    app.include_router(well_known_router)
    return app


app = create_application()
