"""API router: aggregates all endpoints."""

from fastapi import APIRouter

from policycheck.api import assessments, health, terms

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(terms.router)
api_router.include_router(assessments.router)
api_router.include_router(assessments.jwks_router)

# Mounted at the application root, outside the /api prefix.
well_known_router = assessments.well_known_router
