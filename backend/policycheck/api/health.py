"""Service info: welcome message and health with the active signing key."""

from fastapi import APIRouter, Depends

from policycheck.api.deps import get_key_provider
from policycheck.core.config import Settings, get_settings
from policycheck.schemas.common import HealthResponse, MessageResponse
from policycheck.signing import SigningKeyProvider

router = APIRouter(tags=["health"])


@router.get("/", response_model=MessageResponse)
def root(settings: Settings = Depends(get_settings)) -> MessageResponse:
    return MessageResponse(
        message=f"{settings.app_name} is running. POST /api/v1/signed-assessment to assess a seller."
    )


@router.get("/health", response_model=HealthResponse)
def health_check(
    settings: Settings = Depends(get_settings),
    keys: SigningKeyProvider = Depends(get_key_provider),
) -> HealthResponse:
    """Return service health, environment and the active signing key id."""
    return HealthResponse(
        status="ok",
        environment=settings.environment,
        signing_key_id=keys.key_id,
    )
