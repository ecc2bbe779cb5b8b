"""Health and language catalogue endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from hotel_relay.api.deps import get_translation_provider
from hotel_relay.schemas.rooms import (
    HealthResponse,
    LanguageResponse,
    ProviderHealthResponse,
)
from hotel_relay.services.provider.base import TranslationProvider

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc))


@router.get("/health/provider", response_model=ProviderHealthResponse)
async def provider_health(
    provider: TranslationProvider = Depends(get_translation_provider),
) -> ProviderHealthResponse:
    """Runs a trivial translate round-trip against the configured provider."""
    healthy = await provider.health_check()
    return ProviderHealthResponse(provider=provider.name, healthy=healthy)


@router.get("/languages", response_model=list[LanguageResponse])
async def languages(
    provider: TranslationProvider = Depends(get_translation_provider),
) -> list[LanguageResponse]:
    supported = await provider.list_supported_languages()
    return [
        LanguageResponse(code=lang.code, name=lang.name, native_name=lang.native_name)
        for lang in supported
    ]
