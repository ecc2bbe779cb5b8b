"""Selects the translation provider variant from configuration."""

import structlog

from hotel_relay.core.config import Settings
from hotel_relay.services.provider.base import TranslationProvider
from hotel_relay.services.provider.sarvam import SarvamProvider
from hotel_relay.services.provider.simulated import SimulatedProvider

logger = structlog.get_logger(__name__)


def build_provider(settings: Settings) -> TranslationProvider:
    """Instantiate the provider named by TRANSLATION_PROVIDER.

    Raises:
        ValueError: If the Sarvam provider is selected without SARVAM_KEY.
    """
    if settings.translation_provider == "sarvam":
        if not settings.sarvam_key:
            raise ValueError("TRANSLATION_PROVIDER=sarvam requires SARVAM_KEY to be set")
        return SarvamProvider(
            api_key=settings.sarvam_key,
            base_url=settings.sarvam_base_url,
            stt_model=settings.sarvam_stt_model,
            timeout_seconds=settings.provider_timeout_seconds,
        )

    logger.info("using_simulated_provider")
    return SimulatedProvider(latency_scale=settings.simulated_latency_scale)
