"""Abstract translation provider interface.

All transcription/translation backends must inherit from this class.
The relay never imports a concrete provider directly: the configured variant
is built once in the FastAPI lifespan (see factory.build_provider) and passed
into MessageRelay.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

import structlog

from hotel_relay.services.language.directory import DEFAULT_LANGUAGES, SupportedLanguage

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TranscriptSegment:
    speaker_id: str
    text: str


@dataclass(frozen=True)
class Transcript:
    """Result of a speech-to-text call."""

    text: str
    confidence: float | None = None
    segments: list[TranscriptSegment] = field(default_factory=list)
    language_code: str | None = None

    @property
    def primary_speaker(self) -> str | None:
        return self.segments[0].speaker_id if self.segments else None


@dataclass(frozen=True)
class Translation:
    """Result of a text translation call."""

    text: str
    source_language: str
    target_language: str


class TranslationProvider(ABC):
    """Abstract base class for transcription/translation providers."""

    name: str = "provider"

    @abstractmethod
    async def transcribe(self, audio: bytes, language_code: str) -> Transcript:
        """Transcribe raw audio spoken in *language_code*.

        Empty audio is forwarded as-is; whatever the backend returns for it
        (typically an empty transcript) is passed back.

        Raises:
            ProviderError: On a non-success response or transport failure.
        """
        ...

    @abstractmethod
    async def translate(
        self,
        text: str,
        source_language: str,
        target_language: str,
    ) -> Translation:
        """Translate *text* from *source_language* to *target_language*.

        Raises:
            ProviderError: On a non-success response or transport failure.
        """
        ...

    async def list_supported_languages(self) -> Sequence[SupportedLanguage]:
        """Languages the backend supports. Defaults to the static list."""
        return DEFAULT_LANGUAGES

    async def health_check(self) -> bool:
        """True if a trivial translate round-trip succeeds."""
        try:
            await self.translate("Hello", "en-IN", "hi-IN")
            return True
        except Exception as e:
            logger.error("provider_health_check_failed", provider=self.name, error=str(e))
            return False

    async def aclose(self) -> None:
        """Release network resources. No-op for providers that hold none."""
        return None
