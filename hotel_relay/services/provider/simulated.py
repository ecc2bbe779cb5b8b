"""Simulated provider for development and demos.

Answers deterministically from small fixed tables and sleeps before each
answer so clients see the transcribing/translating progress states the way
they would against the real API.
"""

from __future__ import annotations

import asyncio

import structlog

from hotel_relay.services.provider.base import (
    Transcript,
    TranscriptSegment,
    Translation,
    TranslationProvider,
)

logger = structlog.get_logger(__name__)

_TRANSCRIBE_DELAY_SECONDS = 1.0
_TRANSLATE_DELAY_SECONDS = 0.8
_SIMULATED_CONFIDENCE = 0.95
_SIMULATED_SPEAKER = "speaker_1"
_FALLBACK_TRANSCRIPT = "Sample text"

TRANSCRIPTS: dict[str, str] = {
    "hi-IN": "कितना पैसा?",
    "bn-IN": "কত টাকা?",
    "ta-IN": "எவ்வளவு பணம்?",
    "te-IN": "ఎంత డబ్బు?",
    "en-IN": "How much money?",
}

TRANSLATIONS: dict[str, str] = {
    "कितना पैसा?": "How much money?",
    "How much money?": "कितना पैसा?",
    "Rs 3000": "Rs 3000",
    "Thank you": "धन्यवाद",
    "धन्यवाद": "Thank you",
    "Good morning": "सुप्रभात",
    "सुप्रभात": "Good morning",
    "Hello": "नमस्ते",
    "नमस्ते": "Hello",
    "I need a room": "मुझे एक कमरा चाहिए",
    "मुझे एक कमरा चाहिए": "I need a room",
}


def placeholder_translation(text: str) -> str:
    return f"Translated: {text}"


class SimulatedProvider(TranslationProvider):
    """Lookup-table provider with artificial latency."""

    name = "simulated"

    def __init__(self, latency_scale: float = 1.0) -> None:
        self._latency_scale = max(latency_scale, 0.0)
        logger.info("simulated_provider_initialized", latency_scale=self._latency_scale)

    async def _delay(self, seconds: float) -> None:
        await asyncio.sleep(seconds * self._latency_scale)

    async def transcribe(self, audio: bytes, language_code: str) -> Transcript:
        await self._delay(_TRANSCRIBE_DELAY_SECONDS)
        text = TRANSCRIPTS.get(language_code, _FALLBACK_TRANSCRIPT)
        logger.debug("simulated_transcribe", language_code=language_code, audio_bytes=len(audio))
        return Transcript(
            text=text,
            confidence=_SIMULATED_CONFIDENCE,
            segments=[TranscriptSegment(speaker_id=_SIMULATED_SPEAKER, text=text)],
            language_code=language_code,
        )

    async def translate(
        self,
        text: str,
        source_language: str,
        target_language: str,
    ) -> Translation:
        await self._delay(_TRANSLATE_DELAY_SECONDS)
        return Translation(
            text=TRANSLATIONS.get(text, placeholder_translation(text)),
            source_language=source_language,
            target_language=target_language,
        )
