"""Sarvam AI provider implementation.

Speech-to-text and translation over the Sarvam REST API
(https://api.sarvam.ai) using a shared httpx.AsyncClient.
Every call has a single attempt with a 10-second default timeout; any
non-2xx status or transport failure is re-raised as ProviderError.
"""

from __future__ import annotations

from typing import Any, Sequence

import httpx
import structlog

from hotel_relay.core.exceptions import ProviderError
from hotel_relay.services.language.directory import DEFAULT_LANGUAGES, SupportedLanguage
from hotel_relay.services.provider.base import (
    Transcript,
    TranscriptSegment,
    Translation,
    TranslationProvider,
)

logger = structlog.get_logger(__name__)

_DEFAULT_BASE_URL = "https://api.sarvam.ai"
_DEFAULT_SPEAKER = "speaker_1"
_TIMEOUT_SECONDS = 10.0


class SarvamProvider(TranslationProvider):
    """Sarvam speech-to-text + translate."""

    name = "sarvam"

    def __init__(
        self,
        api_key: str,
        base_url: str = _DEFAULT_BASE_URL,
        stt_model: str = "saaras:v1",
        timeout_seconds: float = _TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._stt_model = stt_model
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"api-subscription-key": api_key},
            timeout=timeout_seconds,
            transport=transport,
        )
        logger.info("sarvam_provider_initialized", base_url=base_url, stt_model=stt_model)

    async def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> Any:
        """Send one request and decode the JSON body, mapping failures to ProviderError."""
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            logger.error("sarvam_timeout", operation=operation, path=path)
            raise ProviderError(f"Sarvam {operation} timed out") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(
                "sarvam_http_error",
                operation=operation,
                status_code=status,
                body=e.response.text[:200],
            )
            raise ProviderError(
                f"Sarvam API error: {status} {e.response.reason_phrase}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("sarvam_transport_error", operation=operation, error=str(e))
            raise ProviderError(f"Failed to {operation}: {e}") from e
        except ValueError as e:
            logger.error("sarvam_invalid_json", operation=operation, error=str(e))
            raise ProviderError(f"Sarvam {operation} returned an invalid body") from e

    async def transcribe(self, audio: bytes, language_code: str = "hi-IN") -> Transcript:
        """POST /speech-to-text as multipart form data."""
        result = await self._request(
            "transcribe",
            "POST",
            "/speech-to-text",
            files={"file": ("audio.wav", audio, "audio/wav")},
            data={"language_code": language_code, "model": self._stt_model},
        )
        text = result.get("transcript") or ""
        entries = (result.get("diarized_transcript") or {}).get("entries") or []
        segments = [
            TranscriptSegment(
                speaker_id=str(entry.get("speaker_id") or _DEFAULT_SPEAKER),
                text=entry.get("transcript") or entry.get("text") or "",
            )
            for entry in entries
        ] or [TranscriptSegment(speaker_id=_DEFAULT_SPEAKER, text=text)]

        logger.debug(
            "sarvam_transcribe_ok",
            language_code=language_code,
            audio_bytes=len(audio),
            transcript_len=len(text),
        )
        return Transcript(
            text=text,
            confidence=result.get("confidence"),
            segments=segments,
            language_code=result.get("language_code") or language_code,
        )

    async def translate(
        self,
        text: str,
        source_language: str,
        target_language: str,
    ) -> Translation:
        """POST /translate with a JSON body."""
        result = await self._request(
            "translate",
            "POST",
            "/translate",
            json={
                "input": text,
                "source_language_code": source_language,
                "target_language_code": target_language,
                "speaker_gender": "Male",
                "mode": "formal",
            },
        )
        logger.debug(
            "sarvam_translate_ok",
            source_language=source_language,
            target_language=target_language,
            input_len=len(text),
        )
        return Translation(
            text=result.get("translated_text") or text,
            source_language=source_language,
            target_language=target_language,
        )

    async def list_supported_languages(self) -> Sequence[SupportedLanguage]:
        """Remote language catalogue, or the static list if it cannot be fetched."""
        try:
            result = await self._request(
                "list supported languages", "GET", "/translate/supported-languages"
            )
        except ProviderError:
            logger.warning("sarvam_languages_fallback")
            return DEFAULT_LANGUAGES

        raw = result.get("languages") if isinstance(result, dict) else result
        languages = [
            SupportedLanguage(
                code=item["code"],
                name=item.get("name", item["code"]),
                native_name=item.get("nativeName") or item.get("native") or item.get("name", item["code"]),
            )
            for item in raw or []
            if isinstance(item, dict) and item.get("code")
        ]
        return languages or DEFAULT_LANGUAGES

    async def aclose(self) -> None:
        logger.info("sarvam_provider_shutdown")
        await self._client.aclose()
