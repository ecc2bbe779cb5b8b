"""Unit tests for SarvamProvider against an httpx.MockTransport.

Tests:
  - transcribe posts multipart audio with language + model and the API key header
  - diarized entries become segments; missing confidence stays None
  - translate posts the JSON body and returns translated_text
  - non-2xx status → ProviderError carrying status and reason
  - connection failure and timeout → ProviderError
  - supported languages parsed from the API, static list on failure
"""

import json

import httpx
import pytest

from hotel_relay.core.exceptions import ProviderError
from hotel_relay.services.language.directory import DEFAULT_LANGUAGES
from hotel_relay.services.provider.sarvam import SarvamProvider


def _provider(handler) -> SarvamProvider:
    return SarvamProvider(
        api_key="test-key",
        base_url="https://sarvam.test/",
        transport=httpx.MockTransport(handler),
    )


class TestTranscribe:
    @pytest.mark.asyncio
    async def test_success(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "transcript": "कितना पैसा?",
                    "confidence": 0.87,
                    "diarized_transcript": {
                        "entries": [{"speaker_id": "speaker_2", "transcript": "कितना पैसा?"}]
                    },
                },
            )

        provider = _provider(handler)
        transcript = await provider.transcribe(b"\x00\x01audio", "hi-IN")
        await provider.aclose()

        request = seen[0]
        assert request.method == "POST"
        assert request.url == "https://sarvam.test/speech-to-text"
        assert request.headers["api-subscription-key"] == "test-key"
        body = request.content
        assert b'name="language_code"' in body and b"hi-IN" in body
        assert b'name="model"' in body and b"saaras:v1" in body
        assert b"\x00\x01audio" in body

        assert transcript.text == "कितना पैसा?"
        assert transcript.confidence == 0.87
        assert transcript.primary_speaker == "speaker_2"

    @pytest.mark.asyncio
    async def test_without_diarization(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, json={"transcript": "hello"}))
        transcript = await provider.transcribe(b"", "en-IN")
        assert transcript.confidence is None
        assert transcript.primary_speaker == "speaker_1"
        assert transcript.language_code == "en-IN"

    @pytest.mark.asyncio
    async def test_http_error(self) -> None:
        provider = _provider(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(ProviderError) as exc_info:
            await provider.transcribe(b"audio", "hi-IN")
        assert exc_info.value.message == "Sarvam API error: 500 Internal Server Error"
        assert exc_info.value.status_code == 502


class TestTranslate:
    @pytest.mark.asyncio
    async def test_success(self) -> None:
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"translated_text": "Hello"})

        provider = _provider(handler)
        result = await provider.translate("नमस्ते", "hi-IN", "en-IN")

        assert result.text == "Hello"
        assert seen[0] == {
            "input": "नमस्ते",
            "source_language_code": "hi-IN",
            "target_language_code": "en-IN",
            "speaker_gender": "Male",
            "mode": "formal",
        }

    @pytest.mark.asyncio
    async def test_connect_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = _provider(handler)
        with pytest.raises(ProviderError, match="Failed to translate"):
            await provider.translate("hi", "en-IN", "hi-IN")

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        provider = _provider(handler)
        with pytest.raises(ProviderError, match="timed out"):
            await provider.translate("hi", "en-IN", "hi-IN")

    @pytest.mark.asyncio
    async def test_health_check_reports_failure(self) -> None:
        provider = _provider(lambda request: httpx.Response(401, json={"error": "bad key"}))
        assert await provider.health_check() is False


class TestSupportedLanguages:
    @pytest.mark.asyncio
    async def test_parsed_from_api(self) -> None:
        payload = {"languages": [{"code": "hi-IN", "name": "Hindi", "nativeName": "हिन्दी"}, {"name": "x"}]}
        provider = _provider(lambda request: httpx.Response(200, json=payload))

        languages = await provider.list_supported_languages()

        assert len(languages) == 1
        assert languages[0].code == "hi-IN"
        assert languages[0].native_name == "हिन्दी"

    @pytest.mark.asyncio
    async def test_fallback_on_error(self) -> None:
        provider = _provider(lambda request: httpx.Response(404))
        assert await provider.list_supported_languages() == DEFAULT_LANGUAGES
