"""Shared pytest fixtures for the relay test suite.

Provides:
  - RecordingTransport: in-memory RoomTransport that tracks room membership
    and records who received every event
  - ScriptedProvider: TranslationProvider with canned answers, call tracking,
    fault injection and an optional gate for interleaving tests
  - registry / sessions / cleanup / relay fixtures wired the way the
    application lifespan wires them

The simulated provider's artificial latency is disabled for the whole run.
"""

from __future__ import annotations

import os

os.environ.setdefault("SIMULATED_LATENCY_SCALE", "0")

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from hotel_relay.core.exceptions import ProviderError
from hotel_relay.services.provider.base import (
    Transcript,
    TranscriptSegment,
    Translation,
    TranslationProvider,
)
from hotel_relay.services.provider.simulated import SimulatedProvider
from hotel_relay.services.relay.core import MessageRelay
from hotel_relay.services.relay.transport import RoomTransport
from hotel_relay.services.rooms.cleanup import RoomCleanupScheduler
from hotel_relay.services.rooms.registry import RoomRegistry
from hotel_relay.services.sessions import SessionMap


# ---------------------------------------------------------------------------
# Recording transport
# ---------------------------------------------------------------------------


@dataclass
class Delivery:
    event: str
    data: dict[str, Any]
    recipients: frozenset[str]
    room: str | None = None


@dataclass
class RecordingTransport(RoomTransport):
    """RoomTransport that keeps every delivery for later assertions."""

    rooms: dict[str, set[str]] = field(default_factory=dict)
    deliveries: list[Delivery] = field(default_factory=list)

    async def send(self, conn_id: str, event: str, data: dict[str, Any]) -> None:
        self.deliveries.append(Delivery(event, data, frozenset({conn_id})))

    async def broadcast(
        self,
        room_id: str,
        event: str,
        data: dict[str, Any],
        skip: str | None = None,
    ) -> None:
        recipients = frozenset(self.rooms.get(room_id, set()) - {skip})
        self.deliveries.append(Delivery(event, data, recipients, room=room_id))

    async def enter_room(self, conn_id: str, room_id: str) -> None:
        self.rooms.setdefault(room_id, set()).add(conn_id)

    async def leave_room(self, conn_id: str, room_id: str) -> None:
        self.rooms.get(room_id, set()).discard(conn_id)

    def disconnect(self, conn_id: str) -> None:
        """Mimic the socket server dropping a closed connection from all rooms."""
        for members in self.rooms.values():
            members.discard(conn_id)

    def received(self, conn_id: str, event: str) -> list[dict[str, Any]]:
        return [d.data for d in self.deliveries if d.event == event and conn_id in d.recipients]

    def events(self, event: str) -> list[Delivery]:
        return [d for d in self.deliveries if d.event == event]

    def statuses(self, room_id: str) -> list[str]:
        return [
            d.data["status"]
            for d in self.deliveries
            if d.event == "processing_status" and d.room == room_id
        ]


# ---------------------------------------------------------------------------
# Scripted provider
# ---------------------------------------------------------------------------


class ScriptedProvider(TranslationProvider):
    """Mock provider for testing. Returns configurable results."""

    name = "scripted"

    def __init__(
        self,
        transcript: str = "How much money?",
        confidence: float | None = 0.95,
        speaker_id: str | None = "speaker_1",
        translations: dict[str, str] | None = None,
        fail_on: set[str] | None = None,
    ) -> None:
        self._transcript = transcript
        self._confidence = confidence
        self._speaker_id = speaker_id
        self._translations = translations or {}
        self._fail_on = fail_on or set()
        self.gate: asyncio.Event | None = None
        self.transcribe_calls: list[dict[str, Any]] = []
        self.translate_calls: list[dict[str, Any]] = []

    async def _wait_gate(self) -> None:
        if self.gate is not None:
            await self.gate.wait()

    async def transcribe(self, audio: bytes, language_code: str) -> Transcript:
        self.transcribe_calls.append({"audio": audio, "language_code": language_code})
        await self._wait_gate()
        if "transcribe" in self._fail_on:
            raise ProviderError("Sarvam API error: 503 Service Unavailable")
        segments = (
            [TranscriptSegment(speaker_id=self._speaker_id, text=self._transcript)]
            if self._speaker_id
            else []
        )
        return Transcript(text=self._transcript, confidence=self._confidence, segments=segments)

    async def translate(self, text: str, source_language: str, target_language: str) -> Translation:
        self.translate_calls.append(
            {"text": text, "source": source_language, "target": target_language}
        )
        await self._wait_gate()
        if "translate" in self._fail_on:
            raise ProviderError("Sarvam API error: 500 Internal Server Error")
        return Translation(
            text=self._translations.get(text, f"[{target_language}] {text}"),
            source_language=source_language,
            target_language=target_language,
        )


# ---------------------------------------------------------------------------
# Relay wiring
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> RoomRegistry:
    return RoomRegistry()


@pytest.fixture
def sessions() -> SessionMap:
    return SessionMap()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def cleanup(registry: RoomRegistry) -> RoomCleanupScheduler:
    """Cleanup scheduler on a scheduler that is never started: jobs stay pending."""
    return RoomCleanupScheduler(registry, AsyncIOScheduler(), delay_seconds=300)


@pytest.fixture
def simulated_provider() -> SimulatedProvider:
    return SimulatedProvider(latency_scale=0)


@pytest.fixture
def make_relay(registry, sessions, transport, cleanup):
    """Factory building a MessageRelay around the shared fixtures."""

    def _make(provider: TranslationProvider, **kwargs: Any) -> MessageRelay:
        return MessageRelay(
            registry=registry,
            sessions=sessions,
            provider=provider,
            transport=transport,
            cleanup=cleanup,
            **kwargs,
        )

    return _make


@pytest.fixture
def relay(make_relay, simulated_provider) -> MessageRelay:
    return make_relay(simulated_provider)
