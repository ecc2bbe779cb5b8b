"""Message relay: the orchestration core.

One handler per inbound event. For audio/text turns the flow is:
  1. Validate payload            (ValidationError → sender only)
  2. Authorize session vs. room  (AuthorizationError → sender only)
  3. processing_status: transcribing   (audio only, whole room)
  4. Transcribe audio / accept text
  5. processing_status: translating    (whole room)
  6. Resolve source/target languages by role
  7. Translate
  8. Broadcast the bilingual `translation` message to the room
  9. processing_status: complete
Any failure in 3–8 sends `error` to the sender and `processing_status: error`
to the room. Nothing here is allowed to propagate out of a handler.
"""

from __future__ import annotations

import base64
import binascii
import uuid
from datetime import datetime, timezone
from typing import Any, Type, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from hotel_relay.core.exceptions import (
    AuthorizationError,
    RelayError,
    RoomNotFoundError,
    ValidationError,
)
from hotel_relay.schemas.events import (
    AudioMessagePayload,
    JoinRoomPayload,
    LanguageText,
    ProcessingStatus,
    RoomInfoRequest,
    TextMessagePayload,
    TranslationMessage,
)
from hotel_relay.services.language.directory import language_name
from hotel_relay.services.language.routing import (
    LanguagePair,
    resolve_audio_languages,
    resolve_text_languages,
)
from hotel_relay.services.provider.base import TranslationProvider
from hotel_relay.services.relay.transport import RoomTransport
from hotel_relay.services.rooms.cleanup import RoomCleanupScheduler
from hotel_relay.services.rooms.registry import Room, RoomRegistry
from hotel_relay.services.sessions import ParticipantSession, Role, SessionMap

logger = structlog.get_logger(__name__)

DEFAULT_AUDIO_CONFIDENCE = 0.95
TEXT_CONFIDENCE = 1.0

_PayloadT = TypeVar("_PayloadT", bound=BaseModel)


def _describe_validation_error(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ())) or "payload"
        parts.append(f"{location}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def new_message_id() -> str:
    return f"msg_{uuid.uuid4().hex[:16]}"


class MessageRelay:
    """Room membership, presence and the transcribe → translate pipeline."""

    def __init__(
        self,
        registry: RoomRegistry,
        sessions: SessionMap,
        provider: TranslationProvider,
        transport: RoomTransport,
        cleanup: RoomCleanupScheduler,
        max_text_chars: int = 1000,
        max_audio_bytes: int = 10 * 1024 * 1024,
    ) -> None:
        self._registry = registry
        self._sessions = sessions
        self._provider = provider
        self._transport = transport
        self._cleanup = cleanup
        self._max_text_chars = max_text_chars
        self._max_audio_bytes = max_audio_bytes

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parse(model: Type[_PayloadT], data: Any, event: str) -> _PayloadT:
        if not isinstance(data, dict):
            raise ValidationError(f"Invalid {event} payload: expected an object")
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid {event} payload: {_describe_validation_error(e)}"
            ) from e

    def _authorize(self, conn_id: str, room_id: str) -> ParticipantSession:
        session = self._sessions.get_session(conn_id)
        if session is None or session.room != room_id:
            logger.warning(
                "message_not_authorized",
                conn_id=conn_id,
                room=room_id,
                session_room=session.room if session else None,
            )
            raise AuthorizationError()
        return session

    def _decode_audio(self, audio_data: str) -> bytes:
        # Browsers commonly send data URLs ("data:audio/webm;base64,....")
        if audio_data.startswith("data:") and "," in audio_data:
            audio_data = audio_data.split(",", 1)[1]
        try:
            audio = base64.b64decode(audio_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError("Invalid audio_message payload: audioData is not valid base64") from e
        if len(audio) > self._max_audio_bytes:
            raise ValidationError(
                f"Invalid audio_message payload: audio exceeds {self._max_audio_bytes} bytes"
            )
        return audio

    @staticmethod
    def _room_stats(room: Room) -> dict[str, Any]:
        return {"userCount": room.user_count, "hotelName": room.label}

    async def _reject(self, conn_id: str, error: RelayError) -> None:
        """Sender-only notice for failures detected before processing starts."""
        logger.info("event_rejected", conn_id=conn_id, code=error.code, reason=error.message)
        await self._transport.send(conn_id, "error", {"message": error.message})

    async def _announce(
        self,
        room_id: str,
        status: ProcessingStatus,
        speaker: Role | None = None,
    ) -> None:
        payload: dict[str, Any] = {"status": status.value}
        if speaker is not None:
            payload["speaker"] = speaker.value
        await self._transport.broadcast(room_id, "processing_status", payload)

    async def _fail(self, conn_id: str, room_id: str, message: str, exc: Exception) -> None:
        logger.error(
            "message_processing_failed",
            conn_id=conn_id,
            room=room_id,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        try:
            await self._transport.send(conn_id, "error", {"message": message, "error": str(exc)})
            await self._announce(room_id, ProcessingStatus.ERROR)
        except Exception as notify_err:
            logger.error("failure_notice_not_delivered", conn_id=conn_id, error=str(notify_err))

    def _compose(
        self,
        conn_id: str,
        room_id: str,
        speaker: Role,
        original_text: str,
        translated_text: str,
        languages: LanguagePair,
        confidence: float,
        speaker_id: str | None,
    ) -> TranslationMessage:
        return TranslationMessage(
            id=new_message_id(),
            timestamp=datetime.now(timezone.utc),
            room=room_id,
            speaker=speaker,
            original=LanguageText(
                text=original_text,
                language=languages.source,
                language_name=language_name(languages.source),
            ),
            translated=LanguageText(
                text=translated_text,
                language=languages.target,
                language_name=language_name(languages.target),
            ),
            confidence=confidence,
            speaker_id=speaker_id or conn_id,
        )

    async def _leave_room(self, conn_id: str, session: ParticipantSession, *, disconnecting: bool) -> None:
        """Drop *conn_id* from its room, notify the others, schedule cleanup if emptied."""
        room = self._registry.remove_participant(session.room, conn_id)
        if not disconnecting:
            await self._transport.leave_room(conn_id, session.room)
        if room is None:
            return

        await self._transport.broadcast(
            room.room_id,
            "user_left",
            {"role": session.role.value, "userId": conn_id},
            skip=conn_id,
        )
        await self._transport.broadcast(room.room_id, "room_stats", self._room_stats(room))

        if room.is_empty:
            self._cleanup.schedule(room.room_id)

    # ------------------------------------------------------------------
    # Presence
    # ------------------------------------------------------------------

    async def join_room(self, conn_id: str, data: Any) -> ParticipantSession | None:
        """join_room: switch the connection into a room and announce it."""
        try:
            payload = self._parse(JoinRoomPayload, data, "join_room")
        except ValidationError as e:
            await self._reject(conn_id, e)
            return None

        previous = self._sessions.get_session(conn_id)
        if previous is not None and previous.room != payload.room:
            await self._leave_room(conn_id, previous, disconnecting=False)

        room = self._registry.add_participant(payload.room, conn_id)
        self._cleanup.cancel(payload.room)
        session = ParticipantSession(room=payload.room, role=payload.role, language=payload.language)
        self._sessions.set_session(conn_id, session)
        await self._transport.enter_room(conn_id, payload.room)

        logger.info(
            "participant_joined",
            conn_id=conn_id,
            room=payload.room,
            role=payload.role.value,
            language=payload.language,
            user_count=room.user_count,
        )

        display_language = language_name(payload.language)
        await self._transport.send(
            conn_id,
            "room_joined",
            {"room": payload.room, "role": payload.role.value, "language": display_language},
        )
        await self._transport.broadcast(
            payload.room,
            "user_joined",
            {"role": payload.role.value, "language": display_language, "userId": conn_id},
            skip=conn_id,
        )
        await self._transport.broadcast(payload.room, "room_stats", self._room_stats(room))
        return session

    async def disconnect(self, conn_id: str) -> None:
        """disconnect: forget the session and leave the room."""
        session = self._sessions.clear_session(conn_id)
        if session is None:
            return
        logger.info("participant_disconnected", conn_id=conn_id, room=session.room)
        await self._leave_room(conn_id, session, disconnecting=True)

    async def get_room_info(self, conn_id: str, data: Any) -> None:
        """get_room_info: label, head count and creation time, sender only."""
        try:
            payload = self._parse(RoomInfoRequest, data, "get_room_info")
            room = self._registry.get_room(payload.room)
            if room is None:
                raise RoomNotFoundError()
        except RelayError as e:
            await self._reject(conn_id, e)
            return

        await self._transport.send(
            conn_id,
            "room_info",
            {
                "hotelName": room.label,
                "userCount": room.user_count,
                "createdAt": room.created_at.isoformat(),
            },
        )

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def handle_audio_message(self, conn_id: str, data: Any) -> TranslationMessage | None:
        """audio_message: transcribe, translate, broadcast."""
        try:
            payload = self._parse(AudioMessagePayload, data, "audio_message")
            session = self._authorize(conn_id, payload.room)
            audio = self._decode_audio(payload.audio_data)
        except RelayError as e:
            await self._reject(conn_id, e)
            return None

        room_id = payload.room
        speaker = payload.role or session.role
        logger.info(
            "audio_message_received",
            conn_id=conn_id,
            room=room_id,
            role=speaker.value,
            language=payload.language,
            audio_bytes=len(audio),
        )

        try:
            await self._announce(room_id, ProcessingStatus.TRANSCRIBING, speaker)
            languages = resolve_audio_languages(
                speaker,
                declared_language=payload.language,
                guest_language=payload.guest_language,
                session_language=session.language,
            )
            transcript = await self._provider.transcribe(audio, languages.source)

            await self._announce(room_id, ProcessingStatus.TRANSLATING, speaker)
            translation = await self._provider.translate(
                transcript.text, languages.source, languages.target
            )

            confidence = transcript.confidence
            if confidence is None:
                confidence = DEFAULT_AUDIO_CONFIDENCE
            message = self._compose(
                conn_id,
                room_id,
                speaker,
                original_text=transcript.text,
                translated_text=translation.text,
                languages=languages,
                confidence=confidence,
                speaker_id=transcript.primary_speaker,
            )
            await self._transport.broadcast(room_id, "translation", message.to_wire())
            await self._announce(room_id, ProcessingStatus.COMPLETE)
        except Exception as e:
            await self._fail(conn_id, room_id, "Failed to process audio message", e)
            return None

        logger.info(
            "audio_message_relayed",
            message_id=message.id,
            room=room_id,
            source=languages.source,
            target=languages.target,
        )
        return message

    async def handle_text_message(self, conn_id: str, data: Any) -> TranslationMessage | None:
        """text_message: translate typed text and broadcast it."""
        try:
            payload = self._parse(TextMessagePayload, data, "text_message")
            if len(payload.text) > self._max_text_chars:
                raise ValidationError(
                    f"Invalid text_message payload: text exceeds {self._max_text_chars} characters"
                )
            session = self._authorize(conn_id, payload.room)
        except RelayError as e:
            await self._reject(conn_id, e)
            return None

        room_id = payload.room
        speaker = payload.role or session.role
        logger.info(
            "text_message_received",
            conn_id=conn_id,
            room=room_id,
            role=speaker.value,
            text_len=len(payload.text),
        )

        try:
            await self._announce(room_id, ProcessingStatus.TRANSLATING, speaker)
            languages = resolve_text_languages(
                speaker,
                explicit_language=payload.language,
                session_language=session.language,
            )
            translation = await self._provider.translate(
                payload.text, languages.source, languages.target
            )
            message = self._compose(
                conn_id,
                room_id,
                speaker,
                original_text=payload.text,
                translated_text=translation.text,
                languages=languages,
                confidence=TEXT_CONFIDENCE,
                speaker_id=conn_id,
            )
            await self._transport.broadcast(room_id, "translation", message.to_wire())
            await self._announce(room_id, ProcessingStatus.COMPLETE)
        except Exception as e:
            await self._fail(conn_id, room_id, "Failed to process text message", e)
            return None

        logger.info(
            "text_message_relayed",
            message_id=message.id,
            room=room_id,
            source=languages.source,
            target=languages.target,
        )
        return message
