"""Socket.IO event payload schemas.

Inbound payloads are validated with pydantic before any provider call.
Wire keys are camelCase (``audioData``, ``guestLanguage``); outbound models
are serialized with ``model_dump(by_alias=True)``.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from hotel_relay.services.language.directory import DEFAULT_GUEST_LANGUAGE
from hotel_relay.services.sessions import Role


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class JoinRoomPayload(_WireModel):
    """C→S join_room."""

    room: str = Field(min_length=1)
    role: Role
    language: str = DEFAULT_GUEST_LANGUAGE


class AudioMessagePayload(_WireModel):
    """C→S audio_message. ``audioData`` is base64; empty audio is allowed."""

    room: str = Field(min_length=1)
    role: Role | None = None
    language: str | None = None
    guest_language: str | None = None
    audio_data: str = ""


class TextMessagePayload(_WireModel):
    """C→S text_message."""

    room: str = Field(min_length=1)
    role: Role | None = None
    language: str | None = None
    text: str = Field(min_length=1)


class RoomInfoRequest(_WireModel):
    """C→S get_room_info."""

    room: str = Field(min_length=1)


class ProcessingStatus(str, Enum):
    TRANSCRIBING = "transcribing"
    TRANSLATING = "translating"
    COMPLETE = "complete"
    ERROR = "error"


class LanguageText(_WireModel):
    text: str
    language: str
    language_name: str


class TranslationMessage(_WireModel):
    """S→C translation: the bilingual message broadcast to the room."""

    id: str
    timestamp: datetime
    room: str
    speaker: Role
    original: LanguageText
    translated: LanguageText
    confidence: float
    speaker_id: str

    @field_validator("confidence")
    @classmethod
    def _confidence_range(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("confidence must be within [0, 1]")
        return value

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
