"""Room bootstrap request/response schemas."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CreateRoomRequest(BaseModel):
    """POST /create-room request body. ``hotelName`` is accepted for ``label``."""

    label: str | None = Field(
        default=None,
        max_length=200,
        validation_alias=AliasChoices("label", "hotelName", "hotel_name"),
    )


class CreateRoomResponse(BaseModel):
    """POST /create-room response body."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    room_id: str
    join_url: str


class HealthResponse(BaseModel):
    """GET /health response body."""

    status: str
    timestamp: datetime


class ProviderHealthResponse(BaseModel):
    """GET /health/provider response body."""

    provider: str
    healthy: bool


class LanguageResponse(BaseModel):
    """One entry of GET /languages."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    code: str
    name: str
    native_name: str
