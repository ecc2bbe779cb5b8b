"""Room bootstrap endpoint."""

import structlog
from fastapi import APIRouter, Depends, Request

from hotel_relay.api.deps import get_http_rate_limiter, get_room_registry
from hotel_relay.core.config import settings
from hotel_relay.schemas.rooms import CreateRoomRequest, CreateRoomResponse
from hotel_relay.services.rate_limit import RateLimiter
from hotel_relay.services.rooms.registry import RoomRegistry

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["rooms"])


def build_join_url(base_url: str, room_id: str) -> str:
    """Shareable guest link carrying the room id as a query parameter."""
    return f"{base_url.rstrip('/')}/?room={room_id}"


@router.post("/create-room", response_model=CreateRoomResponse)
async def create_room(
    request: Request,
    body: CreateRoomRequest | None = None,
    registry: RoomRegistry = Depends(get_room_registry),
    limiter: RateLimiter = Depends(get_http_rate_limiter),
) -> CreateRoomResponse:
    """Create an empty room and return its id with a join URL."""
    client_host = request.client.host if request.client else "unknown"
    limiter.check(f"http:{client_host}")

    room_id = registry.create_room(body.label if body else None)
    base_url = settings.public_base_url or str(request.base_url)
    join_url = build_join_url(base_url, room_id)

    logger.info("create_room_ok", room_id=room_id, client=client_host)
    return CreateRoomResponse(room_id=room_id, join_url=join_url)
