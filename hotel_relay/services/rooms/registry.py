"""In-memory room registry.

Rooms are created explicitly through POST /create-room or implicitly when a
participant joins an identifier the registry does not know. Emptied rooms are
removed later by the cleanup scheduler, which calls delete_if_empty() so the
decision is taken against live membership, not a snapshot.

All methods are synchronous and only ever called from the event loop thread.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

logger = structlog.get_logger(__name__)

PLACEHOLDER_LABEL = "Unknown Hotel"


@dataclass
class Room:
    room_id: str
    label: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    participants: set[str] = field(default_factory=set)

    @property
    def user_count(self) -> int:
        return len(self.participants)

    @property
    def is_empty(self) -> bool:
        return not self.participants


def generate_room_id() -> str:
    return f"room_{uuid.uuid4().hex}"


class RoomRegistry:
    """Room id -> Room table."""

    def __init__(self) -> None:
        self._rooms: dict[str, Room] = {}

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def create_room(self, label: str | None = None) -> str:
        """Create a new empty room and return its identifier."""
        room_id = generate_room_id()
        while room_id in self._rooms:
            room_id = generate_room_id()
        self._rooms[room_id] = Room(room_id=room_id, label=label or PLACEHOLDER_LABEL)
        logger.info("room_created", room_id=room_id, label=self._rooms[room_id].label)
        return room_id

    def ensure_room(self, room_id: str) -> Room:
        """Return the room, creating it with a placeholder label if absent."""
        room = self._rooms.get(room_id)
        if room is None:
            room = Room(room_id=room_id, label=PLACEHOLDER_LABEL)
            self._rooms[room_id] = room
            logger.info("room_created_implicitly", room_id=room_id)
        return room

    def get_room(self, room_id: str) -> Room | None:
        return self._rooms.get(room_id)

    def user_count(self, room_id: str) -> int:
        room = self._rooms.get(room_id)
        return room.user_count if room else 0

    def add_participant(self, room_id: str, conn_id: str) -> Room:
        room = self.ensure_room(room_id)
        room.participants.add(conn_id)
        logger.debug("participant_added", room_id=room_id, conn_id=conn_id, user_count=room.user_count)
        return room

    def remove_participant(self, room_id: str, conn_id: str) -> Room | None:
        """Remove *conn_id* from the room. Returns None if the room is gone."""
        room = self._rooms.get(room_id)
        if room is None:
            return None
        room.participants.discard(conn_id)
        logger.debug("participant_removed", room_id=room_id, conn_id=conn_id, user_count=room.user_count)
        return room

    def delete_if_empty(self, room_id: str) -> bool:
        """Delete the room if it currently has no participants."""
        room = self._rooms.get(room_id)
        if room is None or not room.is_empty:
            return False
        del self._rooms[room_id]
        logger.info("room_deleted", room_id=room_id)
        return True
