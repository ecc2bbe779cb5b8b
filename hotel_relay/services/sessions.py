"""Participant session map.

One entry per live connection: which room it joined, under which role and
language. This is the relay's only authorization source: a connection may act
in a room only if its session names that room.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

logger = structlog.get_logger(__name__)


class Role(str, Enum):
    HOST = "host"
    GUEST = "guest"


@dataclass(frozen=True)
class ParticipantSession:
    room: str
    role: Role
    language: str


class SessionMap:
    """Connection id -> ParticipantSession. Re-joining overwrites the entry."""

    def __init__(self) -> None:
        self._sessions: dict[str, ParticipantSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def set_session(self, conn_id: str, session: ParticipantSession) -> ParticipantSession | None:
        """Record *session* for *conn_id*, returning the session it replaced."""
        previous = self._sessions.get(conn_id)
        self._sessions[conn_id] = session
        logger.debug(
            "session_set",
            conn_id=conn_id,
            room=session.room,
            role=session.role.value,
            replaced_room=previous.room if previous else None,
        )
        return previous

    def get_session(self, conn_id: str) -> ParticipantSession | None:
        return self._sessions.get(conn_id)

    def clear_session(self, conn_id: str) -> ParticipantSession | None:
        session = self._sessions.pop(conn_id, None)
        if session is not None:
            logger.debug("session_cleared", conn_id=conn_id, room=session.room)
        return session

    def is_member(self, conn_id: str, room_id: str) -> bool:
        """True if *conn_id* has joined *room_id*."""
        session = self._sessions.get(conn_id)
        return session is not None and session.room == room_id
