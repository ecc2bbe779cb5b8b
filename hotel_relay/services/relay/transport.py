"""Connection-level transport used by the relay.

The relay only needs four primitives: send to one connection, broadcast to a
room, and move a connection in or out of a room. SocketIOTransport maps them
onto python-socketio; tests substitute a recording fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import socketio


class RoomTransport(ABC):
    """Abstract base class for event delivery."""

    @abstractmethod
    async def send(self, conn_id: str, event: str, data: dict[str, Any]) -> None:
        """Deliver *event* to a single connection."""
        ...

    @abstractmethod
    async def broadcast(
        self,
        room_id: str,
        event: str,
        data: dict[str, Any],
        skip: str | None = None,
    ) -> None:
        """Deliver *event* to every connection in *room_id*, except *skip*."""
        ...

    @abstractmethod
    async def enter_room(self, conn_id: str, room_id: str) -> None:
        ...

    @abstractmethod
    async def leave_room(self, conn_id: str, room_id: str) -> None:
        ...


class SocketIOTransport(RoomTransport):
    """RoomTransport over a python-socketio AsyncServer (default namespace)."""

    def __init__(self, sio: socketio.AsyncServer) -> None:
        self._sio = sio

    async def send(self, conn_id: str, event: str, data: dict[str, Any]) -> None:
        await self._sio.emit(event, data, to=conn_id)

    async def broadcast(
        self,
        room_id: str,
        event: str,
        data: dict[str, Any],
        skip: str | None = None,
    ) -> None:
        await self._sio.emit(event, data, room=room_id, skip_sid=skip)

    async def enter_room(self, conn_id: str, room_id: str) -> None:
        await self._sio.enter_room(conn_id, room_id)

    async def leave_room(self, conn_id: str, room_id: str) -> None:
        await self._sio.leave_room(conn_id, room_id)
