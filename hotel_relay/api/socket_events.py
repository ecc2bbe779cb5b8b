"""Socket.IO event handlers.

One handler per wire event, registered on the AsyncServer at startup.
python-socketio runs every inbound event as its own task, so events from one
connection are funnelled through a per-connection asyncio.Lock to keep them in
arrival order. Events from different connections still interleave while a
provider call is in flight.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import socketio
import structlog

from hotel_relay.services.rate_limit import RateLimiter
from hotel_relay.services.relay.core import MessageRelay

logger = structlog.get_logger(__name__)

_Handler = Callable[[str, Any], Awaitable[Any]]


class SocketGateway:
    """Binds MessageRelay handlers to a python-socketio server."""

    def __init__(
        self,
        sio: socketio.AsyncServer,
        relay: MessageRelay,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self._sio = sio
        self._relay = relay
        self._rate_limiter = rate_limiter
        self._locks: dict[str, asyncio.Lock] = {}

    def register(self) -> None:
        self._sio.on("connect", self.on_connect)
        self._sio.on("disconnect", self.on_disconnect)
        self._sio.on("join_room", self.on_join_room)
        self._sio.on("audio_message", self.on_audio_message)
        self._sio.on("text_message", self.on_text_message)
        self._sio.on("get_room_info", self.on_get_room_info)
        logger.info("socket_handlers_registered")

    def _lock_for(self, sid: str) -> asyncio.Lock:
        return self._locks.setdefault(sid, asyncio.Lock())

    async def _run(self, sid: str, event: str, handler: _Handler, data: Any) -> None:
        async with self._lock_for(sid):
            try:
                await handler(sid, data)
            except Exception as e:
                # Relay handlers report their own failures; this only guards the server loop.
                logger.error("socket_handler_crashed", sid=sid, socket_event=event, error=str(e))

    async def _within_rate_limit(self, sid: str) -> bool:
        if self._rate_limiter is None or self._rate_limiter.hit(sid):
            return True
        logger.warning("socket_rate_limited", sid=sid)
        await self._sio.emit("error", {"message": "Rate limit exceeded"}, to=sid)
        return False

    async def on_connect(self, sid: str, environ: dict, auth: Any = None) -> None:
        logger.info("socket_connected", sid=sid, remote_addr=environ.get("REMOTE_ADDR"))

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        await self._run(sid, "disconnect", lambda s, _: self._relay.disconnect(s), None)
        self._locks.pop(sid, None)
        if self._rate_limiter is not None:
            self._rate_limiter.reset(sid)
        logger.info("socket_disconnected", sid=sid, reason=str(reason) if reason else None)

    async def on_join_room(self, sid: str, data: Any) -> None:
        await self._run(sid, "join_room", self._relay.join_room, data)

    async def on_audio_message(self, sid: str, data: Any) -> None:
        if await self._within_rate_limit(sid):
            await self._run(sid, "audio_message", self._relay.handle_audio_message, data)

    async def on_text_message(self, sid: str, data: Any) -> None:
        if await self._within_rate_limit(sid):
            await self._run(sid, "text_message", self._relay.handle_text_message, data)

    async def on_get_room_info(self, sid: str, data: Any) -> None:
        await self._run(sid, "get_room_info", self._relay.get_room_info, data)
