"""FastAPI + Socket.IO application entrypoint.

HTTP routes (room bootstrap, health, languages) live on the FastAPI app; the
real-time protocol is served by a python-socketio AsyncServer mounted in
front of it. Serve ``hotel_relay.main:asgi_app``.

The translation provider, room registry, session map, cleanup scheduler and
message relay are created once during the lifespan and stored on app.state.
Socket handlers are bound to the relay at the same time.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

import socketio
import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hotel_relay.api.socket_events import SocketGateway
from hotel_relay.api.v1.health import router as health_router
from hotel_relay.api.v1.rooms import router as rooms_router
from hotel_relay.core.config import settings
from hotel_relay.core.exceptions import RelayError
from hotel_relay.services.provider.factory import build_provider
from hotel_relay.services.rate_limit import RateLimiter
from hotel_relay.services.relay.core import MessageRelay
from hotel_relay.services.relay.transport import SocketIOTransport
from hotel_relay.services.rooms.cleanup import RoomCleanupScheduler
from hotel_relay.services.rooms.registry import RoomRegistry
from hotel_relay.services.sessions import SessionMap


def _configure_logging() -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("engineio.server").setLevel(logging.WARNING)
    logging.getLogger("socketio.server").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


_configure_logging()

logger = structlog.get_logger(__name__)


def _socket_cors_origins() -> str | list[str]:
    origins = settings.allowed_origin_list
    return "*" if origins == ["*"] else origins


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=_socket_cors_origins(),
    # base64 inflates audio by a third; leave headroom for the JSON envelope
    max_http_buffer_size=settings.max_audio_bytes * 2,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle.

    Builds the configured TranslationProvider and the in-memory room state,
    starts the APScheduler used for empty-room cleanup, and registers the
    Socket.IO handlers against a MessageRelay wired with all of them.
    """
    # --- Startup ---
    logger.info(
        "app_startup",
        env=settings.app_env,
        provider=settings.translation_provider,
    )

    provider = build_provider(settings)
    registry = RoomRegistry()
    sessions = SessionMap()

    scheduler = AsyncIOScheduler()
    scheduler.start()
    cleanup = RoomCleanupScheduler(
        registry=registry,
        scheduler=scheduler,
        delay_seconds=settings.room_cleanup_delay_seconds,
    )

    relay = MessageRelay(
        registry=registry,
        sessions=sessions,
        provider=provider,
        transport=SocketIOTransport(sio),
        cleanup=cleanup,
        max_text_chars=settings.max_text_chars,
        max_audio_bytes=settings.max_audio_bytes,
    )
    SocketGateway(
        sio,
        relay,
        rate_limiter=RateLimiter(
            max_requests=settings.rate_limit_max,
            window_seconds=settings.rate_limit_window_seconds,
        ),
    ).register()

    app.state.translation_provider = provider
    app.state.room_registry = registry
    app.state.session_map = sessions
    app.state.scheduler = scheduler
    app.state.room_cleanup = cleanup
    app.state.relay = relay
    app.state.http_rate_limiter = RateLimiter(
        max_requests=settings.rate_limit_max,
        window_seconds=settings.rate_limit_window_seconds,
    )

    logger.info("app_ready", cleanup_delay_seconds=cleanup.delay_seconds)
    yield

    # --- Shutdown ---
    logger.info("app_shutdown")

    scheduler.shutdown(wait=False)
    await provider.aclose()


app = FastAPI(
    title="Hotel Translation Relay",
    description="Room-based speech/text translation relay for hotel guests and staff.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Structured error response for all relay exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


app.include_router(health_router)
app.include_router(rooms_router)

asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)
