"""Shared FastAPI dependencies.

The registry, provider and rate limiter are created once during the FastAPI
lifespan and stored on app.state. Route handlers retrieve them via Depends(),
never by direct import.
"""

from fastapi import Request

from hotel_relay.services.provider.base import TranslationProvider
from hotel_relay.services.rate_limit import RateLimiter
from hotel_relay.services.rooms.registry import RoomRegistry


def get_room_registry(request: Request) -> RoomRegistry:
    """Return the singleton RoomRegistry from app state."""
    return request.app.state.room_registry


def get_translation_provider(request: Request) -> TranslationProvider:
    """Return the configured TranslationProvider from app state."""
    return request.app.state.translation_provider


def get_http_rate_limiter(request: Request) -> RateLimiter:
    """Return the per-client-address limiter for HTTP endpoints."""
    return request.app.state.http_rate_limiter
