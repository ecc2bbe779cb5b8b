"""Fixed-window request counters.

Each key (client address or connection id) gets ``max_requests`` hits per
window. Counters live in process memory and reset when their window expires.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

import structlog

from hotel_relay.core.exceptions import RateLimitExceededError

logger = structlog.get_logger(__name__)


@dataclass
class _Window:
    started_at: float
    count: int = 0


class RateLimiter:
    """In-memory fixed-window rate limiter."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def hit(self, key: str) -> bool:
        """Count one request for *key*. Returns False once the limit is exceeded."""
        now = self._clock()
        window = self._windows.get(key)
        if window is None or now - window.started_at >= self._window_seconds:
            window = _Window(started_at=now)
            self._windows[key] = window
        window.count += 1
        return window.count <= self._max_requests

    def check(self, key: str) -> None:
        """Like hit(), but raises RateLimitExceededError when over the limit."""
        if not self.hit(key):
            logger.warning("rate_limit_exceeded", key=key, max_requests=self._max_requests)
            raise RateLimitExceededError()

    def reset(self, key: str) -> None:
        self._windows.pop(key, None)
