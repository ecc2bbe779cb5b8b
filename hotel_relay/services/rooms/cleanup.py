"""Deferred cleanup of empty rooms.

When the last participant leaves, a one-shot APScheduler job is registered
under a per-room id. A later schedule for the same room replaces it and a join
cancels it. The job itself re-reads live membership through
RoomRegistry.delete_if_empty(), so a room that was rejoined survives even if
the cancel was missed.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import structlog
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from hotel_relay.services.rooms.registry import RoomRegistry

logger = structlog.get_logger(__name__)


def _job_id(room_id: str) -> str:
    return f"room_cleanup:{room_id}"


class RoomCleanupScheduler:
    """Schedules and cancels per-room cleanup jobs."""

    def __init__(
        self,
        registry: RoomRegistry,
        scheduler: AsyncIOScheduler,
        delay_seconds: float = 300,
    ) -> None:
        self._registry = registry
        self._scheduler = scheduler
        self._delay_seconds = delay_seconds

    @property
    def delay_seconds(self) -> float:
        return self._delay_seconds

    def schedule(self, room_id: str) -> None:
        """Delete *room_id* after the grace period if it is still empty then."""
        run_at = datetime.now(timezone.utc) + timedelta(seconds=self._delay_seconds)
        self._scheduler.add_job(
            self.sweep,
            "date",
            run_date=run_at,
            args=[room_id],
            id=_job_id(room_id),
            replace_existing=True,
            misfire_grace_time=None,
        )
        logger.debug("room_cleanup_scheduled", room_id=room_id, run_at=run_at.isoformat())

    def cancel(self, room_id: str) -> bool:
        """Drop a pending cleanup. Returns False if none was pending."""
        try:
            self._scheduler.remove_job(_job_id(room_id))
        except JobLookupError:
            return False
        logger.debug("room_cleanup_cancelled", room_id=room_id)
        return True

    def is_pending(self, room_id: str) -> bool:
        return self._scheduler.get_job(_job_id(room_id)) is not None

    async def sweep(self, room_id: str) -> bool:
        """Job body. Coroutine so APScheduler runs it on the event loop."""
        deleted = self._registry.delete_if_empty(room_id)
        if deleted:
            logger.info("room_cleaned_up", room_id=room_id)
        else:
            logger.debug("room_cleanup_skipped", room_id=room_id)
        return deleted
