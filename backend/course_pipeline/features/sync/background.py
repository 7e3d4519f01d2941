"""
Periodic course sync.
"""

import asyncio
import logging
from typing import Optional

from course_pipeline.config import settings
from .service import CourseSyncService

logger = logging.getLogger(__name__)


class SyncScheduler:
    """
    Runs CourseSyncService on a fixed interval.

    Call `start()` to begin, `stop()` to stop.

    Usage:
        scheduler = SyncScheduler(service)
        await scheduler.start()
        # ... later ...
        await scheduler.stop()
    """

    def __init__(self, service: CourseSyncService, interval_seconds: Optional[float] = None):
        self.service = service
        self.interval_seconds = interval_seconds or settings.sync_interval_seconds
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start the sync loop."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(f"Course sync scheduler started (interval={self.interval_seconds}s)")

    async def stop(self):
        """Stop the sync loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Course sync scheduler stopped")

    async def _run_loop(self):
        while self._running:
            try:
                await self.service.run()
            except Exception as e:
                logger.error(f"Course sync error: {e}")

            await asyncio.sleep(self.interval_seconds)
