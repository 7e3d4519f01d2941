"""
Course sync orchestration.

Sync Flow:
1. Load persisted feed courses (short read session)
2. Reconcile the feed against them (network only, no session held)
3. Apply the plan in one short write transaction (skipped for dry runs)

Only one run is active at a time per service instance.
"""

import asyncio
import logging
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from course_pipeline.features.courses.repository import CourseRepository
from course_pipeline.features.feed.reconciler import FeedReconciler, FetchPage

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncSession]


class CourseSyncService:
    """
    Single-flight course sync.

    Usage:
        service = CourseSyncService(AsyncSessionLocal, client.fetch_page, reconciler)
        result = await service.run()
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        fetch_page: FetchPage,
        reconciler: FeedReconciler
    ):
        self.session_factory = session_factory
        self.fetch_page = fetch_page
        self.reconciler = reconciler
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def run(self, dry_run: bool = False) -> dict:
        """
        Run one sync.

        Returns:
            {"status": "skipped"} if a run is already active, otherwise
            {"status": "applied" | "dry_run" | "unchanged", "plan": summary,
             "applied": counts or None}
        """
        if self._lock.locked():
            logger.warning("Course sync already running, skipping")
            return {"status": "skipped", "plan": None, "applied": None}

        async with self._lock:
            logger.info(f"Course sync started (dry_run={dry_run})")

            async with self.session_factory() as session:
                existing = await CourseRepository(session).list_synced_courses()

            plan = await self.reconciler.reconcile(self.fetch_page, existing)
            summary = plan.summary()

            if dry_run:
                logger.info(f"Course sync dry run finished: {summary}")
                return {"status": "dry_run", "plan": summary, "applied": None}

            if plan.is_empty:
                logger.info("Course sync finished, nothing to apply")
                return {"status": "unchanged", "plan": summary, "applied": None}

            async with self.session_factory() as session:
                try:
                    applied = await CourseRepository(session).apply_plan(plan)
                    await session.commit()
                except Exception:
                    await session.rollback()
                    logger.error("Applying course sync plan failed, rolled back")
                    raise

            logger.info(f"Course sync finished: {applied}")
            return {"status": "applied", "plan": summary, "applied": applied}
