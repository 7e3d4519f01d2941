"""
Tests for CourseSyncService and SyncScheduler.

Uses a real FeedReconciler with in-memory feed/GPX/geocoder doubles and an
in-memory SQLite database.
"""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from course_pipeline.features.courses import CourseRepository
from course_pipeline.features.feed import FeedItem, FeedPage, FeedReconciler
from course_pipeline.features.geocoding import AddressInfo, GeoClassifier
from course_pipeline.features.sync import CourseSyncService, SyncScheduler
from course_pipeline.models import Base


# =============================================================================
# Test Data
# =============================================================================

GPX = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1"><trk><trkseg>'
    + "".join(f'<trkpt lat="{35.15 + i * 0.001:.4f}" lon="129.1100"><ele>{i}</ele></trkpt>' for i in range(30))
    + "</trkseg></trk></gpx>"
).encode("utf-8")


def _item(external_id, name=None):
    return FeedItem(
        external_id=external_id,
        name=name or f"Course {external_id}",
        distance="4.5",
        required_time="90",
        level="2",
        locale="부산 수영구",
        gpx_url=f"https://gpx.test/{external_id}.gpx",
    )


class Feed:
    """Single-page feed whose items can be changed between runs."""

    def __init__(self, items):
        self.items = items
        self.gate = None

    async def __call__(self, page_no, page_size):
        if self.gate is not None:
            await self.gate.wait()
        return FeedPage(total_count=len(self.items), items=self.items if page_no == 1 else [])


async def download(url):
    return GPX


async def geocode(lon, lat):
    return AddressInfo("수영구", "민락동")


def _run(scenario):
    async def main():
        engine = create_async_engine(
            "sqlite+aiosqlite:///:memory:",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        try:
            return await scenario(factory)
        finally:
            await engine.dispose()

    return asyncio.run(main())


def _service(factory, feed):
    reconciler = FeedReconciler(
        fetch_gpx=download,
        classifier=GeoClassifier(geocode),
        page_size=50,
        target_region="부산",
        running_speed_kmh=9.0,
        concurrency=4,
    )
    return CourseSyncService(factory, feed, reconciler)


async def _external_ids(factory):
    async with factory() as session:
        return [c.external_id for c in await CourseRepository(session).list_synced_courses()]


# =============================================================================
# Tests
# =============================================================================

class TestRun:

    def test_sync_applies_then_is_idempotent(self):
        async def scenario(factory):
            feed = Feed([_item("A1"), _item("B2")])
            service = _service(factory, feed)

            first = await service.run()
            second = await service.run()

            feed.items = [_item("A1", name="Renamed")]
            third = await service.run()
            return first, second, third, await _external_ids(factory)

        first, second, third, ids = _run(scenario)

        assert first["status"] == "applied"
        assert first["applied"] == {"inserted": 2, "updated": 0, "deleted": 0}
        assert second["status"] == "unchanged"
        assert third["applied"] == {"inserted": 0, "updated": 1, "deleted": 1}
        assert ids == ["A1"]

    def test_dry_run_does_not_write(self):
        async def scenario(factory):
            result = await _service(factory, Feed([_item("A1")])).run(dry_run=True)
            return result, await _external_ids(factory)

        result, ids = _run(scenario)

        assert result["status"] == "dry_run"
        assert result["plan"]["inserted"] == 1
        assert ids == []

    def test_unusable_feed_deletes_nothing(self):
        async def scenario(factory):
            feed = Feed([_item("A1")])
            service = _service(factory, feed)
            await service.run()

            feed.items = []
            result = await service.run()
            return result, await _external_ids(factory)

        result, ids = _run(scenario)

        assert result["status"] == "unchanged"
        assert result["plan"]["complete"] is False
        assert ids == ["A1"]


class TestSingleFlight:

    def test_concurrent_run_is_skipped(self):
        async def scenario(factory):
            feed = Feed([_item("A1")])
            feed.gate = asyncio.Event()
            service = _service(factory, feed)

            first = asyncio.create_task(service.run())
            await asyncio.sleep(0.05)
            assert service.running

            second = await service.run()
            feed.gate.set()
            return await first, second

        first, second = _run(scenario)

        assert second["status"] == "skipped"
        assert first["status"] == "applied"


class CountingService:
    """Stands in for CourseSyncService; signals each run."""

    def __init__(self, fail=False):
        self.calls = 0
        self.fail = fail
        self.ran = asyncio.Event()

    async def run(self, dry_run=False):
        self.calls += 1
        self.ran.set()
        if self.fail:
            raise RuntimeError("feed down")
        return {"status": "applied"}


class TestScheduler:

    def test_start_runs_sync_and_stop_cancels(self):
        async def scenario():
            service = CountingService()
            scheduler = SyncScheduler(service, interval_seconds=3600)

            await scheduler.start()
            await scheduler.start()  # second start is a no-op
            await asyncio.wait_for(service.ran.wait(), timeout=5)
            await scheduler.stop()
            return scheduler.running, service.calls

        running, calls = asyncio.run(scenario())

        assert running is False
        assert calls == 1

    def test_loop_survives_sync_errors(self):
        async def scenario():
            service = CountingService(fail=True)
            scheduler = SyncScheduler(service, interval_seconds=0.01)

            await scheduler.start()
            for _ in range(200):
                if service.calls >= 2:
                    break
                await asyncio.sleep(0.01)
            await scheduler.stop()
            return service.calls

        assert asyncio.run(scenario()) >= 2
