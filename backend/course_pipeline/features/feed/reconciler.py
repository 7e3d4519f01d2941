"""
Feed reconciliation.

Pages through the course feed, turns each feed item into a candidate
CourseRecord (GPX download + parse, classification, derived fields) and
diffs the result against persisted courses by external id.

Reconciliation never touches storage; the resulting ReconciliationPlan is
applied by CourseRepository.apply_plan.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence

from course_pipeline.config import settings
from course_pipeline.features.courses.constants import CourseLevel
from course_pipeline.features.courses.schemas import (
    CourseRecord,
    CourseUpdate,
    ReconciliationPlan,
)
from course_pipeline.features.geocoding.classifier import GeoClassifier
from course_pipeline.features.gpx.parser import GPXParserService, GpxParseError
from course_pipeline.shared.geo import (
    duration_minutes,
    max_elevation,
    min_elevation,
    start_point,
)
from .schemas import FeedItem, FeedPage

logger = logging.getLogger(__name__)

FetchPage = Callable[[int, int], Awaitable[FeedPage]]
FetchGpx = Callable[[str], Awaitable[bytes]]


class ItemSkipped(Exception):
    """A feed item cannot become a course; it is dropped from this run."""

    def __init__(self, external_id: str, reason: str):
        self.external_id = external_id
        self.reason = reason
        super().__init__(f"{external_id}: {reason}")


@dataclass
class CollectedFeed:
    """Region-filtered feed items keyed by external id, in first-seen order."""
    items: dict[str, FeedItem]
    complete: bool
    usable: bool


class FeedReconciler:
    """
    Builds a ReconciliationPlan from the course feed.

    Usage:
        reconciler = FeedReconciler(
            fetch_gpx=GpxDownloader().download,
            classifier=GeoClassifier(KakaoGeocodingClient().lookup),
        )
        plan = await reconciler.reconcile(client.fetch_page, existing)
    """

    def __init__(
        self,
        fetch_gpx: FetchGpx,
        classifier: GeoClassifier,
        page_size: Optional[int] = None,
        target_region: Optional[str] = None,
        running_speed_kmh: Optional[float] = None,
        concurrency: Optional[int] = None,
    ):
        self.fetch_gpx = fetch_gpx
        self.classifier = classifier
        self.page_size = page_size or settings.feed_page_size
        self.target_region = target_region if target_region is not None else settings.feed_target_region
        self.running_speed_kmh = running_speed_kmh or settings.running_speed_kmh
        self.concurrency = concurrency or settings.sync_concurrency

    async def reconcile(
        self,
        fetch_page: FetchPage,
        existing: Sequence[CourseRecord]
    ) -> ReconciliationPlan:
        """
        Diff the feed against persisted courses.

        Args:
            fetch_page: async (page_no, page_size) -> FeedPage
            existing: Persisted courses; only those with an external id take
                part in the diff

        Returns:
            ReconciliationPlan. Empty (and incomplete) when the first page is
            unusable; without deletions when a later page failed.
        """
        collected = await self.collect(fetch_page)
        if not collected.usable:
            return ReconciliationPlan(complete=False)

        records, skipped = await self._build_records(list(collected.items.values()))

        existing_by_id = {
            record.external_id: record
            for record in existing
            if record.external_id is not None
        }

        plan = ReconciliationPlan(skipped=skipped, complete=collected.complete)
        for record in records:
            current = existing_by_id.get(record.external_id)
            if current is None:
                plan.to_insert.append(record)
                continue

            changed = current.changed_fields(record)
            if changed:
                record.id = current.id
                plan.to_update.append(CourseUpdate(current, record, changed))

        # Skipped items were still seen; a bad GPX file must not delete a course
        seen_ids = set(collected.items)
        stale = [
            record
            for external_id, record in existing_by_id.items()
            if external_id not in seen_ids
        ]
        if collected.complete:
            plan.to_delete = stale
        elif stale:
            logger.warning(
                f"Feed read incomplete, not deleting {len(stale)} courses missing from it"
            )

        logger.info(f"Reconciliation plan: {plan.summary()}")
        return plan

    # -------------------------------------------------------------------------
    # Pagination
    # -------------------------------------------------------------------------

    async def collect(self, fetch_page: FetchPage) -> CollectedFeed:
        """
        Fetch every page and keep items inside the target region.

        Stops when the cumulative number of fetched items (before region
        filtering) reaches the reported total, or on an empty page. A failed
        page stops pagination and marks the result incomplete.
        """
        items: dict[str, FeedItem] = {}
        seen_on_page: dict[str, int] = {}
        fetched = 0
        page_no = 1

        while True:
            try:
                page = await fetch_page(page_no, self.page_size)
            except Exception as e:
                if page_no == 1:
                    logger.warning(f"First feed page unusable, skipping sync: {e}")
                    return CollectedFeed(items={}, complete=False, usable=False)
                logger.warning(f"Feed page failed, stopping pagination: pageNo={page_no}: {e}")
                return CollectedFeed(items=items, complete=False, usable=True)

            if not page.items:
                if page_no == 1:
                    logger.warning("First feed page has no items, skipping sync")
                    return CollectedFeed(items={}, complete=False, usable=False)
                break

            fetched += len(page.items)
            for item in page.items:
                self._collect_item(item, page_no, items, seen_on_page)

            if fetched >= page.total_count:
                break
            page_no += 1

        logger.info(
            f"Feed collected: pages={page_no}, fetched={fetched}, "
            f"inRegion={len(items)}"
        )
        return CollectedFeed(items=items, complete=True, usable=True)

    def _collect_item(
        self,
        item: FeedItem,
        page_no: int,
        items: dict[str, FeedItem],
        seen_on_page: dict[str, int]
    ) -> None:
        if not item.locale or not item.locale.startswith(self.target_region):
            return

        external_id = _blank_to_none(item.external_id)
        if external_id is None:
            logger.warning(f"Feed item without course index skipped: name={item.name!r}")
            return

        if external_id in items:
            logger.warning(
                f"Duplicate course in feed, keeping the later one: externalId={external_id}, "
                f"firstPage={seen_on_page[external_id]}, duplicatePage={page_no}"
            )
        items[external_id] = item
        seen_on_page[external_id] = page_no

    # -------------------------------------------------------------------------
    # Candidate records
    # -------------------------------------------------------------------------

    async def _build_records(
        self,
        items: list[FeedItem]
    ) -> tuple[list[CourseRecord], list[str]]:
        semaphore = asyncio.Semaphore(self.concurrency)

        async def build(item: FeedItem) -> CourseRecord | ItemSkipped:
            async with semaphore:
                try:
                    return await self.build_record(item)
                except ItemSkipped as skip:
                    return skip
                except Exception as e:
                    logger.exception(f"Unexpected error building course: externalId={item.external_id}")
                    return ItemSkipped(item.external_id or "?", f"unexpected error: {e}")

        # gather keeps input order, so the plan does not depend on timing
        results = await asyncio.gather(*(build(item) for item in items))

        records: list[CourseRecord] = []
        skipped: list[str] = []
        for result in results:
            if isinstance(result, ItemSkipped):
                logger.warning(f"Feed item skipped: externalId={result.external_id}, {result.reason}")
                skipped.append(result.external_id)
            else:
                records.append(result)
        return records, skipped

    async def build_record(self, item: FeedItem) -> CourseRecord:
        """
        Validate a feed item and derive its CourseRecord.

        Raises:
            ItemSkipped: On a missing/unparsable field, failed download or
                empty/unparsable GPX
        """
        external_id = _blank_to_none(item.external_id) or "?"

        name = _required(item.name, external_id, "crsKorNm")
        distance_km = _parse_float(_required(item.distance, external_id, "crsDstnc"), external_id, "crsDstnc")
        _parse_int(_required(item.required_time, external_id, "crsTotlRqrmHour"), external_id, "crsTotlRqrmHour")
        level_code = _required(item.level, external_id, "crsLevel")
        try:
            level = CourseLevel.from_feed_value(level_code)
        except ValueError as e:
            raise ItemSkipped(external_id, f"field=crsLevel: {e}") from e
        _required(item.locale, external_id, "sigun")
        gpx_url = _required(item.gpx_url, external_id, "gpxpath")

        try:
            content = await self.fetch_gpx(gpx_url)
        except Exception as e:
            raise ItemSkipped(external_id, f"GPX download failed: {e}") from e

        try:
            points = GPXParserService.parse(content)
        except GpxParseError as e:
            raise ItemSkipped(external_id, f"GPX unparsable: {e}") from e
        if not points:
            raise ItemSkipped(external_id, "GPX has no points")

        start = start_point(points)
        classification = await self.classifier.classify(
            start[0], start[1], fallback_district=item.district
        )

        return CourseRecord(
            external_id=external_id,
            name=name,
            distance_km=distance_km,
            duration_min=duration_minutes(distance_km, self.running_speed_kmh),
            level=level,
            area=classification.area,
            themes=classification.themes,
            tour_point=_blank_to_none(item.tour_info),
            gpx_path=gpx_url,
            start_point=start,
            min_elevation=min_elevation(points),
            max_elevation=max_elevation(points),
            track_points=points,
        )


# =============================================================================
# Field validation
# =============================================================================

def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


def _required(value: Optional[str], external_id: str, field_name: str) -> str:
    value = _blank_to_none(value)
    if value is None:
        raise ItemSkipped(external_id, f"field={field_name} missing")
    return value


def _parse_float(value: str, external_id: str, field_name: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ItemSkipped(external_id, f"field={field_name} not a number: {value!r}") from None


def _parse_int(value: str, external_id: str, field_name: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ItemSkipped(external_id, f"field={field_name} not an integer: {value!r}") from None
