"""
Course repository.

Storage side of the sync: reads persisted feed courses for diffing and
applies a ReconciliationPlan. Methods flush but never commit; the caller
owns the (short, storage-only) transaction.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from course_pipeline.features.gpx.schemas import TrackPoint
from course_pipeline.shared.repository import BaseRepository
from .constants import Area, CourseLevel, Theme
from .models import Course, CourseTheme, CourseTrackPoint, RoadCondition
from .schemas import CourseRecord, ReconciliationPlan

logger = logging.getLogger(__name__)


class CourseRepository(BaseRepository[Course]):
    """Repository for Course model operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Course)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_synced_courses(self) -> list[CourseRecord]:
        """All feed-sourced courses (external_id set), without track points."""
        result = await self.db.execute(
            select(Course)
            .where(Course.external_id.is_not(None))
            .options(selectinload(Course.themes))
            .order_by(Course.id)
        )
        return [_to_record(course) for course in result.scalars().all()]

    async def get_record(self, course_id: int) -> Optional[CourseRecord]:
        """Course with its track points, None if not found."""
        result = await self.db.execute(
            select(Course)
            .where(Course.id == course_id)
            .options(selectinload(Course.themes))
        )
        course = result.scalar_one_or_none()
        if course is None:
            return None
        record = _to_record(course)
        record.track_points = await self.get_track_points(course_id)
        return record

    async def get_track_points(self, course_id: int) -> list[TrackPoint]:
        """Track points of a course in sequence order."""
        result = await self.db.execute(
            select(CourseTrackPoint)
            .where(CourseTrackPoint.course_id == course_id)
            .order_by(CourseTrackPoint.sequence)
        )
        return [
            TrackPoint(lat=row.lat, lon=row.lon, elevation=row.elevation, sequence=row.sequence)
            for row in result.scalars().all()
        ]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def save_course(self, record: CourseRecord) -> int:
        """
        Insert a course with its track points and themes.

        Returns:
            New course ID (also set on `record.id`)
        """
        course = Course(external_id=record.external_id)
        _copy_fields(course, record)
        self.db.add(course)
        await self.db.flush()

        self._add_children(course.id, record)
        await self.db.flush()

        record.id = course.id
        return course.id

    async def apply_plan(self, plan: ReconciliationPlan) -> dict:
        """
        Apply a reconciliation plan: deletes, then updates, then inserts.

        Updated courses get their track points replaced wholesale
        (delete all, then reinsert).

        Returns:
            Counts of applied operations
        """
        deleted = 0
        for record in plan.to_delete:
            course_id = await self._resolve_id(record)
            if course_id is None:
                logger.warning(f"Course to delete not found: externalId={record.external_id}")
                continue
            await self._delete_course(course_id)
            deleted += 1
            logger.debug(f"Deleted course: courseId={course_id}, externalId={record.external_id}")

        updated = 0
        for update in plan.to_update:
            course_id = await self._resolve_id(update.existing)
            course = await self.get_by_id(course_id) if course_id is not None else None
            if course is None:
                logger.warning(
                    f"Course to update not found: externalId={update.existing.external_id}"
                )
                continue

            incoming = update.incoming
            _copy_fields(course, incoming)
            await self.delete_where(CourseTrackPoint, course_id=course.id)
            await self.delete_where(CourseTheme, course_id=course.id)
            self._add_children(course.id, incoming)
            await self.db.flush()
            incoming.id = course.id
            updated += 1
            logger.info(
                f"Updated course: courseId={course.id}, externalId={incoming.external_id}, "
                f"points={len(incoming.track_points)}, changed={update.changed_fields}"
            )

        for record in plan.to_insert:
            await self.save_course(record)
            logger.info(f"Inserted course: courseId={record.id}, externalId={record.external_id}")

        return {
            "inserted": len(plan.to_insert),
            "updated": updated,
            "deleted": deleted,
        }

    async def replace_road_conditions(self, course_id: int, descriptions: list[str]) -> None:
        """Delete existing road conditions of a course and store new ones."""
        await self.delete_where(RoadCondition, course_id=course_id)
        self.db.add_all([
            RoadCondition(course_id=course_id, description=description)
            for description in descriptions
        ])
        await self.db.flush()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _resolve_id(self, record: CourseRecord) -> Optional[int]:
        if record.id is not None:
            return record.id
        if record.external_id is None:
            return None
        course = await self.get_by(external_id=record.external_id)
        return course.id if course else None

    async def _delete_course(self, course_id: int) -> None:
        for child in (CourseTrackPoint, CourseTheme, RoadCondition):
            await self.delete_where(child, course_id=course_id)
        await self.delete_where(id=course_id)

    def _add_children(self, course_id: int, record: CourseRecord) -> None:
        self.db.add_all([
            CourseTrackPoint(
                course_id=course_id,
                lat=point.lat,
                lon=point.lon,
                elevation=point.elevation,
                sequence=point.sequence,
            )
            for point in record.track_points
        ])
        self.db.add_all([
            CourseTheme(course_id=course_id, theme=theme.value)
            for theme in sorted(record.themes, key=lambda t: t.value)
        ])


def _copy_fields(course: Course, record: CourseRecord) -> None:
    course.name = record.name
    course.distance_km = record.distance_km
    course.duration_min = record.duration_min
    course.level = record.level.value
    course.area = record.area.value
    course.tour_point = record.tour_point
    course.gpx_path = record.gpx_path
    if record.start_point is not None:
        course.start_lat, course.start_lon = record.start_point
    else:
        course.start_lat = course.start_lon = None
    course.min_elevation = record.min_elevation
    course.max_elevation = record.max_elevation


def _to_record(course: Course) -> CourseRecord:
    start = None
    if course.start_lat is not None and course.start_lon is not None:
        start = (course.start_lat, course.start_lon)
    return CourseRecord(
        id=course.id,
        external_id=course.external_id,
        name=course.name,
        distance_km=course.distance_km,
        duration_min=course.duration_min,
        level=CourseLevel(course.level),
        area=Area(course.area),
        themes=frozenset(Theme(t.theme) for t in course.themes),
        tour_point=course.tour_point,
        gpx_path=course.gpx_path,
        start_point=start,
        min_elevation=course.min_elevation,
        max_elevation=course.max_elevation,
    )
