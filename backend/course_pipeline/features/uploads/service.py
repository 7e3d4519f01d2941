"""
Course creation from an uploaded GPX file.

Derives every course field from the track itself (no feed data): distance,
duration, elevation, start point, area/themes via reverse geocoding, and
difficulty plus road conditions via the LLM.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from course_pipeline.config import settings
from course_pipeline.features.courses.schemas import CourseRecord
from course_pipeline.features.geocoding.classifier import GeoClassifier
from course_pipeline.features.gpx.parser import GPXParserService, GpxParseError
from course_pipeline.features.road_conditions.service import RoadConditionService
from course_pipeline.shared.geo import (
    duration_minutes,
    max_elevation,
    min_elevation,
    start_point,
    total_distance_km,
)

logger = logging.getLogger(__name__)


@dataclass
class CourseUpload:
    """A user-uploaded course ready for storage."""
    course: CourseRecord
    road_conditions: list[str] = field(default_factory=list)


class CourseUploadService:
    """
    Builds a course from a GPX upload.

    Usage:
        service = CourseUploadService(classifier, road_conditions)
        upload = await service.create(gpx_bytes, "Gwangan", "Haeundae", "gpx/abc.gpx")
    """

    def __init__(
        self,
        classifier: GeoClassifier,
        road_conditions: RoadConditionService,
        running_speed_kmh: Optional[float] = None,
    ):
        self.classifier = classifier
        self.road_conditions = road_conditions
        self.running_speed_kmh = running_speed_kmh or settings.running_speed_kmh

    async def create(
        self,
        gpx_bytes: bytes,
        start_name: str,
        end_name: str,
        gpx_path: str
    ) -> CourseUpload:
        """
        Args:
            gpx_bytes: Uploaded GPX document
            start_name, end_name: Start/end place names; the course is
                named "{start_name}-{end_name}"
            gpx_path: Where the storage collaborator keeps the file

        Raises:
            GpxParseError: If the file is not GPX or has no points
            TokenBudgetExceededError / RoadConditionError / LLMError:
                From the difficulty and road condition request
        """
        parsed = GPXParserService.read(gpx_bytes)
        points = parsed.points
        if not points:
            raise GpxParseError("GPX file has no track or route points")
        logger.info(f"Uploaded GPX parsed: source={parsed.source.value}, points={len(points)}")

        name = f"{start_name}-{end_name}"
        distance_km = round(total_distance_km(points), 2)
        duration_min = duration_minutes(distance_km, self.running_speed_kmh)
        start = start_point(points)

        classification = await self.classifier.classify(start[0], start[1])
        assessment = await self.road_conditions.assess(name, distance_km, duration_min, points)

        course = CourseRecord(
            external_id=None,
            name=name,
            distance_km=distance_km,
            duration_min=duration_min,
            level=assessment.level,
            area=classification.area,
            themes=classification.themes,
            gpx_path=gpx_path,
            start_point=start,
            min_elevation=min_elevation(points),
            max_elevation=max_elevation(points),
            track_points=points,
        )
        logger.info(
            f"Course built from upload: name={name}, distanceKm={distance_km}, "
            f"durationMin={duration_min}, level={course.level.value}, area={course.area.value}"
        )
        return CourseUpload(course=course, road_conditions=assessment.road_conditions)
