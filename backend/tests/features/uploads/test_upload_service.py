"""
Tests for CourseUploadService.
"""

import asyncio

import pytest

from course_pipeline.features.courses import Area, CourseLevel, Theme
from course_pipeline.features.geocoding import AddressInfo, GeoClassifier
from course_pipeline.features.gpx import GpxParseError
from course_pipeline.features.road_conditions import RoadConditionService, TokenBudgetSimplifier
from course_pipeline.features.uploads import CourseUploadService
from course_pipeline.shared.geo import haversine


# =============================================================================
# Test Data
# =============================================================================

def _gpx(body: str) -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">'
        f"{body}</gpx>"
    ).encode("utf-8")


ROUTE_GPX = _gpx(
    "<rte>"
    '<rtept lat="35.2440" lon="129.0890"><ele>60</ele></rtept>'
    '<rtept lat="35.2540" lon="129.0890"><ele>180</ele></rtept>'
    '<rtept lat="35.2640" lon="129.0890"><ele>420</ele></rtept>'
    "</rte>"
)


class FakeLLM:
    def __init__(self, reply):
        self.reply = reply
        self.prompts = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


async def geumjeong(lon: float, lat: float) -> AddressInfo:
    return AddressInfo("금정구", "장전동")


def _service(reply="HARD|steep climb|rocky|shaded|stairs|temple"):
    llm = FakeLLM(reply)
    road_conditions = RoadConditionService(
        llm, estimate_tokens=len, budget=TokenBudgetSimplifier(), max_tokens=100_000,
        initial_tolerance=0.00001,
    )
    return CourseUploadService(GeoClassifier(geumjeong), road_conditions, running_speed_kmh=9.0), llm


# =============================================================================
# Tests
# =============================================================================

class TestCreate:

    def test_builds_course_from_route(self):
        service, llm = _service()
        upload = asyncio.run(service.create(ROUTE_GPX, "Beomeosa", "Godangbong", "gpx/u1.gpx"))
        course = upload.course

        expected_km = round(2 * haversine(35.2440, 129.0890, 35.2540, 129.0890), 2)
        assert course.external_id is None
        assert course.name == "Beomeosa-Godangbong"
        assert course.distance_km == expected_km
        assert course.duration_min == round(expected_km / 9.0 * 60)
        assert course.level == CourseLevel.HARD
        assert course.area == Area.NORTHERN_BUSAN
        assert course.themes == frozenset({Theme.RIVERSIDE, Theme.MOUNTAIN})
        assert course.gpx_path == "gpx/u1.gpx"
        assert course.start_point == (35.2440, 129.0890)
        assert (course.min_elevation, course.max_elevation) == (60.0, 420.0)
        assert [p.sequence for p in course.track_points] == [1, 2, 3]
        assert upload.road_conditions == ["steep climb", "rocky", "shaded", "stairs", "temple"]
        assert "Beomeosa-Godangbong" in llm.prompts[0]

    def test_unparsable_upload_rejected(self):
        service, llm = _service()
        with pytest.raises(GpxParseError):
            asyncio.run(service.create(b"<html></html>", "a", "b", "gpx/x.gpx"))
        assert llm.prompts == []

    def test_empty_upload_rejected(self):
        service, _ = _service()
        with pytest.raises(GpxParseError):
            asyncio.run(service.create(_gpx(""), "a", "b", "gpx/x.gpx"))
