"""
Prompt templates for road-condition generation.

Templates use str.format placeholders; track points are embedded as the
JSON produced by serialize_track_points, so templates contain no braces
of their own.
"""

from typing import Sequence

from course_pipeline.features.gpx.schemas import TrackPoint
from .budget import serialize_track_points

# Number of "|"-separated fields each prompt asks for
ROAD_CONDITION_COUNT = 5
LEVEL_AND_ROAD_CONDITION_COUNT = ROAD_CONDITION_COUNT + 1

ROAD_CONDITION_TEMPLATE = """You are a running course guide for runners in Busan.
Describe the road conditions a runner will meet on the course below.

Course name: {name}
Distance: {distance} km
Estimated duration: {duration} minutes
Difficulty: {level}

Track points (JSON array, ordered by sequence; lat/lon in degrees, ele in meters):
{track_points}

Write exactly 5 short descriptions (one sentence each) covering surface,
slope changes, crossings or traffic, shade or exposure, and notable landmarks.
Answer with the 5 descriptions on one line separated by "|".
No numbering, no labels, no other text."""

LEVEL_AND_ROAD_CONDITION_TEMPLATE = """You are a running course guide for runners in Busan.
Rate the difficulty of the course below and describe its road conditions.

Course name: {name}
Distance: {distance} km
Estimated duration: {duration} minutes

Track points (JSON array, ordered by sequence; lat/lon in degrees, ele in meters):
{track_points}

Answer with 6 fields on one line separated by "|":
1. Difficulty: exactly one of EASY, MEDIUM, HARD
2-6. Five short descriptions (one sentence each) covering surface, slope
changes, crossings or traffic, shade or exposure, and notable landmarks.
No numbering, no labels, no other text."""


def render_road_condition_prompt(
    name: str,
    distance_km: float,
    duration_min: int,
    level: str,
    points: Sequence[TrackPoint]
) -> str:
    return ROAD_CONDITION_TEMPLATE.format(
        name=name,
        distance=distance_km,
        duration=duration_min,
        level=level,
        track_points=serialize_track_points(points),
    )


def render_level_and_road_condition_prompt(
    name: str,
    distance_km: float,
    duration_min: int,
    points: Sequence[TrackPoint]
) -> str:
    return LEVEL_AND_ROAD_CONDITION_TEMPLATE.format(
        name=name,
        distance=distance_km,
        duration=duration_min,
        track_points=serialize_track_points(points),
    )
