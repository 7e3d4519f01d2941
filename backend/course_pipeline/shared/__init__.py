"""
Shared utilities (NOT business logic).

Usage:
    from course_pipeline.shared import haversine, total_distance_km
    from course_pipeline.shared.repository import BaseRepository
"""
from .geo import (
    haversine,
    total_distance_km,
    duration_minutes,
    min_elevation,
    max_elevation,
    start_point,
    EARTH_RADIUS_KM,
)
from .repository import BaseRepository

__all__ = [
    "haversine",
    "total_distance_km",
    "duration_minutes",
    "min_elevation",
    "max_elevation",
    "start_point",
    "EARTH_RADIUS_KM",
    "BaseRepository",
]
