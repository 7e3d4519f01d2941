"""
Geographic utility functions.

This is the SINGLE SOURCE OF TRUTH for distance, duration and elevation
calculations over track points. DO NOT duplicate these functions elsewhere.
"""
import math
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from course_pipeline.features.gpx.schemas import TrackPoint

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def total_distance_km(points: Sequence["TrackPoint"]) -> float:
    """
    Calculate total distance for a route.

    Args:
        points: Track points in sequence order

    Returns:
        Total distance in kilometers (0.0 for fewer than two points)
    """
    total = 0.0

    for i in range(1, len(points)):
        previous = points[i - 1]
        current = points[i]
        total += haversine(previous.lat, previous.lon, current.lat, current.lon)

    return total


def duration_minutes(distance_km: float, speed_kmh: float) -> int:
    """
    Time to cover a distance at constant speed.

    Args:
        distance_km: Distance in kilometers
        speed_kmh: Speed in km/h (must be positive)

    Returns:
        Duration in whole minutes, rounded half away from zero
    """
    if speed_kmh <= 0:
        raise ValueError(f"speed_kmh must be positive, got {speed_kmh}")
    minutes = distance_km / speed_kmh * 60
    # round() is banker's rounding; durations round .5 up
    return int(math.floor(minutes + 0.5))


def min_elevation(points: Sequence["TrackPoint"]) -> float:
    """Lowest elevation in meters, 0.0 for an empty sequence."""
    if not points:
        return 0.0
    return min(p.elevation for p in points)


def max_elevation(points: Sequence["TrackPoint"]) -> float:
    """Highest elevation in meters, 0.0 for an empty sequence."""
    if not points:
        return 0.0
    return max(p.elevation for p in points)


def start_point(points: Sequence["TrackPoint"]) -> Optional[tuple[float, float]]:
    """(lat, lon) of the first point, None for an empty sequence."""
    if not points:
        return None
    first = points[0]
    return (first.lat, first.lon)
