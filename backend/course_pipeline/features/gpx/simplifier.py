"""
Polyline simplification (Douglas-Peucker).

Tolerance is in the same units as the coordinates (fractional degrees).
Distances are measured in the (lon, lat) plane; elevation is carried along
with each kept point but does not affect which points are kept.
"""

import math
from typing import Sequence

from course_pipeline.config import settings
from .schemas import TrackPoint, resequence


def point_segment_distance(
    point: TrackPoint,
    start: TrackPoint,
    end: TrackPoint
) -> float:
    """
    Distance from a point to the segment start-end, in degrees.

    Falls back to point-to-point distance when the segment is degenerate
    (start and end coincide, e.g. a loop course).
    """
    dx = end.lon - start.lon
    dy = end.lat - start.lat
    length_sq = dx * dx + dy * dy

    if length_sq == 0:
        return math.hypot(point.lon - start.lon, point.lat - start.lat)

    t = ((point.lon - start.lon) * dx + (point.lat - start.lat) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    proj_x = start.lon + t * dx
    proj_y = start.lat + t * dy
    return math.hypot(point.lon - proj_x, point.lat - proj_y)


def simplify(points: Sequence[TrackPoint], tolerance: float) -> list[TrackPoint]:
    """
    Simplify a polyline with the Douglas-Peucker algorithm.

    The first and last points are always kept. For each span, the point
    farthest from the chord is kept (and the span split there) when its
    distance exceeds `tolerance`; otherwise the span collapses to its ends.
    Larger tolerance never yields more points.

    Args:
        points: Points in sequence order
        tolerance: Distance tolerance in degrees (>= 0)

    Returns:
        Kept points re-sequenced 1..m. Inputs of 0-2 points are returned
        unchanged.
    """
    if tolerance < 0:
        raise ValueError(f"tolerance must be >= 0, got {tolerance}")

    count = len(points)
    if count <= 2:
        return list(points)

    keep = [False] * count
    keep[0] = keep[-1] = True

    # (first, last) spans still to examine
    stack = [(0, count - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue

        max_distance = -1.0
        split = first
        for i in range(first + 1, last):
            distance = point_segment_distance(points[i], points[first], points[last])
            if distance > max_distance:
                max_distance = distance
                split = i

        if max_distance > tolerance:
            keep[split] = True
            stack.append((split, last))
            stack.append((first, split))

    return resequence(point for point, kept in zip(points, keep) if kept)


def simplify_for_display(points: Sequence[TrackPoint]) -> list[TrackPoint]:
    """Simplify with the fixed client-display tolerance."""
    return simplify(points, settings.display_simplification_tolerance)
