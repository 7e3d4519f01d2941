"""
GPX handling module.

Usage:
    from course_pipeline.features.gpx import GPXParserService, simplify

Components:
- GPXParserService: Parse GPX documents into TrackPoint lists
- simplify / simplify_for_display: Douglas-Peucker simplification
- TrackPoint: Canonical ordered point
"""

from .schemas import TrackPoint, ParsedGpx, PointSource, resequence
from .parser import GPXParserService, GpxParseError
from .simplifier import simplify, simplify_for_display, point_segment_distance

__all__ = [
    # Schemas
    "TrackPoint",
    "ParsedGpx",
    "PointSource",
    "resequence",
    # Services
    "GPXParserService",
    "GpxParseError",
    "simplify",
    "simplify_for_display",
    "point_segment_distance",
]
