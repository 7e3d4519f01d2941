"""
GPX Parser Service

Parses raw GPX documents into an ordered list of track points.
"""

import logging
import re

import gpxpy
import gpxpy.gpx

from .schemas import ParsedGpx, PointSource, TrackPoint

logger = logging.getLogger(__name__)

# encoding="..." in the XML declaration
_XML_ENCODING = re.compile(rb"^\s*<\?xml[^>]*?encoding=['\"]([A-Za-z0-9._-]+)['\"]")


class GpxParseError(ValueError):
    """GPX document could not be parsed."""
    pass


class GPXParserService:
    """Service for parsing GPX files."""

    @staticmethod
    def read(content: bytes) -> ParsedGpx:
        """
        Parse GPX content, preferring track points over route points.

        Track points from every track and segment are concatenated in
        document order. Route points are used only when no track point
        exists. Missing elevation (optional in GPX) becomes 0.0.

        Args:
            content: GPX file content as bytes

        Returns:
            ParsedGpx; `points` is empty (source NONE) when the document
            has neither track nor route points

        Raises:
            GpxParseError: If the document is not valid GPX
        """
        try:
            gpx = gpxpy.parse(_decode(content))
        except Exception as e:
            logger.error(f"Failed to parse GPX: {e}")
            raise GpxParseError(f"Invalid GPX file: {e}") from e

        track_points = [
            point
            for track in gpx.tracks
            for segment in track.segments
            for point in segment.points
        ]
        if track_points:
            return ParsedGpx(PointSource.TRACK, _to_track_points(track_points))

        route_points = [
            point
            for route in gpx.routes
            for point in route.points
        ]
        if route_points:
            return ParsedGpx(PointSource.ROUTE, _to_track_points(route_points))

        return ParsedGpx(PointSource.NONE, [])

    @staticmethod
    def parse(content: bytes) -> list[TrackPoint]:
        """
        Extract track points from GPX content.

        Args:
            content: GPX file content as bytes

        Returns:
            Points with sequence 1..n; empty when the document has no points

        Raises:
            GpxParseError: If the document is not valid GPX
        """
        return GPXParserService.read(content).points


def _to_track_points(
    points: list[gpxpy.gpx.GPXTrackPoint | gpxpy.gpx.GPXRoutePoint]
) -> list[TrackPoint]:
    return [
        TrackPoint(
            lat=point.latitude,
            lon=point.longitude,
            elevation=point.elevation if point.elevation is not None else 0.0,
            sequence=index,
        )
        for index, point in enumerate(points, start=1)
    ]


def _decode(content: bytes) -> str:
    """Decode with the encoding named in the XML declaration (UTF-8 default)."""
    if content.startswith(b"\xef\xbb\xbf"):
        return content.decode("utf-8-sig")
    match = _XML_ENCODING.match(content[:200])
    encoding = match.group(1).decode("ascii") if match else "utf-8"
    return content.decode(encoding)
