"""
Track point types.

TrackPoint is the single canonical point representation used after parsing;
downstream code never needs to know whether a GPX track or route produced it.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable


@dataclass(frozen=True)
class TrackPoint:
    """A point on a course, ordered by 1-based `sequence`."""
    lat: float
    lon: float
    elevation: float
    sequence: int

    def to_dict(self) -> dict:
        """Serialized form used in prompts and CLI output."""
        return {
            "lat": self.lat,
            "lon": self.lon,
            "ele": self.elevation,
            "sequence": self.sequence,
        }


class PointSource(str, Enum):
    """Which GPX structure the points were read from."""
    TRACK = "track"
    ROUTE = "route"
    NONE = "none"


@dataclass(frozen=True)
class ParsedGpx:
    """Result of reading a GPX document."""
    source: PointSource
    points: list[TrackPoint]


def resequence(points: Iterable[TrackPoint]) -> list[TrackPoint]:
    """Return the points with `sequence` reassigned as 1..n in iteration order."""
    return [
        replace(point, sequence=index)
        for index, point in enumerate(points, start=1)
    ]
