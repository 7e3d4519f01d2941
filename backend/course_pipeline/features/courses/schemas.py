"""
Course records and reconciliation plan.

Plain data handed between the pipeline and the storage collaborator.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from course_pipeline.features.gpx.schemas import TrackPoint
from .constants import Area, CourseLevel, Theme

# Fields compared when deciding whether a feed course changed
DIFF_FIELDS = ("name", "distance_km", "duration_min", "level", "area", "gpx_path")


@dataclass
class CourseRecord:
    """
    A course with its derived fields and (optionally) its track points.

    `external_id` is the feed's natural key; None for uploaded courses.
    `id` is the storage primary key, None until persisted.
    """
    external_id: Optional[str]
    name: str
    distance_km: float
    duration_min: int
    level: CourseLevel
    area: Area
    gpx_path: str
    start_point: Optional[tuple[float, float]]  # (lat, lon)
    min_elevation: float
    max_elevation: float
    themes: frozenset[Theme] = frozenset()
    tour_point: Optional[str] = None
    track_points: list[TrackPoint] = field(default_factory=list, repr=False)
    id: Optional[int] = None

    def changed_fields(self, other: "CourseRecord") -> list[str]:
        """Names of DIFF_FIELDS whose values differ from `other`."""
        changed = []
        for name in DIFF_FIELDS:
            mine = getattr(self, name)
            theirs = getattr(other, name)
            if isinstance(mine, float) or isinstance(theirs, float):
                if not math.isclose(mine, theirs, rel_tol=1e-9, abs_tol=1e-9):
                    changed.append(name)
            elif mine != theirs:
                changed.append(name)
        return changed


@dataclass
class CourseUpdate:
    """A persisted course and the feed version that replaces it."""
    existing: CourseRecord
    incoming: CourseRecord
    changed_fields: list[str] = field(default_factory=list)


@dataclass
class ReconciliationPlan:
    """
    Insert/update/delete sets produced by diffing the feed against storage.

    `complete` is False when pagination stopped on a page failure; such a
    plan never carries deletions.
    """
    to_insert: list[CourseRecord] = field(default_factory=list)
    to_update: list[CourseUpdate] = field(default_factory=list)
    to_delete: list[CourseRecord] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    complete: bool = True

    @property
    def is_empty(self) -> bool:
        return not (self.to_insert or self.to_update or self.to_delete)

    def summary(self) -> dict:
        return {
            "inserted": len(self.to_insert),
            "updated": len(self.to_update),
            "deleted": len(self.to_delete),
            "skipped": len(self.skipped),
            "complete": self.complete,
        }
