"""
Courses module.

Usage:
    from course_pipeline.features.courses import CourseRecord, ReconciliationPlan
    from course_pipeline.features.courses import CourseRepository

Components:
- CourseRecord / CourseUpdate / ReconciliationPlan: Plain records
- CourseLevel / Area / Theme: Course enums and membership tables
- Course, CourseTrackPoint, CourseTheme, RoadCondition: SQLAlchemy models
- CourseRepository: Reads feed courses, applies plans
"""

from .constants import (
    CourseLevel,
    Area,
    Theme,
    AREA_DISTRICTS,
    AREA_OVERRIDES,
    THEME_DISTRICTS,
)
from .schemas import CourseRecord, CourseUpdate, ReconciliationPlan, DIFF_FIELDS
from .models import Course, CourseTrackPoint, CourseTheme, RoadCondition
from .repository import CourseRepository

__all__ = [
    # Constants
    "CourseLevel",
    "Area",
    "Theme",
    "AREA_DISTRICTS",
    "AREA_OVERRIDES",
    "THEME_DISTRICTS",
    # Schemas
    "CourseRecord",
    "CourseUpdate",
    "ReconciliationPlan",
    "DIFF_FIELDS",
    # Models
    "Course",
    "CourseTrackPoint",
    "CourseTheme",
    "RoadCondition",
    # Repository
    "CourseRepository",
]
