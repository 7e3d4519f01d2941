"""
Course sync module.

Usage:
    from course_pipeline.features.sync import CourseSyncService, SyncScheduler
"""

from .service import CourseSyncService
from .background import SyncScheduler

__all__ = [
    "CourseSyncService",
    "SyncScheduler",
]
