"""
Course uploads module.

Usage:
    from course_pipeline.features.uploads import CourseUploadService
"""

from .service import CourseUploadService, CourseUpload

__all__ = [
    "CourseUploadService",
    "CourseUpload",
]
