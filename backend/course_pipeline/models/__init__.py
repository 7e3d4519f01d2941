"""
Database Models

Declarative base shared by all feature models.
Feature models live next to their feature (features/<name>/models.py).
"""

from course_pipeline.models.base import Base

__all__ = ["Base"]
