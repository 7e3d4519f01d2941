"""
Course-related database models.

Models:
- Course: Running course (feed-synced or uploaded)
- CourseTrackPoint: Ordered points of a course (deleted with the course)
- CourseTheme: Theme tags of a course
- RoadCondition: LLM-generated road condition descriptions
"""

from datetime import datetime

from sqlalchemy import (
    Column, String, DateTime, Integer, Float, ForeignKey, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship

from course_pipeline.models.base import Base


class Course(Base):
    """
    Running course.

    `external_id` is the feed's course index; NULL for uploaded courses.
    """

    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(String(50), unique=True, nullable=True, index=True)

    name = Column(String(255), nullable=False)
    distance_km = Column(Float, nullable=False)
    duration_min = Column(Integer, nullable=False)
    level = Column(String(10), nullable=False)  # CourseLevel value
    area = Column(String(30), nullable=False)  # Area value
    tour_point = Column(Text, nullable=True)
    gpx_path = Column(String(500), nullable=False)

    # Start point (first track point)
    start_lat = Column(Float, nullable=True)
    start_lon = Column(Float, nullable=True)

    min_elevation = Column(Float, nullable=False, default=0.0)
    max_elevation = Column(Float, nullable=False, default=0.0)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    track_points = relationship(
        "CourseTrackPoint",
        back_populates="course",
        order_by="CourseTrackPoint.sequence",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    themes = relationship(
        "CourseTheme",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    road_conditions = relationship(
        "RoadCondition",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Course {self.id} external_id={self.external_id} ({self.name})>"


class CourseTrackPoint(Base):
    """Single point of a course; `sequence` is 1-based and gap-free."""

    __tablename__ = "course_track_points"
    __table_args__ = (
        UniqueConstraint("course_id", "sequence", name="uq_track_point_sequence"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )

    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)
    elevation = Column(Float, nullable=False, default=0.0)
    sequence = Column(Integer, nullable=False)

    course = relationship("Course", back_populates="track_points")


class CourseTheme(Base):
    """Theme tag of a course."""

    __tablename__ = "course_themes"
    __table_args__ = (
        UniqueConstraint("course_id", "theme", name="uq_course_theme"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    theme = Column(String(20), nullable=False)  # Theme value

    course = relationship("Course", back_populates="themes")


class RoadCondition(Base):
    """One road condition description of a course."""

    __tablename__ = "road_conditions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    course = relationship("Course", back_populates="road_conditions")
