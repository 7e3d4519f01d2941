"""Initial migration - create course tables

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create courses table
    op.create_table(
        'courses',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('external_id', sa.String(50), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('distance_km', sa.Float(), nullable=False),
        sa.Column('duration_min', sa.Integer(), nullable=False),
        sa.Column('level', sa.String(10), nullable=False),
        sa.Column('area', sa.String(30), nullable=False),
        sa.Column('tour_point', sa.Text(), nullable=True),
        sa.Column('gpx_path', sa.String(500), nullable=False),
        sa.Column('start_lat', sa.Float(), nullable=True),
        sa.Column('start_lon', sa.Float(), nullable=True),
        sa.Column('min_elevation', sa.Float(), nullable=False),
        sa.Column('max_elevation', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_courses_external_id', 'courses', ['external_id'], unique=True)

    # Create course_track_points table
    op.create_table(
        'course_track_points',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'course_id', sa.Integer(),
            sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('lat', sa.Float(), nullable=False),
        sa.Column('lon', sa.Float(), nullable=False),
        sa.Column('elevation', sa.Float(), nullable=False),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.UniqueConstraint('course_id', 'sequence', name='uq_track_point_sequence'),
    )
    op.create_index('ix_course_track_points_course_id', 'course_track_points', ['course_id'])

    # Create course_themes table
    op.create_table(
        'course_themes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'course_id', sa.Integer(),
            sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('theme', sa.String(20), nullable=False),
        sa.UniqueConstraint('course_id', 'theme', name='uq_course_theme'),
    )
    op.create_index('ix_course_themes_course_id', 'course_themes', ['course_id'])

    # Create road_conditions table
    op.create_table(
        'road_conditions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'course_id', sa.Integer(),
            sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_road_conditions_course_id', 'road_conditions', ['course_id'])


def downgrade() -> None:
    op.drop_table('road_conditions')
    op.drop_table('course_themes')
    op.drop_table('course_track_points')
    op.drop_table('courses')
