"""
Command line interface.

Usage:
    course-pipeline init-db
    course-pipeline sync --dry-run
    course-pipeline simplify route.gpx --tolerance 0.0001
    course-pipeline fit route.gpx --max-tokens 8000
    course-pipeline describe 42
    course-pipeline upload route.gpx --start-name Gwangan --end-name Haeundae --gpx-path gpx/route.gpx
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from course_pipeline.config import settings
from course_pipeline.features.feed import CourseFeedClient, FeedReconciler, GpxDownloader
from course_pipeline.features.geocoding import GeoClassifier, KakaoGeocodingClient
from course_pipeline.features.gpx import GPXParserService, GpxParseError, simplify
from course_pipeline.features.road_conditions import (
    OpenAIChatClient,
    RoadConditionService,
    TokenBudgetExceededError,
    TokenBudgetSimplifier,
    TokenEstimator,
)
from course_pipeline.features.sync import CourseSyncService
from course_pipeline.features.uploads import CourseUploadService


def _configure_logging():
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def _read_points(gpx_file: str):
    try:
        points = GPXParserService.parse(Path(gpx_file).read_bytes())
    except GpxParseError as e:
        raise click.ClickException(str(e))
    if not points:
        raise click.ClickException(f"No track or route points in {gpx_file}")
    return points


def _classifier() -> GeoClassifier:
    return GeoClassifier(KakaoGeocodingClient().lookup)


def _echo_json(data):
    click.echo(json.dumps(data, ensure_ascii=False, indent=2))


@click.group()
def cli():
    """Running course pipeline."""
    _configure_logging()


@cli.command("init-db")
def init_db_command():
    """Create database tables."""
    from course_pipeline.db.session import init_db

    asyncio.run(init_db())
    click.echo("Database initialized.")


@cli.command()
@click.option("--dry-run", is_flag=True, help="Build the plan without applying it")
def sync(dry_run):
    """Sync courses from the course feed."""
    from course_pipeline.db.session import AsyncSessionLocal

    reconciler = FeedReconciler(
        fetch_gpx=GpxDownloader().download,
        classifier=_classifier(),
    )
    service = CourseSyncService(AsyncSessionLocal, CourseFeedClient().fetch_page, reconciler)
    result = asyncio.run(service.run(dry_run=dry_run))
    _echo_json(result)


@cli.command("simplify")
@click.argument("gpx_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--tolerance",
    default=None,
    type=float,
    help="Tolerance in degrees (default: display tolerance from settings)"
)
def simplify_command(gpx_file, tolerance):
    """Print simplified track points as JSON."""
    points = _read_points(gpx_file)
    if tolerance is None:
        tolerance = settings.display_simplification_tolerance
    if tolerance < 0:
        raise click.BadParameter("must be >= 0", param_hint="--tolerance")

    simplified = simplify(points, tolerance)
    click.echo(f"{len(points)} -> {len(simplified)} points", err=True)
    _echo_json([point.to_dict() for point in simplified])


@cli.command()
@click.argument("gpx_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--max-tokens", required=True, type=click.IntRange(min=1), help="Token budget")
@click.option("--initial-tolerance", default=None, type=float, help="First tolerance tried (degrees)")
def fit(gpx_file, max_tokens, initial_tolerance):
    """Simplify a track until its JSON fits a token budget."""
    points = _read_points(gpx_file)
    estimator = TokenEstimator()
    try:
        fitted = TokenBudgetSimplifier().fit(
            points, estimator.estimate, max_tokens, initial_tolerance=initial_tolerance
        )
    except TokenBudgetExceededError as e:
        raise click.ClickException(str(e))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--initial-tolerance")

    click.echo(f"{len(points)} -> {len(fitted)} points")


@cli.command()
@click.argument("course_id", type=int)
def describe(course_id):
    """Regenerate road conditions of a stored course."""
    asyncio.run(_run_describe(course_id))


async def _run_describe(course_id: int):
    """Async implementation of describe command."""
    from course_pipeline.db.session import AsyncSessionLocal
    from course_pipeline.features.courses import CourseRepository

    async with AsyncSessionLocal() as session:
        course = await CourseRepository(session).get_record(course_id)
    if course is None:
        raise click.ClickException(f"Course not found: {course_id}")

    service = RoadConditionService(OpenAIChatClient(), TokenEstimator().estimate)
    try:
        descriptions = await service.describe(course, course.track_points)
    except TokenBudgetExceededError as e:
        raise click.ClickException(str(e))

    async with AsyncSessionLocal() as session:
        await CourseRepository(session).replace_road_conditions(course_id, descriptions)
        await session.commit()

    _echo_json(descriptions)


@cli.command()
@click.argument("gpx_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--start-name", required=True, help="Start place name")
@click.option("--end-name", required=True, help="End place name")
@click.option("--gpx-path", required=True, help="Stored path of the GPX file")
@click.option("--save", is_flag=True, help="Store the course in the database")
def upload(gpx_file, start_name, end_name, gpx_path, save):
    """Build a course from a GPX file."""
    asyncio.run(_run_upload(gpx_file, start_name, end_name, gpx_path, save))


async def _run_upload(gpx_file: str, start_name: str, end_name: str, gpx_path: str, save: bool):
    """Async implementation of upload command."""
    road_conditions = RoadConditionService(OpenAIChatClient(), TokenEstimator().estimate)
    service = CourseUploadService(_classifier(), road_conditions)

    try:
        result = await service.create(Path(gpx_file).read_bytes(), start_name, end_name, gpx_path)
    except GpxParseError as e:
        raise click.ClickException(str(e))

    course = result.course
    if save:
        from course_pipeline.db.session import AsyncSessionLocal
        from course_pipeline.features.courses import CourseRepository

        async with AsyncSessionLocal() as session:
            repo = CourseRepository(session)
            await repo.save_course(course)
            await repo.replace_road_conditions(course.id, result.road_conditions)
            await session.commit()

    _echo_json({
        "id": course.id,
        "name": course.name,
        "distance_km": course.distance_km,
        "duration_min": course.duration_min,
        "level": course.level.value,
        "area": course.area.value,
        "themes": sorted(theme.value for theme in course.themes),
        "start_point": course.start_point,
        "min_elevation": course.min_elevation,
        "max_elevation": course.max_elevation,
        "points": len(course.track_points),
        "road_conditions": result.road_conditions,
    })


if __name__ == "__main__":
    cli()
