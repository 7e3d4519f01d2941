"""
Road condition service.

Asks the LLM to describe a course's road conditions (and, for uploaded
courses, rate its difficulty). The prompt is kept under the input token
limit with TokenBudgetSimplifier before it is sent.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence

from course_pipeline.config import settings
from course_pipeline.features.courses.constants import CourseLevel
from course_pipeline.features.courses.schemas import CourseRecord
from course_pipeline.features.gpx.schemas import TrackPoint
from .budget import TokenBudgetSimplifier
from .prompts import (
    LEVEL_AND_ROAD_CONDITION_COUNT,
    ROAD_CONDITION_COUNT,
    render_level_and_road_condition_prompt,
    render_road_condition_prompt,
)

logger = logging.getLogger(__name__)


class RoadConditionError(Exception):
    """LLM returned no usable road condition descriptions."""
    pass


class ChatModel(Protocol):
    async def complete(self, prompt: str) -> str: ...


@dataclass
class CourseAssessment:
    """Difficulty and road conditions generated for an uploaded course."""
    level: CourseLevel
    road_conditions: list[str]


def parse_response(response: Optional[str], count: int) -> list[str]:
    """
    Split a "|"-separated reply into at most `count` fields.

    Each field is trimmed; a leading "label:" (e.g. "Difficulty: HARD") is
    dropped. Returns an empty list for an empty reply.
    """
    if response is None or not response.strip():
        logger.warning("LLM response is empty")
        return []

    fields = []
    for raw in response.split("|")[:count]:
        value = raw.strip()
        if ":" in value:
            value = value.split(":", 1)[1].strip()
        fields.append(value)

    if len(fields) < count:
        logger.warning(
            f"LLM response has too few fields: expected={count}, actual={len(fields)}, "
            f"response={response!r}"
        )
    return fields


class RoadConditionService:
    """
    Generates road condition descriptions for courses.

    Usage:
        service = RoadConditionService(OpenAIChatClient(), TokenEstimator())
        descriptions = await service.describe(course, points)
    """

    def __init__(
        self,
        llm: ChatModel,
        estimate_tokens: Callable[[str], int],
        budget: Optional[TokenBudgetSimplifier] = None,
        max_tokens: Optional[int] = None,
        initial_tolerance: Optional[float] = None,
    ):
        self.llm = llm
        self.estimate_tokens = estimate_tokens
        self.budget = budget or TokenBudgetSimplifier()
        self.max_tokens = max_tokens or settings.llm_input_max_tokens
        self.initial_tolerance = initial_tolerance or settings.budget_initial_tolerance

    async def describe(
        self,
        course: CourseRecord,
        points: Sequence[TrackPoint]
    ) -> list[str]:
        """
        Five road condition descriptions for a course.

        Raises:
            TokenBudgetExceededError: If the track cannot fit the prompt budget
            RoadConditionError: If the reply has no usable descriptions
            LLMError: On LLM failure
        """
        def render(pts: Sequence[TrackPoint]) -> str:
            return render_road_condition_prompt(
                course.name, course.distance_km, course.duration_min, course.level.value, pts
            )

        fitted = self._fit(points, render)
        response = await self.llm.complete(render(fitted))
        logger.info(f"Road condition response received: courseId={course.id}, response={response!r}")

        descriptions = parse_response(response, ROAD_CONDITION_COUNT)
        if not descriptions:
            raise RoadConditionError(f"No road conditions generated: courseId={course.id}")
        return descriptions

    async def assess(
        self,
        name: str,
        distance_km: float,
        duration_min: int,
        points: Sequence[TrackPoint]
    ) -> CourseAssessment:
        """
        Difficulty plus five road condition descriptions for a new course.

        An unrecognised difficulty falls back to MEDIUM.

        Raises:
            TokenBudgetExceededError: If the track cannot fit the prompt budget
            RoadConditionError: If the reply is empty
            LLMError: On LLM failure
        """
        def render(pts: Sequence[TrackPoint]) -> str:
            return render_level_and_road_condition_prompt(name, distance_km, duration_min, pts)

        fitted = self._fit(points, render)
        response = await self.llm.complete(render(fitted))
        logger.info(f"Course assessment response received: name={name}, response={response!r}")

        fields = parse_response(response, LEVEL_AND_ROAD_CONDITION_COUNT)
        if not fields:
            raise RoadConditionError(f"No course assessment generated: name={name}")

        level_value = fields[0].upper()
        try:
            level = CourseLevel(level_value)
        except ValueError:
            logger.warning(f"Unexpected difficulty from LLM: {fields[0]!r}, using MEDIUM")
            level = CourseLevel.MEDIUM

        return CourseAssessment(level=level, road_conditions=fields[1:])

    def _fit(
        self,
        points: Sequence[TrackPoint],
        render: Callable[[Sequence[TrackPoint]], str]
    ) -> list[TrackPoint]:
        return self.budget.fit(
            points,
            self.estimate_tokens,
            self.max_tokens,
            initial_tolerance=self.initial_tolerance,
            serialize=render,
        )
