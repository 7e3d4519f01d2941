"""
Road conditions module.

Usage:
    from course_pipeline.features.road_conditions import RoadConditionService
    from course_pipeline.features.road_conditions import TokenBudgetSimplifier

Components:
- TokenBudgetSimplifier: Simplifies a track until its prompt fits the budget
- TokenEstimator: tiktoken-based token counter
- OpenAIChatClient: Chat completion client
- RoadConditionService: Road conditions / difficulty via the LLM
"""

from .budget import (
    TokenBudgetSimplifier,
    TokenBudgetExceededError,
    serialize_track_points,
)
from .tokens import TokenEstimator
from .prompts import (
    render_road_condition_prompt,
    render_level_and_road_condition_prompt,
    ROAD_CONDITION_COUNT,
    LEVEL_AND_ROAD_CONDITION_COUNT,
)
from .client import OpenAIChatClient, LLMError
from .service import (
    RoadConditionService,
    RoadConditionError,
    CourseAssessment,
    parse_response,
)

__all__ = [
    # Budget
    "TokenBudgetSimplifier",
    "TokenBudgetExceededError",
    "serialize_track_points",
    "TokenEstimator",
    # Prompts
    "render_road_condition_prompt",
    "render_level_and_road_condition_prompt",
    "ROAD_CONDITION_COUNT",
    "LEVEL_AND_ROAD_CONDITION_COUNT",
    # LLM
    "OpenAIChatClient",
    "LLMError",
    # Service
    "RoadConditionService",
    "RoadConditionError",
    "CourseAssessment",
    "parse_response",
]
