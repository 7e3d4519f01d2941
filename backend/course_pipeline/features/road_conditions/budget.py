"""
Token-budget simplification.

Shrinks a track until the prompt built from it fits the LLM input limit.
Tolerance doubles each round and every round simplifies the ORIGINAL
points, since point count does not fall linearly with tolerance.

The loop stops at the first fitting result, or fails once simplification is
down to the two endpoints (nothing left to shed) or the iteration cap is hit.
"""

import json
import logging
from typing import Callable, Optional, Sequence

from course_pipeline.config import settings
from course_pipeline.features.gpx.schemas import TrackPoint
from course_pipeline.features.gpx.simplifier import simplify

logger = logging.getLogger(__name__)

EstimateTokens = Callable[[str], int]
Serialize = Callable[[Sequence[TrackPoint]], str]


class TokenBudgetExceededError(Exception):
    """Even the most simplified track does not fit the token budget."""

    def __init__(self, tolerance: float, point_count: int, tokens: int, max_tokens: int):
        self.tolerance = tolerance
        self.point_count = point_count
        self.tokens = tokens
        self.max_tokens = max_tokens
        super().__init__(
            f"Prompt exceeds token budget: tokens={tokens}, maxTokens={max_tokens}, "
            f"points={point_count}, tolerance={tolerance}"
        )


def serialize_track_points(points: Sequence[TrackPoint]) -> str:
    """Compact JSON array of points, as embedded in prompts."""
    return json.dumps(
        [point.to_dict() for point in points],
        ensure_ascii=False,
        separators=(",", ":"),
    )


class TokenBudgetSimplifier:
    """
    Fits a track into a token budget by escalating simplification tolerance.

    Usage:
        budget = TokenBudgetSimplifier()
        points = budget.fit(points, estimator.estimate, max_tokens=8000,
                            serialize=lambda pts: render_prompt(pts))
    """

    def __init__(self, max_iterations: Optional[int] = None):
        self.max_iterations = max_iterations or settings.budget_max_iterations

    def fit(
        self,
        points: Sequence[TrackPoint],
        estimate_tokens: EstimateTokens,
        max_tokens: int,
        initial_tolerance: Optional[float] = None,
        serialize: Serialize = serialize_track_points,
    ) -> list[TrackPoint]:
        """
        Return the original points if they fit, else the least-simplified
        version that does.

        Args:
            points: Original track points
            estimate_tokens: text -> token count
            max_tokens: Inclusive token limit
            initial_tolerance: First tolerance tried (degrees, > 0)
            serialize: Renders points into the exact text sent to the model;
                pass a full prompt renderer so the estimate covers it all

        Raises:
            TokenBudgetExceededError: If no simplification fits
            ValueError: If initial_tolerance is not positive
        """
        tolerance = initial_tolerance if initial_tolerance is not None else settings.budget_initial_tolerance
        if tolerance <= 0:
            raise ValueError(f"initial_tolerance must be > 0, got {tolerance}")

        original = list(points)
        tokens = estimate_tokens(serialize(original))
        if tokens <= max_tokens:
            logger.info(f"Prompt within token budget, using original track: tokens={tokens}, points={len(original)}")
            return original

        logger.info(f"Prompt over token budget, simplifying: tokens={tokens}, maxTokens={max_tokens}")

        candidate = original
        for _ in range(self.max_iterations):
            if len(candidate) <= 2:
                break

            candidate = simplify(original, tolerance)
            tokens = estimate_tokens(serialize(candidate))
            if tokens <= max_tokens:
                logger.info(
                    f"Track simplified to fit token budget: tolerance={tolerance}, "
                    f"points={len(candidate)}, tokens={tokens}"
                )
                return candidate

            tolerance *= 2

        final_tolerance = tolerance / 2 if candidate is not original else 0.0
        logger.warning(
            f"Track cannot fit token budget: tokens={tokens}, maxTokens={max_tokens}, "
            f"points={len(candidate)}, tolerance={final_tolerance}"
        )
        raise TokenBudgetExceededError(final_tolerance, len(candidate), tokens, max_tokens)
