"""
Evaluation models for the AI Interviewer

Defines the per-answer evaluation and the tagged result produced
when parsing an evaluation out of provider text.
"""

import math
from typing import Literal

from pydantic import BaseModel, Field, field_validator

MIN_SCORE = 1
MAX_SCORE = 10


def clamp_score(value: float) -> int:
    """Round a raw score and clamp it into [MIN_SCORE, MAX_SCORE]."""
    return max(MIN_SCORE, min(MAX_SCORE, int(round(value))))


class Evaluation(BaseModel):
    """Score and feedback for a single answer."""

    score: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE)
    feedback: str
    ideal_answer: str

    @field_validator("score", mode="before")
    @classmethod
    def _clamp(cls, value):
        if isinstance(value, bool):
            raise ValueError("score must be a number")
        if isinstance(value, str):
            value = value.strip()
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError("score must be a number")
        if math.isnan(number) or math.isinf(number):
            raise ValueError("score must be finite")
        return clamp_score(number)


class ParsedEvaluation(BaseModel):
    """Evaluation successfully read from a provider response."""

    kind: Literal["parsed"] = "parsed"
    evaluation: Evaluation


class FallbackEvaluation(BaseModel):
    """Provider response could not be used; callers apply the local heuristic."""

    kind: Literal["fallback"] = "fallback"
    reason: str


EvaluationParseResult = ParsedEvaluation | FallbackEvaluation
