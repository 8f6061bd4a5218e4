"""
Data models and schemas for the AI Interviewer

Contains Pydantic models for:
- Interview sessions and answer records
- Evaluation results
"""

from interviewer.models.interview import (
    AnswerRecord,
    InterviewSession,
    InterviewState,
)
from interviewer.models.evaluation import (
    Evaluation,
    EvaluationParseResult,
    FallbackEvaluation,
    ParsedEvaluation,
)

__all__ = [
    # Interview
    "AnswerRecord",
    "InterviewSession",
    "InterviewState",
    # Evaluation
    "Evaluation",
    "EvaluationParseResult",
    "FallbackEvaluation",
    "ParsedEvaluation",
]
