"""Tolerant parsing of provider text into interview content.

Provider output is untrusted text: JSON may be wrapped in code fences,
prefixed with prose, or missing entirely. Nothing here raises on bad
input; callers get an empty value or a FallbackEvaluation instead.
"""

import json
import re
from typing import Any

from pydantic import ValidationError

from interviewer.models.evaluation import (
    Evaluation,
    EvaluationParseResult,
    FallbackEvaluation,
    ParsedEvaluation,
)

_FENCE = re.compile(r"```[A-Za-z0-9_-]*\s*|\s*```")
_OBJECT_BLOCK = re.compile(r"\{.*\}", re.DOTALL)
_ARRAY_BLOCK = re.compile(r"\[.*\]", re.DOTALL)
_QUESTION_PREFIX = re.compile(r"^(?:next\s+)?(?:question|q\d*)\s*[:.\-]\s*", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove ```json ... ``` style markers anywhere in the text."""
    return _FENCE.sub("", text).strip()


def extract_json(text: str, pattern: re.Pattern = _OBJECT_BLOCK) -> Any:
    """
    Parse the JSON payload embedded in a provider response.

    Tries the whole (de-fenced) text first, then the outermost block
    matching `pattern`. Returns None when nothing parses.
    """
    if not text:
        return None
    cleaned = strip_code_fences(text)

    try:
        return json.loads(cleaned)
    except ValueError:
        pass

    match = pattern.search(cleaned)
    if not match:
        return None
    try:
        return json.loads(match.group(0))
    except ValueError:
        return None


def parse_questions(text: str) -> list[str]:
    """Read a JSON array of question strings; empty list when unusable."""
    data = extract_json(text, _ARRAY_BLOCK)
    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list):
        return []
    return [q.strip() for q in data if isinstance(q, str) and q.strip()]


def parse_question_text(text: str) -> str:
    """Clean a single free-text question; empty string when unusable."""
    if not text:
        return ""
    cleaned = strip_code_fences(text)
    lines = [line.strip() for line in cleaned.splitlines() if line.strip()]
    if not lines:
        return ""
    question = " ".join(lines)
    question = _QUESTION_PREFIX.sub("", question)
    question = question.strip().strip('"').strip("'").strip()
    # A JSON payload where plain text was requested is not a question
    if question.startswith("{") or question.startswith("["):
        return ""
    return question


def parse_evaluation(text: str) -> EvaluationParseResult:
    """Read {score, feedback, idealAnswer} from provider text."""
    data = extract_json(text)
    if not isinstance(data, dict):
        return FallbackEvaluation(reason="no JSON object in response")

    feedback = data.get("feedback")
    ideal_answer = data.get("idealAnswer", data.get("ideal_answer"))
    if data.get("score") is None or not feedback or not ideal_answer:
        return FallbackEvaluation(reason="evaluation is missing score, feedback or idealAnswer")

    try:
        evaluation = Evaluation(
            score=data["score"],
            feedback=str(feedback).strip(),
            ideal_answer=str(ideal_answer).strip(),
        )
    except ValidationError as e:
        return FallbackEvaluation(reason=f"invalid evaluation: {e.errors()[0]['msg']}")

    return ParsedEvaluation(evaluation=evaluation)


def parse_summary(text: str) -> str:
    """Plain-text summary with any wrapper markers removed."""
    if not text:
        return ""
    return strip_code_fences(text)
