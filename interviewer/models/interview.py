"""
Interview session and state models for the AI Interviewer
"""

import time
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from interviewer.models.evaluation import Evaluation


def new_session_id() -> str:
    """Opaque session identifier: session_<epoch ms>_<9 random chars>."""
    return f"session_{int(time.time() * 1000)}_{uuid4().hex[:9]}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InterviewState(str, Enum):
    """Interview state machine states."""

    AWAITING_FIRST_QUESTION = "awaiting_first_question"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class AnswerRecord(BaseModel):
    """A submitted answer together with its evaluation."""

    question_index: int
    question: str
    answer: str
    evaluation: Evaluation
    timestamp: datetime = Field(default_factory=utcnow)


class InterviewSession(BaseModel):
    """Complete interview session state."""

    # Identification
    session_id: str = Field(default_factory=new_session_id)
    resume: str

    # State
    state: InterviewState = Field(default=InterviewState.AWAITING_FIRST_QUESTION)

    # Timing
    start_time: datetime = Field(default_factory=utcnow)
    end_time: datetime | None = None

    # Questions & Answers
    questions: list[str] = Field(default_factory=list)
    current_question_index: int = 0
    answers: list[AnswerRecord] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.state == InterviewState.COMPLETED

    @property
    def current_question(self) -> str | None:
        """Question awaiting an answer, if any."""
        if 0 <= self.current_question_index < len(self.questions):
            return self.questions[self.current_question_index]
        return None

    def record_answer(self, answer: str, evaluation: Evaluation) -> AnswerRecord:
        """Store an answer to the current question and advance the index."""
        question = self.current_question
        if question is None:
            raise ValueError("No current question to answer")

        record = AnswerRecord(
            question_index=self.current_question_index,
            question=question,
            answer=answer,
            evaluation=evaluation,
        )
        self.answers.append(record)
        self.current_question_index += 1
        return record

    def average_score(self) -> float:
        """Mean evaluation score across answers, 0 when nothing was answered."""
        if not self.answers:
            return 0.0
        return sum(a.evaluation.score for a in self.answers) / len(self.answers)

    def is_expired(self, retention_seconds: float, now: datetime | None = None) -> bool:
        now = now or utcnow()
        return (now - self.start_time).total_seconds() > retention_seconds
