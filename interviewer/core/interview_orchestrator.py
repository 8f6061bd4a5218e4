"""
Interview Orchestrator - State machine for managing interview lifecycle.

This is the central coordinator for the interview process. It creates
sessions, decides which AI operation each request needs, and substitutes
fallback content whenever the AI layer cannot deliver.
"""

import logging
import random
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from interviewer.core import fallbacks
from interviewer.core.providers import ProviderError
from interviewer.core.session_store import SessionStore
from interviewer.models.evaluation import Evaluation, ParsedEvaluation
from interviewer.models.interview import InterviewSession, InterviewState, utcnow

logger = logging.getLogger(__name__)


# Whole-answer match only: "thanks!" ends the interview,
# "thank you for the opportunity" is an ordinary answer.
TERMINATION_PATTERN = re.compile(
    r"^(thank\s*you|thanks|thx|goodbye|bye|end|finish|done|that's all|stop)$",
    re.IGNORECASE,
)


def is_termination_phrase(answer: str) -> bool:
    """Check whether an answer asks to end the interview."""
    text = answer.strip().replace("’", "'").rstrip(".!?,").strip()
    return bool(TERMINATION_PATTERN.match(text))


def format_average(average: float) -> str:
    """Format an average score with one decimal, rounding ties up."""
    return str(Decimal(average).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class StateTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


class SessionNotFoundError(Exception):
    """Raised when a session id is unknown or has expired."""
    pass


class NoCurrentQuestionError(Exception):
    """Raised when an answer arrives but no question is pending."""
    pass


class InterviewOrchestrator:
    """
    Manages the interview lifecycle using a state machine pattern.

    States:
        AWAITING_FIRST_QUESTION → IN_PROGRESS → COMPLETED

    The orchestrator coordinates between:
    - AI Reasoning Layer (questions, evaluation, summary)
    - Session Storage
    """

    VALID_TRANSITIONS: dict[InterviewState, list[InterviewState]] = {
        InterviewState.AWAITING_FIRST_QUESTION: [InterviewState.IN_PROGRESS],
        InterviewState.IN_PROGRESS: [InterviewState.COMPLETED],
        InterviewState.COMPLETED: [],  # Terminal state
    }

    UNLIMITED_QUESTIONS = "Unlimited - say 'thank you' to end"

    def __init__(
        self,
        ai_reasoning: Any = None,  # AIReasoningLayer
        store: SessionStore | None = None,
        initial_question_count: int = 3,
        rng: random.Random | None = None,
    ):
        """
        Initialize the orchestrator with component dependencies.

        Args:
            ai_reasoning: AI reasoning layer; None means fallback content only
            store: Session storage
            initial_question_count: Questions requested when an interview starts
            rng: Random source for fallback question selection
        """
        self.ai_reasoning = ai_reasoning
        self.store = store or SessionStore()
        self.initial_question_count = initial_question_count
        self.rng = rng or random.Random()

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    def get_session(self, session_id: str) -> InterviewSession | None:
        """Get a session by ID."""
        return self.store.get(session_id)

    def require_session(self, session_id: str) -> InterviewSession:
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return session

    def get_session_info(self, session_id: str) -> dict[str, Any]:
        """Read-only progress snapshot. Never includes answers."""
        session = self.require_session(session_id)
        return {
            "session_id": session.session_id,
            "current_question": session.current_question_index + 1,
            "total_questions": len(session.questions),
            "is_complete": session.is_complete,
            "start_time": session.start_time,
        }

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    def transition_state(self, session: InterviewSession, new_state: InterviewState) -> None:
        """
        Move a session to a new state.

        Raises:
            StateTransitionError: If transition is invalid
        """
        old_state = session.state
        valid_next_states = self.VALID_TRANSITIONS.get(old_state, [])
        if new_state not in valid_next_states:
            raise StateTransitionError(
                f"Invalid transition from {old_state.value} to {new_state.value}"
            )

        session.state = new_state
        if new_state == InterviewState.COMPLETED:
            session.end_time = utcnow()

        logger.info(f"Session {session.session_id}: {old_state.value} → {new_state.value}")

    # =========================================================================
    # INTERVIEW FLOW
    # =========================================================================

    async def start_interview(self, resume: str) -> InterviewSession:
        """
        Create a session for a resume and prepare its opening questions.

        Returns:
            The stored session; its first question is `session.current_question`
        """
        questions = await self._opening_questions(resume)

        session = InterviewSession(resume=resume, questions=questions)
        self.transition_state(session, InterviewState.IN_PROGRESS)
        self.store.save(session)

        logger.info(f"Created interview session: {session.session_id} ({len(questions)} questions)")
        return session

    async def submit_answer(self, session_id: str, answer: str) -> dict[str, Any]:
        """
        Process an answer: either finish the interview or evaluate and continue.

        Submissions for one session are serialized. The session object is
        mutated in place and never re-saved, so a session removed by the
        expiry sweep mid-request stays removed.

        Returns:
            {"action": "complete", ...} or {"action": "question", ...}
        """
        self.require_session(session_id)

        async with self.store.lock(session_id):
            # Re-read: an earlier holder of the lock may have finished it,
            # or the sweep may have removed it while we waited.
            session = self.require_session(session_id)

            if session.is_complete:
                raise StateTransitionError("Interview has already been completed")

            if is_termination_phrase(answer):
                return await self._finish_interview(session)

            question = session.current_question
            if question is None:
                raise NoCurrentQuestionError("No current question found for this session.")

            evaluation = await self._evaluate(session, question, answer)
            session.record_answer(answer, evaluation)

            next_question = await self._next_question(session)
            session.questions.append(next_question)

            return {
                "action": "question",
                "evaluation": evaluation,
                "next_question": next_question,
                "current_question": session.current_question_index + 1,
            }

    async def _finish_interview(self, session: InterviewSession) -> dict[str, Any]:
        self.transition_state(session, InterviewState.COMPLETED)

        average = session.average_score()
        overall_feedback = fallbacks.NO_ANSWERS_FEEDBACK

        if session.answers:
            overall_feedback = await self._summary(session, average)

        return {
            "action": "complete",
            "average_score": format_average(average),
            "overall_feedback": overall_feedback,
            "total_questions": len(session.answers),
        }

    # =========================================================================
    # AI CALLS WITH FALLBACKS
    # =========================================================================

    async def _opening_questions(self, resume: str) -> list[str]:
        if self.ai_reasoning:
            try:
                questions = await self.ai_reasoning.generate_questions(
                    resume, self.initial_question_count
                )
                if questions:
                    return questions
            except ProviderError as e:
                logger.warning(f"Question generation unavailable: {e}")

        logger.warning("Using fallback opening questions")
        return fallbacks.opening_questions(self.initial_question_count)

    async def _evaluate(self, session: InterviewSession, question: str, answer: str) -> Evaluation:
        if self.ai_reasoning:
            try:
                result = await self.ai_reasoning.evaluate_answer(
                    question=question,
                    answer=answer,
                    resume=session.resume,
                    session_id=session.session_id,
                )
                if isinstance(result, ParsedEvaluation):
                    return result.evaluation
            except ProviderError as e:
                logger.warning(f"Evaluation unavailable for {session.session_id}: {e}")

        logger.warning(f"Using heuristic evaluation for {session.session_id}")
        return fallbacks.heuristic_evaluation(answer)

    async def _next_question(self, session: InterviewSession) -> str:
        if self.ai_reasoning:
            try:
                question = await self.ai_reasoning.generate_next_question(session)
                if question:
                    return question
            except ProviderError as e:
                logger.warning(f"Next question unavailable for {session.session_id}: {e}")

        logger.warning(f"Using fallback follow-up question for {session.session_id}")
        return fallbacks.follow_up_question(
            progress=len(session.answers),
            asked=session.questions,
            rng=self.rng,
        )

    async def _summary(self, session: InterviewSession, average: float) -> str:
        if self.ai_reasoning:
            try:
                summary = await self.ai_reasoning.summarize(session, average)
                if summary:
                    return summary
            except ProviderError as e:
                logger.warning(f"Summary unavailable for {session.session_id}: {e}")

        return fallbacks.summary_text(len(session.answers))
