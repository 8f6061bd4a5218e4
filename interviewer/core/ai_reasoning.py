"""
AI Reasoning Layer for the AI Interviewer

Handles all AI-powered operations:
- Opening question generation
- Answer evaluation
- Follow-up question generation
- Interview summary

Every call goes through the FailoverDispatcher. Provider errors are
raised to the caller; malformed output comes back as an empty value
or a FallbackEvaluation so the orchestrator can substitute its own content.
Integrated with Langfuse for observability and tracing.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from langfuse import Langfuse

from interviewer.config.settings import Settings, get_settings
from interviewer.core.dispatcher import FailoverDispatcher
from interviewer.core import response_parser
from interviewer.models.evaluation import EvaluationParseResult, FallbackEvaluation
from interviewer.models.interview import InterviewSession
from interviewer.prompts.interviewer import InterviewerPrompts
from interviewer.prompts.evaluator import EvaluatorPrompts

logger = logging.getLogger(__name__)


class AIReasoningLayer:
    """
    Central AI reasoning component.

    Observability:
    - Langfuse integration for tracing all LLM operations
    """

    CONNECTION_TEST_PROMPT = "Say hello and confirm you're working!"

    def __init__(self, dispatcher: FailoverDispatcher, settings: Settings | None = None):
        self.dispatcher = dispatcher
        self.settings = settings or get_settings()

        # Prompt templates
        self.interviewer_prompts = InterviewerPrompts()
        self.evaluator_prompts = EvaluatorPrompts()

        # Initialize Langfuse for observability
        self.langfuse = None
        if self.settings.langfuse_enabled:
            if self.settings.langfuse_secret_key and self.settings.langfuse_public_key:
                try:
                    self.langfuse = Langfuse(
                        secret_key=self.settings.langfuse_secret_key,
                        public_key=self.settings.langfuse_public_key,
                        host=self.settings.langfuse_base_url,
                    )
                    logger.info("Langfuse initialized for LLM observability")
                except Exception as e:
                    logger.warning(f"Failed to initialize Langfuse: {e}")
            else:
                logger.info("Langfuse keys not configured, tracing disabled")

    async def close(self):
        """Close provider connections and flush Langfuse."""
        await self.dispatcher.pool.close()
        if self.langfuse:
            try:
                self.langfuse.flush()
            except Exception as e:
                logger.warning(f"Failed to flush Langfuse: {e}")

    # =========================================================================
    # TRACING
    # =========================================================================

    @contextmanager
    def _span(self, name: str, metadata: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """
        Trace one AI operation. Yields a dict the caller fills with output.

        Tracing problems are logged and never interrupt the operation.
        """
        output: dict[str, Any] = {}
        span = None
        if self.langfuse:
            try:
                span = self.langfuse.start_span(name=name, metadata=metadata)
            except Exception as lf_err:
                logger.warning(f"Langfuse span start failed: {lf_err}")

        try:
            yield output
        except Exception as e:
            output.setdefault("error", str(e))
            raise
        finally:
            if span:
                try:
                    span.update(output=output)
                    span.end()
                except Exception as lf_err:
                    logger.warning(f"Langfuse span end failed: {lf_err}")

    # =========================================================================
    # QUESTION GENERATION
    # =========================================================================

    async def generate_questions(self, resume: str, count: int = 3) -> list[str]:
        """
        Generate the opening questions for a resume.

        Returns:
            Parsed questions, empty when the response could not be read

        Raises:
            ProviderError: no provider produced a response
        """
        with self._span("generate_questions", {"count": count}) as trace:
            prompt = self.interviewer_prompts.generate_questions_prompt(resume, count)
            response = await self.dispatcher.generate(prompt)
            questions = response_parser.parse_questions(response)

            if not questions:
                logger.warning(f"Could not parse questions from response: {response[:200]!r}")
            trace["questions"] = len(questions)
            return questions

    async def generate_next_question(self, session: InterviewSession) -> str:
        """
        Generate the next question from the conversation so far.

        Returns:
            Question text, empty when the response was unusable
        """
        with self._span(
            "generate_next_question",
            {"session_id": session.session_id, "answered": len(session.answers)},
        ) as trace:
            prompt = self.interviewer_prompts.next_question_prompt(session)
            response = await self.dispatcher.generate(prompt)
            question = response_parser.parse_question_text(response)

            if not question:
                logger.warning("Next question response was empty or not plain text")
            trace["question"] = question
            return question

    # =========================================================================
    # EVALUATION
    # =========================================================================

    async def evaluate_answer(
        self,
        question: str,
        answer: str,
        resume: str,
        session_id: str | None = None,
    ) -> EvaluationParseResult:
        """
        Evaluate an answer against its question.

        Returns:
            ParsedEvaluation, or FallbackEvaluation when the output was malformed
        """
        with self._span("evaluate_answer", {"session_id": session_id}) as trace:
            prompt = self.evaluator_prompts.evaluate_answer_prompt(question, answer, resume)
            response = await self.dispatcher.generate(prompt)
            result = response_parser.parse_evaluation(response)

            if isinstance(result, FallbackEvaluation):
                logger.warning(f"Failed to parse evaluation: {result.reason}")
                trace["fallback_reason"] = result.reason
            else:
                trace["score"] = result.evaluation.score
            return result

    # =========================================================================
    # SUMMARY
    # =========================================================================

    async def summarize(self, session: InterviewSession, average_score: float) -> str:
        """Overall assessment of a finished interview; empty when unusable."""
        with self._span(
            "summarize_interview",
            {"session_id": session.session_id, "answered": len(session.answers)},
        ) as trace:
            prompt = self.interviewer_prompts.summary_prompt(session, average_score)
            response = await self.dispatcher.generate(prompt)
            summary = response_parser.parse_summary(response)
            trace["length"] = len(summary)
            return summary

    async def test_connection(self) -> str:
        """Round-trip a trivial prompt through the provider pool."""
        return await self.dispatcher.generate(self.CONNECTION_TEST_PROMPT)
