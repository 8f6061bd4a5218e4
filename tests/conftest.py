import json
import random
from typing import Callable, Iterable

import pytest

from interviewer.config.settings import Settings
from interviewer.core.ai_reasoning import AIReasoningLayer
from interviewer.core.dispatcher import FailoverDispatcher
from interviewer.core.interview_orchestrator import InterviewOrchestrator
from interviewer.core.providers import Provider, ProviderPool
from interviewer.core.retry import RetryExecutor
from interviewer.core.session_store import SessionStore


class ScriptedProvider(Provider):
    """Provider that replays queued outcomes, then falls back to `default`.

    An outcome is a string (returned), an exception (raised) or a
    callable taking the prompt.
    """

    def __init__(self, provider_id: int, outcomes: Iterable = (), default=None):
        super().__init__(provider_id, f"GEMINI_API_KEY_{provider_id}")
        self.outcomes = list(outcomes)
        self.default = default
        self.calls: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.calls.append(prompt)
        outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if isinstance(outcome, Exception):
            raise outcome
        if callable(outcome):
            return outcome(prompt)
        return outcome


def interview_responder(
    questions: list[str] | None = None,
    scores: Iterable[int] | None = None,
    next_question: str = "What did you learn from your last role?",
    summary: str = "A strong, well-rounded candidate. Thank you for your time.",
) -> Callable[[str], str]:
    """Answer each kind of interview prompt with canned content."""
    questions = questions or ["Q1 from AI?", "Q2 from AI?", "Q3 from AI?"]
    score_iter = iter(scores) if scores is not None else None

    def respond(prompt: str) -> str:
        if "JSON array of strings" in prompt:
            return "```json\n" + json.dumps(questions) + "\n```"
        if '"idealAnswer"' in prompt:
            score = next(score_iter) if score_iter is not None else 8
            return json.dumps({
                "score": score,
                "feedback": "Clear and specific.",
                "idealAnswer": "Mention a concrete example.",
            })
        if "follow-up interview question" in prompt:
            return next_question
        if "Interview session ended" in prompt:
            return summary
        return "Hello, I'm working!"

    return respond


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    return _sleep


@pytest.fixture
def build_ai(fake_sleep, settings):
    def _build(providers: list[Provider]) -> AIReasoningLayer:
        pool = ProviderPool(providers, daily_quota=50)
        retry = RetryExecutor(max_attempts=3, base_delay=1.0, overload_delay=5.0, sleep=fake_sleep)
        return AIReasoningLayer(FailoverDispatcher(pool, retry), settings)

    return _build


@pytest.fixture
def build_orchestrator(build_ai):
    def _build(providers: list[Provider] | None = None) -> InterviewOrchestrator:
        ai = build_ai(providers) if providers is not None else None
        return InterviewOrchestrator(
            ai_reasoning=ai,
            store=SessionStore(retention_seconds=3600),
            rng=random.Random(0),
        )

    return _build
