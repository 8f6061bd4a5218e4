import asyncio

import pytest

from interviewer.core import fallbacks
from interviewer.core.interview_orchestrator import (
    NoCurrentQuestionError,
    SessionNotFoundError,
    StateTransitionError,
    format_average,
    is_termination_phrase,
)
from interviewer.core.providers import QuotaExceededError
from interviewer.models.interview import InterviewSession, InterviewState

from conftest import ScriptedProvider, interview_responder

RESUME = "Backend engineer, 5 years of Python and distributed systems."


class YieldingProvider(ScriptedProvider):
    """Suspends before answering so concurrent requests interleave."""

    async def generate(self, prompt: str) -> str:
        await asyncio.sleep(0)
        return await super().generate(prompt)


# ============================================================================
# TERMINATION PHRASES
# ============================================================================

@pytest.mark.parametrize(
    "answer",
    ["thank you", "Thanks!", "bye", "done", "STOP", "thankyou", "  Thank   you.  ", "That's all", "goodbye"],
)
def test_termination_phrases_match(answer):
    assert is_termination_phrase(answer)


@pytest.mark.parametrize(
    "answer",
    [
        "thank you very much for the opportunity",
        "I'm done with the migration now",
        "stop words are removed in preprocessing",
        "thanks to my team we shipped on time",
    ],
)
def test_longer_answers_do_not_terminate(answer):
    assert not is_termination_phrase(answer)


# ============================================================================
# START
# ============================================================================

def test_start_uses_ai_questions(build_orchestrator):
    provider = ScriptedProvider(1, default=interview_responder(questions=["A?", "B?", "C?"]))
    orchestrator = build_orchestrator([provider])

    session = asyncio.run(orchestrator.start_interview(RESUME))

    assert session.questions == ["A?", "B?", "C?"]
    assert session.current_question == "A?"
    assert session.state == InterviewState.IN_PROGRESS
    assert orchestrator.get_session(session.session_id) is session
    assert RESUME in provider.calls[0]


def test_start_without_ai_uses_fallback_questions(build_orchestrator):
    orchestrator = build_orchestrator(None)

    session = asyncio.run(orchestrator.start_interview(RESUME))

    assert session.questions == fallbacks.OPENING_QUESTIONS


def test_start_with_unparsable_questions_uses_fallback(build_orchestrator):
    orchestrator = build_orchestrator([ScriptedProvider(1, default="Here are some questions for you!")])

    session = asyncio.run(orchestrator.start_interview(RESUME))

    assert session.questions == fallbacks.OPENING_QUESTIONS


def test_start_with_all_providers_exhausted_uses_fallback(build_orchestrator):
    providers = [ScriptedProvider(i, default=QuotaExceededError("quota")) for i in (1, 2)]
    orchestrator = build_orchestrator(providers)

    session = asyncio.run(orchestrator.start_interview(RESUME))

    assert session.questions == fallbacks.OPENING_QUESTIONS
    assert all(p.exhausted for p in providers)


# ============================================================================
# SUBMIT ANSWER
# ============================================================================

def test_answer_is_evaluated_and_next_question_appended(build_orchestrator):
    responder = interview_responder(scores=[8], next_question="How do you mentor juniors?")
    orchestrator = build_orchestrator([ScriptedProvider(1, default=responder)])
    session = asyncio.run(orchestrator.start_interview(RESUME))

    result = asyncio.run(orchestrator.submit_answer(session.session_id, "I led a migration project."))

    assert result["action"] == "question"
    assert result["evaluation"].score == 8
    assert result["next_question"] == "How do you mentor juniors?"
    assert result["current_question"] == 2
    assert session.questions[-1] == "How do you mentor juniors?"
    assert len(session.answers) == session.current_question_index == 1
    assert session.answers[0].question == session.questions[0]


def test_invariant_holds_across_many_answers(build_orchestrator):
    orchestrator = build_orchestrator([ScriptedProvider(1, default=interview_responder())])
    session = asyncio.run(orchestrator.start_interview(RESUME))

    for i in range(5):
        asyncio.run(orchestrator.submit_answer(session.session_id, f"answer {i}"))
        assert len(session.answers) == session.current_question_index == i + 1
        assert session.current_question_index <= len(session.questions)


def test_average_score_of_five_seven_nine(build_orchestrator):
    orchestrator = build_orchestrator([ScriptedProvider(1, default=interview_responder(scores=[5, 7, 9]))])
    session = asyncio.run(orchestrator.start_interview(RESUME))

    for answer in ("first", "second", "third"):
        asyncio.run(orchestrator.submit_answer(session.session_id, answer))
    result = asyncio.run(orchestrator.submit_answer(session.session_id, "thank you"))

    assert result["action"] == "complete"
    assert result["average_score"] == "7.0"
    assert result["total_questions"] == 3
    assert result["overall_feedback"] == "A strong, well-rounded candidate. Thank you for your time."
    assert session.is_complete
    assert session.end_time is not None


def test_average_score_rounds_ties_up(build_orchestrator):
    orchestrator = build_orchestrator([ScriptedProvider(1, default=interview_responder(scores=[6, 6, 6, 7]))])
    session = asyncio.run(orchestrator.start_interview(RESUME))

    for answer in ("first", "second", "third", "fourth"):
        asyncio.run(orchestrator.submit_answer(session.session_id, answer))
    result = asyncio.run(orchestrator.submit_answer(session.session_id, "thank you"))

    assert result["average_score"] == "6.3"


@pytest.mark.parametrize(
    "average, expected",
    [(0.0, "0.0"), (6.25, "6.3"), (6.75, "6.8"), (7.0, "7.0"), (20 / 3, "6.7"), (10.0, "10.0")],
)
def test_format_average(average, expected):
    assert format_average(average) == expected


def test_termination_without_answers(build_orchestrator):
    provider = ScriptedProvider(1, default=interview_responder())
    orchestrator = build_orchestrator([provider])
    session = asyncio.run(orchestrator.start_interview(RESUME))
    calls_before = len(provider.calls)

    result = asyncio.run(orchestrator.submit_answer(session.session_id, "bye"))

    assert result["average_score"] == "0.0"
    assert result["overall_feedback"] == fallbacks.NO_ANSWERS_FEEDBACK
    assert result["total_questions"] == 0
    assert len(provider.calls) == calls_before


def test_long_thank_you_is_evaluated_not_terminating(build_orchestrator):
    orchestrator = build_orchestrator([ScriptedProvider(1, default=interview_responder())])
    session = asyncio.run(orchestrator.start_interview(RESUME))

    result = asyncio.run(
        orchestrator.submit_answer(session.session_id, "thank you very much for the opportunity")
    )

    assert result["action"] == "question"
    assert not session.is_complete


def test_summary_falls_back_when_providers_fail(build_orchestrator):
    provider = ScriptedProvider(1, default=interview_responder())
    orchestrator = build_orchestrator([provider])
    session = asyncio.run(orchestrator.start_interview(RESUME))
    asyncio.run(orchestrator.submit_answer(session.session_id, "an answer"))

    provider.default = QuotaExceededError("quota")
    result = asyncio.run(orchestrator.submit_answer(session.session_id, "thanks"))

    assert result["overall_feedback"] == fallbacks.summary_text(1)
    assert result["average_score"] == "8.0"


def test_evaluation_and_question_fall_back_when_providers_fail(build_orchestrator):
    provider = ScriptedProvider(1, default=interview_responder())
    orchestrator = build_orchestrator([provider])
    session = asyncio.run(orchestrator.start_interview(RESUME))

    provider.default = QuotaExceededError("quota")
    answer = "On one project I solved a tricky caching problem for our team. " * 4
    result = asyncio.run(orchestrator.submit_answer(session.session_id, answer))

    assert result["evaluation"] == fallbacks.heuristic_evaluation(answer)
    assert result["evaluation"].score == 9
    assert result["next_question"] in fallbacks.FOLLOW_UP_QUESTIONS[0:2]
    assert len(session.answers) == session.current_question_index == 1


def test_malformed_evaluation_uses_heuristic(build_orchestrator):
    def respond(prompt):
        if '"idealAnswer"' in prompt:
            return "I think this answer was pretty good overall."
        return interview_responder()(prompt)

    orchestrator = build_orchestrator([ScriptedProvider(1, default=respond)])
    session = asyncio.run(orchestrator.start_interview(RESUME))

    result = asyncio.run(orchestrator.submit_answer(session.session_id, "Short."))

    assert result["evaluation"].score == fallbacks.FALLBACK_BASE_SCORE


def test_failover_during_interview(build_orchestrator):
    first = ScriptedProvider(1, default=QuotaExceededError("quota"))
    second = ScriptedProvider(2, default=interview_responder(scores=[6]))
    orchestrator = build_orchestrator([first, second])
    session = asyncio.run(orchestrator.start_interview(RESUME))

    result = asyncio.run(orchestrator.submit_answer(session.session_id, "answer"))

    assert result["evaluation"].score == 6
    assert first.exhausted
    assert len(first.calls) == 1


def test_unknown_session(build_orchestrator):
    orchestrator = build_orchestrator(None)
    with pytest.raises(SessionNotFoundError):
        asyncio.run(orchestrator.submit_answer("session_missing", "hello"))


def test_completed_session_rejects_answers(build_orchestrator):
    orchestrator = build_orchestrator(None)
    session = asyncio.run(orchestrator.start_interview(RESUME))
    asyncio.run(orchestrator.submit_answer(session.session_id, "done"))

    with pytest.raises(StateTransitionError):
        asyncio.run(orchestrator.submit_answer(session.session_id, "another answer"))


def test_missing_current_question(build_orchestrator):
    orchestrator = build_orchestrator(None)
    session = InterviewSession(resume=RESUME, questions=["Only?"], current_question_index=1,
                               state=InterviewState.IN_PROGRESS)
    orchestrator.store.save(session)

    with pytest.raises(NoCurrentQuestionError):
        asyncio.run(orchestrator.submit_answer(session.session_id, "an answer"))


def test_concurrent_submissions_are_serialized(build_orchestrator):
    orchestrator = build_orchestrator([YieldingProvider(1, default=interview_responder())])
    session = asyncio.run(orchestrator.start_interview(RESUME))

    async def submit_both():
        return await asyncio.gather(
            orchestrator.submit_answer(session.session_id, "answer one"),
            orchestrator.submit_answer(session.session_id, "answer two"),
        )

    results = asyncio.run(submit_both())

    assert [r["current_question"] for r in results] == [2, 3]
    assert len(session.answers) == session.current_question_index == 2
    assert [a.question for a in session.answers] == session.questions[:2]


def test_session_info_is_read_only(build_orchestrator):
    orchestrator = build_orchestrator(None)
    session = asyncio.run(orchestrator.start_interview(RESUME))
    asyncio.run(orchestrator.submit_answer(session.session_id, "an answer"))

    first = orchestrator.get_session_info(session.session_id)
    second = orchestrator.get_session_info(session.session_id)

    assert first == second
    assert first["current_question"] == 2
    assert first["total_questions"] == 4
    assert "answers" not in first


def test_transition_table_rejects_skipping_states(build_orchestrator):
    orchestrator = build_orchestrator(None)
    session = InterviewSession(resume=RESUME)

    with pytest.raises(StateTransitionError):
        orchestrator.transition_state(session, InterviewState.COMPLETED)
