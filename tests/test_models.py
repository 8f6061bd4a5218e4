from datetime import timedelta

import pytest
from pydantic import ValidationError

from interviewer.models.evaluation import Evaluation, clamp_score
from interviewer.models.interview import InterviewSession, InterviewState, utcnow


@pytest.mark.parametrize("raw, expected", [(-5, 1), (0, 1), (7, 7), (15, 10)])
def test_evaluation_score_is_clamped(raw, expected):
    evaluation = Evaluation(score=raw, feedback="f", ideal_answer="i")
    assert evaluation.score == expected
    assert isinstance(evaluation.score, int)


def test_clamp_score_rounds():
    assert clamp_score(9.4) == 9
    assert clamp_score(10.6) == 10


@pytest.mark.parametrize("raw", ["high", None, True, float("nan")])
def test_evaluation_rejects_non_numeric_scores(raw):
    with pytest.raises(ValidationError):
        Evaluation(score=raw, feedback="f", ideal_answer="i")


def test_session_defaults():
    session = InterviewSession(resume="Engineer", questions=["A?", "B?"])

    assert session.session_id.startswith("session_")
    assert session.state == InterviewState.AWAITING_FIRST_QUESTION
    assert not session.is_complete
    assert session.current_question == "A?"
    assert session.average_score() == 0.0


def test_session_ids_are_unique():
    ids = {InterviewSession(resume="r").session_id for _ in range(50)}
    assert len(ids) == 50


def test_record_answer_advances_index():
    session = InterviewSession(resume="r", questions=["A?", "B?"])
    evaluation = Evaluation(score=5, feedback="f", ideal_answer="i")

    record = session.record_answer("my answer", evaluation)

    assert record.question == "A?"
    assert record.question_index == 0
    assert session.current_question_index == 1
    assert len(session.answers) == session.current_question_index
    assert session.current_question == "B?"


def test_record_answer_without_question():
    session = InterviewSession(resume="r", questions=[])
    with pytest.raises(ValueError):
        session.record_answer("x", Evaluation(score=5, feedback="f", ideal_answer="i"))


def test_is_expired():
    session = InterviewSession(resume="r", start_time=utcnow() - timedelta(hours=2))
    assert session.is_expired(3600)

    fresh = InterviewSession(resume="r", start_time=utcnow() - timedelta(minutes=10))
    assert not fresh.is_expired(3600)
