"""
Interview API endpoints

Handles interview session lifecycle:
- Starting interviews from a resume
- Submitting answers (and ending the interview)
- Reading session progress
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from interviewer.api.dependencies import get_orchestrator
from interviewer.core.interview_orchestrator import (
    InterviewOrchestrator,
    NoCurrentQuestionError,
    SessionNotFoundError,
    StateTransitionError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class StartInterviewRequest(BaseModel):
    """Request model for starting an interview."""
    resume: str | None = None


class StartInterviewResponse(BaseModel):
    """Response after starting an interview."""
    success: bool = True
    sessionId: str
    firstQuestion: str
    totalQuestions: str
    currentQuestion: int = 1


class SubmitAnswerRequest(BaseModel):
    """Request model for submitting an answer."""
    sessionId: str | None = None
    userAnswer: str | None = None


class EvaluationPayload(BaseModel):
    score: int
    feedback: str
    idealAnswer: str


class NextQuestionResponse(BaseModel):
    """Response after an answer that continues the interview."""
    success: bool = True
    evaluation: EvaluationPayload
    nextQuestion: str
    currentQuestion: int
    totalQuestions: str
    isFinal: bool = False


class FinalSummaryResponse(BaseModel):
    """Response after the candidate ends the interview."""
    success: bool = True
    isFinal: bool = True
    message: str = "Thank you for your time!"
    averageScore: str
    overallFeedback: str
    totalQuestions: int


class SessionInfoResponse(BaseModel):
    """Response for session status. Answers are never exposed."""
    success: bool = True
    sessionId: str
    currentQuestion: int
    totalQuestions: int
    isComplete: bool
    startTime: datetime


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.post("/start-interview", response_model=StartInterviewResponse)
async def start_interview(
    request: StartInterviewRequest,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> StartInterviewResponse:
    """
    Start an interview for a resume.

    Generates the opening questions and returns the first one.
    """
    if not request.resume or not request.resume.strip():
        raise HTTPException(status_code=400, detail="Resume is required")

    try:
        session = await orchestrator.start_interview(request.resume)
    except Exception:
        logger.exception("Error starting interview")
        raise HTTPException(status_code=500, detail="Failed to start interview")

    return StartInterviewResponse(
        sessionId=session.session_id,
        firstQuestion=session.current_question,
        totalQuestions=orchestrator.UNLIMITED_QUESTIONS,
        currentQuestion=1,
    )


@router.post(
    "/submit-answer",
    response_model=NextQuestionResponse | FinalSummaryResponse,
)
async def submit_answer(
    request: SubmitAnswerRequest,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> NextQuestionResponse | FinalSummaryResponse:
    """
    Submit an answer to the current question.

    A closing phrase such as "thank you" ends the interview and returns
    the final assessment; anything else is evaluated and the next
    question is returned.
    """
    if not request.sessionId or not request.userAnswer or not request.userAnswer.strip():
        raise HTTPException(status_code=400, detail="Session ID and user answer are required")

    try:
        result = await orchestrator.submit_answer(request.sessionId, request.userAnswer)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=404,
            detail="Interview session not found. Please start a new interview.",
        )
    except (NoCurrentQuestionError, StateTransitionError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception(f"Error submitting answer for {request.sessionId}")
        raise HTTPException(status_code=500, detail="Failed to process answer submission")

    if result["action"] == "complete":
        return FinalSummaryResponse(
            averageScore=result["average_score"],
            overallFeedback=result["overall_feedback"],
            totalQuestions=result["total_questions"],
        )

    evaluation = result["evaluation"]
    return NextQuestionResponse(
        evaluation=EvaluationPayload(
            score=evaluation.score,
            feedback=evaluation.feedback,
            idealAnswer=evaluation.ideal_answer,
        ),
        nextQuestion=result["next_question"],
        currentQuestion=result["current_question"],
        totalQuestions=orchestrator.UNLIMITED_QUESTIONS,
    )


@router.get("/session/{session_id}", response_model=SessionInfoResponse)
async def get_session(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionInfoResponse:
    """Get the current status of an interview session."""
    try:
        info = orchestrator.get_session_info(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")

    return SessionInfoResponse(
        sessionId=info["session_id"],
        currentQuestion=info["current_question"],
        totalQuestions=info["total_questions"],
        isComplete=info["is_complete"],
        startTime=info["start_time"],
    )
