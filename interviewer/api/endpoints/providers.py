"""
Provider diagnostic endpoints

Read-only views of the AI provider pool plus a connectivity check.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from interviewer.api.dependencies import get_ai_reasoning, get_provider_pool
from interviewer.core.ai_reasoning import AIReasoningLayer
from interviewer.core.providers import ProviderError, ProviderPool

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class PoolSummary(BaseModel):
    total: int
    available: int
    exhausted: int
    totalQuota: int
    availableQuota: int


class ProviderInfo(BaseModel):
    id: int
    name: str
    keyName: str
    isExhausted: bool
    status: str


class ProviderStatusResponse(BaseModel):
    summary: PoolSummary
    providers: list[ProviderInfo]


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/status")
async def backend_status() -> dict[str, str]:
    """Backend status message."""
    return {"message": "AI Interviewer Backend is running!"}


@router.get("/provider-status", response_model=ProviderStatusResponse)
async def provider_status(
    pool: ProviderPool = Depends(get_provider_pool),
) -> ProviderStatusResponse:
    """Exhaustion state of every configured provider."""
    status = pool.status()
    summary = status["summary"]

    return ProviderStatusResponse(
        summary=PoolSummary(
            total=summary["total"],
            available=summary["available"],
            exhausted=summary["exhausted"],
            totalQuota=summary["total_quota"],
            availableQuota=summary["available_quota"],
        ),
        providers=[
            ProviderInfo(
                id=p["id"],
                name=p["name"],
                keyName=p["key_name"],
                isExhausted=p["is_exhausted"],
                status=p["status"],
            )
            for p in status["providers"]
        ],
    )


@router.get("/test-ai")
async def test_ai(ai_reasoning: AIReasoningLayer = Depends(get_ai_reasoning)):
    """Send a trivial prompt through the provider pool."""
    if not len(ai_reasoning.dispatcher.pool):
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "API key not found in environment variables",
                "error": "No GEMINI_API_KEY slots are set",
            },
        )

    try:
        text = await ai_reasoning.test_connection()
    except ProviderError as e:
        logger.error(f"AI connection test failed: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Error connecting to Gemini AI",
                "error": str(e),
            },
        )

    return {"success": True, "message": "Gemini AI is working!", "aiResponse": text}
