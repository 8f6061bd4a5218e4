"""
API Dependencies

Provides dependency injection for API endpoints.
Manages singleton instances of core components.
"""

from interviewer.config.settings import get_settings
from interviewer.core.ai_reasoning import AIReasoningLayer
from interviewer.core.dispatcher import FailoverDispatcher
from interviewer.core.interview_orchestrator import InterviewOrchestrator
from interviewer.core.providers import ProviderPool
from interviewer.core.retry import RetryExecutor
from interviewer.core.session_store import SessionStore


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_session_store: SessionStore | None = None
_ai_reasoning: AIReasoningLayer | None = None
_orchestrator: InterviewOrchestrator | None = None


def get_session_store() -> SessionStore:
    """Get the process-wide session store."""
    global _session_store

    if _session_store is None:
        settings = get_settings()
        _session_store = SessionStore(retention_seconds=settings.session_retention_seconds)

    return _session_store


def get_ai_reasoning() -> AIReasoningLayer:
    """
    Get the AI reasoning layer singleton.

    Builds the provider pool from the configured credential slots.
    """
    global _ai_reasoning

    if _ai_reasoning is None:
        settings = get_settings()
        pool = ProviderPool.from_settings(settings)
        retry = RetryExecutor(
            max_attempts=settings.ai_max_attempts,
            base_delay=settings.ai_retry_base_delay_seconds,
            overload_delay=settings.ai_overload_retry_delay_seconds,
        )
        _ai_reasoning = AIReasoningLayer(FailoverDispatcher(pool, retry), settings)

    return _ai_reasoning


def get_provider_pool() -> ProviderPool:
    """Get the shared provider pool."""
    return get_ai_reasoning().dispatcher.pool


def get_orchestrator() -> InterviewOrchestrator:
    """
    Get the interview orchestrator singleton.

    Lazily initializes all required components.
    """
    global _orchestrator

    if _orchestrator is None:
        settings = get_settings()
        _orchestrator = InterviewOrchestrator(
            ai_reasoning=get_ai_reasoning(),
            store=get_session_store(),
            initial_question_count=settings.initial_question_count,
        )

    return _orchestrator


async def cleanup():
    """Cleanup resources on shutdown."""
    global _session_store, _ai_reasoning, _orchestrator

    if _ai_reasoning:
        await _ai_reasoning.close()

    _ai_reasoning = None
    _orchestrator = None
    _session_store = None
