"""
Core components for the AI Interviewer

- Provider pool, retry executor and failover dispatcher
- AI reasoning layer
- Session store
- Interview orchestrator (state machine)
"""

from interviewer.core.providers import (
    GeminiProvider,
    Provider,
    ProviderError,
    ProviderOverloadedError,
    ProviderPool,
    QuotaExceededError,
)
from interviewer.core.retry import RetryExecutor
from interviewer.core.dispatcher import AllProvidersUnavailableError, FailoverDispatcher
from interviewer.core.ai_reasoning import AIReasoningLayer
from interviewer.core.session_store import SessionStore
from interviewer.core.interview_orchestrator import InterviewOrchestrator

__all__ = [
    "AIReasoningLayer",
    "AllProvidersUnavailableError",
    "FailoverDispatcher",
    "GeminiProvider",
    "InterviewOrchestrator",
    "Provider",
    "ProviderError",
    "ProviderOverloadedError",
    "ProviderPool",
    "QuotaExceededError",
    "RetryExecutor",
    "SessionStore",
]
