"""
API layer for the AI Interviewer

Contains FastAPI routers for:
- Interview management
- Provider diagnostics
"""

from interviewer.api.router import api_router

__all__ = ["api_router"]
