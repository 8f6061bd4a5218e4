"""
Main API router for the AI Interviewer

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from interviewer.api.endpoints import interview, providers

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    interview.router,
    tags=["Interview"]
)

api_router.include_router(
    providers.router,
    tags=["Providers"]
)
