"""
AI Interviewer - simulated job interview backend

Main application entry point.
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from interviewer.config.settings import get_settings
from interviewer.api.router import api_router
from interviewer.api.dependencies import cleanup, get_session_store
from interviewer.api.errors import register_exception_handlers
from interviewer.api.endpoints import providers

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting AI Interviewer...")
    settings = get_settings()
    logger.info(f"Running in {'debug' if settings.debug else 'production'} mode")

    sweeper = asyncio.create_task(
        get_session_store().run_expiry_sweeper(settings.session_sweep_interval_seconds)
    )

    yield

    # Shutdown
    logger.info("Shutting down AI Interviewer...")
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper
    await cleanup()


# Create FastAPI application
settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Simulated job interview backend with multi-provider AI failover",
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Mount API routes
app.include_router(api_router, prefix="/api")

# Connectivity check is also served at the root path
app.add_api_route("/test-ai", providers.test_ai, methods=["GET"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
