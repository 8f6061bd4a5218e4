"""
In-memory session storage for the AI Interviewer

Sessions live only as long as the process. Each session id gets its
own asyncio.Lock so answer submissions against one session run one at
a time. A background task removes sessions older than the retention
window.
"""

import asyncio
import logging
from datetime import datetime

from interviewer.models.interview import InterviewSession, utcnow

logger = logging.getLogger(__name__)


class SessionStore:
    """Keyed map of session id to InterviewSession."""

    def __init__(self, retention_seconds: float = 60 * 60):
        self.retention_seconds = retention_seconds
        self._sessions: dict[str, InterviewSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> InterviewSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def save(self, session: InterviewSession) -> None:
        """Insert or replace a session."""
        self._sessions[session.session_id] = session

    def delete(self, session_id: str) -> bool:
        self._locks.pop(session_id, None)
        return self._sessions.pop(session_id, None) is not None

    def lock(self, session_id: str) -> asyncio.Lock:
        """Mutation lock for a session id, created on first use."""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

    # =========================================================================
    # EXPIRY
    # =========================================================================

    def sweep_expired(self, now: datetime | None = None) -> list[str]:
        """
        Remove every session whose start time predates the retention window.

        Works on a snapshot of the map, so requests that already hold a
        session object finish against it; later lookups miss.

        Returns:
            IDs of the removed sessions
        """
        now = now or utcnow()
        expired = [
            session_id
            for session_id, session in list(self._sessions.items())
            if session.is_expired(self.retention_seconds, now)
        ]

        for session_id in expired:
            self.delete(session_id)
            logger.info(f"Cleaned up expired session: {session_id}")

        return expired

    async def run_expiry_sweeper(self, interval_seconds: float) -> None:
        """Sweep forever on a fixed interval; cancel the task to stop."""
        logger.info(
            f"Session sweeper started (interval={interval_seconds}s, "
            f"retention={self.retention_seconds}s)"
        )
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                self.sweep_expired()
            except Exception:
                logger.exception("Session sweep failed")
