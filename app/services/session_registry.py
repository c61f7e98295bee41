"""
Registry of open inspection sessions, one per job.
"""
import asyncio
import logging
from typing import Dict, Optional

from app.core.exceptions import SessionNotOpenError
from app.models.inspection import SessionState
from app.jobs.autosave import AutosaveScheduler
from app.services.inspection_session import InspectionSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Keeps the open InspectionSession of each job for the API layer."""

    def __init__(self, backend, autosave: Optional[AutosaveScheduler] = None):
        self.backend = backend
        self.autosave = autosave
        self._sessions: Dict[str, InspectionSession] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def __contains__(self, job_id: str) -> bool:
        return job_id in self._sessions

    async def open(self, job_id: str) -> InspectionSession:
        """
        Return the job's open session, loading it first if needed.

        Concurrent opens of one job wait for the load already in flight
        and share its session.
        """
        lock = self._locks.setdefault(job_id, asyncio.Lock())
        async with lock:
            session = self._sessions.get(job_id)
            if session is not None and session.state != SessionState.ERROR:
                return session

            session = InspectionSession(job_id, self.backend, autosave=self.autosave)
            try:
                await session.load()
            finally:
                # A failed load leaves no session behind
                if session.state == SessionState.READY:
                    self._sessions[job_id] = session
                else:
                    self._sessions.pop(job_id, None)
            return session

    def get(self, job_id: str) -> InspectionSession:
        session = self._sessions.get(job_id)
        if session is None:
            raise SessionNotOpenError(job_id)
        return session

    def close(self, job_id: str) -> None:
        session = self._sessions.pop(job_id, None)
        if session is None:
            raise SessionNotOpenError(job_id)
        session.close()

    def close_all(self) -> None:
        for job_id in list(self._sessions):
            self._sessions.pop(job_id).close()
        logger.info("All inspection sessions closed")
