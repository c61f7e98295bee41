"""
Draft autosave.

Every edit of a session (re)schedules a one-shot save after a quiet
period; a newer edit replaces the pending job, closing or submitting
the session removes it.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

from app.core.exceptions import QCInspectionError
from app.models.inspection import SessionState

if TYPE_CHECKING:
    from app.services.inspection_session import InspectionSession

logger = logging.getLogger(__name__)


class AutosaveScheduler:
    """Debounced draft saves for inspection sessions."""

    def __init__(self, scheduler: BaseScheduler, delay_seconds: float):
        self.scheduler = scheduler
        self.delay_seconds = delay_seconds

    @staticmethod
    def job_id(session: "InspectionSession") -> str:
        return f"autosave:{session.job_id}"

    def schedule(self, session: "InspectionSession") -> None:
        """Save `session` once it has been quiet for `delay_seconds`."""
        run_date = datetime.now(timezone.utc) + timedelta(seconds=self.delay_seconds)
        self.scheduler.add_job(
            self.run,
            'date',
            run_date=run_date,
            args=[session],
            id=self.job_id(session),
            name=f"Autosave draft {session.job_id}",
            replace_existing=True,
        )
        logger.debug(f"Autosave scheduled for job {session.job_id} in {self.delay_seconds}s")

    def cancel(self, session: "InspectionSession") -> None:
        try:
            self.scheduler.remove_job(self.job_id(session))
            logger.debug(f"Autosave cancelled for job {session.job_id}")
        except JobLookupError:
            pass

    def is_scheduled(self, session: "InspectionSession") -> bool:
        return self.scheduler.get_job(self.job_id(session)) is not None

    async def run(self, session: "InspectionSession") -> None:
        """Scheduled entry point: save the draft if there is still something to save."""
        if session.is_closed or not session.dirty:
            return
        if session.in_flight or session.state != SessionState.READY:
            # Try again after the current operation settles
            self.schedule(session)
            return

        try:
            await session.save_draft()
        except QCInspectionError as e:
            # Draft stays dirty; the next edit schedules another attempt
            logger.warning(f"Autosave failed for job {session.job_id}: {e}")
