"""
In-memory QC backend.

Implements the job-details, draft and submission collaborators without a
server: jobs come from mock_data, drafts and submissions are kept in
memory, and every call sleeps for MOCK_API_DELAY_MS to mimic the network.
"""
import asyncio
import logging
from copy import deepcopy
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from app.config import settings
from app.core.exceptions import QCInspectionError, JobNotFoundError
from app.models.inspection import JobStatus
from app.schemas.inspection import (
    JobDetails, PendingJob, DraftPayload, DraftAck, SavedReadings,
    SubmissionPayload, SubmissionAck
)
from app.services.mock_data import MOCK_PENDING_JOBS, MOCK_JOB_DETAILS

logger = logging.getLogger(__name__)


class MockQCBackend:
    """Mock QC API used in development and tests."""

    def __init__(
        self,
        jobs: Optional[List[dict]] = None,
        job_details: Optional[Dict[str, dict]] = None,
        delay_ms: Optional[int] = None
    ):
        self.delay_ms = settings.MOCK_API_DELAY_MS if delay_ms is None else delay_ms
        self._jobs: Dict[str, PendingJob] = {
            job["id"]: PendingJob.model_validate(job)
            for job in deepcopy(MOCK_PENDING_JOBS if jobs is None else jobs)
        }
        self._details: Dict[str, dict] = deepcopy(
            MOCK_JOB_DETAILS if job_details is None else job_details
        )
        self.drafts: Dict[str, SavedReadings] = {}
        self.submissions: Dict[str, SubmissionPayload] = {}
        self._ir_sequence = 0
        self._failures: Dict[str, QCInspectionError] = {}

    def inject_failure(self, operation: str, error: QCInspectionError) -> None:
        """Make the next call of `operation` ('queue', 'load', 'save', 'submit') raise `error`."""
        self._failures[operation] = error

    async def _call(self, operation: str, delay_ms: Optional[int] = None) -> None:
        await asyncio.sleep((self.delay_ms if delay_ms is None else delay_ms) / 1000)
        error = self._failures.pop(operation, None)
        if error is not None:
            raise error

    # ========================================================================
    # QUEUE
    # ========================================================================

    async def list_jobs(self) -> List[PendingJob]:
        await self._call("queue")
        return [job.model_copy() for job in self._jobs.values()]

    # ========================================================================
    # COLLABORATORS
    # ========================================================================

    async def get_job_details(self, job_id: str) -> JobDetails:
        await self._call("load")
        details = self._details.get(job_id)
        if details is None:
            raise JobNotFoundError(job_id)

        job = JobDetails.model_validate(deepcopy(details))
        draft = self.drafts.get(job_id)
        if draft is not None:
            job = job.model_copy(update={"saved_readings": draft.model_copy(deep=True)})
        return job

    async def save_draft(self, job_id: str, payload: DraftPayload) -> DraftAck:
        await self._call("save", self.delay_ms + 200)
        if job_id not in self._details:
            raise JobNotFoundError(job_id)

        saved_at = datetime.now(timezone.utc)
        self.drafts[job_id] = SavedReadings(
            checkpoint_readings=deepcopy(payload.checkpoint_readings),
            remarks=payload.remarks,
            last_saved=saved_at,
        )
        job = self._jobs.get(job_id)
        if job is not None and job.status == JobStatus.PENDING:
            job.status = JobStatus.IN_PROGRESS
        logger.debug(f"Mock draft saved for {job_id}")
        return DraftAck(job_id=job_id, saved_at=saved_at)

    async def submit_inspection(self, job_id: str, payload: SubmissionPayload) -> SubmissionAck:
        await self._call("submit", self.delay_ms + 500)
        if job_id not in self._details:
            raise JobNotFoundError(job_id)

        now = datetime.now(timezone.utc)
        self.submissions[job_id] = payload
        self.drafts.pop(job_id, None)
        job = self._jobs.get(job_id)
        if job is not None:
            job.status = JobStatus.COMPLETED
            job.completed_at = now
            job.pass_rate = payload.summary.pass_rate
        logger.debug(f"Mock submission recorded for {job_id}")
        return SubmissionAck(
            job_id=job_id,
            submitted_at=now,
            ir_number=self._generate_ir_number(),
        )

    def _generate_ir_number(self) -> str:
        """Generate unique inspection report number."""
        self._ir_sequence += 1
        return f"IR-{date.today().strftime('%Y%m%d')}-{self._ir_sequence:04d}"
