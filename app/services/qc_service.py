"""
QC Service - job queue and dashboard statistics.

Works against any backend exposing `list_jobs()` (the mock backend or
the HTTP client).
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Protocol

from app.models.inspection import JobStatus, JobPriority
from app.schemas.inspection import PendingJob, DashboardStats


class JobQueue(Protocol):
    async def list_jobs(self) -> List[PendingJob]: ...


class QCService:
    """Service for QC job queue operations."""

    def __init__(self, backend: JobQueue):
        self.backend = backend

    async def list_pending_jobs(
        self,
        status: Optional[JobStatus] = None,
        priority: Optional[JobPriority] = None
    ) -> List[PendingJob]:
        """List QC jobs, optionally filtered by status and priority."""
        jobs = await self.backend.list_jobs()

        if status:
            jobs = [job for job in jobs if job.status == status]
        if priority:
            jobs = [job for job in jobs if job.priority == priority]

        return jobs

    async def dashboard_stats(self) -> DashboardStats:
        """Get QC dashboard statistics."""
        jobs = await self.backend.list_jobs()

        pending = sum(1 for job in jobs if job.status == JobStatus.PENDING)
        in_progress = sum(1 for job in jobs if job.status == JobStatus.IN_PROGRESS)
        completed_jobs = [job for job in jobs if job.status == JobStatus.COMPLETED]

        # Average pass rate over completed jobs that report one
        rates = [job.pass_rate for job in completed_jobs if job.pass_rate is not None]
        pass_rate = None
        if rates:
            pass_rate = float(
                (Decimal(str(sum(rates))) / len(rates)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)
            )

        return DashboardStats(
            pending_jobs=pending,
            in_progress=in_progress,
            completed=len(completed_jobs),
            total_jobs=len(jobs),
            pass_rate=pass_rate,
        )
