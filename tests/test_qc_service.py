import re

import pytest

from app.core.exceptions import JobNotFoundError
from app.models.inspection import JobStatus, JobPriority, InputType
from app.services.mock_qc_backend import MockQCBackend
from app.services.qc_service import QCService


# ============================================================================
# MOCK BACKEND
# ============================================================================

async def test_bundled_jobs_load():
    backend = MockQCBackend(delay_ms=0)

    job = await backend.get_job_details("QC-2025-001")

    assert job.sample_size == 10
    assert job.lot_size == 60
    assert [cp.input_type for cp in job.checkpoints] == [InputType.MEASUREMENT] * 3
    assert job.checkpoints[0].lower_limit == 93.5
    assert job.checkpoints[0].upper_limit == 94.5
    assert job.saved_readings is None


async def test_bundled_mixed_job_loads():
    backend = MockQCBackend(delay_ms=0)
    job = await backend.get_job_details("QC-2025-002")
    assert job.checkpoints[-1].input_type == InputType.BOTH
    assert not job.checkpoints[-1].has_limits


async def test_unknown_job():
    backend = MockQCBackend(delay_ms=0)
    with pytest.raises(JobNotFoundError):
        await backend.get_job_details("QC-1999-999")


async def test_backends_do_not_share_state(backend):
    other = MockQCBackend(delay_ms=0)
    jobs = await backend.list_jobs()
    jobs[0].status = JobStatus.COMPLETED
    assert (await other.list_jobs())[0].status == JobStatus.PENDING
    assert (await backend.list_jobs())[0].status == JobStatus.PENDING


async def test_ir_numbers_are_sequential(backend):
    from app.services.inspection_session import InspectionSession

    numbers = []
    for _ in range(2):
        session = await InspectionSession.open("JOB-1", backend)
        numbers.append((await session.submit(confirm_incomplete=True)).ir_number)

    assert all(re.fullmatch(r"IR-\d{8}-\d{4}", n) for n in numbers)
    assert numbers[0].endswith("-0001")
    assert numbers[1].endswith("-0002")


# ============================================================================
# QUEUE & DASHBOARD
# ============================================================================

async def test_filter_by_status_and_priority(backend):
    service = QCService(backend)

    pending = await service.list_pending_jobs(status=JobStatus.PENDING)
    low = await service.list_pending_jobs(status=JobStatus.PENDING, priority=JobPriority.LOW)

    assert all(job.status == JobStatus.PENDING for job in pending)
    assert [job.id for job in low] == ["JOB-1"]
    assert len(await service.list_pending_jobs()) == len(await backend.list_jobs())


async def test_dashboard_counts(backend):
    service = QCService(backend)

    stats = await service.dashboard_stats()

    assert stats.total_jobs == 4
    assert stats.completed == 1
    assert stats.pending_jobs + stats.in_progress + stats.completed == stats.total_jobs
    assert stats.pass_rate == 98.0


async def test_dashboard_without_completed_jobs():
    backend = MockQCBackend(jobs=[{"id": "A", "sample_size": 5}], job_details={}, delay_ms=0)
    stats = await QCService(backend).dashboard_stats()
    assert stats.total_jobs == 1
    assert stats.pending_jobs == 1
    assert stats.pass_rate is None
