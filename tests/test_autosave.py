import asyncio

import pytest_asyncio

from app.core.exceptions import TransportError
from app.jobs.autosave import AutosaveScheduler
from app.jobs.scheduler import create_scheduler
from app.models.inspection import SessionState
from app.services.inspection_session import InspectionSession


@pytest_asyncio.fixture
async def scheduler():
    scheduler = create_scheduler()
    scheduler.start()
    yield scheduler
    scheduler.shutdown(wait=False)


async def wait_until(predicate, timeout=2.0):
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


async def test_edit_triggers_draft_save(backend, scheduler):
    autosave = AutosaveScheduler(scheduler, delay_seconds=0.05)
    session = await InspectionSession.open("JOB-1", backend, autosave=autosave)

    session.toggle_sample(0, 0)
    assert autosave.is_scheduled(session)

    await wait_until(lambda: "JOB-1" in backend.drafts and not session.dirty)
    assert session.last_saved is not None
    assert not autosave.is_scheduled(session)


async def test_rapid_edits_keep_one_pending_save(backend, scheduler):
    autosave = AutosaveScheduler(scheduler, delay_seconds=10)
    session = await InspectionSession.open("JOB-1", backend, autosave=autosave)

    session.toggle_sample(0, 0)
    first_run = scheduler.get_job(autosave.job_id(session)).next_run_time
    await asyncio.sleep(0.02)
    session.toggle_sample(0, 1)
    session.update_remarks("two edits")

    jobs = scheduler.get_jobs()
    assert [job.id for job in jobs] == ["autosave:JOB-1"]
    assert jobs[0].next_run_time > first_run


async def test_close_cancels_pending_save(backend, scheduler):
    autosave = AutosaveScheduler(scheduler, delay_seconds=10)
    session = await InspectionSession.open("JOB-1", backend, autosave=autosave)
    session.toggle_sample(0, 0)

    session.close()

    assert not autosave.is_scheduled(session)
    # Cancelling twice is harmless
    autosave.cancel(session)


async def test_run_skips_clean_and_closed_sessions(backend, scheduler):
    autosave = AutosaveScheduler(scheduler, delay_seconds=10)
    session = await InspectionSession.open("JOB-1", backend, autosave=autosave)

    await autosave.run(session)
    assert "JOB-1" not in backend.drafts

    session.toggle_sample(0, 0)
    session.close()
    await autosave.run(session)
    assert "JOB-1" not in backend.drafts


async def test_run_defers_while_save_in_flight(backend, scheduler):
    backend.delay_ms = 20
    autosave = AutosaveScheduler(scheduler, delay_seconds=10)
    session = await InspectionSession.open("JOB-1", backend, autosave=autosave)
    session.toggle_sample(0, 0)
    autosave.cancel(session)

    save = asyncio.create_task(session.save_draft())
    await asyncio.sleep(0)
    assert session.state == SessionState.SAVING

    await autosave.run(session)
    assert autosave.is_scheduled(session)
    await save


async def test_failed_autosave_keeps_draft_dirty(backend, scheduler):
    autosave = AutosaveScheduler(scheduler, delay_seconds=10)
    session = await InspectionSession.open("JOB-1", backend, autosave=autosave)
    session.toggle_sample(0, 0)
    backend.inject_failure("save", TransportError("QC API request failed"))

    await autosave.run(session)

    assert session.dirty
    assert session.state == SessionState.READY
