import asyncio

import pytest

from app.core.exceptions import SessionNotOpenError, TransportError
from app.models.inspection import SessionState
from app.services.session_registry import SessionRegistry


async def test_open_once_per_job(backend):
    registry = SessionRegistry(backend)

    first = await registry.open("JOB-1")
    second = await registry.open("JOB-1")

    assert first is second
    assert registry.get("JOB-1") is first


async def test_failed_load_leaves_no_session(backend):
    registry = SessionRegistry(backend)
    backend.inject_failure("load", TransportError("connection reset"))

    with pytest.raises(TransportError):
        await registry.open("JOB-1")

    assert "JOB-1" not in registry
    session = await registry.open("JOB-1")
    assert session.state == SessionState.READY


async def test_close_discards_session(backend, autosave):
    registry = SessionRegistry(backend, autosave=autosave)
    session = await registry.open("JOB-1")

    registry.close("JOB-1")

    assert session.is_closed
    assert autosave.cancelled == ["JOB-1"]
    with pytest.raises(SessionNotOpenError):
        registry.get("JOB-1")


async def test_close_all(backend):
    registry = SessionRegistry(backend)
    sessions = [await registry.open("JOB-1"), await registry.open("QC-2025-001")]

    registry.close_all()

    assert all(session.is_closed for session in sessions)
    assert "QC-2025-001" not in registry


async def test_concurrent_opens_share_one_load(backend, monkeypatch):
    registry = SessionRegistry(backend)
    backend.delay_ms = 20
    loads = []
    get_job_details = backend.get_job_details

    async def counting_get_job_details(job_id):
        loads.append(job_id)
        return await get_job_details(job_id)

    monkeypatch.setattr(backend, "get_job_details", counting_get_job_details)

    first, second = await asyncio.gather(registry.open("JOB-1"), registry.open("JOB-1"))

    assert first is second
    assert loads == ["JOB-1"]
    assert registry.get("JOB-1") is first


async def test_concurrent_opens_of_different_jobs_both_load(backend):
    registry = SessionRegistry(backend)

    first, second = await asyncio.gather(registry.open("JOB-1"), registry.open("QC-2025-001"))

    assert first is not second
    assert first.job_id == "JOB-1"
    assert second.job_id == "QC-2025-001"
