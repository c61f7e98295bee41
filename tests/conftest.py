"""
Shared fixtures for the QC inspection tests.
"""
import pytest
import pytest_asyncio
import httpx

from app.main import app
from app.api.deps import get_qc_backend, get_session_registry
from app.services.mock_data import MOCK_PENDING_JOBS, MOCK_JOB_DETAILS
from app.services.mock_qc_backend import MockQCBackend
from app.services.reading_store import SampleReadingStore
from app.services.session_registry import SessionRegistry

from tests.factories import measurement_checkpoint, yesno_checkpoint, job_details


@pytest.fixture
def height():
    return measurement_checkpoint(id=1, name="Height")


@pytest.fixture
def store(height):
    """Two checkpoints of five samples: a limited measurement and a yes/no."""
    return SampleReadingStore([height, yesno_checkpoint(id=2, name="Visual")], sample_size=5)


# ============================================================================
# JOBS
# ============================================================================

@pytest.fixture
def backend():
    """Mock backend with the bundled jobs plus a small JOB-1, no latency."""
    jobs = MOCK_PENDING_JOBS + [{"id": "JOB-1", "sample_size": 2, "priority": "low"}]
    details = {**MOCK_JOB_DETAILS, "JOB-1": job_details()}
    return MockQCBackend(jobs=jobs, job_details=details, delay_ms=0)


class RecordingAutosave:
    """Stands in for AutosaveScheduler and records what it was asked to do."""

    def __init__(self):
        self.scheduled = []
        self.cancelled = []

    def schedule(self, session):
        self.scheduled.append(session.job_id)

    def cancel(self, session):
        self.cancelled.append(session.job_id)


@pytest.fixture
def autosave():
    return RecordingAutosave()


# ============================================================================
# API
# ============================================================================

@pytest_asyncio.fixture
async def client(backend):
    """HTTP client bound to the app, with the mock backend and autosave off."""
    registry = SessionRegistry(backend)
    app.dependency_overrides[get_qc_backend] = lambda: backend
    app.dependency_overrides[get_session_registry] = lambda: registry

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    registry.close_all()
    app.dependency_overrides.clear()
