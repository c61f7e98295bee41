"""
API dependencies: QC backend, autosave and the session registry.
"""
from functools import lru_cache
from typing import Optional
import logging

from fastapi import Depends

from app.config import settings
from app.jobs.autosave import AutosaveScheduler
from app.jobs.scheduler import scheduler
from app.services.mock_qc_backend import MockQCBackend
from app.services.qc_api_client import QCApiClient
from app.services.qc_service import QCService
from app.services.session_registry import SessionRegistry


logger = logging.getLogger(__name__)


@lru_cache()
def get_qc_backend():
    """
    The QC backend serving job queue, job details, drafts and submissions.

    USE_MOCK_API selects the in-memory mock; otherwise the HTTP client
    for QC_API_BASE_URL is used.
    """
    if settings.USE_MOCK_API:
        logger.info("Using mock QC backend")
        return MockQCBackend()
    logger.info(f"Using QC API at {settings.QC_API_BASE_URL}")
    return QCApiClient()


@lru_cache()
def get_autosave() -> Optional[AutosaveScheduler]:
    if not settings.AUTOSAVE_ENABLED:
        return None
    return AutosaveScheduler(scheduler, settings.AUTOSAVE_DELAY_SECONDS)


@lru_cache()
def get_session_registry() -> SessionRegistry:
    return SessionRegistry(get_qc_backend(), autosave=get_autosave())


def get_qc_service(backend=Depends(get_qc_backend)) -> QCService:
    return QCService(backend)
