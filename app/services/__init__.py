# Services module
from app.services.reading_store import SampleReadingStore
from app.services.inspection_session import InspectionSession
from app.services.session_registry import SessionRegistry
from app.services.qc_service import QCService

# QC backends
from app.services.mock_qc_backend import MockQCBackend
from app.services.qc_api_client import QCApiClient

__all__ = [
    "SampleReadingStore",
    "InspectionSession",
    "SessionRegistry",
    "QCService",
    # Backends
    "MockQCBackend",
    "QCApiClient",
]
