"""
Inspection API Endpoints - QC sample inspection.

API endpoints for:
- Job queue and dashboard
- Inspection sessions (open, snapshot, close)
- Sample readings and remarks
- Draft save and submission
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from app.api.deps import get_qc_service, get_session_registry
from app.core.exceptions import (
    QCInspectionError, SampleIndexOutOfRange, InputTypeMismatch, InvalidReading,
    SessionStateError, OperationInFlightError, SessionNotOpenError,
    JobNotFoundError, TransportError, SubmissionValidationError, IncompleteWarning
)
from app.models.inspection import JobStatus, JobPriority
from app.schemas.inspection import (
    PendingJob, DashboardStats, SessionSnapshot, InspectionSummary,
    MeasuredValueUpdate, RemarksUpdate, SampleUpdateResponse,
    DraftAck, SubmissionAck
)
from app.services.inspection_session import InspectionSession
from app.services.qc_service import QCService
from app.services.session_registry import SessionRegistry

router = APIRouter()


ERROR_STATUS = (
    ((JobNotFoundError, SessionNotOpenError), status.HTTP_404_NOT_FOUND),
    ((SampleIndexOutOfRange, InputTypeMismatch, InvalidReading), status.HTTP_422_UNPROCESSABLE_ENTITY),
    (SubmissionValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    ((SessionStateError, OperationInFlightError), status.HTTP_409_CONFLICT),
    (TransportError, status.HTTP_502_BAD_GATEWAY),
)


def _http_error(e: QCInspectionError) -> HTTPException:
    """Translate an inspection error into an HTTPException."""
    status_code = status.HTTP_400_BAD_REQUEST
    for error_types, code in ERROR_STATUS:
        if isinstance(e, error_types):
            status_code = code
            break
    return HTTPException(
        status_code=status_code,
        detail={"message": e.message, "error_code": e.error_code, "details": e.details},
        headers={"X-Error-Code": e.error_code or "QC_ERROR"},
    )


def _get_session(registry: SessionRegistry, job_id: str) -> InspectionSession:
    try:
        return registry.get(job_id)
    except SessionNotOpenError as e:
        raise _http_error(e)


def _sample_response(session: InspectionSession, cp: int, s: int, reading) -> SampleUpdateResponse:
    summary = session.current_summary()
    return SampleUpdateResponse(
        checkpoint_id=session.checkpoints[cp].id,
        sample_number=s + 1,
        status=reading.status,
        measured_value=reading.measured_value,
        checkpoint_result=summary.checkpoint_results[cp],
        summary=summary,
    )


# ============================================================================
# JOB QUEUE
# ============================================================================

@router.get(
    "/jobs",
    response_model=List[PendingJob],
    summary="List QC Jobs"
)
async def list_jobs(
    job_status: Optional[JobStatus] = Query(None, alias="status"),
    priority: Optional[JobPriority] = None,
    service: QCService = Depends(get_qc_service)
):
    """List QC jobs, optionally filtered by status and priority."""
    try:
        return await service.list_pending_jobs(status=job_status, priority=priority)
    except QCInspectionError as e:
        raise _http_error(e)


@router.get(
    "/dashboard",
    response_model=DashboardStats,
    summary="Get QC Dashboard"
)
async def get_dashboard(
    service: QCService = Depends(get_qc_service)
):
    """Get QC dashboard statistics."""
    try:
        return await service.dashboard_stats()
    except QCInspectionError as e:
        raise _http_error(e)


# ============================================================================
# SESSIONS
# ============================================================================

@router.post(
    "/sessions/{job_id}",
    response_model=SessionSnapshot,
    summary="Open Inspection Session"
)
async def open_session(
    job_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
):
    """Load a job and open (or resume) its inspection session."""
    try:
        session = await registry.open(job_id)
    except QCInspectionError as e:
        raise _http_error(e)
    return session.snapshot()


@router.get(
    "/sessions/{job_id}",
    response_model=SessionSnapshot,
    summary="Get Inspection Session"
)
async def get_session(
    job_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
):
    """Get the current state, readings and summary of a session."""
    return _get_session(registry, job_id).snapshot()


@router.delete(
    "/sessions/{job_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Close Inspection Session"
)
async def close_session(
    job_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
):
    """Discard a session. Unsaved readings are lost."""
    try:
        registry.close(job_id)
    except SessionNotOpenError as e:
        raise _http_error(e)


@router.get(
    "/sessions/{job_id}/summary",
    response_model=InspectionSummary,
    summary="Get Inspection Summary"
)
async def get_summary(
    job_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
):
    return _get_session(registry, job_id).current_summary()


# ============================================================================
# READINGS
# ============================================================================

@router.post(
    "/sessions/{job_id}/checkpoints/{checkpoint_index}/samples/{sample_index}/toggle",
    response_model=SampleUpdateResponse,
    summary="Toggle Sample Status"
)
async def toggle_sample(
    job_id: str,
    checkpoint_index: int,
    sample_index: int,
    registry: SessionRegistry = Depends(get_session_registry)
):
    """Cycle a sample UNSET -> PASS -> FAIL -> UNSET. Indices are 0-based."""
    session = _get_session(registry, job_id)
    try:
        reading = session.toggle_sample(checkpoint_index, sample_index)
    except QCInspectionError as e:
        raise _http_error(e)
    return _sample_response(session, checkpoint_index, sample_index, reading)


@router.put(
    "/sessions/{job_id}/checkpoints/{checkpoint_index}/samples/{sample_index}/value",
    response_model=SampleUpdateResponse,
    summary="Set Measured Value"
)
async def set_measured_value(
    job_id: str,
    checkpoint_index: int,
    sample_index: int,
    data: MeasuredValueUpdate,
    registry: SessionRegistry = Depends(get_session_registry)
):
    """
    Record a measured value, or clear it with null.

    On checkpoints with limits the sample is classified from the value.
    """
    session = _get_session(registry, job_id)
    try:
        reading = session.set_measured_value(checkpoint_index, sample_index, data.value)
    except QCInspectionError as e:
        raise _http_error(e)
    return _sample_response(session, checkpoint_index, sample_index, reading)


@router.put(
    "/sessions/{job_id}/remarks",
    response_model=SessionSnapshot,
    summary="Update Remarks"
)
async def update_remarks(
    job_id: str,
    data: RemarksUpdate,
    registry: SessionRegistry = Depends(get_session_registry)
):
    session = _get_session(registry, job_id)
    try:
        session.update_remarks(data.remarks)
    except QCInspectionError as e:
        raise _http_error(e)
    return session.snapshot()


# ============================================================================
# DRAFT & SUBMISSION
# ============================================================================

@router.post(
    "/sessions/{job_id}/draft",
    response_model=DraftAck,
    summary="Save Draft"
)
async def save_draft(
    job_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
):
    """Save the current readings and remarks as a draft."""
    session = _get_session(registry, job_id)
    try:
        return await session.save_draft()
    except QCInspectionError as e:
        raise _http_error(e)


@router.post(
    "/sessions/{job_id}/submit",
    response_model=SubmissionAck,
    summary="Submit Inspection",
    responses={409: {"description": "Incomplete readings or session busy"}}
)
async def submit_inspection(
    job_id: str,
    confirm_incomplete: bool = False,
    registry: SessionRegistry = Depends(get_session_registry)
):
    """
    Submit the inspection.

    When samples are still unset the request is refused with 409 and the
    current summary; resend with confirm_incomplete=true to submit anyway.
    A successful submission closes the session.
    """
    session = _get_session(registry, job_id)
    try:
        ack = await session.submit(confirm_incomplete=confirm_incomplete)
    except IncompleteWarning as e:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={
                "message": e.message,
                "error_code": e.error_code,
                "summary": e.summary.model_dump(mode="json"),
            },
            headers={"X-Error-Code": e.error_code},
        )
    except QCInspectionError as e:
        raise _http_error(e)

    if job_id in registry:
        registry.close(job_id)
    return ack
