"""
Inspection error taxonomy.

Every failure the readings engine or the session orchestrator can
produce is one of these. None of them is retried automatically; the
caller decides.
"""
from typing import Any, Dict, Optional


class QCInspectionError(Exception):
    """Base exception for inspection errors."""
    def __init__(self, message: str, error_code: str = None, details: Dict = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# CALLER ERRORS
# ============================================================================

class SampleIndexOutOfRange(QCInspectionError, IndexError):
    """Checkpoint or sample index does not address an existing slot."""

    def __init__(self, kind: str, index: int, size: int):
        super().__init__(
            f"{kind} index {index} out of range (0..{size - 1})",
            error_code="INDEX_OUT_OF_RANGE",
            details={"kind": kind, "index": index, "size": size},
        )


class InputTypeMismatch(QCInspectionError, ValueError):
    """Mutation is not valid for the checkpoint's input type."""

    def __init__(self, operation: str, checkpoint_id: Any, input_type: str):
        super().__init__(
            f"{operation} is not allowed on checkpoint {checkpoint_id} ({input_type})",
            error_code="INPUT_TYPE_MISMATCH",
            details={"operation": operation, "checkpoint_id": checkpoint_id, "input_type": input_type},
        )


class InvalidReading(QCInspectionError, ValueError):
    """Measured value is not a finite number."""

    def __init__(self, value: Any):
        super().__init__(
            f"Measured value must be a finite number, got {value!r}",
            error_code="INVALID_READING",
        )


class SessionStateError(QCInspectionError):
    """Operation is not allowed in the session's current state."""

    def __init__(self, operation: str, state: str):
        super().__init__(
            f"Cannot {operation} while session is {state}",
            error_code="INVALID_STATE",
            details={"operation": operation, "state": state},
        )


class OperationInFlightError(QCInspectionError):
    """A save or submit is already in flight for this session."""

    def __init__(self, operation: str, in_flight: str):
        super().__init__(
            f"Cannot {operation}: {in_flight} already in flight",
            error_code="IN_FLIGHT",
            details={"operation": operation, "in_flight": in_flight},
        )


class SessionNotOpenError(QCInspectionError):
    """No open inspection session for the job."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"No open inspection session for job {job_id}", error_code="SESSION_NOT_OPEN")


# ============================================================================
# COLLABORATOR ERRORS
# ============================================================================

class JobNotFoundError(QCInspectionError):
    """Requested QC job does not exist."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found", error_code="NOT_FOUND")


class TransportError(QCInspectionError):
    """Network or backend failure while talking to the QC API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message, error_code="TRANSPORT_ERROR", details={"status_code": status_code})


class SubmissionValidationError(QCInspectionError):
    """QC API rejected the submission payload."""

    def __init__(self, message: str, errors: Any = None):
        self.errors = errors
        super().__init__(message, error_code="VALIDATION_ERROR", details={"errors": errors})


# ============================================================================
# ADVISORY
# ============================================================================

class IncompleteWarning(QCInspectionError):
    """
    Submission requested while some samples are still unset.

    Not a failure: the caller confirms with the user and resubmits with
    confirm_incomplete=True.
    """

    def __init__(self, summary):
        self.summary = summary
        super().__init__(
            f"{summary.missing_samples} of {summary.total_samples} samples have no reading",
            error_code="INCOMPLETE",
            details={"missing_samples": summary.missing_samples},
        )
