"""
Inspection Models - Quality Control Inspection.

Enumerations shared by the readings engine, the session orchestrator
and the API layer:
- InputType: what an inspector records for a checkpoint
- SampleStatus: tri-state classification of one sample slot
- CheckpointResult: derived per-checkpoint verdict
- LotDisposition: derived verdict for the whole lot
- SessionState: lifecycle of an inspection session
- JobStatus / JobPriority: queue attributes of a QC job
"""
from enum import Enum


# ============================================================================
# ENUMS
# ============================================================================

class InputType(str, Enum):
    """How a checkpoint is recorded."""
    MEASUREMENT = "MEASUREMENT"  # Numeric value only
    YESNO = "YESNO"              # Pass/fail toggle only
    BOTH = "BOTH"                # Numeric value and pass/fail toggle


class SampleStatus(str, Enum):
    """Classification of a single sample reading."""
    UNSET = "UNSET"
    PASS = "PASS"
    FAIL = "FAIL"


class CheckpointResult(str, Enum):
    """Derived result of a checkpoint across all samples."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class LotDisposition(str, Enum):
    """Overall verdict for the lot."""
    ACCEPT_LOT = "ACCEPT_LOT"
    REJECT_LOT = "REJECT_LOT"
    INDETERMINATE = "INDETERMINATE"  # Every checkpoint still pending


class SessionState(str, Enum):
    """Lifecycle of an inspection session."""
    LOADING = "LOADING"
    READY = "READY"
    SAVING = "SAVING"
    SUBMITTING = "SUBMITTING"
    SUBMITTED = "SUBMITTED"
    ERROR = "ERROR"              # Load failed; reopen to retry


class JobStatus(str, Enum):
    """Status of a QC job in the queue."""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class JobPriority(str, Enum):
    """Priority of a QC job."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


# Sample statuses cycle in this order on each toggle
TOGGLE_CYCLE = {
    SampleStatus.UNSET: SampleStatus.PASS,
    SampleStatus.PASS: SampleStatus.FAIL,
    SampleStatus.FAIL: SampleStatus.UNSET,
}
