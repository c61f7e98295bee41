"""
Inspection Schemas - Quality Control Inspection.

Pydantic schemas for:
- Checkpoint definitions and sample readings
- Job details, queue items and dashboard statistics
- Draft / submission payloads and acknowledgements
- Derived inspection summary
- API request bodies and session snapshots
"""
from datetime import datetime, date
from typing import Optional, List, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.core.enum_utils import (
    normalize_to_uppercase, VALID_INPUT_TYPES, VALID_SAMPLE_STATUSES,
    VALID_JOB_STATUSES, VALID_JOB_PRIORITIES
)
from app.models.inspection import (
    InputType, SampleStatus, CheckpointResult, LotDisposition,
    SessionState, JobStatus, JobPriority
)


CheckpointId = Union[int, str]


# ============================================================================
# CHECKPOINT & READING SCHEMAS
# ============================================================================

class CheckpointDefinition(BaseModel):
    """
    One quality attribute inspected on every sample.

    Read-only once a job is loaded. Nominal value and limits are given
    together or not at all.
    """
    model_config = ConfigDict(frozen=True)

    id: CheckpointId
    name: str
    instrument: str = ""
    spec_text: str = ""
    tolerance_text: str = ""
    input_type: InputType = InputType.MEASUREMENT
    unit: Optional[str] = None
    nominal_value: Optional[float] = None
    upper_limit: Optional[float] = None
    lower_limit: Optional[float] = None
    qc_file_id: Optional[str] = None
    qc_file_url: Optional[str] = None

    @field_validator('input_type', mode='before')
    @classmethod
    def normalize_input_type(cls, v):
        return normalize_to_uppercase(v, VALID_INPUT_TYPES)

    @model_validator(mode='after')
    def check_limits(self):
        values = (self.lower_limit, self.nominal_value, self.upper_limit)
        present = [v is not None for v in values]
        if any(present) and not all(present):
            raise ValueError(
                "nominal_value, lower_limit and upper_limit must be given together"
            )
        if all(present) and not (self.lower_limit <= self.nominal_value <= self.upper_limit):
            raise ValueError("limits must satisfy lower_limit <= nominal_value <= upper_limit")
        return self

    @property
    def has_limits(self) -> bool:
        return self.lower_limit is not None and self.upper_limit is not None

    @property
    def accepts_status(self) -> bool:
        """Whether the inspector may toggle pass/fail by hand."""
        if self.input_type == InputType.MEASUREMENT:
            # Without limits a measurement can only be classified manually
            return not self.has_limits
        return True

    @property
    def accepts_value(self) -> bool:
        return self.input_type in (InputType.MEASUREMENT, InputType.BOTH)


class SampleReading(BaseModel):
    """Status and optional measured value of one sample slot."""
    model_config = ConfigDict(frozen=True)

    status: SampleStatus = SampleStatus.UNSET
    measured_value: Optional[float] = None

    @field_validator('status', mode='before')
    @classmethod
    def normalize_status(cls, v):
        return normalize_to_uppercase(v, VALID_SAMPLE_STATUSES)


class SampleReadingOut(BaseModel):
    """Serialized sample slot."""
    sample_number: int = Field(..., ge=1)
    status: SampleStatus = SampleStatus.UNSET
    measured_value: Optional[float] = None
    deviation: Optional[float] = None

    @field_validator('status', mode='before')
    @classmethod
    def normalize_status(cls, v):
        return normalize_to_uppercase(v, VALID_SAMPLE_STATUSES)


class CheckpointReadingsOut(BaseModel):
    """Serialized readings of one checkpoint."""
    checkpoint_id: CheckpointId
    result: CheckpointResult = CheckpointResult.PENDING
    samples: List[SampleReadingOut] = []


# ============================================================================
# SUMMARY SCHEMAS
# ============================================================================

class MissingReading(BaseModel):
    """A sample slot that still has no classification."""
    checkpoint_id: CheckpointId
    checkpoint_name: str
    sample_number: int


class InspectionSummary(BaseModel):
    """Aggregated, derived state of an inspection."""
    total_samples: int = 0
    completed_samples: int = 0
    missing_samples: int = 0
    passed_samples: int = 0
    failed_samples: int = 0
    pass_rate: float = 0.0
    is_complete: bool = False
    checkpoint_results: List[CheckpointResult] = []
    total_checkpoints: int = 0
    accepted_checkpoints: int = 0
    rejected_checkpoints: int = 0
    pending_checkpoints: int = 0
    lot_disposition: LotDisposition = LotDisposition.INDETERMINATE
    missing: List[MissingReading] = []


# ============================================================================
# PAYLOAD SCHEMAS
# ============================================================================

class DraftPayload(BaseModel):
    """Draft readings handed to the draft persistence collaborator."""
    checkpoint_readings: List[CheckpointReadingsOut] = []
    remarks: str = ""


class SavedReadings(DraftPayload):
    """A previously saved draft returned with the job details."""
    last_saved: Optional[datetime] = None


class SubmissionPayload(DraftPayload):
    """Full inspection handed to the submission sink."""
    summary: InspectionSummary
    sample_size: int
    lot_size: Optional[int] = None
    submitted_at: datetime


class DraftAck(BaseModel):
    """Acknowledgement of a saved draft."""
    job_id: str
    saved_at: datetime
    message: str = "Draft saved successfully"


class SubmissionAck(BaseModel):
    """Acknowledgement of a submitted inspection."""
    job_id: str
    submitted_at: datetime
    ir_number: Optional[str] = None
    message: str = "Inspection submitted successfully"


# ============================================================================
# JOB SCHEMAS
# ============================================================================

class Supplier(BaseModel):
    code: str
    name: str


class Product(BaseModel):
    code: str
    name: str
    category: Optional[str] = None


class JobDetails(BaseModel):
    """Job header plus the checkpoints to inspect."""
    id: str
    grn_no: Optional[str] = None
    po_no: Optional[str] = None
    ir_no: Optional[str] = None
    ir_date: Optional[date] = None
    supplier: Optional[Supplier] = None
    product: Optional[Product] = None
    lot_size: Optional[int] = Field(None, ge=1)
    sample_size: int = Field(..., ge=1)
    quality_plan_no: Optional[str] = None
    imte_id: Optional[str] = None
    checkpoints: List[CheckpointDefinition]
    saved_readings: Optional[SavedReadings] = None

    @field_validator('checkpoints')
    @classmethod
    def unique_checkpoint_ids(cls, v):
        ids = [c.id for c in v]
        if len(ids) != len(set(ids)):
            raise ValueError("checkpoint ids must be unique within a job")
        return v


class PendingJob(BaseModel):
    """QC job queue item."""
    id: str
    grn_no: Optional[str] = None
    grn_date: Optional[date] = None
    po_no: Optional[str] = None
    ir_no: Optional[str] = None
    supplier: Optional[Supplier] = None
    product: Optional[Product] = None
    lot_size: Optional[int] = None
    sample_size: int
    priority: JobPriority = JobPriority.MEDIUM
    status: JobStatus = JobStatus.PENDING
    created_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    pass_rate: Optional[float] = None

    @field_validator('priority', mode='before')
    @classmethod
    def normalize_priority(cls, v):
        return normalize_to_uppercase(v, VALID_JOB_PRIORITIES)

    @field_validator('status', mode='before')
    @classmethod
    def normalize_status(cls, v):
        return normalize_to_uppercase(v, VALID_JOB_STATUSES)


class DashboardStats(BaseModel):
    """QC dashboard statistics."""
    pending_jobs: int = 0
    in_progress: int = 0
    completed: int = 0
    total_jobs: int = 0
    pass_rate: Optional[float] = None


# ============================================================================
# API SCHEMAS
# ============================================================================

class MeasuredValueUpdate(BaseModel):
    """Set (or clear with null) a sample's measured value."""
    value: Optional[float] = None


class RemarksUpdate(BaseModel):
    remarks: str = Field("", max_length=2000)


class SessionSnapshot(BaseModel):
    """Read-only view of an inspection session."""
    job_id: str
    state: SessionState
    sample_size: int
    checkpoints: List[CheckpointDefinition]
    readings: List[CheckpointReadingsOut]
    remarks: str
    dirty: bool
    last_saved: Optional[datetime] = None
    summary: InspectionSummary


class SampleUpdateResponse(BaseModel):
    """A sample after a toggle or value update, with the refreshed summary."""
    checkpoint_id: CheckpointId
    sample_number: int
    status: SampleStatus
    measured_value: Optional[float] = None
    checkpoint_result: CheckpointResult
    summary: InspectionSummary
