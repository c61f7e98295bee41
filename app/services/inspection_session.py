"""
Inspection Session - orchestrates one inspector working one QC job.

Lifecycle:
    LOADING -> READY -> SUBMITTING -> SUBMITTED
                 ^  \
                 |   SAVING (draft sub-cycle, back to READY)
    LOADING -> ERROR when the job cannot be loaded

Mutations run synchronously to completion. The only awaits are the
three collaborator calls (load, save draft, submit), and at most one
save or submit is in flight at a time.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Protocol, Tuple, TYPE_CHECKING

from app.core.exceptions import (
    QCInspectionError, SessionStateError, OperationInFlightError, IncompleteWarning
)
from app.models.inspection import SessionState
from app.schemas.inspection import (
    JobDetails, CheckpointDefinition, SampleReading, CheckpointReadingsOut,
    DraftPayload, DraftAck, SubmissionPayload, SubmissionAck,
    InspectionSummary, SessionSnapshot
)
from app.services.reading_store import SampleReadingStore
from app.services.result_aggregator import aggregate, summarize

if TYPE_CHECKING:
    from app.jobs.autosave import AutosaveScheduler

logger = logging.getLogger(__name__)


# ============================================================================
# COLLABORATORS
# ============================================================================

class JobDetailsProvider(Protocol):
    async def get_job_details(self, job_id: str) -> JobDetails: ...


class DraftPersistence(Protocol):
    async def save_draft(self, job_id: str, payload: DraftPayload) -> DraftAck: ...


class SubmissionSink(Protocol):
    async def submit_inspection(self, job_id: str, payload: SubmissionPayload) -> SubmissionAck: ...


EDITABLE_STATES = (SessionState.READY, SessionState.SAVING)


class InspectionSession:
    """Holds a job's checkpoints, readings and remarks for one inspector."""

    def __init__(
        self,
        job_id: str,
        provider: JobDetailsProvider,
        drafts: Optional[DraftPersistence] = None,
        sink: Optional[SubmissionSink] = None,
        autosave: Optional["AutosaveScheduler"] = None
    ):
        self.job_id = job_id
        self.provider = provider
        # A single backend usually serves all three roles
        self.drafts = drafts or provider
        self.sink = sink or provider
        self.autosave = autosave

        self.state = SessionState.LOADING
        self.error: Optional[Exception] = None
        self.job: Optional[JobDetails] = None
        self.remarks = ""
        self.dirty = False
        self.last_saved: Optional[datetime] = None

        self._store: Optional[SampleReadingStore] = None
        self._revision = 0
        self._in_flight: Optional[str] = None
        self._closed = False
        self._summary_cache: Optional[Tuple[int, InspectionSummary]] = None

    @classmethod
    async def open(
        cls,
        job_id: str,
        provider: JobDetailsProvider,
        **kwargs
    ) -> "InspectionSession":
        """Create a session and load its job."""
        session = cls(job_id, provider, **kwargs)
        await session.load()
        return session

    # ========================================================================
    # LOADING
    # ========================================================================

    async def load(self) -> None:
        """Fetch the job and initialize (or restore) its readings."""
        if self._in_flight:
            raise OperationInFlightError("load", self._in_flight)

        self.state = SessionState.LOADING
        self.error = None
        try:
            job = await self.provider.get_job_details(self.job_id)
        except Exception as e:
            self.state = SessionState.ERROR
            self.error = e
            logger.error(f"Failed to load inspection job {self.job_id}: {e}")
            raise

        store = SampleReadingStore(job.checkpoints, job.sample_size)
        remarks = ""
        last_saved = None
        if job.saved_readings:
            restored = store.restore(job.saved_readings)
            remarks = job.saved_readings.remarks
            last_saved = job.saved_readings.last_saved
            logger.info(f"Restored {restored} saved readings for job {self.job_id}")

        self.job = job
        self._store = store
        self.remarks = remarks
        self.last_saved = last_saved
        self.dirty = False
        self._touch()
        self.state = SessionState.READY
        logger.info(
            f"Inspection session opened for job {self.job_id}: "
            f"{len(store)} checkpoints x {job.sample_size} samples"
        )

    # ========================================================================
    # READ-ONLY VIEWS
    # ========================================================================

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def in_flight(self) -> Optional[str]:
        """'save' or 'submit' while a collaborator call is pending."""
        return self._in_flight

    @property
    def sample_size(self) -> int:
        return self._loaded_store().sample_size

    @property
    def checkpoints(self) -> List[CheckpointDefinition]:
        return self._loaded_store().definitions

    @property
    def readings(self) -> List[CheckpointReadingsOut]:
        return [cp.to_out(aggregate(cp)) for cp in self._loaded_store()]

    def reading(self, checkpoint_index: int, sample_index: int) -> SampleReading:
        return self._loaded_store().reading(checkpoint_index, sample_index)

    def current_summary(self) -> InspectionSummary:
        """Summary of the current readings, recomputed after every mutation."""
        store = self._loaded_store()
        if self._summary_cache and self._summary_cache[0] == self._revision:
            return self._summary_cache[1]
        summary = summarize(store)
        self._summary_cache = (self._revision, summary)
        return summary

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            job_id=self.job_id,
            state=self.state,
            sample_size=self.sample_size,
            checkpoints=self.checkpoints,
            readings=self.readings,
            remarks=self.remarks,
            dirty=self.dirty,
            last_saved=self.last_saved,
            summary=self.current_summary(),
        )

    # ========================================================================
    # MUTATIONS
    # ========================================================================

    def toggle_sample(self, checkpoint_index: int, sample_index: int) -> SampleReading:
        """Cycle a sample's status UNSET -> PASS -> FAIL -> UNSET."""
        store = self._editable_store("toggle a sample")
        reading = store.toggle_status(checkpoint_index, sample_index)
        self._mark_dirty()
        logger.debug(f"Job {self.job_id} [{checkpoint_index}, {sample_index}] -> {reading.status.value}")
        return reading

    def set_measured_value(
        self,
        checkpoint_index: int,
        sample_index: int,
        value: Optional[float]
    ) -> SampleReading:
        """Record (or clear with None) a measured value."""
        store = self._editable_store("set a measured value")
        reading = store.set_measured_value(checkpoint_index, sample_index, value)
        self._mark_dirty()
        logger.debug(
            f"Job {self.job_id} [{checkpoint_index}, {sample_index}] = {value} "
            f"-> {reading.status.value}"
        )
        return reading

    def update_remarks(self, text: str) -> None:
        self._editable_store("update remarks")
        self.remarks = text
        self._mark_dirty()

    # ========================================================================
    # SAVE / SUBMIT
    # ========================================================================

    async def save_draft(self) -> DraftAck:
        """
        Persist the current readings and remarks as a draft.

        Failures leave the session READY with dirty unchanged and are
        re-raised; drafts can simply be saved again.
        """
        self._ensure_dispatchable("save a draft")

        payload = DraftPayload(checkpoint_readings=self.readings, remarks=self.remarks)
        revision = self._revision
        self._in_flight = "save"
        self.state = SessionState.SAVING
        logger.info(f"Saving draft for job {self.job_id}")

        try:
            ack = await self.drafts.save_draft(self.job_id, payload)
        except QCInspectionError as e:
            logger.warning(f"Draft save failed for job {self.job_id}: {e}")
            raise
        finally:
            self._in_flight = None
            if not self._closed and self.state == SessionState.SAVING:
                self.state = SessionState.READY

        if self._closed:
            logger.info(f"Draft save for closed session {self.job_id} completed; result discarded")
            return ack

        self.last_saved = ack.saved_at
        # Edits made while the save was in flight are still unsaved
        if self._revision == revision:
            self.dirty = False
        logger.info(f"Draft saved for job {self.job_id}")
        return ack

    async def submit(self, confirm_incomplete: bool = False) -> SubmissionAck:
        """
        Submit the inspection.

        Raises IncompleteWarning when samples are still unset, unless the
        caller has confirmed with confirm_incomplete=True.
        """
        self._ensure_dispatchable("submit")

        summary = self.current_summary()
        if not summary.is_complete and not confirm_incomplete:
            raise IncompleteWarning(summary)

        if self.autosave:
            self.autosave.cancel(self)

        payload = SubmissionPayload(
            checkpoint_readings=self.readings,
            remarks=self.remarks,
            summary=summary,
            sample_size=self.sample_size,
            lot_size=self.job.lot_size,
            submitted_at=datetime.now(timezone.utc),
        )
        self._in_flight = "submit"
        self.state = SessionState.SUBMITTING
        logger.info(
            f"Submitting job {self.job_id}: {summary.lot_disposition.value}, "
            f"pass rate {summary.pass_rate}%"
        )

        submitted = False
        try:
            ack = await self.sink.submit_inspection(self.job_id, payload)
            submitted = True
        except QCInspectionError as e:
            logger.warning(f"Submission failed for job {self.job_id}: {e}")
            raise
        finally:
            self._in_flight = None
            if not self._closed:
                self.state = SessionState.SUBMITTED if submitted else SessionState.READY
                if not submitted and self.dirty and self.autosave:
                    self.autosave.schedule(self)

        if not self._closed:
            self.dirty = False
        logger.info(f"Job {self.job_id} submitted ({ack.ir_number})")
        return ack

    def close(self) -> None:
        """Discard the session; pending collaborator results will be ignored."""
        self._closed = True
        if self.autosave:
            self.autosave.cancel(self)
        logger.info(f"Inspection session for job {self.job_id} closed")

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _loaded_store(self) -> SampleReadingStore:
        if self._store is None:
            raise SessionStateError("read readings", self.state.value)
        return self._store

    def _editable_store(self, operation: str) -> SampleReadingStore:
        if self._closed:
            raise SessionStateError(operation, "CLOSED")
        if self.state not in EDITABLE_STATES:
            raise SessionStateError(operation, self.state.value)
        return self._loaded_store()

    def _ensure_dispatchable(self, operation: str) -> None:
        if self._closed:
            raise SessionStateError(operation, "CLOSED")
        if self._in_flight:
            raise OperationInFlightError(operation, self._in_flight)
        if self.state != SessionState.READY:
            raise SessionStateError(operation, self.state.value)

    def _touch(self) -> None:
        self._revision += 1
        self._summary_cache = None

    def _mark_dirty(self) -> None:
        self._touch()
        self.dirty = True
        if self.autosave:
            self.autosave.schedule(self)
