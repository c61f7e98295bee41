"""
Sample Reading Store.

Holds, per checkpoint, a fixed number of sample slots and owns the two
mutations an inspector can perform on a slot:
- toggle_status: UNSET -> PASS -> FAIL -> UNSET
- set_measured_value: store a reading, auto-classifying it when the
  checkpoint defines tolerance limits

Slots are immutable SampleReading values; a mutation replaces exactly
one slot and never resizes the sequence.
"""
import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from app.core.exceptions import SampleIndexOutOfRange, InputTypeMismatch, InvalidReading
from app.models.inspection import InputType, SampleStatus, CheckpointResult, TOGGLE_CYCLE
from app.schemas.inspection import (
    CheckpointDefinition, SampleReading, SampleReadingOut, CheckpointReadingsOut,
    SavedReadings
)
from app.services.limit_evaluator import evaluate, deviation, is_finite_number

logger = logging.getLogger(__name__)


def _check_index(kind: str, index: int, size: int) -> None:
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < size:
        raise SampleIndexOutOfRange(kind, index, size)


class CheckpointReadings:
    """Sample slots of one checkpoint."""

    def __init__(self, definition: CheckpointDefinition, sample_size: int):
        if sample_size < 1:
            raise ValueError("sample_size must be at least 1")
        self.definition = definition
        self._samples: List[SampleReading] = [SampleReading() for _ in range(sample_size)]

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[SampleReading]:
        return iter(self._samples)

    @property
    def samples(self) -> Tuple[SampleReading, ...]:
        return tuple(self._samples)

    def get(self, sample_index: int) -> SampleReading:
        _check_index("sample", sample_index, len(self._samples))
        return self._samples[sample_index]

    def replace(self, sample_index: int, reading: SampleReading) -> None:
        _check_index("sample", sample_index, len(self._samples))
        self._samples[sample_index] = reading

    def to_out(self, result: CheckpointResult) -> CheckpointReadingsOut:
        nominal = self.definition.nominal_value
        return CheckpointReadingsOut(
            checkpoint_id=self.definition.id,
            result=result,
            samples=[
                SampleReadingOut(
                    sample_number=number,
                    status=reading.status,
                    measured_value=reading.measured_value,
                    deviation=deviation(reading.measured_value, nominal),
                )
                for number, reading in enumerate(self._samples, start=1)
            ],
        )


class SampleReadingStore:
    """Readings of every checkpoint of a job, in checkpoint definition order."""

    def __init__(self, checkpoints: Sequence[CheckpointDefinition], sample_size: int):
        self.sample_size = sample_size
        self._checkpoints: List[CheckpointReadings] = [
            CheckpointReadings(definition, sample_size) for definition in checkpoints
        ]

    def __len__(self) -> int:
        return len(self._checkpoints)

    def __iter__(self) -> Iterator[CheckpointReadings]:
        return iter(self._checkpoints)

    @property
    def definitions(self) -> List[CheckpointDefinition]:
        return [cp.definition for cp in self._checkpoints]

    def checkpoint(self, checkpoint_index: int) -> CheckpointReadings:
        _check_index("checkpoint", checkpoint_index, len(self._checkpoints))
        return self._checkpoints[checkpoint_index]

    def reading(self, checkpoint_index: int, sample_index: int) -> SampleReading:
        return self.checkpoint(checkpoint_index).get(sample_index)

    # ========================================================================
    # MUTATIONS
    # ========================================================================

    def toggle_status(self, checkpoint_index: int, sample_index: int) -> SampleReading:
        """Advance a sample's status one step in the toggle cycle."""
        readings = self.checkpoint(checkpoint_index)
        current = readings.get(sample_index)
        definition = readings.definition
        if not definition.accepts_status:
            raise InputTypeMismatch("toggle_status", definition.id, definition.input_type.value)

        updated = current.model_copy(update={"status": TOGGLE_CYCLE[current.status]})
        readings.replace(sample_index, updated)
        return updated

    def set_measured_value(
        self,
        checkpoint_index: int,
        sample_index: int,
        value: Optional[float]
    ) -> SampleReading:
        """
        Store a measured value (None clears it).

        With both limits defined a value re-classifies the sample,
        overriding any manual toggle. Without limits the status is
        left alone.
        """
        readings = self.checkpoint(checkpoint_index)
        current = readings.get(sample_index)
        definition = readings.definition
        if not definition.accepts_value:
            raise InputTypeMismatch("set_measured_value", definition.id, definition.input_type.value)
        if value is not None and not is_finite_number(value):
            raise InvalidReading(value)

        update = {"measured_value": None if value is None else float(value)}
        if definition.has_limits:
            if value is not None:
                update["status"] = evaluate(value, definition.lower_limit, definition.upper_limit)
            elif definition.input_type == InputType.MEASUREMENT:
                # Status was derived from the value being cleared
                update["status"] = SampleStatus.UNSET

        updated = current.model_copy(update=update)
        readings.replace(sample_index, updated)
        return updated

    # ========================================================================
    # DRAFT RESTORE
    # ========================================================================

    def restore(self, saved: SavedReadings) -> int:
        """
        Copy slots of a saved draft into this store.

        Matches checkpoints by id and samples by 1-based sample number;
        anything that does not match is skipped. Values are dropped where
        the checkpoint takes none, and checkpoints with limits re-classify
        from the restored value. Returns the number of slots restored.
        """
        by_id = {cp.definition.id: cp for cp in self._checkpoints}
        restored = 0
        for saved_checkpoint in saved.checkpoint_readings:
            readings = by_id.get(saved_checkpoint.checkpoint_id)
            if readings is None:
                logger.warning(f"Saved readings for unknown checkpoint {saved_checkpoint.checkpoint_id} skipped")
                continue
            for sample in saved_checkpoint.samples:
                index = sample.sample_number - 1
                if index >= len(readings):
                    logger.warning(
                        f"Saved sample {sample.sample_number} of checkpoint "
                        f"{saved_checkpoint.checkpoint_id} exceeds sample size {len(readings)}"
                    )
                    continue
                readings.replace(index, self._restored_reading(readings.definition, sample))
                restored += 1
        return restored

    @staticmethod
    def _restored_reading(definition: CheckpointDefinition, sample: SampleReadingOut) -> SampleReading:
        """A saved slot, held to the same rules as a live mutation."""
        value = sample.measured_value
        if not definition.accepts_value or (value is not None and not is_finite_number(value)):
            value = None

        status = sample.status
        if definition.has_limits:
            if value is not None:
                status = evaluate(value, definition.lower_limit, definition.upper_limit)
            elif definition.input_type == InputType.MEASUREMENT:
                status = SampleStatus.UNSET
        return SampleReading(status=status, measured_value=value)
