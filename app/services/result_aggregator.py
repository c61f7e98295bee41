"""
Result aggregation for inspections.

Checkpoint level (aggregate):
    Any FAIL rejects the checkpoint, regardless of how many samples
    passed. This is deliberately stricter than the ratio thresholds of
    AQL sampling plans configured elsewhere.

Inspection level (summarize):
    Sample counts, pass rate, completeness and lot disposition across
    all checkpoints. Computed on demand from the current readings.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List

from app.models.inspection import SampleStatus, CheckpointResult, LotDisposition
from app.schemas.inspection import InspectionSummary, MissingReading
from app.services.reading_store import CheckpointReadings


def aggregate(readings: CheckpointReadings) -> CheckpointResult:
    """Derive a checkpoint result from its sample readings."""
    statuses = [reading.status for reading in readings]

    if all(status == SampleStatus.UNSET for status in statuses):
        return CheckpointResult.PENDING
    if any(status == SampleStatus.FAIL for status in statuses):
        return CheckpointResult.REJECTED
    return CheckpointResult.ACCEPTED


def pass_rate(passed: int, failed: int) -> float:
    """Passed share of classified samples in percent, one decimal; 0 when nothing is classified."""
    classified = passed + failed
    if classified == 0:
        return 0.0
    rate = Decimal(passed) / Decimal(classified) * 100
    return float(rate.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def lot_disposition(results: List[CheckpointResult]) -> LotDisposition:
    """Roll checkpoint results up into a verdict for the lot."""
    if any(result == CheckpointResult.REJECTED for result in results):
        return LotDisposition.REJECT_LOT
    if any(result == CheckpointResult.ACCEPTED for result in results):
        return LotDisposition.ACCEPT_LOT
    return LotDisposition.INDETERMINATE


def summarize(checkpoints: Iterable[CheckpointReadings]) -> InspectionSummary:
    """Aggregate counts, pass rate, completeness and lot disposition."""
    total = passed = failed = 0
    results: List[CheckpointResult] = []
    missing: List[MissingReading] = []

    for readings in checkpoints:
        results.append(aggregate(readings))
        definition = readings.definition
        for number, reading in enumerate(readings, start=1):
            total += 1
            if reading.status == SampleStatus.PASS:
                passed += 1
            elif reading.status == SampleStatus.FAIL:
                failed += 1
            else:
                missing.append(MissingReading(
                    checkpoint_id=definition.id,
                    checkpoint_name=definition.name,
                    sample_number=number,
                ))

    completed = passed + failed

    return InspectionSummary(
        total_samples=total,
        completed_samples=completed,
        missing_samples=total - completed,
        passed_samples=passed,
        failed_samples=failed,
        pass_rate=pass_rate(passed, failed),
        is_complete=completed == total,
        checkpoint_results=results,
        total_checkpoints=len(results),
        accepted_checkpoints=results.count(CheckpointResult.ACCEPTED),
        rejected_checkpoints=results.count(CheckpointResult.REJECTED),
        pending_checkpoints=results.count(CheckpointResult.PENDING),
        lot_disposition=lot_disposition(results),
        missing=missing,
    )
