import pytest

from app.models.inspection import SampleStatus, CheckpointResult, LotDisposition
from app.services.reading_store import SampleReadingStore
from app.services.result_aggregator import aggregate, pass_rate, lot_disposition, summarize

from tests.factories import measurement_checkpoint, yesno_checkpoint


def fill(store, checkpoint_index, statuses):
    """Toggle samples of a yes/no checkpoint into the given statuses."""
    steps = {SampleStatus.UNSET: 0, SampleStatus.PASS: 1, SampleStatus.FAIL: 2}
    for sample_index, status in enumerate(statuses):
        for _ in range(steps[status]):
            store.toggle_status(checkpoint_index, sample_index)


P, F, U = SampleStatus.PASS, SampleStatus.FAIL, SampleStatus.UNSET


# ============================================================================
# CHECKPOINT RESULT
# ============================================================================

@pytest.mark.parametrize("statuses, expected", [
    ([U] * 10, CheckpointResult.PENDING),
    ([P] * 10, CheckpointResult.ACCEPTED),
    ([P] * 9 + [F], CheckpointResult.REJECTED),
    ([P] * 5 + [U] * 5, CheckpointResult.ACCEPTED),
    ([F] + [U] * 9, CheckpointResult.REJECTED),
])
def test_any_fail_rejects_the_checkpoint(statuses, expected):
    store = SampleReadingStore([yesno_checkpoint()], sample_size=10)
    fill(store, 0, statuses)
    assert aggregate(store.checkpoint(0)) == expected


# ============================================================================
# PASS RATE
# ============================================================================

@pytest.mark.parametrize("passed, failed, expected", [
    (0, 0, 0.0),
    (1, 1, 50.0),
    (2, 1, 66.7),
    (1, 2, 33.3),
    (10, 0, 100.0),
    (1, 7, 12.5),
])
def test_pass_rate(passed, failed, expected):
    assert pass_rate(passed, failed) == expected


def test_lot_disposition():
    assert lot_disposition([CheckpointResult.PENDING] * 3) == LotDisposition.INDETERMINATE
    assert lot_disposition([CheckpointResult.ACCEPTED, CheckpointResult.PENDING]) == LotDisposition.ACCEPT_LOT
    assert lot_disposition([CheckpointResult.ACCEPTED, CheckpointResult.REJECTED]) == LotDisposition.REJECT_LOT
    assert lot_disposition([]) == LotDisposition.INDETERMINATE


# ============================================================================
# SUMMARY
# ============================================================================

def test_fresh_store_summary():
    store = SampleReadingStore([yesno_checkpoint(id=1), yesno_checkpoint(id=2)], sample_size=5)
    summary = summarize(store)
    assert summary.total_samples == 10
    assert summary.completed_samples == 0
    assert summary.pass_rate == 0.0
    assert not summary.is_complete
    assert summary.checkpoint_results == [CheckpointResult.PENDING] * 2
    assert summary.lot_disposition == LotDisposition.INDETERMINATE


def test_missing_slots_are_listed():
    store = SampleReadingStore([yesno_checkpoint(id=1), yesno_checkpoint(id=2, name="Finish")], sample_size=5)
    fill(store, 0, [P, P, F, P, P])
    fill(store, 1, [P, U, P, U, U])

    summary = summarize(store)

    assert summary.completed_samples == 7
    assert summary.missing_samples == 3
    assert not summary.is_complete
    assert [(m.checkpoint_id, m.sample_number) for m in summary.missing] == [(2, 2), (2, 4), (2, 5)]
    assert summary.missing[0].checkpoint_name == "Finish"

    fill(store, 1, [U, P, U, F, P])
    summary = summarize(store)
    assert summary.completed_samples == 10
    assert summary.missing_samples == 0
    assert summary.is_complete
    assert summary.missing == []


def test_counts_are_consistent():
    store = SampleReadingStore([yesno_checkpoint(id=1), yesno_checkpoint(id=2)], sample_size=4)
    fill(store, 0, [P, F, U, P])
    fill(store, 1, [F, F, P, U])

    summary = summarize(store)

    assert summary.passed_samples + summary.failed_samples == summary.completed_samples
    assert summary.completed_samples + summary.missing_samples == summary.total_samples
    assert summary.accepted_checkpoints + summary.rejected_checkpoints + summary.pending_checkpoints == 2
    assert summary.pass_rate == 50.0


def test_measurement_walkthrough():
    """One limited checkpoint, three samples: 94.2, 95.0, then clear 95.0."""
    store = SampleReadingStore([measurement_checkpoint()], sample_size=3)

    store.set_measured_value(0, 0, 94.2)
    store.set_measured_value(0, 1, 95.0)
    summary = summarize(store)
    assert summary.completed_samples == 2
    assert summary.total_samples == 3
    assert summary.is_complete is False
    assert summary.checkpoint_results == [CheckpointResult.REJECTED]
    assert summary.pass_rate == 50.0
    assert summary.lot_disposition == LotDisposition.REJECT_LOT

    store.set_measured_value(0, 1, None)
    summary = summarize(store)
    assert summary.completed_samples == 1
    assert summary.checkpoint_results == [CheckpointResult.ACCEPTED]
    assert summary.pass_rate == 100.0


def test_complete_inspection():
    store = SampleReadingStore([yesno_checkpoint()], sample_size=3)
    fill(store, 0, [P, P, P])
    summary = summarize(store)
    assert summary.is_complete
    assert summary.missing == []
    assert summary.lot_disposition == LotDisposition.ACCEPT_LOT
