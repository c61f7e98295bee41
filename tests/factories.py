"""
Builders for checkpoint definitions and job payloads used across tests.
"""
from app.schemas.inspection import CheckpointDefinition


def measurement_checkpoint(id=1, lower=93.5, nominal=94.0, upper=94.5, **kwargs):
    return CheckpointDefinition(
        id=id,
        name=kwargs.pop("name", f"Checkpoint {id}"),
        input_type="MEASUREMENT",
        nominal_value=nominal,
        lower_limit=lower,
        upper_limit=upper,
        **kwargs,
    )


def yesno_checkpoint(id=1, **kwargs):
    return CheckpointDefinition(id=id, name=kwargs.pop("name", f"Checkpoint {id}"), input_type="YESNO", **kwargs)


def job_details(job_id="JOB-1", sample_size=2, checkpoints=None, **kwargs):
    """Job details dict; by default a yes/no and a limited measurement checkpoint."""
    if checkpoints is None:
        checkpoints = [
            {"id": 1, "name": "Visual", "input_type": "YESNO"},
            {"id": 2, "name": "Height", "input_type": "MEASUREMENT",
             "nominal_value": 10.0, "lower_limit": 9.9, "upper_limit": 10.1},
        ]
    return {
        "id": job_id,
        "grn_no": "GRN-1",
        "lot_size": 20,
        "sample_size": sample_size,
        "checkpoints": checkpoints,
        **kwargs,
    }
