"""
Tolerance evaluation for measured values.
"""
import math
from typing import Optional

from app.models.inspection import SampleStatus


def is_finite_number(value) -> bool:
    """True for int/float values that are neither NaN nor infinite."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def evaluate(
    measured_value: Optional[float],
    lower_limit: Optional[float],
    upper_limit: Optional[float]
) -> SampleStatus:
    """
    Classify a measured value against inclusive tolerance limits.

    Args:
        measured_value: The reading, or None
        lower_limit: Lower tolerance limit, or None
        upper_limit: Upper tolerance limit, or None

    Returns:
        UNSET if a limit is missing or the value is absent/not finite,
        PASS if lower_limit <= measured_value <= upper_limit, FAIL otherwise.
    """
    if lower_limit is None or upper_limit is None:
        return SampleStatus.UNSET
    if measured_value is None or not is_finite_number(measured_value):
        return SampleStatus.UNSET

    if lower_limit <= measured_value <= upper_limit:
        return SampleStatus.PASS
    return SampleStatus.FAIL


def deviation(measured_value: Optional[float], nominal_value: Optional[float]) -> Optional[float]:
    """Signed distance from nominal, rounded to 3 decimals."""
    if measured_value is None or nominal_value is None:
        return None
    return round(measured_value - nominal_value, 3)
