import math

import pytest

from app.models.inspection import SampleStatus
from app.services.limit_evaluator import evaluate, deviation, is_finite_number


@pytest.mark.parametrize("value, expected", [
    (93.5, SampleStatus.PASS),
    (94.0, SampleStatus.PASS),
    (94.5, SampleStatus.PASS),
    (93.49, SampleStatus.FAIL),
    (94.51, SampleStatus.FAIL),
])
def test_limits_are_inclusive(value, expected):
    assert evaluate(value, 93.5, 94.5) == expected


@pytest.mark.parametrize("value, lower, upper", [
    (94.0, None, 94.5),
    (94.0, 93.5, None),
    (None, 93.5, 94.5),
    (math.nan, 93.5, 94.5),
    (math.inf, 93.5, 94.5),
])
def test_unclassifiable_values_are_unset(value, lower, upper):
    assert evaluate(value, lower, upper) == SampleStatus.UNSET


def test_integer_readings_are_accepted():
    assert evaluate(12, 11.8, 12.2) == SampleStatus.PASS


def test_is_finite_number_rejects_bools_and_strings():
    assert is_finite_number(1.5)
    assert not is_finite_number(True)
    assert not is_finite_number("1.5")
    assert not is_finite_number(-math.inf)


def test_deviation_from_nominal():
    assert deviation(94.2, 94.0) == 0.2
    assert deviation(93.75, 94.0) == -0.25
    assert deviation(None, 94.0) is None
    assert deviation(94.2, None) is None
