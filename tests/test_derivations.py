import math

import pytest

from finance_api.derivations import (
    STATUS_ACHIEVED,
    STATUS_IN_PROGRESS,
    goal_status,
    percentage_used,
    to_number,
)


def test_percentage_used_basic():
    assert percentage_used(50, 200) == 25.0


def test_percentage_used_is_not_clamped():
    assert percentage_used(300, 200) == 150.0


def test_percentage_used_zero_amount():
    assert percentage_used(10, 0) == 0.0


@pytest.mark.parametrize("current, target, requested, expected", [
    (500, 500, None, STATUS_ACHIEVED),
    (600, 500, STATUS_IN_PROGRESS, STATUS_ACHIEVED),
    (100, 500, STATUS_ACHIEVED, STATUS_IN_PROGRESS),
    (100, 500, "paused", STATUS_IN_PROGRESS),
    (100, 500, STATUS_IN_PROGRESS, STATUS_IN_PROGRESS),
    (0, 0, None, STATUS_IN_PROGRESS),
    (10, 0, STATUS_ACHIEVED, STATUS_IN_PROGRESS),
])
def test_goal_status(current, target, requested, expected):
    assert goal_status(current, target, requested) == expected


def test_to_number_accepts_numeric_strings():
    assert to_number(" 12.5 ") == 12.5


@pytest.mark.parametrize("bad", [None, True, "", "abc", math.inf, float("nan"), [1]])
def test_to_number_rejects(bad):
    with pytest.raises(ValueError):
        to_number(bad, "amount")


def test_percentage_used_rejects_overflow():
    with pytest.raises(ValueError):
        percentage_used(1, 1e-310)
