from types import SimpleNamespace

import pytest

from school_records.errors import InvalidInputError, ValidationError
from school_records.grading.engine import (
    GRADES,
    compute_grade,
    compute_percentage,
    is_passing,
    recompute,
)


@pytest.mark.parametrize("marks_obtained, total_marks", [
    (82, 100),
    (17, 20),
    (0, 50),
    (33.5, 40),
    (120, 100),
    (-5, 100),
])
def test_compute_percentage_is_plain_ratio(marks_obtained, total_marks):
    """
    The percentage is marks_obtained / total_marks * 100, unclamped.
    """
    expected = marks_obtained / total_marks * 100
    assert abs(compute_percentage(marks_obtained, total_marks) - expected) < 1e-9


def test_compute_percentage_allows_more_than_total():
    assert compute_percentage(110, 100) == pytest.approx(110.0)


@pytest.mark.parametrize("total_marks", [0, -10])
def test_compute_percentage_rejects_non_positive_total(total_marks):
    with pytest.raises(InvalidInputError):
        compute_percentage(50, total_marks)


def test_compute_percentage_rejects_missing_values():
    with pytest.raises(InvalidInputError):
        compute_percentage(None, 100)
    with pytest.raises(InvalidInputError):
        compute_percentage(50, None)


def test_invalid_input_is_a_validation_error():
    """Transports render engine input failures like any other bad input."""
    assert issubclass(InvalidInputError, ValidationError)
    assert InvalidInputError.status_code == 400
    assert InvalidInputError.code == "BAD_USER_INPUT"


@pytest.mark.parametrize("percentage, grade", [
    (100, "A+"),
    (90, "A+"),
    (89.99, "A"),
    (89.999, "A"),
    (85, "A"),
    (84.9, "A-"),
    (80, "A-"),
    (75, "B+"),
    (70, "B"),
    (65, "B-"),
    (60, "C+"),
    (55, "C"),
    (50, "C-"),
    (45, "D+"),
    (44.99, "D"),
    (40, "D"),
    (39.99, "F"),
    (0, "F"),
])
def test_compute_grade_bands(percentage, grade):
    assert compute_grade(percentage) == grade


def test_compute_grade_out_of_range_values():
    assert compute_grade(-12.5) == "F"
    assert compute_grade(150) == "A+"


def test_compute_grade_bands_do_not_overlap():
    """
    Walking upward in small steps, the grade only ever improves, and every
    grade in the table is reached exactly once as a contiguous band.
    """
    seen = []
    step = -10.0
    while step <= 110.0:
        grade = compute_grade(step)
        if not seen or seen[-1] != grade:
            seen.append(grade)
        step = round(step + 0.01, 2)

    assert seen == list(reversed(GRADES))


def test_is_passing_boundary():
    assert is_passing(40) is True
    assert is_passing(39.999) is False
    assert is_passing(100) is True


def test_recompute_sets_derived_fields():
    record = SimpleNamespace(marks_obtained=82, total_marks=100, percentage=None, grade=None)

    recompute(record)

    assert record.percentage == pytest.approx(82.0)
    assert record.grade == "A-"


def test_recompute_overwrites_caller_supplied_values():
    record = SimpleNamespace(marks_obtained=30, total_marks=100, percentage=99.0, grade="A+")

    recompute(record)

    assert record.percentage == pytest.approx(30.0)
    assert record.grade == "F"


def test_recompute_is_idempotent():
    record = SimpleNamespace(marks_obtained=15, total_marks=20, percentage=None, grade=None)

    recompute(record)
    first = (record.percentage, record.grade)
    recompute(record)

    assert (record.percentage, record.grade) == first
    assert first == (75.0, "B+")


def test_recompute_rejects_zero_total():
    record = SimpleNamespace(marks_obtained=10, total_marks=0, percentage=None, grade=None)
    with pytest.raises(InvalidInputError):
        recompute(record)
