"""
Percentage and letter-grade derivation for exam marks.

Every function here is pure except `recompute`, which writes the derived
fields onto a record in place. Marks records never keep a caller-supplied
percentage or grade: `recompute` runs before each create and update.
"""
from typing import Optional

from school_records.errors import InvalidInputError

PASS_MARK = 40.0

# Descending lower bounds, first match wins; anything below the last band is F
GRADE_THRESHOLDS = (
    (90.0, "A+"),
    (85.0, "A"),
    (80.0, "A-"),
    (75.0, "B+"),
    (70.0, "B"),
    (65.0, "B-"),
    (60.0, "C+"),
    (55.0, "C"),
    (50.0, "C-"),
    (45.0, "D+"),
    (40.0, "D"),
)
FAILING_GRADE = "F"

GRADES = tuple(grade for _, grade in GRADE_THRESHOLDS) + (FAILING_GRADE,)


def compute_percentage(marks_obtained: Optional[float], total_marks: Optional[float]) -> float:
    """
    Convert raw marks to a percentage.

    The result is not clamped: marks above the total give more than 100.

    Raises:
        InvalidInputError: if either value is missing or total_marks is not positive
    """
    if marks_obtained is None or total_marks is None:
        raise InvalidInputError("Marks obtained and total marks are required")
    if total_marks <= 0:
        raise InvalidInputError("Total marks must be greater than 0")
    return (float(marks_obtained) / float(total_marks)) * 100


def compute_grade(percentage: float) -> str:
    for lower_bound, grade in GRADE_THRESHOLDS:
        if percentage >= lower_bound:
            return grade
    return FAILING_GRADE


def is_passing(percentage: float) -> bool:
    return percentage >= PASS_MARK


def recompute(record):
    """Set `percentage` and `grade` on a marks record from its raw marks."""
    percentage = compute_percentage(record.marks_obtained, record.total_marks)
    record.percentage = percentage
    record.grade = compute_grade(percentage)
    return record
