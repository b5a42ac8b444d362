from typing import Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session

from school_records.grading.engine import is_passing
from school_records.models import Marks, Student, Teacher
from school_records.policy.access import Action, authorize


class ClassAnalytics(BaseModel):
    class_name: str
    total_students: int
    total_records: int
    average_marks: float
    highest_marks: float
    lowest_marks: float
    pass_rate: float


def get_class_analytics(db: Session, actor: Optional[Teacher], class_name: str) -> ClassAnalytics:
    """
    Percentage statistics over every marks record of the class's active students.

    All figures are 0 when the class has no marks yet.
    """
    authorize(actor, Action.CLASS_ANALYTICS)

    student_ids = [
        row.id
        for row in db.query(Student.id).filter(Student.class_name == class_name, Student.is_active == True)
    ]
    percentages = []
    if student_ids:
        percentages = [
            row.percentage
            for row in db.query(Marks.percentage).filter(Marks.student_id.in_(student_ids))
            if row.percentage is not None
        ]

    if not percentages:
        return ClassAnalytics(
            class_name=class_name,
            total_students=len(student_ids),
            total_records=0,
            average_marks=0.0,
            highest_marks=0.0,
            lowest_marks=0.0,
            pass_rate=0.0,
        )

    passed = sum(1 for percentage in percentages if is_passing(percentage))
    return ClassAnalytics(
        class_name=class_name,
        total_students=len(student_ids),
        total_records=len(percentages),
        average_marks=sum(percentages) / len(percentages),
        highest_marks=max(percentages),
        lowest_marks=min(percentages),
        pass_rate=passed / len(percentages) * 100,
    )
