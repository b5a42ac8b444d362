import pytest

from school_records.grading.engine import recompute
from school_records.models import Marks, Student


def _add_student(db_session, name, roll_number, class_name="10th", is_active=True):
    student = Student(
        name=name,
        roll_number=roll_number,
        class_name=class_name,
        section="A",
        email=f"{roll_number}@student.com",
        gender="Other",
        is_active=is_active,
    )
    db_session.add(student)
    db_session.commit()
    return student


def _add_marks(db_session, student, teacher, marks_obtained, subject="Mathematics"):
    marks = Marks(
        student_id=student.id,
        subject=subject,
        marks_obtained=marks_obtained,
        total_marks=100,
        entered_by_id=teacher.id,
    )
    recompute(marks)
    db_session.add(marks)
    db_session.commit()
    return marks


def test_class_analytics(teacher_client, db_session, teacher, student):
    """
    Tests that class statistics cover only active students of the requested class.
    """
    classmate = _add_student(db_session, "Rohan Gupta", "2024011")
    other_class = _add_student(db_session, "Isha Verma", "2024101", class_name="9th")
    departed = _add_student(db_session, "Dev Patel", "2024012", is_active=False)

    _add_marks(db_session, student, teacher, 82)
    _add_marks(db_session, classmate, teacher, 30)
    _add_marks(db_session, other_class, teacher, 100)
    _add_marks(db_session, departed, teacher, 5)

    response = teacher_client.get("/api/analytics/classes/10th")

    assert response.status_code == 200, f"Failed to get analytics: {response.text}"
    analytics = response.json()
    assert analytics["class_name"] == "10th"
    assert analytics["total_students"] == 2
    assert analytics["total_records"] == 2
    assert analytics["average_marks"] == pytest.approx(56.0)
    assert analytics["highest_marks"] == pytest.approx(82.0)
    assert analytics["lowest_marks"] == pytest.approx(30.0)
    assert analytics["pass_rate"] == pytest.approx(50.0)


def test_class_analytics_pass_boundary(teacher_client, db_session, teacher, student):
    _add_marks(db_session, student, teacher, 40, subject="Mathematics")
    _add_marks(db_session, student, teacher, 39.5, subject="Science")

    analytics = teacher_client.get("/api/analytics/classes/10th").json()

    assert analytics["total_records"] == 2
    assert analytics["pass_rate"] == pytest.approx(50.0), "Exactly 40% passes, anything below fails"


def test_class_analytics_without_marks(teacher_client, student):
    response = teacher_client.get("/api/analytics/classes/10th")

    assert response.status_code == 200
    assert response.json() == {
        "class_name": "10th",
        "total_students": 1,
        "total_records": 0,
        "average_marks": 0.0,
        "highest_marks": 0.0,
        "lowest_marks": 0.0,
        "pass_rate": 0.0,
    }


def test_class_analytics_requires_authentication(anon_client):
    response = anon_client.get("/api/analytics/classes/10th")
    assert response.status_code == 401
