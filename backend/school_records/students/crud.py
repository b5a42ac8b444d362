import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from school_records.database import commit
from school_records.errors import NotFoundError
from school_records.models import Student, Teacher
from school_records.policy.access import Action, authorize
from school_records.students.schemas import StudentCreate, StudentUpdate
from school_records import validation

logger = logging.getLogger(__name__)


def list_students(
    db: Session,
    actor: Optional[Teacher],
    class_name: Optional[str] = None,
    section: Optional[str] = None,
) -> List[Student]:
    """Active students, optionally filtered by class and section, ordered by name."""
    authorize(actor, Action.READ_STUDENTS)
    query = db.query(Student).filter(Student.is_active == True)
    if class_name:
        query = query.filter(Student.class_name == class_name)
    if section:
        query = query.filter(Student.section == section)
    return query.order_by(Student.name.asc()).all()


def get_student(db: Session, actor: Optional[Teacher], student_id: int) -> Student:
    authorize(actor, Action.READ_STUDENTS)
    return validation.get_active_student(db, student_id)


def get_student_by_roll_number(db: Session, actor: Optional[Teacher], roll_number: str) -> Student:
    authorize(actor, Action.READ_STUDENTS)
    student = (
        db.query(Student)
        .filter(Student.roll_number == roll_number.strip(), Student.is_active == True)
        .first()
    )
    if student is None:
        raise NotFoundError("Student not found")
    return student


def create_student(db: Session, actor: Optional[Teacher], student_in: StudentCreate) -> Student:
    """
    Create a student after checking roll number and email against every
    existing student, including soft-deleted ones.
    """
    authorize(actor, Action.CREATE_STUDENT)

    roll_number = validation.validate_roll_number(student_in.roll_number)
    email = validation.validate_email(student_in.email)
    validation.ensure_student_unique(db, roll_number=roll_number, email=email)

    data = student_in.model_dump(exclude_none=True)
    data.update(roll_number=roll_number, email=email)
    student = Student(**data)
    db.add(student)
    commit(db, on_conflict=lambda: validation.ensure_student_unique(db, roll_number=roll_number, email=email))
    db.refresh(student)

    logger.info(f"Student {student.id} (roll {student.roll_number}) created by teacher {actor.id}")
    return student


def update_student(
    db: Session,
    actor: Optional[Teacher],
    student_id: int,
    student_in: StudentUpdate,
) -> Student:
    authorize(actor, Action.UPDATE_STUDENT)
    student = validation.get_active_student(db, student_id)

    changes = student_in.model_dump(exclude_unset=True)
    # Required columns can't be cleared
    for field in ("name", "roll_number", "class_name", "section", "email", "gender"):
        if field in changes and changes[field] is None:
            changes.pop(field)

    roll_number = None
    email = None
    if "roll_number" in changes:
        changes["roll_number"] = validation.validate_roll_number(changes["roll_number"])
        if changes["roll_number"] != student.roll_number:
            roll_number = changes["roll_number"]
    if "email" in changes:
        changes["email"] = validation.validate_email(changes["email"])
        if changes["email"] != student.email:
            email = changes["email"]
    validation.ensure_student_unique(db, roll_number=roll_number, email=email, exclude_id=student.id)

    for field, value in changes.items():
        setattr(student, field, value)

    commit(
        db,
        on_conflict=lambda: validation.ensure_student_unique(
            db, roll_number=roll_number, email=email, exclude_id=student_id
        ),
    )
    db.refresh(student)

    logger.info(f"Student {student.id} updated by teacher {actor.id}: {sorted(changes)}")
    return student


def deactivate_student(db: Session, actor: Optional[Teacher], student_id: int) -> Student:
    """Soft delete: the row and its marks stay, the student drops out of listings."""
    authorize(actor, Action.DELETE_STUDENT)
    student = db.query(Student).filter(Student.id == student_id).first()
    if student is None:
        raise NotFoundError("Student not found")

    student.is_active = False
    commit(db)

    logger.info(f"Student {student_id} deactivated by admin {actor.id}")
    return student
