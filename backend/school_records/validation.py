from typing import Optional

from email_validator import EmailNotValidError, validate_email as check_email_syntax
from sqlalchemy.orm import Session

from school_records.errors import ValidationError, NotFoundError
from school_records.models import Student, Teacher, Marks

MIN_PASSWORD_LENGTH = 6

STUDENT_ROLL_EXISTS = "Student with this roll number already exists"
STUDENT_EMAIL_EXISTS = "Student with this email already exists"
TEACHER_EMAIL_EXISTS = "Teacher with this email already exists"
DUPLICATE_MARKS = "Marks already exist for this student, subject, exam type and academic year"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_email(email: Optional[str]) -> str:
    if not email or not email.strip():
        raise ValidationError("Email is required")
    email = normalize_email(email)
    try:
        check_email_syntax(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("Please enter a valid email")
    return email


def validate_roll_number(roll_number: Optional[str]) -> str:
    if roll_number is None or not roll_number.strip():
        raise ValidationError("Roll number is required")
    return roll_number.strip()


def validate_password(password: Optional[str]) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return password


def ensure_student_unique(
    db: Session,
    roll_number: Optional[str] = None,
    email: Optional[str] = None,
    exclude_id: Optional[int] = None,
) -> None:
    """
    Reject a roll number or email already used by any student, active or not.

    `exclude_id` skips the student being updated.
    """
    if roll_number is not None:
        query = db.query(Student.id).filter(Student.roll_number == roll_number)
        if exclude_id is not None:
            query = query.filter(Student.id != exclude_id)
        if query.first() is not None:
            raise ValidationError(STUDENT_ROLL_EXISTS)

    if email is not None:
        query = db.query(Student.id).filter(Student.email == email)
        if exclude_id is not None:
            query = query.filter(Student.id != exclude_id)
        if query.first() is not None:
            raise ValidationError(STUDENT_EMAIL_EXISTS)


def ensure_teacher_email_unique(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Teacher.id).filter(Teacher.email == email)
    if exclude_id is not None:
        query = query.filter(Teacher.id != exclude_id)
    if query.first() is not None:
        raise ValidationError(TEACHER_EMAIL_EXISTS)


def get_active_student(db: Session, student_id: int) -> Student:
    """Fetch a student that exists and has not been soft deleted."""
    student = db.query(Student).filter(Student.id == student_id).first()
    if student is None or not student.is_active:
        raise NotFoundError("Student not found")
    return student


def validate_marks_range(marks_obtained: Optional[float], total_marks: Optional[float]) -> None:
    if marks_obtained is None or total_marks is None:
        raise ValidationError("Please provide marks obtained and total marks")
    if marks_obtained < 0:
        raise ValidationError("Marks cannot be negative")
    if total_marks <= 0:
        raise ValidationError("Total marks must be greater than 0")
    if marks_obtained > total_marks:
        raise ValidationError("Marks obtained cannot exceed total marks")


def ensure_no_duplicate_marks(
    db: Session,
    student_id: int,
    subject: str,
    exam_type: str,
    academic_year: str,
    exclude_id: Optional[int] = None,
) -> None:
    query = db.query(Marks.id).filter(
        Marks.student_id == student_id,
        Marks.subject == subject,
        Marks.exam_type == exam_type,
        Marks.academic_year == academic_year,
    )
    if exclude_id is not None:
        query = query.filter(Marks.id != exclude_id)
    if query.first() is not None:
        raise ValidationError(DUPLICATE_MARKS)
