import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from school_records.config.settings import settings
from school_records.database import commit
from school_records.errors import NotFoundError
from school_records.grading.engine import recompute
from school_records.models import Marks, Student, Teacher, current_academic_year
from school_records.marks.schemas import MarksCreate, MarksUpdate
from school_records.policy.access import Action, authorize, require_auth
from school_records import validation

logger = logging.getLogger(__name__)

# Fields that make up the one-record-per-exam key when duplicates are disallowed
DUPLICATE_KEY_FIELDS = ("subject", "exam_type", "academic_year")

# Columns an update may not clear; an explicit null for these is ignored
REQUIRED_FIELDS = (
    "subject", "exam_type", "marks_obtained", "total_marks", "exam_date", "academic_year", "semester",
)


def _duplicates_allowed(allow_duplicates: Optional[bool]) -> bool:
    if allow_duplicates is None:
        return settings.ALLOW_DUPLICATE_MARKS
    return allow_duplicates


def _marks_query(db: Session):
    return db.query(Marks).options(joinedload(Marks.student), joinedload(Marks.entered_by))


def _get_marks_or_404(db: Session, marks_id: int) -> Marks:
    marks = _marks_query(db).filter(Marks.id == marks_id).first()
    if marks is None:
        raise NotFoundError("Marks not found")
    return marks


def filter_marks(
    db: Session,
    subject: Optional[str] = None,
    exam_type: Optional[str] = None,
    academic_year: Optional[str] = None,
) -> List[Marks]:
    """Marks matching the optional filters, newest exam first. No permission check."""
    query = _marks_query(db)
    if subject:
        query = query.filter(Marks.subject == subject)
    if exam_type:
        query = query.filter(Marks.exam_type == exam_type)
    if academic_year:
        query = query.filter(Marks.academic_year == academic_year)
    return query.order_by(Marks.exam_date.desc(), Marks.id.desc()).all()


def list_marks(
    db: Session,
    actor: Optional[Teacher],
    subject: Optional[str] = None,
    exam_type: Optional[str] = None,
    academic_year: Optional[str] = None,
) -> List[Marks]:
    authorize(actor, Action.READ_MARKS)
    return filter_marks(db, subject=subject, exam_type=exam_type, academic_year=academic_year)


def get_marks(db: Session, actor: Optional[Teacher], marks_id: int) -> Marks:
    authorize(actor, Action.READ_MARKS)
    return _get_marks_or_404(db, marks_id)


def list_student_marks(db: Session, actor: Optional[Teacher], student_id: int) -> Tuple[Student, List[Marks]]:
    """The active student and all of their marks, newest exam first."""
    authorize(actor, Action.READ_MARKS)
    student = validation.get_active_student(db, student_id)
    marks = (
        _marks_query(db)
        .filter(Marks.student_id == student.id)
        .order_by(Marks.exam_date.desc(), Marks.id.desc())
        .all()
    )
    return student, marks


def create_marks(
    db: Session,
    actor: Optional[Teacher],
    marks_in: MarksCreate,
    allow_duplicates: Optional[bool] = None,
) -> Marks:
    """
    Record marks for an active student, entered by the acting teacher.

    Percentage and grade are computed here from the raw marks. When duplicates
    are disallowed, a second record for the same student, subject, exam type
    and academic year is rejected.
    """
    authorize(actor, Action.CREATE_MARKS)

    student = validation.get_active_student(db, marks_in.student_id)
    validation.validate_marks_range(marks_in.marks_obtained, marks_in.total_marks)

    academic_year = marks_in.academic_year or current_academic_year()
    if not _duplicates_allowed(allow_duplicates):
        validation.ensure_no_duplicate_marks(
            db, student.id, marks_in.subject, marks_in.exam_type, academic_year
        )

    marks = Marks(
        student_id=student.id,
        subject=marks_in.subject,
        exam_type=marks_in.exam_type,
        marks_obtained=marks_in.marks_obtained,
        total_marks=marks_in.total_marks,
        academic_year=academic_year,
        semester=marks_in.semester,
        remarks=marks_in.remarks,
        entered_by_id=actor.id,
    )
    if marks_in.exam_date is not None:
        marks.exam_date = marks_in.exam_date
    recompute(marks)

    db.add(marks)
    commit(db)
    db.refresh(marks)

    logger.info(
        f"Marks {marks.id} created for student {student.id} by teacher {actor.id} - "
        f"subject: {marks.subject}, percentage: {marks.percentage:.2f}, grade: {marks.grade}"
    )
    return marks


def update_marks(
    db: Session,
    actor: Optional[Teacher],
    marks_id: int,
    marks_in: MarksUpdate,
    allow_duplicates: Optional[bool] = None,
) -> Marks:
    """
    Update a marks record. Only its owner or an admin may do this.

    Percentage and grade are recomputed on every update so they can never go
    stale after a partial change.
    """
    require_auth(actor)
    marks = _get_marks_or_404(db, marks_id)
    authorize(actor, Action.UPDATE_MARKS, marks)

    changes = marks_in.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            changes.pop(field)

    validation.validate_marks_range(
        changes.get("marks_obtained", marks.marks_obtained),
        changes.get("total_marks", marks.total_marks),
    )

    key_changed = any(
        field in changes and changes[field] != getattr(marks, field) for field in DUPLICATE_KEY_FIELDS
    )
    if key_changed and not _duplicates_allowed(allow_duplicates):
        validation.ensure_no_duplicate_marks(
            db,
            marks.student_id,
            changes.get("subject", marks.subject),
            changes.get("exam_type", marks.exam_type),
            changes.get("academic_year", marks.academic_year),
            exclude_id=marks.id,
        )

    for field, value in changes.items():
        setattr(marks, field, value)
    recompute(marks)

    commit(db)
    db.refresh(marks)

    logger.info(
        f"Marks {marks.id} updated by teacher {actor.id}: {sorted(changes)} - "
        f"percentage: {marks.percentage:.2f}, grade: {marks.grade}"
    )
    return marks


def delete_marks(db: Session, actor: Optional[Teacher], marks_id: int) -> None:
    """Physically delete a marks record. Only its owner or an admin may do this."""
    require_auth(actor)
    marks = _get_marks_or_404(db, marks_id)
    authorize(actor, Action.DELETE_MARKS, marks)

    db.delete(marks)
    commit(db)

    logger.info(f"Marks {marks_id} deleted by teacher {actor.id}")
