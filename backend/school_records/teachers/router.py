from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from school_records.auth.dependencies import get_current_actor
from school_records.auth.schemas import TeacherListResponse, TeacherResponse
from school_records.database import get_db
from school_records.errors import NotFoundError
from school_records.models import Teacher
from school_records.policy.access import Action, authorize

router = APIRouter(
    prefix="/api/teachers",
    tags=["teachers"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=TeacherListResponse)
def list_teachers(
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """Active teachers and admins ordered by name. Admin only."""
    authorize(actor, Action.READ_TEACHERS)
    teachers = db.query(Teacher).filter(Teacher.is_active == True).order_by(Teacher.name.asc()).all()
    return {"success": True, "count": len(teachers), "data": teachers}


@router.get("/{teacher_id}", response_model=TeacherResponse)
def get_teacher(
    teacher_id: int,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    authorize(actor, Action.READ_TEACHERS)
    teacher = db.query(Teacher).filter(Teacher.id == teacher_id).first()
    if teacher is None:
        raise NotFoundError("Teacher not found")
    return teacher
