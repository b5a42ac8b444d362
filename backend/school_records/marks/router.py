import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from school_records.auth.dependencies import get_current_actor
from school_records.database import get_db
from school_records.exports.workbook import XLSX_MEDIA_TYPE, build_all_marks_workbook
from school_records.marks import crud
from school_records.marks.schemas import (
    MarksCreate,
    MarksListResponse,
    MarksMutationResponse,
    MarksResponse,
    MarksUpdate,
)
from school_records.models import Teacher
from school_records.policy.access import Action, authorize
from school_records.students.schemas import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/marks",
    tags=["marks"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=MarksListResponse)
def list_marks(
    subject: Optional[str] = Query(None),
    exam_type: Optional[str] = Query(None),
    academic_year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """
    List marks, newest exam first, optionally filtered by subject, exam type and academic year.
    """
    marks = crud.list_marks(db, actor, subject=subject, exam_type=exam_type, academic_year=academic_year)
    return {
        "success": True,
        "count": len(marks),
        "data": [MarksResponse.model_validate(record) for record in marks],
    }


@router.get("/export")
def export_marks(
    subject: Optional[str] = Query(None),
    exam_type: Optional[str] = Query(None),
    academic_year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """
    Download all marks matching the filters as one .xlsx workbook, grouped by student name.
    """
    authorize(actor, Action.EXPORT_MARKS)
    marks = crud.filter_marks(db, subject=subject, exam_type=exam_type, academic_year=academic_year)
    # Stable sort keeps newest-exam-first order inside each student
    marks.sort(key=lambda record: record.student.name if record.student else "")
    content = build_all_marks_workbook(marks)

    logger.info(f"Exported {len(marks)} marks by teacher {actor.id}")
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=all_students_marks.xlsx"},
    )


@router.get("/{marks_id}", response_model=MarksResponse)
def get_marks(
    marks_id: int,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    return MarksResponse.model_validate(crud.get_marks(db, actor, marks_id))


@router.post("", response_model=MarksMutationResponse, status_code=status.HTTP_201_CREATED)
def create_marks(
    marks_in: MarksCreate,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """
    Record marks for a student. The acting teacher becomes the record's owner.
    """
    marks = crud.create_marks(db, actor, marks_in)
    return {"success": True, "message": "Marks added successfully", "data": MarksResponse.model_validate(marks)}


@router.put("/{marks_id}", response_model=MarksMutationResponse)
def update_marks(
    marks_id: int,
    marks_in: MarksUpdate,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """
    Update marks you entered (admins may update any). Percentage and grade are recomputed.
    """
    marks = crud.update_marks(db, actor, marks_id, marks_in)
    return {"success": True, "message": "Marks updated successfully", "data": MarksResponse.model_validate(marks)}


@router.delete("/{marks_id}", response_model=MessageResponse)
def delete_marks(
    marks_id: int,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    crud.delete_marks(db, actor, marks_id)
    return {"success": True, "message": "Marks deleted successfully"}
