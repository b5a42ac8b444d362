import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from school_records.auth.dependencies import get_current_actor
from school_records.database import get_db
from school_records.exports.workbook import (
    XLSX_MEDIA_TYPE,
    build_student_marks_workbook,
    student_marks_filename,
)
from school_records.marks import crud as marks_crud
from school_records.marks.schemas import MarksResponse, StudentMarksResponse
from school_records.models import Teacher
from school_records.policy.access import Action, authorize
from school_records.students import crud
from school_records.students.schemas import (
    MessageResponse,
    StudentCreate,
    StudentListResponse,
    StudentMutationResponse,
    StudentResponse,
    StudentSummary,
    StudentUpdate,
)

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/api/students",
    tags=["students"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=StudentListResponse)
def list_students(
    class_name: Optional[str] = Query(None, description="Filter by class"),
    section: Optional[str] = Query(None, description="Filter by section"),
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """
    List active students ordered by name, optionally filtered by class and section.
    """
    students = crud.list_students(db, actor, class_name=class_name, section=section)
    logger.info(f"list_students returned {len(students)} students - class: {class_name}, section: {section}")
    return {"success": True, "count": len(students), "data": students}


@router.get("/roll/{roll_number}", response_model=StudentResponse)
def get_student_by_roll_number(
    roll_number: str,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """Look up an active student by roll number."""
    return crud.get_student_by_roll_number(db, actor, roll_number)


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(
    student_id: int,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    return crud.get_student(db, actor, student_id)


@router.post("", response_model=StudentMutationResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    student_in: StudentCreate,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """
    Add a student. Roll number and email must not belong to any other student,
    including deactivated ones.
    """
    student = crud.create_student(db, actor, student_in)
    return {"success": True, "message": "Student added successfully", "data": student}


@router.put("/{student_id}", response_model=StudentMutationResponse)
def update_student(
    student_id: int,
    student_in: StudentUpdate,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    student = crud.update_student(db, actor, student_id, student_in)
    return {"success": True, "message": "Student updated successfully", "data": student}


@router.delete("/{student_id}", response_model=MessageResponse)
def delete_student(
    student_id: int,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """
    Soft delete a student (admin only). The record and its marks are kept.
    """
    crud.deactivate_student(db, actor, student_id)
    return {"success": True, "message": "Student deleted successfully"}


@router.get("/{student_id}/marks", response_model=StudentMarksResponse)
def get_student_marks(
    student_id: int,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """All marks for one active student, newest exam first."""
    student, marks = marks_crud.list_student_marks(db, actor, student_id)
    return {
        "success": True,
        "student": StudentSummary.model_validate(student),
        "count": len(marks),
        "data": [MarksResponse.model_validate(record) for record in marks],
    }


@router.get("/{student_id}/marks/export")
def export_student_marks(
    student_id: int,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """Download one student's marks as an .xlsx workbook."""
    authorize(actor, Action.EXPORT_MARKS)
    student, marks = marks_crud.list_student_marks(db, actor, student_id)
    content = build_student_marks_workbook(student, marks)

    logger.info(f"Exported {len(marks)} marks for student {student_id} by teacher {actor.id}")
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={student_marks_filename(student)}"},
    )
