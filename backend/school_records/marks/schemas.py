from __future__ import annotations

from typing import List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator

from school_records.students.schemas import StudentSummary

ExamType = Literal["Midterm", "Final", "Quiz", "Assignment", "Project"]
Semester = Literal["1st", "2nd", "3rd", "4th", "5th", "6th", "7th", "8th"]


class MarksCreate(BaseModel):
    """Percentage and grade are derived server-side; any value sent for them is ignored."""
    student_id: int
    subject: str
    exam_type: ExamType = "Midterm"
    marks_obtained: float
    total_marks: float
    exam_date: Optional[datetime] = None
    academic_year: Optional[str] = None
    semester: Semester = "1st"
    remarks: Optional[str] = None

    @field_validator('subject')
    @classmethod
    def validate_subject(cls, v):
        if not v or not v.strip():
            raise ValueError('Subject cannot be empty')
        return v.strip()

    @field_validator('academic_year')
    @classmethod
    def validate_academic_year(cls, v):
        if v is not None:
            v = v.strip()
            return v or None
        return v


class MarksUpdate(BaseModel):
    subject: Optional[str] = None
    exam_type: Optional[ExamType] = None
    marks_obtained: Optional[float] = None
    total_marks: Optional[float] = None
    exam_date: Optional[datetime] = None
    academic_year: Optional[str] = None
    semester: Optional[Semester] = None
    remarks: Optional[str] = None

    @field_validator('subject', 'academic_year')
    @classmethod
    def validate_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Field cannot be empty')
        return v.strip() if v is not None else v


class EnteredBySummary(BaseModel):
    id: int
    name: str
    subject: str

    model_config = ConfigDict(from_attributes=True)


class MarksResponse(BaseModel):
    id: int
    student_id: int
    student: Optional[StudentSummary] = None
    subject: str
    exam_type: str
    marks_obtained: float
    total_marks: float
    percentage: Optional[float] = None
    grade: str
    passed: bool
    exam_date: Optional[datetime] = None
    academic_year: str
    semester: str
    remarks: Optional[str] = None
    entered_by_id: int
    entered_by: Optional[EnteredBySummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MarksListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[MarksResponse]


class MarksMutationResponse(BaseModel):
    success: bool = True
    message: str
    data: MarksResponse


class StudentMarksResponse(BaseModel):
    success: bool = True
    student: StudentSummary
    count: int
    data: List[MarksResponse]
