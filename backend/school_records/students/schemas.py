from __future__ import annotations

from typing import List, Literal, Optional
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, field_validator

Gender = Literal["Male", "Female", "Other"]


class StudentCreate(BaseModel):
    name: str
    roll_number: str
    class_name: str
    section: str
    email: str
    gender: Gender
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    admission_date: Optional[date] = None

    @field_validator('name', 'roll_number', 'class_name', 'section')
    @classmethod
    def validate_required_text(cls, v):
        if not v or not v.strip():
            raise ValueError('Field cannot be empty')
        return v.strip()


class StudentUpdate(BaseModel):
    name: Optional[str] = None
    roll_number: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[Gender] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None

    @field_validator('name', 'roll_number', 'class_name', 'section')
    @classmethod
    def validate_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Field cannot be empty')
        return v.strip() if v is not None else v


class StudentResponse(BaseModel):
    id: int
    name: str
    roll_number: str
    class_name: str
    section: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: str
    admission_date: Optional[date] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StudentSummary(BaseModel):
    id: int
    name: str
    roll_number: str
    class_name: str
    section: str

    model_config = ConfigDict(from_attributes=True)


class StudentListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[StudentResponse]


class StudentMutationResponse(BaseModel):
    success: bool = True
    message: str
    data: StudentResponse


class MessageResponse(BaseModel):
    success: bool = True
    message: str
