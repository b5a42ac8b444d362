from pydantic import BaseModel, field_validator, ConfigDict
from typing import List, Optional
from datetime import datetime


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if not v or not v.strip():
            raise ValueError('Email cannot be empty')
        return v.strip().lower()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if not v:
            raise ValueError('Password cannot be empty')
        return v


class RegisterTeacherRequest(BaseModel):
    name: str
    email: str
    password: str
    subject: str
    phone: Optional[str] = None
    role: Optional[str] = None

    @field_validator('name', 'subject')
    @classmethod
    def validate_required_text(cls, v):
        if not v or not v.strip():
            raise ValueError('Field cannot be empty')
        return v.strip()


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    subject: Optional[str] = None
    email: Optional[str] = None

    @field_validator('name', 'subject')
    @classmethod
    def validate_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Field cannot be empty')
        return v


class TeacherResponse(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    phone: Optional[str] = None
    role: str
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    success: bool
    message: str
    token: str
    user: TeacherResponse


class TeacherAccountResponse(BaseModel):
    success: bool
    message: str
    user: TeacherResponse


class TeacherListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[TeacherResponse]
