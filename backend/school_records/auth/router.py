import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from school_records.auth.schemas import (
    LoginRequest, LoginResponse, RegisterTeacherRequest,
    UpdateProfileRequest, TeacherResponse, TeacherAccountResponse
)
from school_records.auth.service import auth_service
from school_records.auth.dependencies import get_current_actor
from school_records.database import get_db
from school_records.models import Teacher
from school_records.policy.access import Action, authorize

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/auth",
    tags=["authentication"]
)


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """
    Authenticate a teacher or admin with email and password and issue a bearer token.
    """
    teacher, token = auth_service.login(db, email=request.email, password=request.password)
    return {
        'success': True,
        'message': 'Login successful',
        'token': token,
        'user': teacher
    }


@router.post("/register", response_model=TeacherAccountResponse, status_code=status.HTTP_201_CREATED)
def register_teacher(
    request: RegisterTeacherRequest,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """
    Register a new teacher or admin account. Only admins may call this.
    """
    teacher = auth_service.register_teacher(
        db,
        actor,
        name=request.name,
        email=request.email,
        password=request.password,
        subject=request.subject,
        phone=request.phone,
        role=request.role,
    )
    return {
        'success': True,
        'message': 'Teacher registered successfully',
        'user': teacher
    }


@router.get("/profile", response_model=TeacherResponse)
def read_profile(actor: Optional[Teacher] = Depends(get_current_actor)):
    """
    Fetch the details of the currently authenticated teacher.
    """
    authorize(actor, Action.READ_PROFILE, actor)
    return actor


@router.put("/profile", response_model=TeacherAccountResponse)
def update_profile(
    request: UpdateProfileRequest,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """
    Update the current teacher's name, phone, subject or email.
    """
    teacher = auth_service.update_profile(db, actor, request.model_dump(exclude_none=True))
    return {
        'success': True,
        'message': 'Profile updated successfully',
        'user': teacher
    }
