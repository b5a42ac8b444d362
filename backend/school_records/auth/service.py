import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash

from school_records.config.settings import settings
from school_records.database import commit
from school_records.errors import AuthenticationError, ValidationError
from school_records.models import Teacher, ROLES
from school_records.policy.access import Action, authorize
from school_records import validation

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def hash_password(password: str) -> str:
    """Salted, irreversible hash used for every stored credential."""
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(teacher: Teacher) -> str:
    expires_at = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRES_HOURS)
    payload = {
        "sub": str(teacher.id),
        "role": teacher.role,
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """
    Verify a bearer token and return the teacher id it was issued for.

    Raises:
        AuthenticationError: if the token is expired, tampered with or malformed
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return int(payload["sub"])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Unauthorized: Token has expired")
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise AuthenticationError("Unauthorized: Invalid token content")


class AuthService:
    """Service for handling authentication and teacher account operations."""

    @staticmethod
    def login(db: Session, email: str, password: str) -> Tuple[Teacher, str]:
        """
        Authenticate an active teacher or admin by email and password.

        Returns:
            Tuple[Teacher, str]: the teacher and a freshly issued access token
        """
        teacher = (
            db.query(Teacher)
            .filter(Teacher.email == validation.normalize_email(email), Teacher.is_active == True)
            .first()
        )
        if teacher is None or not verify_password(password, teacher.password_hash):
            logger.info(f"Failed login attempt for email: {email}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info(f"Teacher {teacher.id} logged in")
        return teacher, create_access_token(teacher)

    @staticmethod
    def register_teacher(
        db: Session,
        actor: Optional[Teacher],
        name: str,
        email: str,
        password: str,
        subject: str,
        phone: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Teacher:
        """Create a teacher account. Admin only."""
        authorize(actor, Action.REGISTER_TEACHER)

        role = role or "teacher"
        if role not in ROLES:
            raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")
        email = validation.validate_email(email)
        validation.validate_password(password)
        validation.ensure_teacher_email_unique(db, email)

        teacher = Teacher(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
            subject=subject.strip(),
            phone=phone.strip() if phone else None,
            role=role,
        )
        db.add(teacher)
        commit(db, on_conflict=lambda: validation.ensure_teacher_email_unique(db, email))
        db.refresh(teacher)

        logger.info(f"Teacher {teacher.id} registered by admin {actor.id} with role '{role}'")
        return teacher

    @staticmethod
    def update_profile(db: Session, actor: Optional[Teacher], changes: dict) -> Teacher:
        """
        Self-service profile update limited to name, phone, subject and email.
        """
        authorize(actor, Action.UPDATE_PROFILE, actor)

        allowed = {key: value for key, value in changes.items() if key in ("name", "phone", "subject", "email")}
        if "email" in allowed:
            allowed["email"] = validation.validate_email(allowed["email"])
            if allowed["email"] != actor.email:
                validation.ensure_teacher_email_unique(db, allowed["email"], exclude_id=actor.id)

        for field, value in allowed.items():
            setattr(actor, field, value.strip() if isinstance(value, str) else value)

        commit(
            db,
            on_conflict=lambda: validation.ensure_teacher_email_unique(db, allowed.get("email", ""), exclude_id=actor.id),
        )
        db.refresh(actor)
        logger.info(f"Teacher {actor.id} updated profile fields: {sorted(allowed)}")
        return actor

auth_service = AuthService()
