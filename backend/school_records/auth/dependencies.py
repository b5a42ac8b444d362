from fastapi import Header, Depends
from typing import Optional
from sqlalchemy.orm import Session

from school_records.database import get_db
from school_records.errors import AuthenticationError
from school_records.auth.service import decode_access_token
from school_records import models


def get_bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """
    Extract the token from the 'Authorization' header.

    Returns None when the header is absent so the caller is treated as anonymous.

    Raises:
        AuthenticationError: If the header is present but not a Bearer token
    """
    if authorization is None:
        return None

    parts = authorization.split(' ')
    if len(parts) != 2 or parts[0] != 'Bearer' or not parts[1]:
        raise AuthenticationError("Unauthorized: Missing or invalid Bearer token format")
    return parts[1]


async def get_current_actor(
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db)
) -> Optional[models.Teacher]:
    """
    Resolve the acting teacher from the bearer token, or None for anonymous requests.

    Routes hand the result to the access policy, which decides whether an
    anonymous caller may proceed.
    """
    if token is None:
        return None

    teacher_id = decode_access_token(token)
    teacher = db.query(models.Teacher).filter(models.Teacher.id == teacher_id).first()

    if teacher is None or not teacher.is_active:
        # The token outlived the account it was issued for
        raise AuthenticationError("Unauthorized: User not found")

    return teacher
