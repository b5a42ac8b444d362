"""
Role and ownership rules for every action the API exposes.

An actor is either None (anonymous) or a teacher record with `id` and `role`.
Admins are teachers with role "admin". `authorize` returns None when the
action is allowed and raises otherwise; routes call it before any write.
"""
from enum import Enum
from typing import Optional

from school_records.errors import AuthenticationError, ForbiddenError


class Action(str, Enum):
    READ_STUDENTS = "read_students"
    CREATE_STUDENT = "create_student"
    UPDATE_STUDENT = "update_student"
    DELETE_STUDENT = "delete_student"
    REGISTER_TEACHER = "register_teacher"
    READ_TEACHERS = "read_teachers"
    READ_PROFILE = "read_profile"
    UPDATE_PROFILE = "update_profile"
    READ_MARKS = "read_marks"
    CREATE_MARKS = "create_marks"
    UPDATE_MARKS = "update_marks"
    DELETE_MARKS = "delete_marks"
    CLASS_ANALYTICS = "class_analytics"
    EXPORT_MARKS = "export_marks"


# Any authenticated actor may perform these
TEACHER_ACTIONS = frozenset({
    Action.READ_STUDENTS,
    Action.CREATE_STUDENT,
    Action.UPDATE_STUDENT,
    Action.READ_PROFILE,
    Action.READ_MARKS,
    Action.CREATE_MARKS,
    Action.CLASS_ANALYTICS,
    Action.EXPORT_MARKS,
})

ADMIN_ACTIONS = frozenset({
    Action.DELETE_STUDENT,
    Action.REGISTER_TEACHER,
    Action.READ_TEACHERS,
})

# Allowed for the record's owner or any admin
OWNER_ACTIONS = frozenset({
    Action.UPDATE_MARKS,
    Action.DELETE_MARKS,
})

# Allowed only when the target is the actor, admins included
SELF_ACTIONS = frozenset({
    Action.UPDATE_PROFILE,
})

FORBIDDEN_MESSAGES = {
    Action.DELETE_STUDENT: "Only admins can delete students",
    Action.REGISTER_TEACHER: "Only admins can register teachers",
    Action.READ_TEACHERS: "Only admins can view teachers",
    Action.UPDATE_MARKS: "You can only update marks you entered",
    Action.DELETE_MARKS: "You can only delete marks you entered",
    Action.UPDATE_PROFILE: "You can only update your own profile",
}


def is_admin(actor) -> bool:
    return actor is not None and getattr(actor, "role", None) == "admin"


def is_owner(actor, resource) -> bool:
    """True when the marks record was entered by the actor."""
    if actor is None or resource is None:
        return False
    return getattr(resource, "entered_by_id", None) == actor.id


def require_auth(actor):
    if actor is None:
        raise AuthenticationError("You must be logged in to perform this action")
    return actor


def require_admin(actor):
    require_auth(actor)
    if not is_admin(actor):
        raise ForbiddenError("You must be an admin to perform this action")
    return actor


def authorize(actor, action: Action, resource: Optional[object] = None) -> None:
    """
    Check that `actor` may perform `action` on `resource`.

    Args:
        actor: the authenticated teacher/admin, or None when anonymous
        action: the action being attempted
        resource: the marks record for owner checks, or the target teacher for
            self-only actions

    Raises:
        AuthenticationError: the actor is anonymous
        ForbiddenError: the actor lacks the role or ownership the action needs
    """
    require_auth(actor)
    action = Action(action)

    if action in TEACHER_ACTIONS:
        return None

    if action in ADMIN_ACTIONS:
        if is_admin(actor):
            return None
        raise ForbiddenError(FORBIDDEN_MESSAGES[action])

    if action in OWNER_ACTIONS:
        if is_admin(actor) or is_owner(actor, resource):
            return None
        raise ForbiddenError(FORBIDDEN_MESSAGES[action])

    if action in SELF_ACTIONS:
        if resource is None or getattr(resource, "id", None) == actor.id:
            return None
        raise ForbiddenError(FORBIDDEN_MESSAGES[action])

    raise ForbiddenError(f"Action '{action.value}' is not permitted")
