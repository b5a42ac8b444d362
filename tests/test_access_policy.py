from types import SimpleNamespace

import pytest

from school_records.errors import AuthenticationError, ForbiddenError
from school_records.policy.access import Action, authorize, require_admin, require_auth

ADMIN = SimpleNamespace(id=1, role="admin")
OWNER = SimpleNamespace(id=2, role="teacher")
OTHER_TEACHER = SimpleNamespace(id=3, role="teacher")

OWNED_MARKS = SimpleNamespace(id=10, entered_by_id=OWNER.id)


@pytest.mark.parametrize("action", list(Action))
def test_anonymous_is_denied_every_action(action):
    with pytest.raises(AuthenticationError):
        authorize(None, action)
    with pytest.raises(AuthenticationError):
        authorize(None, action, OWNED_MARKS)


@pytest.mark.parametrize("action", [
    Action.READ_STUDENTS,
    Action.CREATE_STUDENT,
    Action.UPDATE_STUDENT,
    Action.READ_PROFILE,
    Action.READ_MARKS,
    Action.CREATE_MARKS,
    Action.CLASS_ANALYTICS,
    Action.EXPORT_MARKS,
])
def test_any_teacher_may_perform_everyday_actions(action):
    for actor in (ADMIN, OWNER, OTHER_TEACHER):
        assert authorize(actor, action) is None


@pytest.mark.parametrize("action", [
    Action.DELETE_STUDENT,
    Action.REGISTER_TEACHER,
    Action.READ_TEACHERS,
])
def test_admin_only_actions(action):
    assert authorize(ADMIN, action) is None
    for actor in (OWNER, OTHER_TEACHER):
        with pytest.raises(ForbiddenError):
            authorize(actor, action)


@pytest.mark.parametrize("action", [Action.UPDATE_MARKS, Action.DELETE_MARKS])
def test_marks_mutations_need_ownership_or_admin(action):
    assert authorize(OWNER, action, OWNED_MARKS) is None
    assert authorize(ADMIN, action, OWNED_MARKS) is None
    with pytest.raises(ForbiddenError) as exc_info:
        authorize(OTHER_TEACHER, action, OWNED_MARKS)
    assert "marks you entered" in exc_info.value.message


def test_marks_mutation_without_record_is_forbidden_for_teachers():
    with pytest.raises(ForbiddenError):
        authorize(OWNER, Action.UPDATE_MARKS)
    assert authorize(ADMIN, Action.UPDATE_MARKS) is None


def test_profile_update_is_self_only_even_for_admins():
    assert authorize(OWNER, Action.UPDATE_PROFILE, OWNER) is None
    assert authorize(ADMIN, Action.UPDATE_PROFILE, ADMIN) is None
    with pytest.raises(ForbiddenError):
        authorize(OWNER, Action.UPDATE_PROFILE, OTHER_TEACHER)
    with pytest.raises(ForbiddenError):
        authorize(ADMIN, Action.UPDATE_PROFILE, OWNER)


def test_action_accepts_string_values():
    assert authorize(OWNER, "read_marks") is None


def test_error_kinds_map_to_distinct_status_codes():
    with pytest.raises(AuthenticationError) as auth_error:
        require_auth(None)
    with pytest.raises(ForbiddenError) as forbidden_error:
        require_admin(OWNER)

    assert auth_error.value.status_code == 401
    assert auth_error.value.code == "UNAUTHENTICATED"
    assert forbidden_error.value.status_code == 403
    assert forbidden_error.value.code == "FORBIDDEN"


def test_require_helpers_return_the_actor():
    assert require_auth(OWNER) is OWNER
    assert require_admin(ADMIN) is ADMIN
