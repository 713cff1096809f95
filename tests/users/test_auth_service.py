import pytest

from src.library_attendance.library_attendance.core.enums import Role
from src.library_attendance.library_attendance.core.exceptions import AuthenticationError, NotFoundError, ValidationError


def test_signup_provisions_student_profile(container, repos):
    user = container.auth_service.signup(name="Ann", email="ANN@x.io", password="secret1")

    assert user.role == Role.STUDENT
    assert user.email == "ann@x.io"
    profile = repos.students_repo.get_by_user_id(user.user_id)
    assert profile.student_code.startswith("STU")
    assert profile.phone == "0000000000"
    assert (profile.membership_end - profile.membership_start).days == 365


def test_signup_staff_gets_default_terms(container, repos):
    user = container.auth_service.signup(name="Bo", email="bo@x.io", password="secret1", role="Staff")

    profile = repos.staff_repo.get_by_user_id(user.user_id)
    assert profile.designation == "Assistant"
    assert profile.base_salary == 15000


def test_signup_rejections(container):
    auth = container.auth_service
    auth.signup(name="Ann", email="ann@x.io", password="secret1")

    with pytest.raises(ValidationError, match="already exists"):
        auth.signup(name="Ann", email="ann@x.io", password="secret1")
    with pytest.raises(ValidationError):
        auth.signup(name="Root", email="root@x.io", password="secret1", role="Admin")
    with pytest.raises(ValidationError):
        auth.signup(name="Short", email="s@x.io", password="123")


def test_login_and_bad_credentials(container, people):
    token, identity = container.auth_service.login("admin@library.local", "secret123")

    assert identity.role == Role.ADMIN
    assert container.token_service.resolve(token) == identity
    with pytest.raises(AuthenticationError):
        container.auth_service.login("admin@library.local", "wrong")
    with pytest.raises(AuthenticationError):
        container.auth_service.login("nobody@library.local", "secret123")


def test_profile_read_never_provisions(container, repos):
    user = repos.users_repo.add(name="New", email="new@x.io", role=Role.STUDENT)
    profiles = container.profile_service

    with pytest.raises(NotFoundError):
        profiles.get_profile(user_id=user.user_id, role=Role.STUDENT)
    assert repos.students_repo.get_by_user_id(user.user_id) is None

    created = profiles.ensure_for_user(user)
    assert profiles.ensure_for_user(user) == created
    assert profiles.get_profile(user_id=user.user_id, role=Role.STUDENT) == created
