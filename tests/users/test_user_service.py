from __future__ import annotations

from datetime import datetime

import pytest

from src.library_system.library_system.core.enums import Role
from src.library_system.library_system.core.exceptions import AuthorizationError, ValidationError
from src.library_system.library_system.users.service import UserService


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", role=Role.ADMIN, student_id=None)


def test_admin_creates_student_and_admin(users_repo, admin):
    svc = UserService(users_repo)

    sid = svc.create_student(
        current_user=admin,
        full_name="Ravi",
        email="ravi@example.com",
        student_id="STU-7",
        password="secret123",
        seat_number="B4",
    )
    aid = svc.create_admin(current_user=admin, full_name="Meera", email="meera@example.com", password="secret123")

    assert [p.user_id for p in svc.list_students()] == [sid]
    assert {p.user_id for p in svc.list_admins()} == {admin.user_id, aid}
    assert users_repo.get_profile(sid).seat_number == "B4"
    assert svc.count_students() == 1


def test_student_cannot_manage_users(users_repo, make_user):
    student = make_user()
    svc = UserService(users_repo)

    with pytest.raises(AuthorizationError):
        svc.create_admin(current_user=student, full_name="X", email="x@example.com", password="secret123")
    with pytest.raises(AuthorizationError):
        svc.delete_user(current_user=student, user_id=student.user_id)


def test_delete_user_removes_profile_role_and_attendance(users_repo, attendance_repo, admin, make_user):
    student = make_user(email="s@example.com")
    attendance_repo.create_checkin(user_id=student.user_id, check_in=datetime(2026, 2, 2, 9, 0))

    UserService(users_repo).delete_user(current_user=admin, user_id=student.user_id)

    assert users_repo.get_profile(student.user_id) is None
    assert users_repo.get_role(student.user_id) is None
    assert attendance_repo.get_recent_for_user(student.user_id, 10) == []


def test_delete_user_guards(users_repo, admin, make_user):
    other_admin = make_user(email="other@example.com", role=Role.ADMIN, student_id=None)
    svc = UserService(users_repo)

    with pytest.raises(ValidationError):
        svc.delete_user(current_user=admin, user_id=other_admin.user_id)
    with pytest.raises(ValidationError):
        svc.delete_user(current_user=admin, user_id=admin.user_id)
    with pytest.raises(ValidationError):
        svc.delete_user(current_user=admin, user_id=404)
