from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.library_system.library_system.attendance.model import AttendanceRecord, AttendanceReportRow
from src.library_system.library_system.container import wire_container
from src.library_system.library_system.core.enums import Role
from src.library_system.library_system.users.model import Account, Profile, SessionUser


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self._id = 0
        self.profiles: Optional["InMemoryUsers"] = None

    def get_recent_for_user(self, user_id: int, limit: int):
        items = [r for r in self.records.values() if r.user_id == user_id]
        items.sort(key=lambda r: (r.check_in, r.attendance_id), reverse=True)
        return items[:limit]

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(int(attendance_id))

    def create_checkin(self, *, user_id: int, check_in: datetime, purpose=None) -> int:
        self._id += 1
        self.records[self._id] = AttendanceRecord(
            attendance_id=self._id,
            user_id=user_id,
            check_in=check_in,
            check_out=None,
            purpose=purpose,
        )
        return self._id

    def update_checkout(self, *, attendance_id: int, check_out: datetime) -> bool:
        rec = self.records.get(int(attendance_id))
        if not rec or rec.check_out is not None:
            return False
        self.records[rec.attendance_id] = replace(rec, check_out=check_out)
        return True

    def count_checked_in_between(self, start: datetime, end: datetime) -> int:
        return sum(1 for r in self.records.values() if start <= r.check_in < end)

    def count_open_between(self, start: datetime, end: datetime) -> int:
        return sum(1 for r in self.records.values() if start <= r.check_in < end and r.check_out is None)

    def list_open(self):
        return sorted((r for r in self.records.values() if r.check_out is None), key=lambda r: r.check_in)

    def list_completed_between(self, start: datetime, end: datetime):
        return [r for r in self.records.values() if start <= r.check_in < end and r.check_out is not None]

    def get_report_rows(self, *, start: datetime, end: datetime):
        rows = []
        for r in sorted(self.records.values(), key=lambda r: r.check_in, reverse=True):
            if not (start <= r.check_in < end):
                continue
            profile = self.profiles.get_profile(r.user_id) if self.profiles else None
            rows.append(
                AttendanceReportRow(
                    attendance_id=r.attendance_id,
                    user_id=r.user_id,
                    full_name=profile.full_name if profile else "-",
                    student_id=profile.student_id if profile else None,
                    seat_number=profile.seat_number if profile else None,
                    check_in=r.check_in,
                    check_out=r.check_out,
                    purpose=r.purpose,
                )
            )
        return rows


class InMemoryUsers:
    def __init__(self, attendance: Optional[InMemoryAttendance] = None):
        self.accounts: dict[int, Account] = {}
        self.profiles: dict[int, Profile] = {}
        self.roles: dict[int, Role] = {}
        self.attendance = attendance
        self._id = 0

    def get_account_by_email(self, email: str) -> Optional[Account]:
        return next((a for a in self.accounts.values() if a.email == email), None)

    def get_profile(self, user_id: int) -> Optional[Profile]:
        return self.profiles.get(int(user_id))

    def get_role(self, user_id: int) -> Optional[Role]:
        return self.roles.get(int(user_id))

    def create_user(self, *, email, password_hash, full_name, role, student_id=None, seat_number=None, phone=None) -> int:
        self._id += 1
        self.accounts[self._id] = Account(user_id=self._id, email=email, password_hash=password_hash)
        self.profiles[self._id] = Profile(
            user_id=self._id,
            full_name=full_name,
            email=email,
            student_id=student_id,
            seat_number=seat_number,
            phone=phone,
            created_at=datetime(2026, 1, 1, 9, 0),
        )
        self.roles[self._id] = role
        return self._id

    def list_profiles_by_role(self, role: Role):
        items = [p for uid, p in self.profiles.items() if self.roles.get(uid) == role]
        items.sort(key=lambda p: (p.created_at, p.user_id), reverse=True)
        return items

    def count_by_role(self, role: Role) -> int:
        return sum(1 for r in self.roles.values() if r == role)

    def delete_user(self, user_id: int) -> bool:
        user_id = int(user_id)
        if self.attendance:
            for rid in [rid for rid, r in self.attendance.records.items() if r.user_id == user_id]:
                del self.attendance.records[rid]
        self.roles.pop(user_id, None)
        self.profiles.pop(user_id, None)
        return self.accounts.pop(user_id, None) is not None


class InMemorySettings:
    def __init__(self, settings=None):
        self.settings = settings

    def get(self):
        return self.settings

    def save(self, settings) -> None:
        self.settings = settings


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 10, 15, 0)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def users_repo(attendance_repo) -> InMemoryUsers:
    users = InMemoryUsers(attendance_repo)
    attendance_repo.profiles = users
    return users


@pytest.fixture
def settings_repo() -> InMemorySettings:
    return InMemorySettings()


@pytest.fixture
def make_user(users_repo):
    def _make(
        *,
        email: str = "student@example.com",
        password: str = "secret123",
        full_name: str = "Asha Rao",
        role: Role = Role.STUDENT,
        student_id: Optional[str] = "STU-1",
        seat_number: Optional[str] = None,
    ) -> SessionUser:
        user_id = users_repo.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            full_name=full_name,
            role=role,
            student_id=student_id,
            seat_number=seat_number,
        )
        return SessionUser(user_id=user_id, full_name=full_name, email=email, role=role)

    return _make


@pytest.fixture
def container(users_repo, attendance_repo, settings_repo):
    return wire_container(users_repo=users_repo, attendance_repo=attendance_repo, settings_repo=settings_repo)


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.library_system.library_system.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()
