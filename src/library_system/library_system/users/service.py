from __future__ import annotations

from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import Profile, SessionUser
from .repository import UserRepository


class AuthService:
    """Use case: sign up, sign in and resolve the signed-in user per request."""

    def __init__(self, users: UserRepository):
        self._users = users

    def sign_up(
        self,
        *,
        full_name: str,
        email: str,
        student_id: str,
        password: str,
        phone: Optional[str] = None,
    ) -> int:
        """Self-registration always creates a student."""

        return _register(
            self._users,
            full_name=full_name,
            email=email,
            password=password,
            role=Role.STUDENT,
            student_id=require_non_empty(student_id, "Student ID"),
            phone=phone,
        )

    def sign_in(self, email: str, password: str) -> SessionUser:
        account = self._users.get_account_by_email((email or "").strip().lower())
        if not account or not account.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(account.password_hash, password or "")
        except ValueError:
            # unknown hash method, e.g. a placeholder value
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password")

        user = self.get_session_user(account.user_id)
        if user is None:
            raise AuthenticationError("Account has no profile")
        return user

    def get_session_user(self, user_id: Optional[int]) -> Optional[SessionUser]:
        """Re-derive name and role from the store; None when the user is gone."""

        if not user_id:
            return None
        profile = self._users.get_profile(int(user_id))
        if not profile:
            return None
        role = self._users.get_role(profile.user_id) or Role.STUDENT
        return SessionUser(user_id=profile.user_id, full_name=profile.full_name, email=profile.email, role=role)


class UserService:
    """Use case: manage students and admins (admin screens)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_profile(self, user_id: int) -> Optional[Profile]:
        return self._users.get_profile(user_id)

    def list_students(self) -> Sequence[Profile]:
        return self._users.list_profiles_by_role(Role.STUDENT)

    def list_admins(self) -> Sequence[Profile]:
        return self._users.list_profiles_by_role(Role.ADMIN)

    def count_students(self) -> int:
        return self._users.count_by_role(Role.STUDENT)

    def create_student(
        self,
        *,
        current_user: SessionUser,
        full_name: str,
        email: str,
        student_id: str,
        password: str,
        seat_number: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> int:
        _require_admin(current_user)
        return _register(
            self._users,
            full_name=full_name,
            email=email,
            password=password,
            role=Role.STUDENT,
            student_id=require_non_empty(student_id, "Student ID"),
            seat_number=seat_number,
            phone=phone,
        )

    def create_admin(self, *, current_user: SessionUser, full_name: str, email: str, password: str) -> int:
        _require_admin(current_user)
        return _register(self._users, full_name=full_name, email=email, password=password, role=Role.ADMIN)

    def delete_user(self, *, current_user: SessionUser, user_id: int) -> None:
        _require_admin(current_user)

        if int(user_id) == current_user.user_id:
            raise ValidationError("You cannot delete your own account")

        role = self._users.get_role(user_id)
        if role is None and not self._users.get_profile(user_id):
            raise ValidationError("User not found")
        if role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")

        if not self._users.delete_user(user_id):
            raise ValidationError("Failed to delete user")


def _require_admin(user: SessionUser) -> None:
    if user is None or user.role != Role.ADMIN:
        raise AuthorizationError("You do not have permission")


def _register(
    users: UserRepository,
    *,
    full_name: str,
    email: str,
    password: str,
    role: Role,
    student_id: Optional[str] = None,
    seat_number: Optional[str] = None,
    phone: Optional[str] = None,
) -> int:
    full_name = require_non_empty(full_name, "Full name")
    email = require_email(email)
    require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

    if users.get_account_by_email(email):
        raise ValidationError("An account with this email already exists")

    return users.create_user(
        email=email,
        password_hash=generate_password_hash(password),
        full_name=full_name,
        role=role,
        student_id=optional_text(student_id),
        seat_number=optional_text(seat_number),
        phone=optional_text(phone),
    )
