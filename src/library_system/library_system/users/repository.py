from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Account, Profile


class UserRepository(Protocol):
    """Accounts, profiles and the user_roles mapping.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_account_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def get_profile(self, user_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def get_role(self, user_id: int) -> Optional[Role]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        full_name: str,
        role: Role,
        student_id: Optional[str] = None,
        seat_number: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> int:
        """Insert account, profile and role together; returns the new user id."""

        raise NotImplementedError

    def list_profiles_by_role(self, role: Role) -> Sequence[Profile]:
        """Newest first."""

        raise NotImplementedError

    def count_by_role(self, role: Role) -> int:
        raise NotImplementedError

    def delete_user(self, user_id: int) -> bool:
        """Remove attendance, role, profile and account."""

        raise NotImplementedError
