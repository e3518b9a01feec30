from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Identity row: credentials only, no personal data."""

    user_id: int
    email: str
    password_hash: str
    is_active: bool = True


@dataclass(frozen=True)
class Profile:
    """Stored identity record for a student or admin."""

    user_id: int
    full_name: str
    email: str
    student_id: Optional[str]
    seat_number: Optional[str]
    phone: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class SessionUser:
    """Per-request context derived from the store for the signed-in user."""

    user_id: int
    full_name: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
