from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role stored in the user_roles mapping."""

    STUDENT = "student"
    ADMIN = "admin"


class AttendanceAction(str, Enum):
    """What a toggle ended up doing."""

    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
