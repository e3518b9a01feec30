from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        """Newest check_in first."""

        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(self, *, user_id: int, check_in: datetime, purpose: Optional[str] = None) -> int:
        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out: datetime) -> bool:
        raise NotImplementedError

    def count_checked_in_between(self, start: datetime, end: datetime) -> int:
        """Visits whose check_in falls in [start, end)."""

        raise NotImplementedError

    def count_open_between(self, start: datetime, end: datetime) -> int:
        """Visits whose check_in falls in [start, end) and check_out is absent."""

        raise NotImplementedError

    def list_open(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_completed_between(self, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_report_rows(self, *, start: datetime, end: datetime) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
