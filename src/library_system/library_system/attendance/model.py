from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one library visit."""

    attendance_id: int
    user_id: int
    check_in: datetime
    check_out: Optional[datetime]
    purpose: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_out is None


@dataclass(frozen=True)
class AttendanceSnapshot:
    """Last fetched records for one user (newest first) and the derived status."""

    records: Sequence[AttendanceRecord]
    is_checked_in: bool

    @property
    def latest(self) -> Optional[AttendanceRecord]:
        return self.records[0] if self.records else None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for the admin attendance page and CSV export."""

    attendance_id: int
    user_id: int
    full_name: str
    student_id: Optional[str]
    seat_number: Optional[str]
    check_in: datetime
    check_out: Optional[datetime]
    purpose: Optional[str] = None
