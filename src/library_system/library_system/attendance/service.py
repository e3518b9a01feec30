from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import format_duration, now_local
from ..common.validators import optional_text
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_PURPOSE
from ..core.enums import AttendanceAction
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, AttendanceSnapshot
from .repository import AttendanceRepository


def is_currently_checked_in(records: Sequence[AttendanceRecord]) -> bool:
    """True iff the newest visit (by check_in) has no check_out yet."""

    if not records:
        return False
    newest = max(records, key=lambda r: (r.check_in, r.attendance_id))
    return newest.check_out is None


class AttendanceService:
    """Use case: check a student in and out of the library."""

    def __init__(self, attendance: AttendanceRepository, *, history_limit: int = DEFAULT_HISTORY_LIMIT):
        self._attendance = attendance
        self._history_limit = int(history_limit)

    def get_snapshot(self, user_id: int, *, limit: Optional[int] = None) -> AttendanceSnapshot:
        records = list(self._attendance.get_recent_for_user(user_id, limit or self._history_limit))
        records.sort(key=lambda r: (r.check_in, r.attendance_id), reverse=True)
        return AttendanceSnapshot(records=records, is_checked_in=is_currently_checked_in(records))

    def check_in(self, user_id: int, *, purpose: Optional[str] = None, now: Optional[datetime] = None) -> int:
        now = now or now_local()

        if self.get_snapshot(user_id, limit=1).is_checked_in:
            raise ValidationError("You are already checked in")

        return self._attendance.create_checkin(
            user_id=user_id,
            check_in=now,
            purpose=optional_text(purpose) or DEFAULT_PURPOSE,
        )

    def check_out(self, user_id: int, attendance_id: int, *, now: Optional[datetime] = None) -> None:
        now = now or now_local()

        record = self._attendance.get_by_id(attendance_id)
        if not record or record.user_id != user_id:
            raise ValidationError("Attendance record not found")
        if record.check_out is not None:
            raise ValidationError("You have already checked out")

        if not self._attendance.update_checkout(attendance_id=record.attendance_id, check_out=now):
            raise ValidationError("You have already checked out")

    def toggle(self, user_id: int, *, purpose: Optional[str] = None, now: Optional[datetime] = None) -> AttendanceAction:
        """Check out of the open visit if there is one, otherwise check in."""

        snapshot = self.get_snapshot(user_id, limit=1)
        if snapshot.is_checked_in:
            self.check_out(user_id, snapshot.latest.attendance_id, now=now)
            return AttendanceAction.CHECK_OUT

        self.check_in(user_id, purpose=purpose, now=now)
        return AttendanceAction.CHECK_IN

    def get_history_ui(self, user_id: int, *, now: Optional[datetime] = None) -> list[dict]:
        now = now or now_local()
        return [self._to_ui(r, now) for r in self.get_snapshot(user_id).records]

    def auto_checkout(self, *, closing_time: time, now: Optional[datetime] = None) -> int:
        """Close open visits once their closing time has passed.

        A visit closes at the closing time of its check-in day. Opening hours
        are not enforced at check-in, so a visit started after closing runs
        until the next day's closing time instead of being closed with zero
        duration.
        """

        now = now or now_local()
        closed = 0
        for record in self._attendance.list_open():
            closing_at = datetime.combine(record.check_in.date(), closing_time)
            if record.check_in > closing_at:
                closing_at += timedelta(days=1)
            if closing_at > now:
                continue
            if self._attendance.update_checkout(attendance_id=record.attendance_id, check_out=closing_at):
                closed += 1
        return closed

    def _to_ui(self, r: AttendanceRecord, now: datetime) -> dict:
        return {
            "attendance_id": r.attendance_id,
            "date": r.check_in.strftime("%b %d, %Y"),
            "check_in": r.check_in.strftime("%I:%M %p"),
            "check_out": r.check_out.strftime("%I:%M %p") if r.check_out else "Present",
            "duration": format_duration(r.check_in, r.check_out, now=now),
            "purpose": r.purpose or DEFAULT_PURPOSE,
        }
