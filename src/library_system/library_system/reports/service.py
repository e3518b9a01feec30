from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import day_bounds, format_duration, format_minutes, now_local
from ..core.constants import DEFAULT_PURPOSE, DEFAULT_REPORT_DAYS
from ..core.exceptions import ValidationError
from ..occupancy.model import SeatOccupancy
from ..occupancy.service import OccupancyService
from ..users.service import UserService


@dataclass(frozen=True)
class DashboardStats:
    total_students: int
    present_today: int
    avg_duration: str
    weekly_growth: str
    occupancy: SeatOccupancy


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    total_visits: int
    open_visits: int


def growth_label(current: int, previous: int) -> str:
    """Week-over-week change as "+12%"; "+0%" when there is nothing to compare."""

    if previous <= 0:
        return "+0%"
    pct = round((current - previous) * 100 / previous)
    return f"{pct:+d}%"


class AdminStatsService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserService,
        occupancy: OccupancyService,
        *,
        window_days: int = DEFAULT_REPORT_DAYS,
    ):
        self._attendance = attendance
        self._users = users
        self._occupancy = occupancy
        self._window = timedelta(days=int(window_days))

    def dashboard(self, day: Optional[date] = None) -> DashboardStats:
        day = day or now_local().date()
        today_start, today_end = day_bounds(day)

        week_start = today_end - self._window
        prev_start = week_start - self._window

        this_week = self._attendance.count_checked_in_between(week_start, today_end)
        last_week = self._attendance.count_checked_in_between(prev_start, week_start)

        return DashboardStats(
            total_students=self._users.count_students(),
            present_today=self._attendance.count_checked_in_between(today_start, today_end),
            avg_duration=self._average_duration(week_start, today_end),
            weekly_growth=growth_label(this_week, last_week),
            occupancy=self._occupancy.snapshot(day),
        )

    def _average_duration(self, start: datetime, end: datetime) -> str:
        visits = self._attendance.list_completed_between(start, end)
        if not visits:
            return format_minutes(0)
        total = sum(int((v.check_out - v.check_in).total_seconds()) // 60 for v in visits)
        return format_minutes(total // len(visits))


class AttendanceReportService:
    """Attendance rows for the admin page and CSV export."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def build(self, *, start: date, end: date, now: Optional[datetime] = None) -> ReportData:
        if start > end:
            raise ValidationError("Start date must not be after end date")

        now = now or now_local()
        range_start, _ = day_bounds(start)
        _, range_end = day_bounds(end)

        out_rows: list[dict] = []
        open_visits = 0
        for r in self._attendance.get_report_rows(start=range_start, end=range_end):
            if r.check_out is None:
                open_visits += 1
            out_rows.append(
                {
                    "attendance_id": r.attendance_id,
                    "user_id": r.user_id,
                    "full_name": r.full_name,
                    "student_id": r.student_id or "-",
                    "seat_number": r.seat_number or "-",
                    "date": r.check_in.strftime("%Y-%m-%d"),
                    "check_in": r.check_in.strftime("%H:%M"),
                    "check_out": r.check_out.strftime("%H:%M") if r.check_out else "Present",
                    "duration": format_duration(r.check_in, r.check_out, now=now),
                    "purpose": r.purpose or DEFAULT_PURPOSE,
                }
            )

        return ReportData(rows=out_rows, total_visits=len(out_rows), open_visits=open_visits)
