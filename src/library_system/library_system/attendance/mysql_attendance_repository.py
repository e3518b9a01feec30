from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, user_id, check_in, check_out, purpose"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        check_in=r["check_in"],
        check_out=r.get("check_out"),
        purpose=r.get("purpose"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE user_id=%s
                ORDER BY check_in DESC, attendance_id DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_checkin(self, *, user_id: int, check_in: datetime, purpose: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance(user_id, check_in, purpose) VALUES(%s,%s,%s)",
                (user_id, check_in, purpose),
            )
            return int(cur.lastrowid)

    def update_checkout(self, *, attendance_id: int, check_out: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET check_out=%s WHERE attendance_id=%s AND check_out IS NULL",
                (check_out, int(attendance_id)),
            )
            return cur.rowcount > 0

    def count_checked_in_between(self, start: datetime, end: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM attendance WHERE check_in >= %s AND check_in < %s",
                (start, end),
            )
            return int(fetchone(cur)["n"])

    def count_open_between(self, start: datetime, end: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n FROM attendance
                WHERE check_in >= %s AND check_in < %s AND check_out IS NULL
                """,
                (start, end),
            )
            return int(fetchone(cur)["n"])

    def list_open(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE check_out IS NULL ORDER BY check_in ASC")
            return [_to_record(r) for r in fetchall(cur)]

    def list_completed_between(self, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance
                WHERE check_in >= %s AND check_in < %s AND check_out IS NOT NULL
                """,
                (start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_report_rows(self, *, start: datetime, end: datetime) -> Sequence[AttendanceReportRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.attendance_id, a.user_id, a.check_in, a.check_out, a.purpose,
                       p.full_name, p.student_id, p.seat_number
                FROM attendance a
                LEFT JOIN profiles p ON p.user_id = a.user_id
                WHERE a.check_in >= %s AND a.check_in < %s
                ORDER BY a.check_in DESC
                """,
                (start, end),
            )
            return [
                AttendanceReportRow(
                    attendance_id=int(r["attendance_id"]),
                    user_id=int(r["user_id"]),
                    full_name=r.get("full_name") or "-",
                    student_id=r.get("student_id"),
                    seat_number=r.get("seat_number"),
                    check_in=r["check_in"],
                    check_out=r.get("check_out"),
                    purpose=r.get("purpose"),
                )
                for r in fetchall(cur)
            ]
