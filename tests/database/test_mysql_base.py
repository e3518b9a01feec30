from __future__ import annotations

from datetime import datetime, time, timedelta

import mysql.connector
import pytest

from src.library_system.library_system.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.library_system.library_system.core.exceptions import RemoteStoreError
from src.library_system.library_system.database.mysql_base import db_cursor, normalize_mysql_time


class FakeCursor:
    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.executed = []
        self.rowcount = 0
        self.lastrowid = 11

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))
        if self.error:
            raise self.error

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return self.rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn=None, connect_error=None):
        self.conn = conn
        self.connect_error = connect_error

    def connect(self):
        if self.connect_error:
            raise self.connect_error
        return self.conn


def test_commit_and_close_on_success():
    conn = FakeConnection(FakeCursor())
    with db_cursor(FakeFactory(conn)) as (_, cur):
        cur.execute("SELECT 1")
    assert conn.committed and conn.closed and not conn.rolled_back


def test_driver_error_becomes_remote_store_error():
    conn = FakeConnection(FakeCursor(error=mysql.connector.Error(msg="Duplicate entry")))
    with pytest.raises(RemoteStoreError, match="Duplicate entry"):
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("INSERT ...")
    assert conn.rolled_back and conn.closed and not conn.committed


def test_connect_failure_becomes_remote_store_error():
    factory = FakeFactory(connect_error=mysql.connector.Error(msg="Can't connect"))
    with pytest.raises(RemoteStoreError):
        with db_cursor(factory):
            pass


def test_normalize_mysql_time():
    assert normalize_mysql_time(timedelta(hours=9, minutes=30)) == time(9, 30)
    assert normalize_mysql_time("18:00:00") == time(18, 0)
    assert normalize_mysql_time(None) is None


def test_attendance_rows_map_to_records():
    check_in = datetime(2026, 2, 2, 9, 0)
    cursor = FakeCursor(
        rows=[{"attendance_id": 5, "user_id": "3", "check_in": check_in, "check_out": None, "purpose": "Study"}]
    )
    repo = MySQLAttendanceRepository(FakeFactory(FakeConnection(cursor)))

    records = repo.get_recent_for_user(3, 10)

    assert records[0].attendance_id == 5
    assert records[0].user_id == 3
    assert records[0].is_open is True
    sql, params = cursor.executed[0]
    assert "ORDER BY check_in DESC" in sql
    assert params == (3, 10)


def test_count_open_filters_on_missing_check_out():
    cursor = FakeCursor(rows=[{"n": 4}])
    repo = MySQLAttendanceRepository(FakeFactory(FakeConnection(cursor)))

    start = datetime(2026, 2, 2)
    assert repo.count_open_between(start, start + timedelta(days=1)) == 4
    sql, _ = cursor.executed[0]
    assert "check_out IS NULL" in sql
    assert "check_in < %s" in sql
