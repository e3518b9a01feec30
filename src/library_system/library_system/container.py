from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .occupancy.service import OccupancyService
from .reports.service import AdminStatsService, AttendanceReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    settings_repo: SettingsRepository

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    settings_service: SettingsService
    occupancy_service: OccupancyService
    stats_service: AdminStatsService
    report_service: AttendanceReportService


def wire_container(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    settings_repo: SettingsRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any repository implementation."""

    user_service = UserService(users_repo)
    settings_service = SettingsService(settings_repo)
    occupancy_service = OccupancyService(attendance_repo, settings_service)

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        auth_service=AuthService(users_repo),
        user_service=user_service,
        attendance_service=AttendanceService(attendance_repo),
        settings_service=settings_service,
        occupancy_service=occupancy_service,
        stats_service=AdminStatsService(attendance_repo, user_service, occupancy_service),
        report_service=AttendanceReportService(attendance_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_container(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        conn=conn,
    )
