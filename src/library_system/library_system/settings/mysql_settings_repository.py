from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import LibrarySettings
from .repository import SettingsRepository

SETTINGS_ROW_ID = 1


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[LibrarySettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT library_name, total_seats, opening_time, closing_time,
                       qr_attendance_enabled, auto_checkout_enabled, email_notifications, notice_text
                FROM library_settings
                WHERE settings_id=%s
                """,
                (SETTINGS_ROW_ID,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return LibrarySettings(
                library_name=r["library_name"],
                total_seats=int(r["total_seats"]),
                opening_time=normalize_mysql_time(r["opening_time"]),
                closing_time=normalize_mysql_time(r["closing_time"]),
                qr_attendance_enabled=bool(r["qr_attendance_enabled"]),
                auto_checkout_enabled=bool(r["auto_checkout_enabled"]),
                email_notifications=bool(r["email_notifications"]),
                notice_text=r.get("notice_text") or "",
            )

    def save(self, settings: LibrarySettings) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO library_settings(
                    settings_id, library_name, total_seats, opening_time, closing_time,
                    qr_attendance_enabled, auto_checkout_enabled, email_notifications, notice_text
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    library_name=VALUES(library_name),
                    total_seats=VALUES(total_seats),
                    opening_time=VALUES(opening_time),
                    closing_time=VALUES(closing_time),
                    qr_attendance_enabled=VALUES(qr_attendance_enabled),
                    auto_checkout_enabled=VALUES(auto_checkout_enabled),
                    email_notifications=VALUES(email_notifications),
                    notice_text=VALUES(notice_text)
                """,
                (
                    SETTINGS_ROW_ID,
                    settings.library_name,
                    settings.total_seats,
                    settings.opening_time,
                    settings.closing_time,
                    int(settings.qr_attendance_enabled),
                    int(settings.auto_checkout_enabled),
                    int(settings.email_notifications),
                    settings.notice_text,
                ),
            )
