from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Account, Profile
from .repository import UserRepository

_PROFILE_COLUMNS = "p.user_id, p.full_name, p.email, p.student_id, p.seat_number, p.phone, p.created_at"


def _to_profile(r: dict) -> Profile:
    return Profile(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        email=r["email"],
        student_id=r.get("student_id"),
        seat_number=r.get("seat_number"),
        phone=r.get("phone"),
        created_at=r["created_at"],
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_account_by_email(self, email: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, email, password_hash, is_active FROM auth_users WHERE email=%s",
                (email,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Account(
                user_id=int(row["user_id"]),
                email=row["email"],
                password_hash=row["password_hash"],
                is_active=bool(row.get("is_active", True)),
            )

    def get_profile(self, user_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROFILE_COLUMNS} FROM profiles p WHERE p.user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def get_role(self, user_id: int) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role FROM user_roles WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return Role(row["role"]) if row else None

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        full_name: str,
        role: Role,
        student_id: Optional[str] = None,
        seat_number: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO auth_users(email, password_hash, is_active) VALUES(%s,%s,1)",
                (email, password_hash),
            )
            user_id = int(cur.lastrowid)
            cur.execute(
                """
                INSERT INTO profiles(user_id, full_name, email, student_id, seat_number, phone)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (user_id, full_name, email, student_id, seat_number, phone),
            )
            cur.execute("INSERT INTO user_roles(user_id, role) VALUES(%s,%s)", (user_id, role.value))
            return user_id

    def list_profiles_by_role(self, role: Role) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PROFILE_COLUMNS}
                FROM profiles p
                JOIN user_roles r ON r.user_id = p.user_id
                WHERE r.role=%s
                ORDER BY p.created_at DESC, p.user_id DESC
                """,
                (role.value,),
            )
            return [_to_profile(r) for r in fetchall(cur)]

    def count_by_role(self, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM user_roles WHERE role=%s", (role.value,))
            return int(fetchone(cur)["n"])

    def delete_user(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE user_id=%s", (int(user_id),))
            cur.execute("DELETE FROM user_roles WHERE user_id=%s", (int(user_id),))
            cur.execute("DELETE FROM profiles WHERE user_id=%s", (int(user_id),))
            cur.execute("DELETE FROM auth_users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
