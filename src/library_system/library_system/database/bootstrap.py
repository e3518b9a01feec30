from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
            continue
        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
            continue
        if ch == ";" and quote is None:
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_sql_file(db_config: dict, *, path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    apply_sql_file(db_config, path=schema_path)


def ensure_demo_users(db_config: dict) -> None:
    """Upsert a demo admin and a demo student (with profile and role rows)."""

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        def upsert(full_name: str, email: str, password: str, role: str, student_id: str | None, seat: str | None) -> None:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM auth_users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                user_id = int(existing["user_id"])
                cur.execute(
                    "UPDATE auth_users SET password_hash=%s, is_active=1 WHERE user_id=%s",
                    (password_hash, user_id),
                )
            else:
                cur.execute(
                    "INSERT INTO auth_users (email, password_hash) VALUES (%s, %s)",
                    (email, password_hash),
                )
                user_id = int(cur.lastrowid)

            cur.execute(
                """
                INSERT INTO profiles (user_id, full_name, email, student_id, seat_number)
                VALUES (%s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE full_name=VALUES(full_name), student_id=VALUES(student_id),
                    seat_number=VALUES(seat_number)
                """,
                (user_id, full_name, email, student_id, seat),
            )
            cur.execute(
                "INSERT INTO user_roles (user_id, role) VALUES (%s, %s) ON DUPLICATE KEY UPDATE role=VALUES(role)",
                (user_id, role),
            )

        upsert("Library Admin", "admin@library.local", "admin123", "admin", None, None)
        upsert("Demo Student", "student@library.local", "student123", "student", "STU-0001", "A1")

        cur.execute("INSERT IGNORE INTO library_settings (settings_id) VALUES (1)")
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
