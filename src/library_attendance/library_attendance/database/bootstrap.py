from __future__ import annotations

import logging
import re
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.constants import DEFAULT_MEMBERSHIP_DAYS, DEFAULT_STUDENT_PHONE
from ..core.enums import Role, SalaryType
from .connection import DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes and -- comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [line for line in sql.splitlines() if not line.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


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


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied schema %s to %s", schema_path, target.database)


def ensure_demo_users(db_config: dict) -> None:
    """Upsert one account per role, each with its provisioned profile."""

    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_user(name: str, email: str, password: str, role: Role) -> int:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE users SET name=%s, password_hash=%s, role=%s WHERE user_id=%s",
                    (name, password_hash, role.value, existing["user_id"]),
                )
                return int(existing["user_id"])
            cur.execute(
                "INSERT INTO users (name, email, password_hash, role) VALUES (%s, %s, %s, %s)",
                (name, email, password_hash, role.value),
            )
            return int(cur.lastrowid)

        upsert_user("Admin Demo", "admin@library.local", "admin123", Role.ADMIN)

        staff_user_id = upsert_user("Staff Demo", "staff@library.local", "staff123", Role.STAFF)
        cur.execute(
            """
            INSERT INTO staff (user_id, designation, salary_type, base_salary, active)
            VALUES (%s, %s, %s, %s, 1)
            ON DUPLICATE KEY UPDATE user_id = user_id
            """,
            (staff_user_id, "Librarian", SalaryType.DAILY.value, 600),
        )

        student_user_id = upsert_user("Student Demo", "student@library.local", "student123", Role.STUDENT)
        today = date.today()
        cur.execute(
            """
            INSERT INTO students (user_id, student_code, full_name, email, phone, membership_start, membership_end)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE user_id = user_id
            """,
            (
                student_user_id,
                "STU-DEMO",
                "Student Demo",
                "student@library.local",
                DEFAULT_STUDENT_PHONE,
                today,
                today + timedelta(days=DEFAULT_MEMBERSHIP_DAYS),
            ),
        )

        conn.commit()
    finally:
        conn.close()
    logger.info("Demo accounts ready in %s", target.database)


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
