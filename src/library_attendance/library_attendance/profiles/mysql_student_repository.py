from __future__ import annotations

from datetime import date
from typing import Optional

from mysql.connector import errors

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import StudentProfile
from .repository import StudentRepository

_COLUMNS = "student_id, user_id, student_code, full_name, email, phone, membership_start, membership_end, status"


def _to_student(r: dict) -> StudentProfile:
    return StudentProfile(
        student_id=int(r["student_id"]),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        student_code=r["student_code"],
        full_name=r["full_name"],
        email=r["email"],
        phone=r["phone"],
        membership_start=r["membership_start"],
        membership_end=r["membership_end"],
        status=r.get("status") or "Active",
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_user_id(self, user_id: int) -> Optional[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def create_for_user(
        self,
        *,
        user_id: int,
        student_code: str,
        full_name: str,
        email: str,
        phone: str,
        membership_start: date,
        membership_end: date,
    ) -> StudentProfile:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO students(user_id, student_code, full_name, email, phone, membership_start, membership_end)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(user_id), student_code, full_name, email, phone, membership_start, membership_end),
                )
        except errors.IntegrityError as e:
            if not is_duplicate_key(e):
                raise

        profile = self.get_by_user_id(user_id)
        if profile is None:
            raise RuntimeError(f"Student profile for user {user_id} missing after insert")
        return profile
