from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector import errors

from ..core.enums import AttendanceMethod, AttendanceStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord, Location
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, role, student_id, work_date, check_in_time,
    method, latitude, longitude, address, status
"""


def _to_record(r: dict) -> AttendanceRecord:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = Location(lat=float(r["latitude"]), lng=float(r["longitude"]), address=r.get("address"))

    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        role=Role(r["role"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        method=AttendanceMethod(r["method"]) if r.get("method") else None,
        location=location,
        student_id=int(r["student_id"]) if r.get("student_id") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_day(self, *, user_id: int, role: Role, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND role=%s AND work_date=%s
                """,
                (int(user_id), role.value, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def _get_for_student_day(self, *, student_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s AND work_date=%s",
                (int(student_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def _promote_absent(
        self,
        *,
        user_id: int,
        role: Role,
        student_id: Optional[int],
        work_date: date,
        check_in_time: datetime,
        method: AttendanceMethod,
        location: Optional[Location],
    ) -> bool:
        """Conditional UPDATE: only a row still marked Absent is rewritten as Present."""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, check_in_time=%s, method=%s,
                    latitude=%s, longitude=%s, address=%s,
                    user_id=COALESCE(user_id, %s), student_id=COALESCE(student_id, %s)
                WHERE work_date=%s AND status=%s
                  AND ((user_id=%s AND role=%s) OR student_id=%s)
                """,
                (
                    AttendanceStatus.PRESENT.value,
                    check_in_time,
                    method.value,
                    location.lat if location else None,
                    location.lng if location else None,
                    location.address if location else None,
                    int(user_id),
                    student_id,
                    work_date,
                    AttendanceStatus.ABSENT.value,
                    int(user_id),
                    role.value,
                    student_id,
                ),
            )
            return cur.rowcount > 0

    def create_if_absent(
        self,
        *,
        user_id: int,
        role: Role,
        work_date: date,
        check_in_time: datetime,
        method: AttendanceMethod,
        location: Optional[Location] = None,
        student_id: Optional[int] = None,
    ) -> tuple[AttendanceRecord, bool]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        user_id, role, student_id, work_date, check_in_time,
                        method, latitude, longitude, address, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(user_id),
                        role.value,
                        student_id,
                        work_date,
                        check_in_time,
                        method.value,
                        location.lat if location else None,
                        location.lng if location else None,
                        location.address if location else None,
                        AttendanceStatus.PRESENT.value,
                    ),
                )
                attendance_id = int(cur.lastrowid)
        except errors.IntegrityError as e:
            if not is_duplicate_key(e):
                raise
            # The day is taken: an Absent row becomes this check-in, a Present row is returned as is.
            promoted = self._promote_absent(
                user_id=user_id,
                role=role,
                student_id=student_id,
                work_date=work_date,
                check_in_time=check_in_time,
                method=method,
                location=location,
            )
            existing = self.get_for_day(user_id=user_id, role=role, work_date=work_date)
            if existing is None and student_id is not None:
                existing = self._get_for_student_day(student_id=student_id, work_date=work_date)
            if existing is None:
                raise
            return existing, promoted

        record = self.get_by_id(attendance_id)
        if record is None:
            raise RuntimeError(f"Attendance {attendance_id} missing after insert")
        return record, True

    def upsert_status(
        self,
        *,
        user_id: Optional[int],
        role: Role,
        student_id: Optional[int],
        work_date: date,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, role, student_id, work_date, status)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    student_id=COALESCE(student_id, VALUES(student_id))
                """,
                (user_id, role.value, student_id, work_date, status.value),
            )

        record = None
        if student_id is not None:
            record = self._get_for_student_day(student_id=student_id, work_date=work_date)
        if record is None and user_id is not None:
            record = self.get_for_day(user_id=user_id, role=role, work_date=work_date)
        if record is None:
            raise RuntimeError("Attendance override missing after upsert")
        return record

    def get_recent_for_user(self, *, user_id: int, role: Role, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND role=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(user_id), role.value, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date=%s
                ORDER BY check_in_time IS NULL, check_in_time, attendance_id
                """,
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_present(self, *, user_id: int, role: Role, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS present_days
                FROM attendance_records
                WHERE user_id=%s AND role=%s AND status=%s
                  AND work_date >= %s AND work_date < %s
                """,
                (int(user_id), role.value, AttendanceStatus.PRESENT.value, start_date, end_date),
            )
            r = fetchone(cur)
            return int(r["present_days"]) if r else 0
