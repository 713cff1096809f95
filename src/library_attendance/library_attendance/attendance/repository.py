from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceMethod, AttendanceStatus, Role
from .model import AttendanceRecord, Location


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_day(self, *, user_id: int, role: Role, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

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
        """Atomic insert keyed by (user, role, day).

        Returns (record, True) when this call wrote the row. An Absent row
        already on the key is promoted to Present and also counts as written.
        A Present row on the key is returned with False.
        """

        raise NotImplementedError

    def upsert_status(
        self,
        *,
        user_id: Optional[int],
        role: Role,
        student_id: Optional[int],
        work_date: date,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        """Admin-only override: create the day's row or overwrite its status."""

        raise NotImplementedError

    def get_recent_for_user(self, *, user_id: int, role: Role, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_present(self, *, user_id: int, role: Role, start_date: date, end_date: date) -> int:
        """Present rows with start_date <= work_date < end_date."""

        raise NotImplementedError
