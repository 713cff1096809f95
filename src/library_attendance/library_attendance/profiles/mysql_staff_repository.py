from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from mysql.connector import errors

from ..core.enums import SalaryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import StaffProfile
from .repository import StaffRepository

_COLUMNS = "staff_id, user_id, designation, salary_type, base_salary, active"


def _to_staff(r: dict) -> StaffProfile:
    return StaffProfile(
        staff_id=int(r["staff_id"]),
        user_id=int(r["user_id"]),
        designation=r["designation"],
        salary_type=SalaryType(r["salary_type"]),
        base_salary=Decimal(r["base_salary"]),
        active=bool(r.get("active", True)),
    )


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_user_id(self, user_id: int) -> Optional[StaffProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_staff(r) if r else None

    def list_active(self) -> Sequence[StaffProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE active=1 ORDER BY staff_id")
            return [_to_staff(r) for r in fetchall(cur)]

    def list_by_ids(self, staff_ids: Sequence[int]) -> Sequence[StaffProfile]:
        ids = [int(i) for i in staff_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM staff WHERE staff_id IN ({placeholders}) ORDER BY staff_id",
                tuple(ids),
            )
            return [_to_staff(r) for r in fetchall(cur)]

    def create_for_user(
        self,
        *,
        user_id: int,
        designation: str,
        salary_type: SalaryType,
        base_salary: Decimal,
    ) -> StaffProfile:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO staff(user_id, designation, salary_type, base_salary, active)
                    VALUES(%s,%s,%s,%s,1)
                    """,
                    (int(user_id), designation, salary_type.value, base_salary),
                )
        except errors.IntegrityError as e:
            if not is_duplicate_key(e):
                raise

        profile = self.get_by_user_id(user_id)
        if profile is None:
            raise RuntimeError(f"Staff profile for user {user_id} missing after insert")
        return profile
