from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import SalaryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SalaryRecord
from .repository import SalaryRepository

_COLUMNS = "salary_id, staff_id, month, present_days, amount, status"


def _to_salary(r: dict) -> SalaryRecord:
    return SalaryRecord(
        salary_id=int(r["salary_id"]),
        staff_id=int(r["staff_id"]),
        month=str(r["month"]),
        present_days=int(r["present_days"]),
        amount=Decimal(r["amount"]),
        status=SalaryStatus(r["status"]),
    )


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, salary_id: int) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_records WHERE salary_id=%s", (int(salary_id),))
            r = fetchone(cur)
            return _to_salary(r) if r else None

    def upsert(self, *, staff_id: int, month: str, present_days: int, amount: Decimal) -> SalaryRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            # status is not in the UPDATE list: a Paid record stays Paid.
            cur.execute(
                """
                INSERT INTO salary_records(staff_id, month, present_days, amount, status)
                VALUES(%s,%s,%s,%s,'Pending')
                ON DUPLICATE KEY UPDATE
                    present_days=VALUES(present_days),
                    amount=VALUES(amount)
                """,
                (int(staff_id), month, int(present_days), amount),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_records WHERE staff_id=%s AND month=%s",
                (int(staff_id), month),
            )
            return _to_salary(fetchone(cur))

    def mark_paid(self, salary_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE salary_records SET status='Paid' WHERE salary_id=%s",
                (int(salary_id),),
            )
            return cur.rowcount > 0

    def list_for_staff(self, staff_id: int) -> Sequence[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_records WHERE staff_id=%s ORDER BY month DESC",
                (int(staff_id),),
            )
            return [_to_salary(r) for r in fetchall(cur)]

    def list_for_month(self, month: str) -> Sequence[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_records WHERE month=%s ORDER BY staff_id",
                (month,),
            )
            return [_to_salary(r) for r in fetchall(cur)]
