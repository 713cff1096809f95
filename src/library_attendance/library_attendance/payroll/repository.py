from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import SalaryRecord


class SalaryRepository(Protocol):
    def get_by_id(self, salary_id: int) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def upsert(self, *, staff_id: int, month: str, present_days: int, amount: Decimal) -> SalaryRecord:
        """Create or refresh the (staff, month) record; an existing status is kept."""

        raise NotImplementedError

    def mark_paid(self, salary_id: int) -> bool:
        raise NotImplementedError

    def list_for_staff(self, staff_id: int) -> Sequence[SalaryRecord]:
        raise NotImplementedError

    def list_for_month(self, month: str) -> Sequence[SalaryRecord]:
        raise NotImplementedError
