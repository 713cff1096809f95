from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_range
from ..core.enums import Role, SalaryType
from ..core.exceptions import NotFoundError
from ..profiles.model import StaffProfile
from ..profiles.repository import StaffRepository
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import calculator_for
from .model import SalaryRecord
from .repository import SalaryRepository

logger = logging.getLogger(__name__)


class PayrollService:
    """Monthly salary aggregation over staff attendance."""

    def __init__(
        self,
        salaries: SalaryRepository,
        staff: StaffRepository,
        attendance: AttendanceRepository,
        *,
        calculator_factory: Callable[[SalaryType], SalaryCalculator] = calculator_for,
    ):
        self._salaries = salaries
        self._staff = staff
        self._attendance = attendance
        self._calculator_for = calculator_factory

    def calculate(self, month: str, staff_ids: Optional[Sequence[int]] = None) -> list[SalaryRecord]:
        """Recompute (staff, month) records; staff_ids=None means every active staff member."""

        start, end = month_range(month)
        members = self._staff.list_active() if staff_ids is None else self._staff.list_by_ids(staff_ids)

        records = []
        for member in members:
            records.append(self._calculate_one(member, month=month, start=start, end=end))

        logger.info("Salary recomputed for %s: %d staff", month, len(records))
        return records

    def _calculate_one(self, member: StaffProfile, *, month: str, start: date, end: date) -> SalaryRecord:
        present_days = self._attendance.count_present(
            user_id=member.user_id,
            role=Role.STAFF,
            start_date=start,
            end_date=end,
        )
        amount = self._calculator_for(member.salary_type).amount(member, present_days)
        return self._salaries.upsert(
            staff_id=member.staff_id,
            month=month,
            present_days=present_days,
            amount=amount,
        )

    def mark_paid(self, salary_id: int) -> SalaryRecord:
        if self._salaries.get_by_id(salary_id) is None:
            raise NotFoundError("Salary record not found")

        self._salaries.mark_paid(salary_id)
        logger.info("Salary %s marked paid", salary_id)
        return self._salaries.get_by_id(salary_id)

    def list_for_user(self, user_id: int) -> Sequence[SalaryRecord]:
        member = self._staff.get_by_user_id(user_id)
        if not member:
            raise NotFoundError("Staff profile not found")
        return self._salaries.list_for_staff(member.staff_id)

    def list_for_month(self, month: str) -> Sequence[SalaryRecord]:
        month_range(month)
        return self._salaries.list_for_month(month)
