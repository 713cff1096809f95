from __future__ import annotations

from decimal import Decimal

from .base import SalaryCalculator
from ...core.enums import SalaryType
from ...profiles.model import StaffProfile


class DailyRateCalculator(SalaryCalculator):
    """Present days x base salary."""

    def amount(self, staff: StaffProfile, present_days: int) -> Decimal:
        return Decimal(staff.base_salary) * int(present_days)


class MonthlyFlatCalculator(SalaryCalculator):
    """Base salary as-is; attendance is not prorated."""

    def amount(self, staff: StaffProfile, present_days: int) -> Decimal:
        return Decimal(staff.base_salary)


_CALCULATORS = {
    SalaryType.DAILY: DailyRateCalculator(),
    SalaryType.MONTHLY: MonthlyFlatCalculator(),
}


def calculator_for(salary_type: SalaryType) -> SalaryCalculator:
    return _CALCULATORS[SalaryType(salary_type)]
