from decimal import Decimal

from src.library_attendance.library_attendance.core.enums import SalaryType
from src.library_attendance.library_attendance.payroll.calculator.standard_calculator import (
    DailyRateCalculator,
    MonthlyFlatCalculator,
    calculator_for,
)
from src.library_attendance.library_attendance.profiles.model import StaffProfile


def _staff(salary_type: SalaryType, base: str) -> StaffProfile:
    return StaffProfile(staff_id=1, user_id=1, designation="Clerk", salary_type=salary_type, base_salary=Decimal(base))


def test_daily_rate_multiplies_present_days():
    assert DailyRateCalculator().amount(_staff(SalaryType.DAILY, "600"), 3) == Decimal("1800")
    assert DailyRateCalculator().amount(_staff(SalaryType.DAILY, "600"), 0) == Decimal("0")


def test_monthly_flat_ignores_attendance():
    staff = _staff(SalaryType.MONTHLY, "15000")
    assert MonthlyFlatCalculator().amount(staff, 0) == Decimal("15000")
    assert MonthlyFlatCalculator().amount(staff, 22) == Decimal("15000")


def test_calculator_for_salary_type():
    assert isinstance(calculator_for(SalaryType.DAILY), DailyRateCalculator)
    assert isinstance(calculator_for("Monthly"), MonthlyFlatCalculator)
