from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import SalaryType


@dataclass(frozen=True)
class StudentProfile:
    """Domain entity: library member profile (attendance back-reference target)."""

    student_id: int
    user_id: Optional[int]
    student_code: str
    full_name: str
    email: str
    phone: str
    membership_start: date
    membership_end: date
    status: str = "Active"


@dataclass(frozen=True)
class StaffProfile:
    """Domain entity: staff employment terms used by payroll."""

    staff_id: int
    user_id: int
    designation: str
    salary_type: SalaryType
    base_salary: Decimal
    active: bool = True
