from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...profiles.model import StaffProfile


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def amount(self, staff: StaffProfile, present_days: int) -> Decimal:
        raise NotImplementedError
