from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import SalaryType
from .model import StaffProfile, StudentProfile


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[StudentProfile]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[StudentProfile]:
        raise NotImplementedError

    def create_for_user(
        self,
        *,
        user_id: int,
        student_code: str,
        full_name: str,
        email: str,
        phone: str,
        membership_start: date,
        membership_end: date,
    ) -> StudentProfile:
        """Insert-if-absent keyed by user; returns the stored profile either way."""

        raise NotImplementedError


class StaffRepository(Protocol):
    def get_by_user_id(self, user_id: int) -> Optional[StaffProfile]:
        raise NotImplementedError

    def list_active(self) -> Sequence[StaffProfile]:
        raise NotImplementedError

    def list_by_ids(self, staff_ids: Sequence[int]) -> Sequence[StaffProfile]:
        raise NotImplementedError

    def create_for_user(
        self,
        *,
        user_id: int,
        designation: str,
        salary_type: SalaryType,
        base_salary: Decimal,
    ) -> StaffProfile:
        """Insert-if-absent keyed by user; returns the stored profile either way."""

        raise NotImplementedError
