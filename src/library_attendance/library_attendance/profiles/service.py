from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, Union

from ..common.datetime_utils import now_local
from ..core.constants import (
    DEFAULT_MEMBERSHIP_DAYS,
    DEFAULT_STAFF_BASE_SALARY,
    DEFAULT_STAFF_DESIGNATION,
    DEFAULT_STUDENT_PHONE,
)
from ..core.enums import Role, SalaryType
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import User
from .model import StaffProfile, StudentProfile
from .repository import StaffRepository, StudentRepository

logger = logging.getLogger(__name__)

Profile = Union[StudentProfile, StaffProfile]


class ProfileService:
    """Use case: explicit provisioning and lookup of role profiles.

    Reads never create anything; `ensure_*` is the only place a default
    profile comes into existence.
    """

    def __init__(self, students: StudentRepository, staff: StaffRepository):
        self._students = students
        self._staff = staff

    def ensure_student_profile(self, user: User, *, now: Optional[datetime] = None) -> StudentProfile:
        existing = self._students.get_by_user_id(user.user_id)
        if existing:
            return existing

        now = now or now_local()
        profile = self._students.create_for_user(
            user_id=user.user_id,
            student_code=f"STU{int(now.timestamp() * 1000)}{user.user_id}",
            full_name=user.name,
            email=user.email,
            phone=DEFAULT_STUDENT_PHONE,
            membership_start=now.date(),
            membership_end=(now + timedelta(days=DEFAULT_MEMBERSHIP_DAYS)).date(),
        )
        logger.info("Provisioned student profile %s for user %s", profile.student_id, user.user_id)
        return profile

    def ensure_staff_profile(self, user: User) -> StaffProfile:
        existing = self._staff.get_by_user_id(user.user_id)
        if existing:
            return existing

        profile = self._staff.create_for_user(
            user_id=user.user_id,
            designation=DEFAULT_STAFF_DESIGNATION,
            salary_type=SalaryType.MONTHLY,
            base_salary=Decimal(DEFAULT_STAFF_BASE_SALARY),
        )
        logger.info("Provisioned staff profile %s for user %s", profile.staff_id, user.user_id)
        return profile

    def ensure_for_user(self, user: User, *, now: Optional[datetime] = None) -> Optional[Profile]:
        if user.role == Role.STUDENT:
            return self.ensure_student_profile(user, now=now)
        if user.role == Role.STAFF:
            return self.ensure_staff_profile(user)
        return None

    def find_student_for_user(self, user_id: int) -> Optional[StudentProfile]:
        return self._students.get_by_user_id(user_id)

    def get_student(self, student_id: int) -> StudentProfile:
        profile = self._students.get_by_id(student_id)
        if not profile:
            raise NotFoundError("Student not found")
        return profile

    def get_profile(self, *, user_id: int, role: Role) -> Optional[Profile]:
        if role == Role.STUDENT:
            profile = self._students.get_by_user_id(user_id)
            if not profile:
                raise NotFoundError("Student profile not found")
            return profile
        if role == Role.STAFF:
            profile = self._staff.get_by_user_id(user_id)
            if not profile:
                raise NotFoundError("Staff profile not found")
            return profile
        if role == Role.ADMIN:
            return None
        raise ValidationError("Unsupported role")
