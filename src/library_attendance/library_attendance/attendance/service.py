from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local, start_of_day
from ..core.constants import DEFAULT_HISTORY_LIMIT, MAX_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, DomainError, ValidationError
from ..identity.model import Identity
from ..profiles.service import ProfileService
from .factory import AttendanceProofFactory
from .model import AttendanceOutcome, AttendanceRecord
from .proofs.base import AttendanceProof
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

ATTENDEE_ROLES = (Role.STUDENT, Role.STAFF)


class AttendanceService:
    """Decide whether a submission creates today's attendance row.

    Evaluation order per submission: normalise to the calendar day, return an
    existing Present row untouched, validate the proof, then insert-if-absent.
    An Absent row set by an administrator is promoted by that insert.
    The final insert is atomic in the repository, so concurrent duplicates
    converge on one row instead of relying on the earlier read.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        proof_factory: AttendanceProofFactory,
        profiles: Optional[ProfileService] = None,
    ):
        self._attendance = attendance
        self._proofs = proof_factory
        self._profiles = profiles

    def submit_qr(
        self,
        identity: Identity,
        *,
        qr_token: str,
        location: Any = None,
        now: Optional[datetime] = None,
    ) -> AttendanceOutcome:
        proof = self._proofs.for_qr(qr_token=qr_token, location=location)
        return self._submit(identity, proof, now=now)

    def submit_self(
        self,
        identity: Identity,
        *,
        location: Any = None,
        face_match: bool = False,
        face_descriptor: Optional[Any] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceOutcome:
        proof = self._proofs.for_self(location=location, face_match=face_match, face_descriptor=face_descriptor)
        return self._submit(identity, proof, now=now)

    def _submit(self, identity: Identity, proof: AttendanceProof, *, now: Optional[datetime]) -> AttendanceOutcome:
        if identity.role not in ATTENDEE_ROLES:
            raise AuthorizationError("Only students and staff can mark attendance")

        now = now or now_local()
        today = start_of_day(now).date()

        existing = self._attendance.get_for_day(user_id=identity.user_id, role=identity.role, work_date=today)
        if existing and existing.status == AttendanceStatus.PRESENT:
            logger.info("Attendance already marked for user %s on %s", identity.user_id, today)
            return AttendanceOutcome(record=existing, created=False)

        try:
            decision = proof.evaluate(identity=identity, now=now)
        except DomainError as e:
            logger.warning("Rejected %s from user %s: %s", type(proof).__name__, identity.user_id, e)
            raise
        if decision.requires_face_verification:
            logger.info("Face verification required for user %s", identity.user_id)
            return AttendanceOutcome(requires_face_verification=True)

        record, created = self._attendance.create_if_absent(
            user_id=identity.user_id,
            role=identity.role,
            work_date=today,
            check_in_time=now,
            method=decision.method,
            location=decision.location,
            student_id=self._student_ref(identity),
        )
        if created:
            logger.info(
                "Attendance %s created for user %s (%s via %s)",
                record.attendance_id,
                identity.user_id,
                identity.role.value,
                decision.method.value,
            )
        else:
            logger.info("Concurrent submission for user %s on %s converged on %s", identity.user_id, today, record.attendance_id)
        return AttendanceOutcome(record=record, created=created)

    def _student_ref(self, identity: Identity) -> Optional[int]:
        if identity.role != Role.STUDENT or self._profiles is None:
            return None
        profile = self._profiles.find_student_for_user(identity.user_id)
        return profile.student_id if profile else None

    def history(self, identity: Identity, *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        if limit is None or limit <= 0:
            limit = DEFAULT_HISTORY_LIMIT
        limit = min(int(limit), MAX_HISTORY_LIMIT)
        return self._attendance.get_recent_for_user(user_id=identity.user_id, role=identity.role, limit=limit)

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_date(work_date)

    def set_attendance(self, *, student_ref: Any, work_date: date, status: Any) -> AttendanceRecord:
        """Admin override keyed by (student, day); bypasses proof checks.

        The caller is responsible for having authorised an administrator.
        """

        if self._profiles is None:
            raise RuntimeError("Profile service is required for attendance overrides")

        try:
            status_enum = AttendanceStatus(status)
        except ValueError:
            raise ValidationError("status must be Present or Absent")

        try:
            student_id = int(student_ref)
        except (TypeError, ValueError):
            raise ValidationError("student is required")

        student = self._profiles.get_student(student_id)
        record = self._attendance.upsert_status(
            user_id=student.user_id,
            role=Role.STUDENT,
            student_id=student.student_id,
            work_date=work_date,
            status=status_enum,
        )
        logger.info("Attendance override: student %s on %s -> %s", student.student_id, work_date, status_enum.value)
        return record
