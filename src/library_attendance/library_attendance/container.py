from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.factory import AttendanceProofFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_JWT_EXPIRES_HOURS, DEFAULT_QR_TTL_SECONDS, FACE_MATCH_THRESHOLD
from .core.enums import QRDurationPolicy
from .database.connection import DBConfig, DatabaseConnection
from .faces.matcher import FaceMatcher
from .faces.service import FaceService
from .identity.tokens import TokenService
from .payroll.mysql_salary_repository import MySQLSalaryRepository
from .payroll.repository import SalaryRepository
from .payroll.service import PayrollService
from .profiles.mysql_staff_repository import MySQLStaffRepository
from .profiles.mysql_student_repository import MySQLStudentRepository
from .profiles.repository import StaffRepository, StudentRepository
from .profiles.service import ProfileService
from .qr_sessions.mysql_qr_session_repository import MySQLQRSessionRepository
from .qr_sessions.repository import QRSessionRepository
from .qr_sessions.service import QRSessionService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class ContainerOptions:
    jwt_secret: str
    jwt_expires_hours: float = DEFAULT_JWT_EXPIRES_HOURS
    qr_policy: QRDurationPolicy = QRDurationPolicy.END_OF_DAY
    qr_ttl_seconds: int = DEFAULT_QR_TTL_SECONDS
    qr_reuse_active: bool = True
    face_threshold: float = FACE_MATCH_THRESHOLD
    db_pool_size: int = 5

    @classmethod
    def from_settings(cls, settings: Any) -> "ContainerOptions":
        return cls(
            jwt_secret=str(getattr(settings, "JWT_SECRET", "") or getattr(settings, "SECRET_KEY")),
            jwt_expires_hours=float(getattr(settings, "JWT_EXPIRES_HOURS", DEFAULT_JWT_EXPIRES_HOURS)),
            qr_policy=QRDurationPolicy(getattr(settings, "QR_SESSION_POLICY", QRDurationPolicy.END_OF_DAY.value)),
            qr_ttl_seconds=int(getattr(settings, "QR_SESSION_TTL_SECONDS", DEFAULT_QR_TTL_SECONDS)),
            qr_reuse_active=bool(getattr(settings, "QR_REUSE_ACTIVE_SESSION", True)),
            face_threshold=float(getattr(settings, "FACE_MATCH_THRESHOLD", FACE_MATCH_THRESHOLD)),
            db_pool_size=int(getattr(settings, "DB_POOL_SIZE", 5)),
        )


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    students_repo: StudentRepository
    staff_repo: StaffRepository
    attendance_repo: AttendanceRepository
    qr_sessions_repo: QRSessionRepository
    salaries_repo: SalaryRepository

    token_service: TokenService
    auth_service: AuthService
    profile_service: ProfileService
    face_service: FaceService
    qr_session_service: QRSessionService
    attendance_service: AttendanceService
    payroll_service: PayrollService


def assemble_container(
    *,
    options: ContainerOptions,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    staff_repo: StaffRepository,
    attendance_repo: AttendanceRepository,
    qr_sessions_repo: QRSessionRepository,
    salaries_repo: SalaryRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over the given repositories (MySQL in production, fakes in tests)."""

    token_service = TokenService(options.jwt_secret, expires_hours=options.jwt_expires_hours)
    profile_service = ProfileService(students_repo, staff_repo)
    auth_service = AuthService(users_repo, token_service, profile_service)
    face_service = FaceService(users_repo, FaceMatcher(threshold=options.face_threshold))
    qr_session_service = QRSessionService(
        qr_sessions_repo,
        default_policy=options.qr_policy,
        ttl_seconds=options.qr_ttl_seconds,
        reuse_active=options.qr_reuse_active,
    )
    attendance_service = AttendanceService(
        attendance_repo,
        proof_factory=AttendanceProofFactory(qr_session_service, face_service),
        profiles=profile_service,
    )
    payroll_service = PayrollService(salaries_repo, staff_repo, attendance_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        students_repo=students_repo,
        staff_repo=staff_repo,
        attendance_repo=attendance_repo,
        qr_sessions_repo=qr_sessions_repo,
        salaries_repo=salaries_repo,
        token_service=token_service,
        auth_service=auth_service,
        profile_service=profile_service,
        face_service=face_service,
        qr_session_service=qr_session_service,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
    )


def build_container(*, db_config: dict, options: ContainerOptions) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config, pool_size=options.db_pool_size))

    return assemble_container(
        options=options,
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        staff_repo=MySQLStaffRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        qr_sessions_repo=MySQLQRSessionRepository(conn),
        salaries_repo=MySQLSalaryRepository(conn),
    )
