from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional, Sequence

import pytest
from werkzeug.security import generate_password_hash

from src.library_attendance.library_attendance.attendance.model import AttendanceRecord, Location
from src.library_attendance.library_attendance.container import ContainerOptions, assemble_container
from src.library_attendance.library_attendance.core.enums import (
    AttendanceMethod,
    AttendanceStatus,
    Role,
    SalaryStatus,
    SalaryType,
)
from src.library_attendance.library_attendance.identity.model import Identity
from src.library_attendance.library_attendance.payroll.model import SalaryRecord
from src.library_attendance.library_attendance.profiles.model import StaffProfile, StudentProfile
from src.library_attendance.library_attendance.qr_sessions.model import QRSession
from src.library_attendance.library_attendance.users.model import User


class InMemoryUsers:
    def __init__(self):
        self.users_by_id: dict[int, User] = {}
        self._id = 0

    def add(self, *, name: str, email: str, role: Role, password: str = "secret123") -> User:
        user_id = self.create_user(
            name=name, email=email, password_hash=generate_password_hash(password), role=role
        )
        return self.users_by_id[user_id]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users_by_id.values() if u.email == email), None)

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        self._id += 1
        self.users_by_id[self._id] = User(
            user_id=self._id, name=name, email=email, password_hash=password_hash, role=role
        )
        return self._id

    def save_face_enrollment(self, *, user_id: int, descriptor: Sequence[float], registered_at: datetime) -> bool:
        user = self.users_by_id.get(user_id)
        if not user:
            return False
        self.users_by_id[user_id] = replace(
            user,
            face_descriptor=tuple(descriptor),
            face_registered=True,
            face_registration_date=registered_at,
        )
        return True


class InMemoryStudents:
    def __init__(self):
        self.by_id: dict[int, StudentProfile] = {}
        self._id = 0

    def get_by_id(self, student_id: int) -> Optional[StudentProfile]:
        return self.by_id.get(student_id)

    def get_by_user_id(self, user_id: int) -> Optional[StudentProfile]:
        return next((s for s in self.by_id.values() if s.user_id == user_id), None)

    def create_for_user(self, *, user_id, student_code, full_name, email, phone, membership_start, membership_end):
        existing = self.get_by_user_id(user_id)
        if existing:
            return existing
        self._id += 1
        profile = StudentProfile(
            student_id=self._id,
            user_id=user_id,
            student_code=student_code,
            full_name=full_name,
            email=email,
            phone=phone,
            membership_start=membership_start,
            membership_end=membership_end,
        )
        self.by_id[self._id] = profile
        return profile


class InMemoryStaff:
    def __init__(self):
        self.by_id: dict[int, StaffProfile] = {}
        self._id = 0

    def get_by_user_id(self, user_id: int) -> Optional[StaffProfile]:
        return next((s for s in self.by_id.values() if s.user_id == user_id), None)

    def list_active(self) -> Sequence[StaffProfile]:
        return [s for s in self.by_id.values() if s.active]

    def list_by_ids(self, staff_ids: Sequence[int]) -> Sequence[StaffProfile]:
        return [self.by_id[i] for i in staff_ids if i in self.by_id]

    def create_for_user(self, *, user_id, designation, salary_type, base_salary, active=True):
        existing = self.get_by_user_id(user_id)
        if existing:
            return existing
        self._id += 1
        profile = StaffProfile(
            staff_id=self._id,
            user_id=user_id,
            designation=designation,
            salary_type=salary_type,
            base_salary=Decimal(base_salary),
            active=active,
        )
        self.by_id[self._id] = profile
        return profile


class InMemoryQRSessions:
    def __init__(self):
        self.by_token: dict[str, QRSession] = {}
        self._id = 0

    def create(self, *, qr_token, expires_at, created_by, location_required, created_at) -> Optional[QRSession]:
        if qr_token in self.by_token:
            return None
        self._id += 1
        session = QRSession(
            qr_session_id=self._id,
            qr_token=qr_token,
            expires_at=expires_at,
            created_by=created_by,
            location_required=location_required,
            created_at=created_at,
        )
        self.by_token[qr_token] = session
        return session

    def get_by_token(self, qr_token: str) -> Optional[QRSession]:
        return self.by_token.get(qr_token)

    def get_latest_for_issuer(self, *, created_by, created_since, valid_after) -> Optional[QRSession]:
        items = [
            s
            for s in self.by_token.values()
            if s.created_by == created_by and s.created_at >= created_since and s.expires_at > valid_after
        ]
        items.sort(key=lambda s: (s.created_at, s.qr_session_id), reverse=True)
        return items[0] if items else None


class InMemoryAttendance:
    """Emulates the (user, role, day) and (student, day) unique keys under a lock."""

    def __init__(self):
        self.by_id: dict[int, AttendanceRecord] = {}
        self._id = 0
        self._lock = threading.RLock()

    def _find(self, *, user_id, role, student_id, work_date) -> Optional[AttendanceRecord]:
        for r in self.by_id.values():
            if r.work_date != work_date:
                continue
            if user_id is not None and r.user_id == user_id and r.role == role:
                return r
            if student_id is not None and r.student_id == student_id:
                return r
        return None

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.by_id.get(attendance_id)

    def get_for_day(self, *, user_id: int, role: Role, work_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._find(user_id=user_id, role=role, student_id=None, work_date=work_date)

    def create_if_absent(
        self,
        *,
        user_id: int,
        role: Role,
        work_date: date,
        check_in_time: datetime,
        method: AttendanceMethod,
        location: Optional[Location] = None,
        student_id: Optional[int] = None,
    ):
        with self._lock:
            existing = self._find(user_id=user_id, role=role, student_id=student_id, work_date=work_date)
            if existing and existing.status == AttendanceStatus.PRESENT:
                return existing, False
            if existing:
                record = replace(
                    existing,
                    status=AttendanceStatus.PRESENT,
                    check_in_time=check_in_time,
                    method=method,
                    location=location,
                    user_id=existing.user_id or user_id,
                    student_id=existing.student_id or student_id,
                )
                self.by_id[record.attendance_id] = record
                return record, True
            self._id += 1
            record = AttendanceRecord(
                attendance_id=self._id,
                user_id=user_id,
                role=role,
                work_date=work_date,
                status=AttendanceStatus.PRESENT,
                check_in_time=check_in_time,
                method=method,
                location=location,
                student_id=student_id,
            )
            self.by_id[self._id] = record
            return record, True

    def upsert_status(self, *, user_id, role, student_id, work_date, status) -> AttendanceRecord:
        with self._lock:
            existing = self._find(user_id=user_id, role=role, student_id=student_id, work_date=work_date)
            if existing:
                record = replace(existing, status=status, student_id=existing.student_id or student_id)
            else:
                self._id += 1
                record = AttendanceRecord(
                    attendance_id=self._id,
                    user_id=user_id,
                    role=role,
                    work_date=work_date,
                    status=status,
                    student_id=student_id,
                )
            self.by_id[record.attendance_id] = record
            return record

    def get_recent_for_user(self, *, user_id: int, role: Role, limit: int) -> Sequence[AttendanceRecord]:
        items = [r for r in self.by_id.values() if r.user_id == user_id and r.role == role]
        items.sort(key=lambda r: (r.work_date, r.attendance_id), reverse=True)
        return items[:limit]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        return [r for r in self.by_id.values() if r.work_date == work_date]

    def count_present(self, *, user_id: int, role: Role, start_date: date, end_date: date) -> int:
        return sum(
            1
            for r in self.by_id.values()
            if r.user_id == user_id
            and r.role == role
            and r.status == AttendanceStatus.PRESENT
            and start_date <= r.work_date < end_date
        )


class InMemorySalaries:
    def __init__(self):
        self.by_id: dict[int, SalaryRecord] = {}
        self._id = 0

    def get_by_id(self, salary_id: int) -> Optional[SalaryRecord]:
        return self.by_id.get(salary_id)

    def upsert(self, *, staff_id, month, present_days, amount) -> SalaryRecord:
        existing = next((s for s in self.by_id.values() if s.staff_id == staff_id and s.month == month), None)
        if existing:
            record = replace(existing, present_days=present_days, amount=amount)
        else:
            self._id += 1
            record = SalaryRecord(
                salary_id=self._id,
                staff_id=staff_id,
                month=month,
                present_days=present_days,
                amount=amount,
                status=SalaryStatus.PENDING,
            )
        self.by_id[record.salary_id] = record
        return record

    def mark_paid(self, salary_id: int) -> bool:
        record = self.by_id.get(salary_id)
        if not record:
            return False
        self.by_id[salary_id] = replace(record, status=SalaryStatus.PAID)
        return True

    def list_for_staff(self, staff_id: int) -> Sequence[SalaryRecord]:
        items = [s for s in self.by_id.values() if s.staff_id == staff_id]
        return sorted(items, key=lambda s: s.month, reverse=True)

    def list_for_month(self, month: str) -> Sequence[SalaryRecord]:
        return [s for s in self.by_id.values() if s.month == month]


class StubCursor:
    def __init__(self, db: "StubDatabase"):
        self._db = db
        self._rows: list = []
        self.rowcount = 0
        self.lastrowid = None

    def execute(self, sql, params=()):
        sql = " ".join(sql.split())
        self._db.executed.append((sql, tuple(params)))
        result = self._db.handler(sql, tuple(params)) or {}
        self._rows = list(result.get("rows", []))
        self.rowcount = result.get("rowcount", len(self._rows))
        self.lastrowid = result.get("lastrowid")

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)

    def close(self):
        pass


class StubConnection:
    def __init__(self, db: "StubDatabase"):
        self._db = db

    def cursor(self, dictionary=False):
        return StubCursor(self._db)

    def commit(self):
        self._db.commits += 1

    def rollback(self):
        self._db.rollbacks += 1

    def close(self):
        pass


class StubDatabase:
    """Stands in for DatabaseConnection; `handler(sql, params)` returns
    `{"rows", "rowcount", "lastrowid"}` or raises a driver error."""

    def __init__(self, handler):
        self.handler = handler
        self.executed: list[tuple[str, tuple]] = []
        self.commits = 0
        self.rollbacks = 0

    def connect(self):
        return StubConnection(self)

    def statements(self, prefix: str) -> list[str]:
        return [sql for sql, _ in self.executed if sql.startswith(prefix)]


def identity_of(user: User) -> Identity:
    return Identity(user_id=user.user_id, role=user.role, name=user.name, email=user.email)


@pytest.fixture
def repos():
    return SimpleNamespace(
        users_repo=InMemoryUsers(),
        students_repo=InMemoryStudents(),
        staff_repo=InMemoryStaff(),
        attendance_repo=InMemoryAttendance(),
        qr_sessions_repo=InMemoryQRSessions(),
        salaries_repo=InMemorySalaries(),
    )


@pytest.fixture
def container(repos):
    return assemble_container(options=ContainerOptions(jwt_secret="test-jwt-secret"), **vars(repos))


@pytest.fixture
def people(repos, container):
    """One admin, one student with a profile and one daily-paid staff member."""

    admin = repos.users_repo.add(name="Admin", email="admin@library.local", role=Role.ADMIN)
    student = repos.users_repo.add(name="Stu", email="student@library.local", role=Role.STUDENT)
    staff = repos.users_repo.add(name="Sam", email="staff@library.local", role=Role.STAFF)
    student_profile = container.profile_service.ensure_student_profile(student, now=datetime(2025, 1, 1, 9, 0))
    staff_profile = repos.staff_repo.create_for_user(
        user_id=staff.user_id, designation="Assistant", salary_type=SalaryType.DAILY, base_salary=Decimal("600")
    )
    return SimpleNamespace(
        admin=identity_of(admin),
        student=identity_of(student),
        staff=identity_of(staff),
        student_profile=student_profile,
        staff_profile=staff_profile,
    )


@pytest.fixture
def client(monkeypatch, container):
    from src.library_attendance.library_attendance.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


@pytest.fixture
def auth_headers(container):
    def _headers(identity: Identity) -> dict:
        return {"Authorization": f"Bearer {container.token_service.issue(identity)}"}

    return _headers


@pytest.fixture
def stub_db():
    return StubDatabase
