from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles used for route guards."""

    ADMIN = "Admin"
    STAFF = "Staff"
    STUDENT = "Student"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"


class AttendanceMethod(str, Enum):
    """How presence was proven. `QR` also covers location-only student check-in."""

    QR = "QR"
    FACE = "FACE"


class SalaryType(str, Enum):
    MONTHLY = "Monthly"
    DAILY = "Daily"


class SalaryStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"


class QRDurationPolicy(str, Enum):
    """Deployment policy for how long an issued QR session stays valid."""

    FIXED = "fixed"
    END_OF_DAY = "end_of_day"
