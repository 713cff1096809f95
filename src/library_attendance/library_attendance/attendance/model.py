from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..common.validators import has_coordinates
from ..core.enums import AttendanceMethod, AttendanceStatus, Role


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float
    address: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["Location"]:
        """Build from `{lat, lng, address?}`; None when coordinates are missing or not numeric."""

        if not has_coordinates(payload):
            return None
        address = payload.get("address")
        return cls(
            lat=float(payload["lat"]),
            lng=float(payload["lng"]),
            address=str(address) if address is not None else None,
        )


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one person's presence status for one calendar day."""

    attendance_id: int
    user_id: Optional[int]
    role: Role
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    method: Optional[AttendanceMethod] = None
    location: Optional[Location] = None
    student_id: Optional[int] = None


@dataclass(frozen=True)
class AttendanceOutcome:
    """Result of a submission.

    - created: first mark of the day, `record` is the new row
    - not created with a record: already marked, `record` is the existing row
    - requires_face_verification: staff must resubmit with a face match, nothing written
    """

    record: Optional[AttendanceRecord] = None
    created: bool = False
    requires_face_verification: bool = False

    @property
    def already_marked(self) -> bool:
        return self.record is not None and not self.created
