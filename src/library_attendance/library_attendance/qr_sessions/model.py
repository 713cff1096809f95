from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class QRSession:
    """Domain entity: short-lived attendance token issued by an admin.

    Immutable once created; it simply stops matching after `expires_at`.
    """

    qr_session_id: int
    qr_token: str
    expires_at: datetime
    created_by: int
    location_required: bool
    created_at: datetime

    def is_valid_at(self, now: datetime) -> bool:
        return now < self.expires_at


@dataclass(frozen=True)
class IssuedSession:
    session: QRSession
    created: bool
