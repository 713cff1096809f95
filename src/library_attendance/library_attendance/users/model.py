from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: account with its embedded face enrollment.

    Note: plain data object (no DB access code here).
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    face_descriptor: Optional[tuple[float, ...]] = None
    face_registered: bool = False
    face_registration_date: Optional[datetime] = None
