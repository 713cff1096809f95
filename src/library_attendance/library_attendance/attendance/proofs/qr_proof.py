from __future__ import annotations

from datetime import datetime
from typing import Any

from ...common.validators import require_coordinates
from ...core.enums import AttendanceMethod
from ...identity.model import Identity
from ...qr_sessions.service import QRSessionService
from ..model import Location
from .base import AttendanceProof, ProofDecision


class QRTokenProof(AttendanceProof):
    """Scanned admin token; location only mandatory when the session says so."""

    def __init__(self, qr_sessions: QRSessionService, *, qr_token: str, location: Any = None):
        self._qr_sessions = qr_sessions
        self._qr_token = qr_token
        self._location = location

    def evaluate(self, *, identity: Identity, now: datetime) -> ProofDecision:
        session = self._qr_sessions.validate_token(self._qr_token, now=now)
        if session.location_required:
            require_coordinates(self._location, "Location is required for this QR session")

        return ProofDecision(method=AttendanceMethod.QR, location=Location.from_payload(self._location))
