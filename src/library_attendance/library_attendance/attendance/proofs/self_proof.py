from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ...common.validators import require_coordinates
from ...core.enums import AttendanceMethod, Role
from ...core.exceptions import AuthorizationError, FaceMismatchError
from ...faces.service import FaceService
from ...identity.model import Identity
from ..model import Location
from .base import AttendanceProof, ProofDecision


class SelfCheckInProof(AttendanceProof):
    """Remote self check-in: location for everyone, plus a face match for staff.

    Students are recorded with method QR (historical naming for remote check-in).
    """

    def __init__(
        self,
        *,
        location: Any = None,
        face_match: bool = False,
        face_descriptor: Optional[Any] = None,
        faces: Optional[FaceService] = None,
    ):
        self._location = location
        self._face_match = bool(face_match)
        self._face_descriptor = face_descriptor
        self._faces = faces

    def _staff_face_matched(self, identity: Identity) -> bool:
        if self._face_descriptor is not None and self._faces is not None:
            if not self._faces.verify(identity.user_id, self._face_descriptor).verified:
                raise FaceMismatchError()
            return True
        return self._face_match

    def evaluate(self, *, identity: Identity, now: datetime) -> ProofDecision:
        location = Location.from_payload(require_coordinates(self._location))

        if identity.role == Role.STUDENT:
            return ProofDecision(method=AttendanceMethod.QR, location=location)

        if identity.role == Role.STAFF:
            if not self._staff_face_matched(identity):
                return ProofDecision(requires_face_verification=True)
            return ProofDecision(method=AttendanceMethod.FACE, location=location)

        raise AuthorizationError("Unsupported role")
