from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..faces.service import FaceService
from ..qr_sessions.service import QRSessionService
from .proofs.base import AttendanceProof
from .proofs.qr_proof import QRTokenProof
from .proofs.self_proof import SelfCheckInProof


@dataclass
class AttendanceProofFactory:
    """Factory Pattern: choose the proof strategy from the submitted evidence."""

    qr_sessions: QRSessionService
    faces: Optional[FaceService] = None

    def for_qr(self, *, qr_token: str, location: Any = None) -> AttendanceProof:
        return QRTokenProof(self.qr_sessions, qr_token=qr_token, location=location)

    def for_self(
        self,
        *,
        location: Any = None,
        face_match: bool = False,
        face_descriptor: Optional[Any] = None,
    ) -> AttendanceProof:
        return SelfCheckInProof(
            location=location,
            face_match=face_match,
            face_descriptor=face_descriptor,
            faces=self.faces,
        )
