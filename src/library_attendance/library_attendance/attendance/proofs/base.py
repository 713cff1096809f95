from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceMethod
from ...identity.model import Identity
from ..model import Location


@dataclass(frozen=True)
class ProofDecision:
    method: Optional[AttendanceMethod] = None
    location: Optional[Location] = None
    requires_face_verification: bool = False


class AttendanceProof(ABC):
    """Strategy Pattern: encapsulate how a submission proves presence.

    Implementations raise a DomainError when the proof is rejected.
    """

    @abstractmethod
    def evaluate(self, *, identity: Identity, now: datetime) -> ProofDecision:
        raise NotImplementedError
