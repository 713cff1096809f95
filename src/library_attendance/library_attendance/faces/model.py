from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class FaceVerification:
    """Outcome of comparing a live descriptor with the enrolled one.

    `confidence` is `1 - distance / threshold` reported raw, so it goes
    negative once the distance exceeds the threshold.
    """

    verified: bool
    distance: float
    confidence: float
    threshold: float


@dataclass(frozen=True)
class FaceStatus:
    registered: bool
    registration_date: Optional[datetime]
