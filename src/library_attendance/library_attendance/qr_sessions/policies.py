from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import end_of_day
from ..core.enums import QRDurationPolicy
from ..core.exceptions import ValidationError


class DurationPolicy(ABC):
    """Strategy Pattern: decide when a freshly issued QR session expires."""

    reusable: bool = False

    @abstractmethod
    def expires_at(self, now: datetime) -> datetime:
        raise NotImplementedError


@dataclass(frozen=True)
class FixedDuration(DurationPolicy):
    """Valid for a fixed number of seconds from issuance."""

    seconds: int

    def __post_init__(self):
        if self.seconds <= 0:
            raise ValidationError("expiresInSeconds must be a positive integer")

    def expires_at(self, now: datetime) -> datetime:
        return now + timedelta(seconds=self.seconds)


@dataclass(frozen=True)
class EndOfDay(DurationPolicy):
    """Valid until the last microsecond of the issuing calendar day."""

    reusable = True

    def expires_at(self, now: datetime) -> datetime:
        return end_of_day(now)


def policy_for(
    *,
    default: QRDurationPolicy,
    ttl_seconds: int,
    expires_in_seconds: Optional[int] = None,
) -> DurationPolicy:
    """An explicit per-request duration always wins over the deployment default."""

    if expires_in_seconds is not None:
        return FixedDuration(int(expires_in_seconds))
    if default == QRDurationPolicy.FIXED:
        return FixedDuration(int(ttl_seconds))
    return EndOfDay()
