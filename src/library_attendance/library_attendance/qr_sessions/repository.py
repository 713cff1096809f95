from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import QRSession


class QRSessionRepository(Protocol):
    def create(
        self,
        *,
        qr_token: str,
        expires_at: datetime,
        created_by: int,
        location_required: bool,
        created_at: datetime,
    ) -> Optional[QRSession]:
        """Persist a session; returns None when the token value is already taken."""

        raise NotImplementedError

    def get_by_token(self, qr_token: str) -> Optional[QRSession]:
        raise NotImplementedError

    def get_latest_for_issuer(
        self,
        *,
        created_by: int,
        created_since: datetime,
        valid_after: datetime,
    ) -> Optional[QRSession]:
        """Newest session by issuer created at/after `created_since` with `expires_at > valid_after`."""

        raise NotImplementedError
