from __future__ import annotations

import logging
import secrets
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local, start_of_day
from ..core.constants import DEFAULT_QR_TTL_SECONDS, QR_TOKEN_BYTES, QR_TOKEN_MAX_ATTEMPTS
from ..core.enums import QRDurationPolicy, Role
from ..core.exceptions import AuthorizationError, InvalidOrExpiredTokenError, ValidationError
from ..identity.model import Identity
from .model import IssuedSession, QRSession
from .policies import policy_for
from .repository import QRSessionRepository

logger = logging.getLogger(__name__)


def new_token() -> str:
    """128 bits from the OS CSPRNG, hex encoded."""
    return secrets.token_hex(QR_TOKEN_BYTES)


class QRSessionService:
    """Issue and validate the QR tokens admins display for attendance scanning."""

    def __init__(
        self,
        sessions: QRSessionRepository,
        *,
        default_policy: QRDurationPolicy = QRDurationPolicy.END_OF_DAY,
        ttl_seconds: int = DEFAULT_QR_TTL_SECONDS,
        reuse_active: bool = True,
        token_factory=new_token,
    ):
        self._sessions = sessions
        self._default_policy = default_policy
        self._ttl_seconds = int(ttl_seconds)
        self._reuse_active = bool(reuse_active)
        self._token_factory = token_factory

    def create_session(
        self,
        issuer: Identity,
        *,
        location_required: bool = False,
        expires_in_seconds: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> IssuedSession:
        if issuer.role != Role.ADMIN:
            raise AuthorizationError("Only administrators can issue QR sessions")

        now = now or now_local()
        policy = policy_for(
            default=self._default_policy,
            ttl_seconds=self._ttl_seconds,
            expires_in_seconds=expires_in_seconds,
        )

        if self._reuse_active and policy.reusable:
            existing = self.get_active_session_for_issuer(issuer.user_id, now=now)
            if existing:
                logger.info("Reusing QR session %s for issuer %s", existing.qr_session_id, issuer.user_id)
                return IssuedSession(session=existing, created=False)

        expires_at = policy.expires_at(now)
        for _ in range(QR_TOKEN_MAX_ATTEMPTS):
            session = self._sessions.create(
                qr_token=self._token_factory(),
                expires_at=expires_at,
                created_by=issuer.user_id,
                location_required=bool(location_required),
                created_at=now,
            )
            if session:
                logger.info(
                    "Issued QR session %s for issuer %s (expires %s, location_required=%s)",
                    session.qr_session_id,
                    issuer.user_id,
                    session.expires_at.isoformat(),
                    session.location_required,
                )
                return IssuedSession(session=session, created=True)
            logger.warning("QR token collision for issuer %s, regenerating", issuer.user_id)

        raise RuntimeError("Could not allocate a unique QR token")

    def validate_token(self, qr_token: str, *, now: Optional[datetime] = None) -> QRSession:
        """Return the session while `now < expires_at`; unknown and expired look the same."""

        if not qr_token or not isinstance(qr_token, str):
            raise ValidationError("QR token is required")

        now = now or now_local()
        session = self._sessions.get_by_token(qr_token)
        if not session or not session.is_valid_at(now):
            raise InvalidOrExpiredTokenError()
        return session

    def get_active_session_for_issuer(self, issuer_id: int, *, now: Optional[datetime] = None) -> Optional[QRSession]:
        now = now or now_local()
        return self._sessions.get_latest_for_issuer(
            created_by=int(issuer_id),
            created_since=start_of_day(now),
            valid_after=now,
        )
