from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.constants import DEFAULT_JWT_EXPIRES_HOURS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import Identity

_ALGORITHM = "HS256"


class TokenService:
    """Issue and resolve signed bearer tokens (HS256 JWT, payload `{"user": {...}}`)."""

    def __init__(self, secret: str, *, expires_hours: float = DEFAULT_JWT_EXPIRES_HOURS):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._ttl = timedelta(hours=expires_hours)

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, identity: Identity, *, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "user": identity.to_claims(),
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def resolve(self, token: str) -> Identity:
        if not token:
            raise AuthenticationError("Unauthorized")

        try:
            claims = jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Invalid or expired token")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid or expired token")

        user = claims.get("user") or {}
        try:
            return Identity(
                user_id=int(user["id"]),
                role=Role(user["role"]),
                name=str(user.get("name") or ""),
                email=str(user.get("email") or ""),
            )
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid or expired token")
