from __future__ import annotations

import logging
from functools import wraps

from flask import g, jsonify, request

from ..core.constants import SESSION_COOKIE_NAME
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import Identity
from .tokens import TokenService

logger = logging.getLogger(__name__)


def _credential_from_request() -> str:
    cookie = request.cookies.get(SESSION_COOKIE_NAME)
    if cookie:
        return cookie
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header.partition(" ")[2].strip()
    return ""


def current_identity() -> Identity:
    """Identity resolved by the guard for this request."""
    return g.identity


class AuthGuard:
    """Route decorators that resolve the caller from a bearer token."""

    def __init__(self, tokens: TokenService):
        self._tokens = tokens

    def login_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = _credential_from_request()
            if not token:
                return jsonify({"error": "Unauthorized"}), 401
            try:
                g.identity = self._tokens.resolve(token)
            except AuthenticationError as e:
                logger.info("Rejected credential on %s: %s", request.path, e)
                return jsonify({"error": str(e)}), 401
            return view(*args, **kwargs)

        return wrapper

    def roles_required(self, *roles: Role):
        allowed = set(roles)

        def decorator(view):
            @wraps(view)
            def inner(*args, **kwargs):
                if g.identity.role not in allowed:
                    return jsonify({"error": "Forbidden"}), 403
                return view(*args, **kwargs)

            return self.login_required(inner)

        return decorator
