from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from ..identity.model import Identity
from ..identity.tokens import TokenService
from ..profiles.service import ProfileService
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate (login) and self-service signup."""

    def __init__(self, users: UserRepository, tokens: TokenService, profiles: ProfileService):
        self._users = users
        self._tokens = tokens
        self._profiles = profiles

    @staticmethod
    def identity_for(user: User) -> Identity:
        return Identity(user_id=user.user_id, role=user.role, name=user.name, email=user.email)

    def authenticate(self, email: str, password: str) -> Identity:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        return self.identity_for(user)

    def login(self, email: str, password: str) -> tuple[str, Identity]:
        identity = self.authenticate(email, password)
        logger.info("User %s logged in as %s", identity.user_id, identity.role.value)
        return self._tokens.issue(identity), identity

    def signup(self, *, name: str, email: str, password: str, role: Optional[str] = None) -> User:
        name = require_non_empty(name, "Name")
        email = require_non_empty(email, "Email").lower()
        require_min_length(password, "Password", 6)

        try:
            role_enum = Role(role) if role else Role.STUDENT
        except ValueError:
            raise ValidationError("Invalid role")
        if role_enum == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be created by signup")

        if self._users.get_by_email(email):
            raise ValidationError("User already exists")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role_enum,
        )
        user = self._users.get_by_id(user_id)
        if user is None:
            raise RuntimeError(f"User {user_id} missing after insert")

        self._profiles.ensure_for_user(user)
        logger.info("Registered user %s (%s)", user.user_id, user.role.value)
        return user
