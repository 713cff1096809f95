from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import NotEnrolledError, NotFoundError
from ..users.model import User
from ..users.repository import UserRepository
from .matcher import FaceMatcher, validate_descriptor
from .model import FaceStatus, FaceVerification

logger = logging.getLogger(__name__)


class FaceService:
    """Use case: enroll and verify the face descriptor stored on a user."""

    def __init__(self, users: UserRepository, matcher: Optional[FaceMatcher] = None):
        self._users = users
        self._matcher = matcher or FaceMatcher()

    def _get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def enroll(self, user_id: int, descriptor: Any, *, now: Optional[datetime] = None) -> FaceStatus:
        values = validate_descriptor(descriptor)
        self._get_user(user_id)

        registered_at = now or now_local()
        if not self._users.save_face_enrollment(user_id=user_id, descriptor=values, registered_at=registered_at):
            raise NotFoundError("User not found")

        logger.info("Face enrolled for user %s", user_id)
        return FaceStatus(registered=True, registration_date=registered_at)

    def verify(self, user_id: int, descriptor: Any) -> FaceVerification:
        values = validate_descriptor(descriptor)
        user = self._get_user(user_id)
        if not user.face_registered or not user.face_descriptor:
            raise NotEnrolledError()

        result = self._matcher.compare(user.face_descriptor, values)
        logger.info(
            "Face verification for user %s: verified=%s distance=%.4f",
            user_id,
            result.verified,
            result.distance,
        )
        return result

    def status(self, user_id: int) -> FaceStatus:
        user = self._get_user(user_id)
        return FaceStatus(registered=user.face_registered, registration_date=user.face_registration_date)
