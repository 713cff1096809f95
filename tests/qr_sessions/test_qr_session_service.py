import re
from datetime import datetime, timedelta

import pytest

from src.library_attendance.library_attendance.core.enums import QRDurationPolicy, Role
from src.library_attendance.library_attendance.core.exceptions import (
    AuthorizationError,
    InvalidOrExpiredTokenError,
    ValidationError,
)
from src.library_attendance.library_attendance.identity.model import Identity
from src.library_attendance.library_attendance.qr_sessions.policies import EndOfDay, FixedDuration
from src.library_attendance.library_attendance.qr_sessions.service import QRSessionService, new_token

ADMIN = Identity(user_id=1, role=Role.ADMIN)
NOW = datetime(2025, 1, 1, 9, 0, 0)


def test_new_token_is_32_hex_chars():
    token = new_token()
    assert re.fullmatch(r"[0-9a-f]{32}", token)
    assert token != new_token()


def test_token_valid_strictly_before_expiry(repos):
    service = QRSessionService(repos.qr_sessions_repo)
    session = service.create_session(ADMIN, expires_in_seconds=120, now=NOW).session

    assert session.expires_at == NOW + timedelta(seconds=120)
    assert service.validate_token(session.qr_token, now=NOW + timedelta(seconds=119)) == session
    with pytest.raises(InvalidOrExpiredTokenError):
        service.validate_token(session.qr_token, now=session.expires_at)


def test_unknown_and_expired_tokens_look_the_same(repos):
    service = QRSessionService(repos.qr_sessions_repo)
    session = service.create_session(ADMIN, expires_in_seconds=1, now=NOW).session

    with pytest.raises(InvalidOrExpiredTokenError) as unknown:
        service.validate_token("f" * 32, now=NOW)
    with pytest.raises(InvalidOrExpiredTokenError) as expired:
        service.validate_token(session.qr_token, now=NOW + timedelta(seconds=5))
    assert str(unknown.value) == str(expired.value)


def test_empty_token_is_a_validation_error(repos):
    with pytest.raises(ValidationError):
        QRSessionService(repos.qr_sessions_repo).validate_token("", now=NOW)


def test_only_admin_can_issue(repos):
    service = QRSessionService(repos.qr_sessions_repo)
    with pytest.raises(AuthorizationError):
        service.create_session(Identity(user_id=2, role=Role.STAFF), now=NOW)


def test_end_of_day_session_is_reused_same_day(repos):
    service = QRSessionService(repos.qr_sessions_repo)

    first = service.create_session(ADMIN, location_required=True, now=NOW)
    second = service.create_session(ADMIN, now=NOW + timedelta(hours=3))

    assert first.created is True
    assert first.session.expires_at == datetime(2025, 1, 1, 23, 59, 59, 999999)
    assert second.created is False
    assert second.session == first.session


def test_fixed_duration_always_creates(repos):
    service = QRSessionService(repos.qr_sessions_repo, default_policy=QRDurationPolicy.FIXED, ttl_seconds=120)

    first = service.create_session(ADMIN, now=NOW)
    second = service.create_session(ADMIN, now=NOW + timedelta(seconds=10))

    assert first.created and second.created
    assert first.session.qr_token != second.session.qr_token
    assert second.session.expires_at == NOW + timedelta(seconds=130)


def test_reuse_can_be_disabled(repos):
    service = QRSessionService(repos.qr_sessions_repo, reuse_active=False)

    assert service.create_session(ADMIN, now=NOW).created
    assert service.create_session(ADMIN, now=NOW).created


def test_token_collision_regenerates(repos):
    tokens = iter(["a" * 32, "a" * 32, "b" * 32])
    service = QRSessionService(
        repos.qr_sessions_repo,
        default_policy=QRDurationPolicy.FIXED,
        token_factory=lambda: next(tokens),
    )

    assert service.create_session(ADMIN, now=NOW).session.qr_token == "a" * 32
    assert service.create_session(ADMIN, now=NOW).session.qr_token == "b" * 32


def test_active_session_ignores_yesterday(repos):
    service = QRSessionService(repos.qr_sessions_repo)
    late = datetime(2024, 12, 31, 23, 0)
    # issued yesterday but with a lifetime reaching into today
    service.create_session(ADMIN, expires_in_seconds=7200, now=late)

    assert service.get_active_session_for_issuer(ADMIN.user_id, now=datetime(2025, 1, 1, 0, 30)) is None


def test_active_session_returns_latest_unexpired(repos):
    service = QRSessionService(repos.qr_sessions_repo)
    service.create_session(ADMIN, expires_in_seconds=60, now=NOW)
    latest = service.create_session(ADMIN, expires_in_seconds=600, now=NOW + timedelta(minutes=1)).session

    assert service.get_active_session_for_issuer(ADMIN.user_id, now=NOW + timedelta(minutes=2)) == latest
    assert service.get_active_session_for_issuer(ADMIN.user_id, now=NOW + timedelta(minutes=30)) is None


def test_fixed_duration_rejects_non_positive():
    with pytest.raises(ValidationError):
        FixedDuration(0)


def test_end_of_day_policy():
    assert EndOfDay().expires_at(NOW) == datetime(2025, 1, 1, 23, 59, 59, 999999)
    assert EndOfDay.reusable is True
