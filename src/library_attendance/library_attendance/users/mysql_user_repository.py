from __future__ import annotations

import json
from datetime import datetime
from typing import Optional, Sequence

from mysql.connector import errors

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, name, email, password_hash, role,
    face_descriptor, face_registered, face_registration_date
"""


def _decode_descriptor(raw) -> Optional[tuple[float, ...]]:
    if raw is None:
        return None
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    values = json.loads(raw) if isinstance(raw, str) else raw
    return tuple(float(v) for v in values)


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        face_descriptor=_decode_descriptor(row.get("face_descriptor")),
        face_registered=bool(row.get("face_registered")),
        face_registration_date=row.get("face_registration_date"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(name, email, password_hash, role)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (name, email, password_hash, role.value),
                )
                return int(cur.lastrowid)
        except errors.IntegrityError as e:
            # a concurrent signup won the unique email
            if is_duplicate_key(e):
                raise ValidationError("User already exists")
            raise

    def save_face_enrollment(self, *, user_id: int, descriptor: Sequence[float], registered_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET face_descriptor=%s, face_registered=1, face_registration_date=%s
                WHERE user_id=%s
                """,
                (json.dumps([float(v) for v in descriptor]), registered_at, int(user_id)),
            )
            return cur.rowcount > 0
