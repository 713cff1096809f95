from __future__ import annotations

from datetime import datetime
from typing import Optional

from mysql.connector import errors

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import QRSession
from .repository import QRSessionRepository

_COLUMNS = "qr_session_id, qr_token, expires_at, created_by, location_required, created_at"


def _to_session(r: dict) -> QRSession:
    return QRSession(
        qr_session_id=int(r["qr_session_id"]),
        qr_token=r["qr_token"],
        expires_at=r["expires_at"],
        created_by=int(r["created_by"]),
        location_required=bool(r["location_required"]),
        created_at=r["created_at"],
    )


class MySQLQRSessionRepository(QRSessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        qr_token: str,
        expires_at: datetime,
        created_by: int,
        location_required: bool,
        created_at: datetime,
    ) -> Optional[QRSession]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO qr_sessions(qr_token, expires_at, created_by, location_required, created_at)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (qr_token, expires_at, int(created_by), int(bool(location_required)), created_at),
                )
                session_id = int(cur.lastrowid)
        except errors.IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise

        return QRSession(
            qr_session_id=session_id,
            qr_token=qr_token,
            expires_at=expires_at,
            created_by=int(created_by),
            location_required=bool(location_required),
            created_at=created_at,
        )

    def get_by_token(self, qr_token: str) -> Optional[QRSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM qr_sessions WHERE qr_token=%s", (qr_token,))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def get_latest_for_issuer(
        self,
        *,
        created_by: int,
        created_since: datetime,
        valid_after: datetime,
    ) -> Optional[QRSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM qr_sessions
                WHERE created_by=%s AND created_at >= %s AND expires_at > %s
                ORDER BY created_at DESC, qr_session_id DESC
                LIMIT 1
                """,
                (int(created_by), created_since, valid_after),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None
