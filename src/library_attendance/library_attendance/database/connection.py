from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from mysql.connector import pooling

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5

    @classmethod
    def from_dict(cls, db_config: dict, *, pool_size: int = 5) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "library_attendance")),
            pool_size=int(db_config.get("pool_size", pool_size)),
        )


class DatabaseConnection:
    """Connection factory owned by the app container.

    The pool is created on first use and reused by every repository. `close()`
    closes its idle connections and drops it; a fresh pool is built if the
    object is used again.
    """

    def __init__(self, config: DBConfig, *, pool_name: str = "library_attendance"):
        self._config = config
        self._pool_name = pool_name
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        if self._pool is None:
            self._pool = pooling.MySQLConnectionPool(
                pool_name=self._pool_name,
                pool_size=self._config.pool_size,
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
            )
            logger.info(
                "MySQL pool ready: %s@%s:%s/%s (size=%s)",
                self._config.user,
                self._config.host,
                self._config.port,
                self._config.database,
                self._config.pool_size,
            )
        return self._pool

    def connect(self):
        """Borrow a pooled connection; closing it returns it to the pool."""
        return self._get_pool().get_connection()

    def close(self) -> None:
        if self._pool is not None:
            closed = self._pool._remove_connections()
            logger.info("Released MySQL pool %s (%s idle connections closed)", self._pool_name, closed)
            self._pool = None
