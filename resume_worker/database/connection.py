from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from resume_worker.config.settings import Settings
from resume_worker.logging.logger import Log

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def build_conninfo(settings: Settings) -> str:
    """Build the record store conninfo string from DB_* settings."""
    return (
        f"host={settings.db_host} "
        f"port={settings.db_port} "
        f"dbname={settings.db_database} "
        f"user={settings.db_username} "
        f"password={settings.db_password}"
    )


class Database:
    """Owns one psycopg connection pool with an explicit open/close lifecycle."""

    def __init__(
        self,
        conninfo: str,
        *,
        name: str = "database",
        min_size: int = 1,
        max_size: int = 10,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._conninfo = conninfo
        self._name = name
        self._min_size = min_size
        self._max_size = max_size
        self._timeout_seconds = timeout_seconds
        self._pool: ConnectionPool | None = None

    @property
    def name(self) -> str:
        return self._name

    def open(self) -> None:
        """Create the pool. Connections are established in the background."""
        if self._pool is not None:
            return
        self._pool = ConnectionPool(
            self._conninfo,
            min_size=self._min_size,
            max_size=self._max_size,
            timeout=self._timeout_seconds,
            name=self._name,
            open=True,
        )
        Log.info(f"Opened {self._name} connection pool (max_size={self._max_size})")

    def close(self) -> None:
        """Close the pool. Safe to call more than once."""
        if self._pool is not None:
            self._pool.close()
            self._pool = None
            Log.info(f"Closed {self._name} connection pool")

    @contextmanager
    def connection(self) -> Generator[psycopg.Connection[Any], None, None]:
        """Yield a connection from the pool. Caller manages commit/rollback."""
        if self._pool is None:
            raise RuntimeError(f"{self._name} pool not initialized. Call open() first.")
        with self._pool.connection() as conn:
            yield conn

    def apply_schema(self) -> None:
        """Create the worker's tables if they do not exist yet."""
        ddl = SCHEMA_PATH.read_text(encoding="utf-8")
        with self.connection() as conn:
            conn.execute(ddl)
            conn.commit()
