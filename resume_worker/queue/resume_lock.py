from abc import ABC, abstractmethod
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg_pool import PoolTimeout

from resume_worker.database.connection import Database
from resume_worker.queue.exceptions import QueueUnavailableError


class BaseResumeLock(ABC):
    """Per-resume lease: at most one holder per resume at any instant."""

    @abstractmethod
    def acquire(self, resume_id: str, holder: str) -> bool:
        """Take the lease for ``holder``. Returns False if someone else holds it."""

    @abstractmethod
    def release(self, resume_id: str, holder: str) -> None:
        """Give the lease back. A no-op if ``holder`` no longer owns it."""


class PostgresResumeLock(BaseResumeLock):
    """Resume lease rows in the resume_locks table.

    Leases expire after ``ttl_seconds`` so a crashed holder cannot block a resume
    forever. The TTL must outlast one attempt.
    """

    def __init__(self, database: Database, ttl_seconds: int) -> None:
        self._database = database
        self._ttl_seconds = ttl_seconds

    def acquire(self, resume_id: str, holder: str) -> bool:
        with self._connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO resume_locks (resume_id, holder, expires_at)
                    VALUES (%s, %s, NOW() + %s * INTERVAL '1 second')
                    ON CONFLICT (resume_id) DO UPDATE
                    SET holder = EXCLUDED.holder,
                        acquired_at = NOW(),
                        expires_at = EXCLUDED.expires_at
                    WHERE resume_locks.expires_at <= NOW()
                    RETURNING resume_id
                    """,
                    (resume_id, holder, self._ttl_seconds),
                )
                row = cur.fetchone()
            conn.commit()
        return row is not None

    def release(self, resume_id: str, holder: str) -> None:
        with self._connection() as conn:
            conn.execute(
                "DELETE FROM resume_locks WHERE resume_id = %s AND holder = %s",
                (resume_id, holder),
            )
            conn.commit()

    @contextmanager
    def _connection(self) -> Generator[psycopg.Connection[Any], None, None]:
        try:
            with self._database.connection() as conn:
                yield conn
        except (psycopg.OperationalError, PoolTimeout) as exc:
            raise QueueUnavailableError(f"Lock table unavailable: {exc}") from exc
