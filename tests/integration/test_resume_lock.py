import time

import pytest

from resume_worker.database.connection import Database
from resume_worker.queue.resume_lock import PostgresResumeLock


@pytest.mark.integration
class TestPostgresResumeLock:
    def test_second_holder_is_refused(self, clean_database: Database) -> None:
        lock = PostgresResumeLock(clean_database, ttl_seconds=60)

        assert lock.acquire("r-1", "a") is True
        assert lock.acquire("r-1", "b") is False
        assert lock.acquire("r-2", "b") is True

    def test_release_frees_resume(self, clean_database: Database) -> None:
        lock = PostgresResumeLock(clean_database, ttl_seconds=60)
        lock.acquire("r-1", "a")

        lock.release("r-1", "a")

        assert lock.acquire("r-1", "b") is True

    def test_release_by_non_holder_is_ignored(self, clean_database: Database) -> None:
        lock = PostgresResumeLock(clean_database, ttl_seconds=60)
        lock.acquire("r-1", "a")

        lock.release("r-1", "b")

        assert lock.acquire("r-1", "c") is False

    def test_expired_lease_can_be_taken_over(self, clean_database: Database) -> None:
        lock = PostgresResumeLock(clean_database, ttl_seconds=1)
        lock.acquire("r-1", "crashed-worker")

        time.sleep(1.2)

        assert lock.acquire("r-1", "b") is True
        lock.release("r-1", "crashed-worker")
        assert lock.acquire("r-1", "c") is False
