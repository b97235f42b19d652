import uuid
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import PoolTimeout

from resume_worker.database.connection import Database
from resume_worker.logging.logger import Log
from resume_worker.queue.base import BaseJobQueue, CustomizationJob, Delivery, JobHandle
from resume_worker.queue.exceptions import QueueUnavailableError


class PostgresJobQueue(BaseJobQueue):
    """Job queue on the customization_jobs table.

    Dequeue leases one row with SELECT FOR UPDATE SKIP LOCKED. Rows whose lease
    has expired are eligible again, which gives at-least-once delivery when a
    worker dies mid-attempt.
    """

    def __init__(self, database: Database, lease_seconds: int) -> None:
        self._database = database
        self._lease_seconds = lease_seconds

    def enqueue(self, resume_id: str) -> JobHandle:
        with self._connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    INSERT INTO customization_jobs (resume_id)
                    VALUES (%s)
                    RETURNING id
                    """,
                    (resume_id,),
                )
                row = cur.fetchone()
            conn.commit()
        if row is None:
            raise QueueUnavailableError(f"Enqueue for resume {resume_id} returned no job id")
        Log.info(f"Enqueued customization job {row['id']} for resume {resume_id}")
        return JobHandle(job_id=row["id"], resume_id=resume_id)

    def dequeue(self) -> Delivery | None:
        lease_token = uuid.uuid4().hex
        with self._connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    UPDATE customization_jobs
                    SET status = 'leased',
                        deliveries = deliveries + 1,
                        lease_token = %s,
                        lease_expires_at = NOW() + %s * INTERVAL '1 second',
                        updated_at = NOW()
                    WHERE id = (
                        SELECT id
                        FROM customization_jobs
                        WHERE (status = 'queued' AND available_at <= NOW())
                           OR (status = 'leased' AND lease_expires_at <= NOW())
                        ORDER BY available_at, id
                        LIMIT 1
                        FOR UPDATE SKIP LOCKED
                    )
                    RETURNING id, resume_id, deliveries
                    """,
                    (lease_token, self._lease_seconds),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            return None
        return Delivery(
            job_id=row["id"],
            job=CustomizationJob(resume_id=row["resume_id"], attempt=row["deliveries"]),
            lease_token=lease_token,
        )

    def ack(self, delivery: Delivery) -> bool:
        with self._connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM customization_jobs WHERE id = %s AND lease_token = %s",
                    (delivery.job_id, delivery.lease_token),
                )
                rowcount = cur.rowcount
            conn.commit()
        return rowcount > 0

    def nack(self, delivery: Delivery, delay_seconds: float = 0.0) -> bool:
        with self._connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE customization_jobs
                    SET status = 'queued',
                        lease_token = NULL,
                        lease_expires_at = NULL,
                        available_at = NOW() + %s * INTERVAL '1 second',
                        updated_at = NOW()
                    WHERE id = %s AND lease_token = %s
                    """,
                    (delay_seconds, delivery.job_id, delivery.lease_token),
                )
                rowcount = cur.rowcount
            conn.commit()
        return rowcount > 0

    def close(self) -> None:
        self._database.close()

    @contextmanager
    def _connection(self) -> Generator[psycopg.Connection[Any], None, None]:
        try:
            with self._database.connection() as conn:
                yield conn
        except (psycopg.OperationalError, PoolTimeout) as exc:
            raise QueueUnavailableError(f"Queue broker unavailable: {exc}") from exc
