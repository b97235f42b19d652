from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import Any, ClassVar, TypeVar

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import PoolTimeout

from resume_worker.database.connection import Database
from resume_worker.database.exceptions import (
    RecordStoreUnavailableError,
    ResumeNotFoundError,
)
from resume_worker.database.models import JobContext, ResumeRecord, ResumeStatus
from resume_worker.database.repositories.base import BaseResumeStore

T = TypeVar("T")

_COLUMNS = """
    id::text AS id, user_id, name, original_filename, file_type, mime_type,
    file_size_bytes, original_artifact_ref, original_artifact_url,
    customized_artifact_ref, customized_artifact_url, status, progress,
    attempt_count, render_failures, error, job_title, company_name, job_description,
    markdown_content, customized_content, completed_at, created_at, updated_at
"""


class ResumeRepository(BaseResumeStore):
    """Database operations for the resumes table."""

    UPDATABLE_FIELDS: ClassVar[frozenset[str]] = frozenset({
        "name",
        "status",
        "progress",
        "attempt_count",
        "render_failures",
        "error",
        "original_artifact_url",
        "customized_artifact_ref",
        "customized_artifact_url",
        "markdown_content",
        "customized_content",
        "completed_at",
    })

    def __init__(self, database: Database) -> None:
        self._database = database

    def load(self, resume_id: str) -> ResumeRecord:
        def _select(conn: psycopg.Connection[Any]) -> dict[str, Any] | None:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM resumes WHERE id = %s::uuid",
                    (resume_id,),
                )
                return cur.fetchone()

        row = self._run(_select)
        if row is None:
            raise ResumeNotFoundError(f"Resume {resume_id} not found")
        return _row_to_record(row)

    def update(self, resume_id: str, **fields: object) -> None:
        columns = self._columns_for(fields)
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in columns
        )
        query = sql.SQL(
            "UPDATE resumes SET {assignments}, updated_at = NOW() WHERE id = %s::uuid"
        ).format(assignments=assignments)
        params = [*columns.values(), resume_id]

        def _update(conn: psycopg.Connection[Any]) -> int:
            with conn.cursor() as cur:
                cur.execute(query, params)
                rowcount = cur.rowcount
            conn.commit()
            return rowcount

        if self._run(_update) == 0:
            raise ResumeNotFoundError(f"Resume {resume_id} not found")

    def create(self, record: ResumeRecord) -> ResumeRecord:
        def _insert(conn: psycopg.Connection[Any]) -> dict[str, Any] | None:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO resumes
                    (id, user_id, name, original_filename, file_type, mime_type,
                     file_size_bytes, original_artifact_ref, original_artifact_url,
                     status, progress, attempt_count, job_title, company_name,
                     job_description)
                    VALUES (%s::uuid, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                            %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        record.id,
                        record.user_id,
                        record.name,
                        record.original_filename,
                        record.file_type,
                        record.mime_type,
                        record.file_size_bytes,
                        record.original_artifact_ref,
                        record.original_artifact_url,
                        record.status.value,
                        record.progress,
                        record.attempt_count,
                        record.job_context.job_title,
                        record.job_context.company_name,
                        record.job_context.job_description,
                    ),
                )
                row = cur.fetchone()
            conn.commit()
            return row

        row = self._run(_insert)
        if row is None:
            raise RecordStoreUnavailableError(f"Insert of resume {record.id} returned no row")
        return _row_to_record(row)

    def find_by_user(self, user_id: str) -> list[ResumeRecord]:
        def _select(conn: psycopg.Connection[Any]) -> list[dict[str, Any]]:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM resumes WHERE user_id = %s "
                    "ORDER BY created_at DESC",
                    (user_id,),
                )
                return cur.fetchall()

        return [_row_to_record(row) for row in self._run(_select)]

    def delete(self, resume_id: str) -> bool:
        def _delete(conn: psycopg.Connection[Any]) -> int:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM resumes WHERE id = %s::uuid", (resume_id,))
                rowcount = cur.rowcount
            conn.commit()
            return rowcount

        return self._run(_delete) > 0

    def _columns_for(self, fields: dict[str, object]) -> dict[str, object]:
        if not fields:
            raise ValueError("update requires at least one field")
        columns: dict[str, object] = {}
        for name, value in fields.items():
            if name == "job_context":
                if not isinstance(value, JobContext):
                    raise ValueError("'job_context' must be a JobContext")
                columns["job_title"] = value.job_title
                columns["company_name"] = value.company_name
                columns["job_description"] = value.job_description
            elif name in self.UPDATABLE_FIELDS:
                columns[name] = value.value if isinstance(value, ResumeStatus) else value
            else:
                raise ValueError(f"Field '{name}' cannot be updated")
        return columns

    def _run(self, operation: Callable[[psycopg.Connection[Any]], T]) -> T:
        with self._connection() as conn:
            return operation(conn)

    @contextmanager
    def _connection(self) -> Generator[psycopg.Connection[Any], None, None]:
        try:
            with self._database.connection() as conn:
                yield conn
        except (psycopg.OperationalError, PoolTimeout) as exc:
            raise RecordStoreUnavailableError(f"Record store unavailable: {exc}") from exc


def _row_to_record(row: dict[str, Any]) -> ResumeRecord:
    return ResumeRecord(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        original_filename=row["original_filename"],
        file_type=row["file_type"],
        mime_type=row["mime_type"],
        file_size_bytes=row["file_size_bytes"],
        original_artifact_ref=row["original_artifact_ref"],
        original_artifact_url=row["original_artifact_url"],
        customized_artifact_ref=row["customized_artifact_ref"],
        customized_artifact_url=row["customized_artifact_url"],
        status=ResumeStatus(row["status"]),
        progress=row["progress"],
        attempt_count=row["attempt_count"],
        render_failures=row["render_failures"],
        error=row["error"],
        job_context=JobContext(
            job_description=row["job_description"],
            job_title=row["job_title"],
            company_name=row["company_name"],
        ),
        markdown_content=row["markdown_content"],
        customized_content=row["customized_content"],
        completed_at=row["completed_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
