import os
from collections.abc import Generator

import pytest

from resume_worker.config.settings import Settings
from resume_worker.database.connection import Database, build_conninfo
from resume_worker.database.repositories.resume_repository import ResumeRepository


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "resumes_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def database(test_settings: Settings) -> Generator[Database, None, None]:
    db = Database(build_conninfo(test_settings), name="integration", timeout_seconds=3.0)
    try:
        db.open()
        db.apply_schema()
    except Exception as e:
        db.close()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def clean_database(database: Database) -> Database:
    with database.connection() as conn:
        conn.execute("TRUNCATE customization_jobs, resume_locks, resumes")
        conn.commit()
    return database


@pytest.fixture
def repository(clean_database: Database) -> ResumeRepository:
    return ResumeRepository(clean_database)
