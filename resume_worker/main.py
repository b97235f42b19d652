import signal
from types import FrameType

from resume_worker.config.settings import Settings
from resume_worker.database.connection import Database, build_conninfo
from resume_worker.database.repositories.resume_repository import ResumeRepository
from resume_worker.logging.logger import Log
from resume_worker.queue.postgres_queue import PostgresJobQueue
from resume_worker.queue.resume_lock import PostgresResumeLock
from resume_worker.storage.s3_artifact_store import S3ArtifactStore
from resume_worker.worker.worker_pool import WorkerPool, build_worker_pool


def install_signal_handlers(pool: WorkerPool) -> None:
    """Translate SIGTERM and SIGINT into a graceful pool shutdown."""

    def _handle(signum: int, frame: FrameType | None) -> None:
        _ = frame
        Log.info(f"Received {signal.Signals(signum).name}, stopping worker pool")
        pool.request_stop()

    signal.signal(signal.SIGTERM, _handle)
    signal.signal(signal.SIGINT, _handle)


def main() -> None:
    """Entry point: validate config -> open pools -> build dependencies -> run the pool."""
    settings = Settings()
    Log.configure(settings.log_level)
    settings.require_infrastructure()

    records_db = Database(
        build_conninfo(settings), name="records", max_size=settings.db_pool_max_size
    )
    queue_db = Database(
        settings.queue_url, name="queue", max_size=settings.worker_pool_size * 2 + 1
    )
    records_db.open()
    queue_db.open()

    try:
        if settings.apply_schema_on_startup:
            records_db.apply_schema()
            queue_db.apply_schema()
        artifact_store = S3ArtifactStore.from_settings(settings)
        artifact_store.check_connection()
        pool = build_worker_pool(
            settings,
            queue=PostgresJobQueue(queue_db, settings.queue_lease_seconds),
            lock=PostgresResumeLock(queue_db, settings.resume_lock_ttl_seconds),
            records=ResumeRepository(records_db),
            artifact_store=artifact_store,
        )
        install_signal_handlers(pool)
        Log.info(f"Starting resume customization worker ({settings.app_env})")
        pool.run()
    finally:
        queue_db.close()
        records_db.close()


if __name__ == "__main__":
    main()
