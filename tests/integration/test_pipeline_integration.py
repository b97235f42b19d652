import time

import pytest

from fakes import FakeRenderer, InMemoryArtifactStore
from resume_worker.config.settings import Settings
from resume_worker.database.connection import Database, build_conninfo
from resume_worker.database.models import JobContext, ResumeStatus
from resume_worker.database.repositories.resume_repository import ResumeRepository
from resume_worker.pipeline.state_machine import build_state_machine
from resume_worker.queue.postgres_queue import PostgresJobQueue
from resume_worker.queue.resume_lock import PostgresResumeLock
from resume_worker.service.customization_service import CUSTOMIZED, CustomizationService
from resume_worker.worker.worker_pool import build_worker_pool


@pytest.mark.integration
class TestPipelineIntegration:
    def test_upload_is_customized_end_to_end(
        self,
        repository: ResumeRepository,
        sample_pdf_bytes: bytes,
        test_settings: Settings,
    ) -> None:
        settings = Settings(
            _env_file=None,
            customization_provider="example",
            worker_pool_size=2,
            queue_poll_interval_seconds=0.05,
            shutdown_grace_seconds=2.0,
        )
        store = InMemoryArtifactStore()
        queue_db = Database(build_conninfo(test_settings), name="queue", max_size=5)
        queue_db.open()
        queue = PostgresJobQueue(queue_db, lease_seconds=60)
        service = CustomizationService(repository, store, queue)
        pool = build_worker_pool(
            settings,
            queue=queue,
            lock=PostgresResumeLock(queue_db, ttl_seconds=60),
            records=repository,
            artifact_store=store,
            state_machine=build_state_machine(
                settings, repository, store, renderer=FakeRenderer(b"%PDF-tailored")
            ),
        )
        result = service.upload_and_customize(
            "user-1",
            "jane.pdf",
            sample_pdf_bytes,
            JobContext("Build payment APIs", "Backend Engineer", "Acme"),
        )

        pool.start()
        try:
            deadline = time.monotonic() + 15
            while service.get_status(result.resume.id).status != ResumeStatus.COMPLETED:
                assert time.monotonic() < deadline, "resume was not customized in time"
                time.sleep(0.1)
        finally:
            pool.stop()
            queue_db.close()

        view = service.get_status(result.resume.id)
        assert view.progress == 100
        assert view.download_url is not None
        record = repository.load(result.resume.id)
        assert record.attempt_count == 1
        assert "Tailored for Backend Engineer at Acme" in (record.customized_content or "")
        assert service.download(result.resume.id, CUSTOMIZED).data == b"%PDF-tailored"
