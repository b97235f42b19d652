"""Operations the Status API calls: upload, enqueue, status, download, delete."""

import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath

from resume_worker.customization.exceptions import InvalidJobContextError
from resume_worker.database.exceptions import ResumeNotFoundError
from resume_worker.database.models import JobContext, ResumeRecord, ResumeStatus
from resume_worker.database.repositories.base import BaseResumeStore
from resume_worker.extraction.file_types import (
    PDF_MIME,
    file_type_for_filename,
    file_type_for_mime,
)
from resume_worker.logging.logger import Log
from resume_worker.queue.base import BaseJobQueue, JobHandle
from resume_worker.service.exceptions import (
    ArtifactNotReadyError,
    CustomizationInProgressError,
    InvalidUploadError,
)
from resume_worker.service.status_view import StatusView
from resume_worker.storage.base import BaseArtifactStore
from resume_worker.storage.exceptions import ArtifactNotFoundError
from resume_worker.storage.keys import original_artifact_key

ORIGINAL = "original"
CUSTOMIZED = "customized"


@dataclass(frozen=True)
class UploadResult:
    resume: ResumeRecord
    job: JobHandle


@dataclass(frozen=True)
class DownloadedArtifact:
    data: bytes
    content_type: str
    filename: str


@dataclass(frozen=True)
class PresignedUpload:
    key: str
    url: str
    mime_type: str


class CustomizationService:
    """Entry points for the HTTP layer. Never runs an attempt itself."""

    def __init__(
        self,
        records: BaseResumeStore,
        artifact_store: BaseArtifactStore,
        queue: BaseJobQueue,
        *,
        url_expiry_seconds: int = 3600,
    ) -> None:
        self._records = records
        self._artifact_store = artifact_store
        self._queue = queue
        self._url_expiry_seconds = url_expiry_seconds

    def upload_and_customize(
        self,
        user_id: str,
        filename: str,
        data: bytes,
        job_context: JobContext,
        *,
        name: str | None = None,
        declared_mime_type: str | None = None,
    ) -> UploadResult:
        """Store the original, create a pending record and enqueue its job.

        Input is validated before anything is stored.

        Raises:
            UnsupportedFileTypeError: if the file is not PDF, DOC or DOCX.
            InvalidUploadError: if the file is empty or its mime type contradicts the name.
            InvalidJobContextError: if the job description is blank.
            StorageError: if the original cannot be stored.
            QueueUnavailableError: if the job cannot be enqueued. The record stays pending.
        """
        file_type = file_type_for_filename(filename)
        if declared_mime_type:
            if file_type_for_mime(declared_mime_type) != file_type:
                raise InvalidUploadError(
                    f"Declared type '{declared_mime_type}' does not match '{filename}'"
                )
        if not data:
            raise InvalidUploadError("Uploaded file is empty")
        self._validate_job_context(job_context)

        key = original_artifact_key(user_id, filename)
        url = self._artifact_store.upload(data, key, file_type.mime_type)
        record = self._records.create(
            ResumeRecord(
                id=str(uuid.uuid4()),
                user_id=user_id,
                name=name or filename,
                original_filename=filename,
                file_type=file_type.name,
                mime_type=file_type.mime_type,
                file_size_bytes=len(data),
                original_artifact_ref=key,
                original_artifact_url=url,
                job_context=job_context,
            )
        )
        Log.info(f"Created resume {record.id} for user {user_id} ({filename})")
        job = self._queue.enqueue(record.id)
        return UploadResult(resume=record, job=job)

    def customize_existing(self, resume_id: str, job_context: JobContext) -> JobHandle:
        """Reset a resume to pending against a new job context and enqueue it.

        The extracted text stays cached on the record.

        Raises:
            ResumeNotFoundError: if the resume does not exist.
            CustomizationInProgressError: if an attempt is running.
            InvalidJobContextError: if the job description is blank.
        """
        self._validate_job_context(job_context)
        record = self._records.load(resume_id)
        if record.status == ResumeStatus.PROCESSING:
            raise CustomizationInProgressError(f"Resume {resume_id} is already being customized")

        self._records.update(
            resume_id,
            job_context=job_context,
            status=ResumeStatus.PENDING,
            progress=0,
            attempt_count=0,
            render_failures=0,
            error=None,
            customized_artifact_ref=None,
            customized_artifact_url=None,
            customized_content=None,
            completed_at=None,
        )
        if record.customized_artifact_ref:
            self._delete_artifact(record.customized_artifact_ref)
        Log.info(f"Resume {resume_id} reset for re-customization")
        return self._queue.enqueue(resume_id)

    def enqueue_customization(self, resume_id: str) -> JobHandle:
        """Enqueue a job for an existing record.

        Raises:
            ResumeNotFoundError: if the resume does not exist.
            QueueUnavailableError: if the broker cannot be reached.
        """
        self._records.load(resume_id)
        return self._queue.enqueue(resume_id)

    def get_status(self, resume_id: str) -> StatusView:
        return StatusView.from_record(self._records.load(resume_id))

    def list_resumes(self, user_id: str) -> list[StatusView]:
        return [StatusView.from_record(record) for record in self._records.find_by_user(user_id)]

    def download(self, resume_id: str, version: str = ORIGINAL) -> DownloadedArtifact:
        """Return the original upload or the customized PDF.

        Raises:
            ResumeNotFoundError: if the resume does not exist.
            ArtifactNotReadyError: if the customized version is not completed yet.
            ValueError: if ``version`` is neither original nor customized.
        """
        record = self._records.load(resume_id)
        key = self._artifact_key(record, version)
        data = self._artifact_store.get(key)
        if version == CUSTOMIZED:
            stem = PurePosixPath(record.original_filename).stem
            return DownloadedArtifact(
                data=data, content_type=PDF_MIME, filename=f"{stem}-customized.pdf"
            )
        return DownloadedArtifact(
            data=data, content_type=record.mime_type, filename=record.original_filename
        )

    def download_url(self, resume_id: str, version: str = ORIGINAL) -> str:
        """Return a presigned, time-limited download URL for one version."""
        record = self._records.load(resume_id)
        key = self._artifact_key(record, version)
        return self._artifact_store.presigned_download_url(key, self._url_expiry_seconds)

    def presigned_upload_url(self, user_id: str, filename: str) -> PresignedUpload:
        """Reserve a storage key and return a URL the client can PUT the file to."""
        file_type = file_type_for_filename(filename)
        key = original_artifact_key(user_id, filename)
        url = self._artifact_store.presigned_upload_url(
            key, file_type.mime_type, self._url_expiry_seconds
        )
        return PresignedUpload(key=key, url=url, mime_type=file_type.mime_type)

    def delete_resume(self, resume_id: str) -> bool:
        """Delete a resume and its artifacts. Returns False if it did not exist."""
        try:
            record = self._records.load(resume_id)
        except ResumeNotFoundError:
            return False
        self._delete_artifact(record.original_artifact_ref)
        if record.customized_artifact_ref:
            self._delete_artifact(record.customized_artifact_ref)
        deleted = self._records.delete(resume_id)
        Log.info(f"Deleted resume {resume_id}")
        return deleted

    @staticmethod
    def _artifact_key(record: ResumeRecord, version: str) -> str:
        if version == ORIGINAL:
            return record.original_artifact_ref
        if version == CUSTOMIZED:
            if record.status != ResumeStatus.COMPLETED or not record.customized_artifact_ref:
                raise ArtifactNotReadyError(
                    f"Customized resume {record.id} is not available ({record.status.value})"
                )
            return record.customized_artifact_ref
        raise ValueError(f"Unknown version '{version}'. Choose from: {[ORIGINAL, CUSTOMIZED]}")

    @staticmethod
    def _validate_job_context(job_context: JobContext) -> None:
        if not job_context.job_description.strip():
            raise InvalidJobContextError("Job description is required")

    def _delete_artifact(self, key: str) -> None:
        try:
            self._artifact_store.delete(key)
        except ArtifactNotFoundError:
            Log.warning(f"Artifact {key} was already gone")
