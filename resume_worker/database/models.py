from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ResumeStatus(str, Enum):
    """Customization lifecycle of a resume record."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ResumeStatus.COMPLETED, ResumeStatus.FAILED)


@dataclass(frozen=True)
class JobContext:
    """Target job the resume is customized for."""

    job_description: str
    job_title: str = ""
    company_name: str = ""


@dataclass(frozen=True)
class ResumeRecord:
    """Represents a row from the resumes table."""

    id: str
    user_id: str
    name: str
    original_filename: str
    file_type: str
    mime_type: str
    original_artifact_ref: str
    job_context: JobContext
    status: ResumeStatus = ResumeStatus.PENDING
    progress: int = 0
    attempt_count: int = 0
    render_failures: int = 0
    error: str | None = None
    file_size_bytes: int = 0
    original_artifact_url: str | None = None
    customized_artifact_ref: str | None = None
    customized_artifact_url: str | None = None
    markdown_content: str | None = None
    customized_content: str | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
