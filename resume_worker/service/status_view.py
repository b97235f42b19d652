from dataclasses import dataclass
from datetime import datetime

from resume_worker.database.models import ResumeRecord, ResumeStatus

DOWNLOAD_URL_TEMPLATE = "/api/v1/resumes/{resume_id}/download?version=customized"


@dataclass(frozen=True)
class StatusView:
    """Read-only projection of a resume record for polling clients."""

    id: str
    name: str
    status: ResumeStatus
    progress: int
    error: str | None
    completed_at: datetime | None
    job_title: str
    company_name: str
    download_url: str | None

    @property
    def can_download(self) -> bool:
        return self.status == ResumeStatus.COMPLETED

    @classmethod
    def from_record(
        cls,
        record: ResumeRecord,
        download_url_template: str = DOWNLOAD_URL_TEMPLATE,
    ) -> "StatusView":
        completed = record.status == ResumeStatus.COMPLETED
        return cls(
            id=record.id,
            name=record.name,
            status=record.status,
            progress=record.progress,
            error=record.error,
            completed_at=record.completed_at,
            job_title=record.job_context.job_title,
            company_name=record.job_context.company_name,
            download_url=download_url_template.format(resume_id=record.id) if completed else None,
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize with the camelCase keys of the status response."""
        payload: dict[str, object] = {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "progress": self.progress,
            "error": self.error,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
            "jobTitle": self.job_title,
            "companyName": self.company_name,
            "canDownload": self.can_download,
        }
        if self.download_url is not None:
            payload["downloadUrl"] = self.download_url
        return payload
