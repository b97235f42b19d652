from abc import ABC, abstractmethod

from resume_worker.database.models import ResumeRecord


class BaseResumeStore(ABC):
    """Contract for the durable store of resume records.

    Writes are strongly consistent: a completed update is visible to the next load.
    """

    @abstractmethod
    def load(self, resume_id: str) -> ResumeRecord:
        """Return the record.

        Raises:
            ResumeNotFoundError: if no record with this ID exists.
            RecordStoreUnavailableError: if the store cannot be reached.
        """

    @abstractmethod
    def update(self, resume_id: str, **fields: object) -> None:
        """Apply a partial update as one atomic write.

        Field names are ResumeRecord attribute names. ``job_context`` accepts a
        JobContext. ``id``, ``user_id`` and ``original_artifact_ref`` are immutable.

        Raises:
            ResumeNotFoundError: if no record with this ID exists.
            ValueError: if a field is unknown or immutable.
        """

    @abstractmethod
    def create(self, record: ResumeRecord) -> ResumeRecord:
        """Insert a new record and return it as stored."""

    @abstractmethod
    def find_by_user(self, user_id: str) -> list[ResumeRecord]:
        """Return the user's records, newest first."""

    @abstractmethod
    def delete(self, resume_id: str) -> bool:
        """Delete a record. Returns False if it did not exist."""
