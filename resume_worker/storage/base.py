from abc import ABC, abstractmethod


class BaseArtifactStore(ABC):
    """Contract for the object store holding original and customized resumes.

    Every method raises StorageError on an underlying transport failure.
    """

    @abstractmethod
    def upload(self, data: bytes, key: str, mime_type: str) -> str:
        """Store ``data`` under ``key`` and return its URL."""

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Return the bytes stored under ``key``."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete the object under ``key``."""

    @abstractmethod
    def presigned_upload_url(self, key: str, mime_type: str, expiry_seconds: int) -> str:
        """Return a URL a client can PUT the object to directly."""

    @abstractmethod
    def presigned_download_url(self, key: str, expiry_seconds: int) -> str:
        """Return a time-limited URL for downloading the object."""
