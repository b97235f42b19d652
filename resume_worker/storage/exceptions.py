from resume_worker.exceptions import FatalError, InputError, TransientError


class StorageError(TransientError):
    """Raised when an object store operation fails."""


class ArtifactNotFoundError(StorageError):
    """Raised when the requested key does not exist in the bucket."""


class StorageUnavailableError(FatalError):
    """Raised at startup when the bucket cannot be reached at all."""


class OriginalArtifactMissingError(InputError):
    """Raised when the uploaded original is gone from the bucket. Never retried."""
