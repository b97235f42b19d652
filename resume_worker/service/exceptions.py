from resume_worker.exceptions import InputError


class InvalidUploadError(InputError):
    """Raised when an upload is empty or its declared type contradicts the filename."""


class CustomizationInProgressError(InputError):
    """Raised when a resume is re-customized while an attempt is running."""


class ArtifactNotReadyError(InputError):
    """Raised when the customized version is requested before completion."""
