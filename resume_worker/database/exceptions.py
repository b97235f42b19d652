from resume_worker.exceptions import FatalError, ResumeWorkerError


class ResumeNotFoundError(ResumeWorkerError):
    """Raised when a resume record cannot be found."""


class RecordStoreUnavailableError(FatalError):
    """Raised when the record store database cannot be reached."""
