from resume_worker.exceptions import FatalError


class QueueUnavailableError(FatalError):
    """Raised when the queue broker cannot be reached."""
