class ResumeWorkerError(Exception):
    """Base exception for all resume customization errors."""


class InputError(ResumeWorkerError):
    """Bad client input: unsupported file, malformed job context, unparsable document.

    Never retried.
    """


class TransientError(ResumeWorkerError):
    """Timeout or transport failure of an external collaborator.

    Retried up to the configured budget, then escalated to a terminal failure.
    """


class ResourceError(ResumeWorkerError):
    """Local resource failure, such as the rendering engine. Retried once."""


class FatalError(ResumeWorkerError):
    """Infrastructure is unreachable or misconfigured. Not specific to one job."""


class ConfigurationError(FatalError):
    """Raised when required configuration is missing at startup."""


class AttemptCancelledError(ResumeWorkerError):
    """Raised inside an attempt when the worker pool is shutting down."""
