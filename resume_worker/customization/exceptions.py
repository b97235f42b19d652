from resume_worker.exceptions import InputError, TransientError


class CustomizationRejectedError(InputError):
    """Raised when the customization endpoint refuses the request or returns garbage."""


class InvalidJobContextError(CustomizationRejectedError):
    """Raised when the job context cannot be customized against, e.g. no description."""


class CustomizationTimeoutError(TransientError):
    """Raised when the customization call does not finish within its timeout."""


class CustomizationNetworkError(TransientError):
    """Raised when the customization call fails due to network/infrastructure issues."""
