from dataclasses import dataclass

from resume_worker.config.settings import Settings
from resume_worker.exceptions import InputError, ResourceError


@dataclass(frozen=True)
class RetryPolicy:
    """Decides whether a failed attempt is redelivered, and after how long.

    ``attempt_count`` is the record's counter, already incremented for the
    attempt that failed. ``resource_failures`` counts resource failures of
    the resume so far, including this one.
    """

    max_retries: int
    backoff_base_seconds: float
    backoff_max_seconds: float
    resource_retries: int = 1

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_retries=settings.customization_max_retries,
            backoff_base_seconds=settings.retry_backoff_base_seconds,
            backoff_max_seconds=settings.retry_backoff_max_seconds,
        )

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def has_attempts_left(self, attempt_count: int) -> bool:
        return attempt_count < self.max_attempts

    def should_retry(
        self, exc: Exception, attempt_count: int, resource_failures: int = 1
    ) -> bool:
        if isinstance(exc, InputError):
            return False
        if isinstance(exc, ResourceError):
            return resource_failures <= self.resource_retries and self.has_attempts_left(
                attempt_count
            )
        return self.has_attempts_left(attempt_count)

    def backoff_seconds(self, attempt_count: int) -> float:
        """Exponential backoff: base * 2 ** (attempt_count - 1), capped."""
        exponent = max(attempt_count - 1, 0)
        return min(self.backoff_base_seconds * 2**exponent, self.backoff_max_seconds)
