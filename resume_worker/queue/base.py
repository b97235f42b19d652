from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CustomizationJob:
    """Queue message payload. ``attempt`` is the delivery count of the message."""

    resume_id: str
    attempt: int


@dataclass(frozen=True)
class JobHandle:
    """Returned to the caller of enqueue."""

    job_id: int
    resume_id: str


@dataclass(frozen=True)
class Delivery:
    """A leased job. ``lease_token`` identifies this particular delivery."""

    job_id: int
    job: CustomizationJob
    lease_token: str


class BaseJobQueue(ABC):
    """Durable at-least-once queue of customization jobs.

    The queue does not deduplicate by resume; mutual exclusion is the worker's job.
    """

    @abstractmethod
    def enqueue(self, resume_id: str) -> JobHandle:
        """Add a job for the resume.

        Raises:
            QueueUnavailableError: if the broker cannot be reached.
        """

    @abstractmethod
    def dequeue(self) -> Delivery | None:
        """Lease the next available job, or return None when nothing is ready.

        A delivery that is neither acked nor nacked before its lease expires is
        delivered again.

        Raises:
            QueueUnavailableError: if the broker cannot be reached.
        """

    @abstractmethod
    def ack(self, delivery: Delivery) -> bool:
        """Remove the job. Returns False if the lease was lost to another delivery."""

    @abstractmethod
    def nack(self, delivery: Delivery, delay_seconds: float = 0.0) -> bool:
        """Release the job for redelivery after ``delay_seconds``.

        Returns False if the lease was lost to another delivery.
        """

    def close(self) -> None:
        """Release broker connections."""
