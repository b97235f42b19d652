import threading
import uuid

from resume_worker.exceptions import FatalError
from resume_worker.logging.logger import Log
from resume_worker.pipeline.models import AttemptDecision, AttemptOutcome
from resume_worker.pipeline.state_machine import CustomizationStateMachine
from resume_worker.queue.base import BaseJobQueue, Delivery
from resume_worker.queue.resume_lock import BaseResumeLock


class JobRunner:
    """Run one delivery under the resume lock and settle it with ack or nack."""

    def __init__(
        self,
        state_machine: CustomizationStateMachine,
        queue: BaseJobQueue,
        lock: BaseResumeLock,
        *,
        lock_retry_delay_seconds: float = 5.0,
    ) -> None:
        self._state_machine = state_machine
        self._queue = queue
        self._lock = lock
        self._lock_retry_delay_seconds = lock_retry_delay_seconds

    def run(self, delivery: Delivery, cancel_event: threading.Event) -> None:
        """Execute a single delivery.

        Raises:
            FatalError: if the queue or the record store is unreachable. The
                delivery has been released on a best-effort basis.
        """
        resume_id = delivery.job.resume_id
        Log.info(
            f"Running job {delivery.job_id} for resume {resume_id} "
            f"(delivery {delivery.job.attempt})"
        )
        try:
            needs_attempt = self._state_machine.precheck(resume_id)
        except FatalError:
            self._release_delivery(delivery)
            raise
        if not needs_attempt:
            self._settle(delivery, AttemptOutcome.ack("nothing to do"))
            return

        holder = uuid.uuid4().hex
        if not self._lock.acquire(resume_id, holder):
            Log.info(
                f"Resume {resume_id} is locked by another attempt, "
                f"releasing job {delivery.job_id} for {self._lock_retry_delay_seconds:g}s"
            )
            self._queue.nack(delivery, self._lock_retry_delay_seconds)
            return

        try:
            try:
                outcome = self._state_machine.run_attempt(resume_id, cancel_event)
            except FatalError:
                self._release_delivery(delivery)
                raise
            self._settle(delivery, outcome)
        finally:
            self._release_lock(resume_id, holder)

    def _settle(self, delivery: Delivery, outcome: AttemptOutcome) -> None:
        if outcome.decision == AttemptDecision.ACK:
            settled = self._queue.ack(delivery)
            Log.info(f"Job {delivery.job_id} acked ({outcome.reason})")
        else:
            settled = self._queue.nack(delivery, outcome.delay_seconds)
            Log.info(
                f"Job {delivery.job_id} released for redelivery in "
                f"{outcome.delay_seconds:.1f}s ({outcome.reason})"
            )
        if not settled:
            Log.warning(f"Job {delivery.job_id} lease was lost before it could be settled")

    def _release_delivery(self, delivery: Delivery) -> None:
        try:
            self._queue.nack(delivery)
        except FatalError as exc:
            Log.warning(
                f"Could not release job {delivery.job_id}, it is redelivered when "
                f"its lease expires: {exc}"
            )

    def _release_lock(self, resume_id: str, holder: str) -> None:
        try:
            self._lock.release(resume_id, holder)
        except FatalError as exc:
            Log.warning(f"Could not release lock on resume {resume_id}, it expires on its own: {exc}")
