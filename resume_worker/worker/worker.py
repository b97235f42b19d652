import threading

from resume_worker.config.settings import Settings
from resume_worker.exceptions import FatalError
from resume_worker.logging.logger import Log
from resume_worker.queue.base import BaseJobQueue, Delivery
from resume_worker.worker.job_runner import JobRunner


class Worker:
    """One pool slot. Poll loop: lease -> dispatch -> sleep when idle."""

    def __init__(
        self,
        queue: BaseJobQueue,
        job_runner: JobRunner,
        settings: Settings,
        *,
        stop_event: threading.Event,
        cancel_event: threading.Event,
    ) -> None:
        self._queue = queue
        self._job_runner = job_runner
        self._settings = settings
        self._stop_event = stop_event
        self._cancel_event = cancel_event
        self._backoff_seconds = 0.0

    def run(self, max_jobs: int | None = None) -> None:
        """Poll until the stop event is set.

        If max_jobs is set, stop after processing that many jobs (for testing).
        """
        Log.info("Worker slot started, polling for jobs")
        jobs_done = 0
        while not self._stop_event.is_set():
            if max_jobs is not None and jobs_done >= max_jobs:
                break
            delivery = self._try_lease_job()
            if delivery is None:
                continue
            self._dispatch(delivery)
            jobs_done += 1
        Log.info("Worker slot stopped")

    def _try_lease_job(self) -> Delivery | None:
        """Lease the next job. Sleeps and returns None when idle or on broker errors."""
        try:
            delivery = self._queue.dequeue()
        except FatalError as exc:
            self._back_off(exc)
            return None
        self._backoff_seconds = 0.0
        if delivery is None:
            Log.debug("No jobs available, sleeping")
            self._stop_event.wait(self._settings.queue_poll_interval_seconds)
        return delivery

    def _dispatch(self, delivery: Delivery) -> None:
        try:
            self._job_runner.run(delivery, self._cancel_event)
        except FatalError as exc:
            self._back_off(exc)
        except Exception:
            Log.exception(f"Unexpected error while running job {delivery.job_id}")
            self._stop_event.wait(self._settings.queue_poll_interval_seconds)

    def _back_off(self, exc: Exception) -> None:
        self._backoff_seconds = min(
            max(self._backoff_seconds * 2, self._settings.queue_poll_interval_seconds),
            self._settings.queue_reconnect_max_seconds,
        )
        Log.warning(
            f"Infrastructure unavailable, retrying in {self._backoff_seconds:.1f}s: {exc}"
        )
        self._stop_event.wait(self._backoff_seconds)
