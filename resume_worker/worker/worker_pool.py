import threading
import time

from resume_worker.config.settings import Settings
from resume_worker.database.repositories.base import BaseResumeStore
from resume_worker.logging.logger import Log
from resume_worker.pipeline.state_machine import CustomizationStateMachine, build_state_machine
from resume_worker.queue.base import BaseJobQueue
from resume_worker.queue.resume_lock import BaseResumeLock
from resume_worker.storage.base import BaseArtifactStore
from resume_worker.worker.job_runner import JobRunner
from resume_worker.worker.worker import Worker


class WorkerPool:
    """N worker slots on named threads sharing one queue and one job runner.

    Shutdown is two-phase. ``stop`` first asks the slots to stop pulling jobs
    and waits up to the grace period. Slots still busy after that get the
    cancel event, which aborts in-flight customization calls and renders so
    their deliveries are nacked.
    """

    def __init__(
        self,
        queue: BaseJobQueue,
        job_runner: JobRunner,
        settings: Settings,
        *,
        size: int | None = None,
    ) -> None:
        self._queue = queue
        self._job_runner = job_runner
        self._settings = settings
        self._size = size if size is not None else settings.worker_pool_size
        self._stop_event = threading.Event()
        self._cancel_event = threading.Event()
        self._threads: list[threading.Thread] = []
        self._stopped = False

    @property
    def stop_event(self) -> threading.Event:
        return self._stop_event

    @property
    def cancel_event(self) -> threading.Event:
        return self._cancel_event

    @property
    def size(self) -> int:
        return self._size

    def start(self) -> None:
        if self._threads:
            raise RuntimeError("Worker pool already started")
        if self._size < 1:
            raise ValueError("Worker pool size must be at least 1")
        for index in range(self._size):
            worker = Worker(
                self._queue,
                self._job_runner,
                self._settings,
                stop_event=self._stop_event,
                cancel_event=self._cancel_event,
            )
            thread = threading.Thread(
                target=worker.run,
                name=f"worker-{index + 1}",
                daemon=True,
            )
            self._threads.append(thread)
            thread.start()
        Log.info(f"Worker pool started with {self._size} slots")

    def request_stop(self) -> None:
        """Ask the slots to stop pulling new jobs. Safe to call from a signal handler."""
        self._stop_event.set()

    def stop(self, grace_seconds: float | None = None) -> None:
        """Stop the slots, cancel stragglers after the grace period, release the queue."""
        if self._stopped:
            return
        self._stopped = True
        grace = self._settings.shutdown_grace_seconds if grace_seconds is None else grace_seconds
        Log.info(f"Stopping worker pool (grace period {grace:g}s)")
        self._stop_event.set()

        self._join_all(grace)
        busy = [thread.name for thread in self._threads if thread.is_alive()]
        if busy:
            Log.warning(f"Cancelling in-flight attempts on {', '.join(busy)}")
            self._cancel_event.set()
            self._join_all(grace)
            still_alive = [thread.name for thread in self._threads if thread.is_alive()]
            if still_alive:
                Log.error(f"Slots did not stop after cancellation: {', '.join(still_alive)}")

        self._queue.close()
        Log.info("Worker pool stopped")

    def run(self) -> None:
        """Start the slots and block until stop is requested or the process is interrupted."""
        self.start()
        try:
            while not self._stop_event.wait(timeout=1.0):
                pass
        except KeyboardInterrupt:
            Log.info("Interrupted, shutting down")
        finally:
            self.stop()

    def alive_count(self) -> int:
        return sum(1 for thread in self._threads if thread.is_alive())

    def _join_all(self, timeout_seconds: float) -> None:
        deadline = time.monotonic() + timeout_seconds
        for thread in self._threads:
            thread.join(max(0.0, deadline - time.monotonic()))


def build_worker_pool(
    settings: Settings,
    *,
    queue: BaseJobQueue,
    lock: BaseResumeLock,
    records: BaseResumeStore,
    artifact_store: BaseArtifactStore,
    state_machine: CustomizationStateMachine | None = None,
) -> WorkerPool:
    """Build a WorkerPool wired to the configured adapters."""
    state_machine = state_machine or build_state_machine(settings, records, artifact_store)
    job_runner = JobRunner(state_machine, queue, lock)
    return WorkerPool(queue, job_runner, settings)
