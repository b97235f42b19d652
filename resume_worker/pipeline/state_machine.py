"""Customization state machine: pending -> processing -> completed | failed."""

import threading
from collections.abc import Sequence
from datetime import datetime, timezone

from resume_worker.config.settings import Settings
from resume_worker.customization.client import CustomizationClient
from resume_worker.customization.factory import CustomizationClientFactory
from resume_worker.database.exceptions import ResumeNotFoundError
from resume_worker.database.models import ResumeStatus
from resume_worker.database.repositories.base import BaseResumeStore
from resume_worker.exceptions import (
    AttemptCancelledError,
    FatalError,
    InputError,
    ResourceError,
    TransientError,
)
from resume_worker.extraction.extractor import DocumentExtractor
from resume_worker.extraction.factory import DocumentExtractorFactory
from resume_worker.logging.logger import Log
from resume_worker.pipeline.models import AttemptOutcome
from resume_worker.pipeline.pipeline import AttemptContext, PipelineStep
from resume_worker.pipeline.retry_policy import RetryPolicy
from resume_worker.pipeline.steps import (
    CustomizeStep,
    ExtractTextStep,
    FetchOriginalStep,
    RenderStep,
    UploadArtifactStep,
)
from resume_worker.rendering.base import BaseRenderer
from resume_worker.rendering.factory import RendererFactory
from resume_worker.storage.base import BaseArtifactStore

CANCELLED_MESSAGE = "Attempt interrupted by worker shutdown"


class CustomizationStateMachine:
    """Drives one resume through a single customization attempt.

    The caller holds the resume lock for the whole of ``run_attempt`` and
    settles the delivery according to the returned outcome. Every record
    transition is a single update.
    """

    def __init__(
        self,
        records: BaseResumeStore,
        steps: Sequence[PipelineStep],
        retry_policy: RetryPolicy,
    ) -> None:
        self._records = records
        self._steps = list(steps)
        self._retry_policy = retry_policy

    def precheck(self, resume_id: str) -> bool:
        """Return False when the delivery can be acked without an attempt.

        That is the case for a missing record and for a terminal one.
        """
        try:
            record = self._records.load(resume_id)
        except ResumeNotFoundError:
            Log.warning(f"Resume {resume_id} not found, dropping job")
            return False
        if record.status.is_terminal:
            Log.info(f"Resume {resume_id} already {record.status.value}, skipping")
            return False
        return True

    def run_attempt(
        self,
        resume_id: str,
        cancel_event: threading.Event | None = None,
    ) -> AttemptOutcome:
        """Run one attempt and return whether to ack or nack the delivery.

        Per-job failures are recorded on the resume and never raised.

        Raises:
            FatalError: if the record store or another dependency is unreachable.
        """
        try:
            return self._run(resume_id, cancel_event or threading.Event())
        except ResumeNotFoundError:
            Log.warning(f"Resume {resume_id} deleted during its attempt, dropping job")
            return AttemptOutcome.ack("record missing")

    def _run(self, resume_id: str, cancel_event: threading.Event) -> AttemptOutcome:
        record = self._records.load(resume_id)
        if record.status.is_terminal:
            return AttemptOutcome.ack(f"already {record.status.value}")

        if not self._retry_policy.has_attempts_left(record.attempt_count):
            message = "Retries exhausted"
            if record.error:
                message = f"{message}: {record.error}"
            self._fail(resume_id, message)
            return AttemptOutcome.ack("retries exhausted")

        attempt = record.attempt_count + 1
        self._records.update(
            resume_id,
            status=ResumeStatus.PROCESSING,
            attempt_count=attempt,
            progress=0,
            error=None,
        )
        Log.info(
            f"Resume {resume_id} processing "
            f"(attempt {attempt}/{self._retry_policy.max_attempts})"
        )
        context = AttemptContext(record=record, attempt=attempt, cancel_event=cancel_event)

        try:
            self._run_steps(context)
        except FatalError:
            raise
        except AttemptCancelledError:
            Log.warning(f"Resume {resume_id}: {CANCELLED_MESSAGE}")
            # A cancelled attempt does not count against the retry budget.
            self._records.update(resume_id, error=CANCELLED_MESSAGE, attempt_count=attempt - 1)
            return AttemptOutcome.nack("cancelled")
        except InputError as exc:
            self._fail(resume_id, str(exc))
            return AttemptOutcome.ack("rejected")
        except (TransientError, ResourceError) as exc:
            return self._retry_or_fail(context, exc, str(exc))
        except ResumeNotFoundError:
            raise
        except Exception as exc:
            Log.exception(f"Resume {resume_id}: unexpected error during attempt {attempt}")
            return self._retry_or_fail(
                context, exc, f"Unexpected error: {type(exc).__name__}"
            )

        self._complete(context)
        return AttemptOutcome.ack("completed")

    def _run_steps(self, context: AttemptContext) -> None:
        for step in self._steps:
            if context.cancel_event.is_set():
                raise AttemptCancelledError(CANCELLED_MESSAGE)
            step.run(context)
            if step.checkpoint is not None:
                self._records.update(
                    context.resume_id,
                    progress=step.checkpoint,
                    **context.drain_updates(),
                )

    def _retry_or_fail(
        self,
        context: AttemptContext,
        exc: Exception,
        message: str,
    ) -> AttemptOutcome:
        resume_id, attempt = context.resume_id, context.attempt
        updates: dict[str, object] = {}
        render_failures = context.record.render_failures
        if isinstance(exc, ResourceError):
            render_failures += 1
            updates["render_failures"] = render_failures
        if self._retry_policy.should_retry(exc, attempt, resource_failures=render_failures):
            delay = self._retry_policy.backoff_seconds(attempt)
            self._records.update(resume_id, error=message, **updates)
            Log.warning(
                f"Resume {resume_id} attempt {attempt} failed, retrying in {delay:.1f}s: "
                f"{message}"
            )
            return AttemptOutcome.nack("retry", delay_seconds=delay)
        self._fail(resume_id, f"{message} (gave up after {attempt} attempts)", **updates)
        return AttemptOutcome.ack("failed")

    def _fail(self, resume_id: str, message: str, **updates: object) -> None:
        self._records.update(resume_id, status=ResumeStatus.FAILED, error=message, **updates)
        Log.error(f"Resume {resume_id} failed: {message}")

    def _complete(self, context: AttemptContext) -> None:
        self._records.update(
            context.resume_id,
            status=ResumeStatus.COMPLETED,
            progress=100,
            error=None,
            customized_artifact_ref=context.customized_ref,
            customized_artifact_url=context.customized_url,
            completed_at=datetime.now(timezone.utc),
            **context.drain_updates(),
        )
        Log.info(f"Resume {context.resume_id} completed (attempt {context.attempt})")


def build_state_machine(
    settings: Settings,
    records: BaseResumeStore,
    artifact_store: BaseArtifactStore,
    *,
    extractor: DocumentExtractor | None = None,
    client: CustomizationClient | None = None,
    renderer: BaseRenderer | None = None,
) -> CustomizationStateMachine:
    """Build a CustomizationStateMachine with all required adapters."""
    steps: list[PipelineStep] = [
        FetchOriginalStep(artifact_store),
        ExtractTextStep(extractor or DocumentExtractorFactory.create(settings)),
        CustomizeStep(
            client or CustomizationClientFactory.create(settings),
            settings.customization_timeout_seconds,
        ),
        RenderStep(renderer or RendererFactory.create(settings)),
        UploadArtifactStep(artifact_store),
    ]
    return CustomizationStateMachine(
        records=records,
        steps=steps,
        retry_policy=RetryPolicy.from_settings(settings),
    )
