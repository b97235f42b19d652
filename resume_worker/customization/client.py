"""Customization call with a caller-enforced timeout."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait

from resume_worker.customization.client_base import BaseCustomizationTransport
from resume_worker.customization.exceptions import (
    CustomizationRejectedError,
    CustomizationTimeoutError,
    InvalidJobContextError,
)
from resume_worker.customization.models import CustomizationRequest
from resume_worker.database.models import JobContext
from resume_worker.exceptions import AttemptCancelledError
from resume_worker.logging.logger import Log


class CustomizationClient:
    """Sends resume text plus job context to the configured customization endpoint.

    The transport call runs on a helper thread. The caller's thread waits on it
    in short slices so it can give up when the timeout expires or the cancel
    event fires. The abandoned call is left to finish on its own; its result is
    discarded.
    """

    def __init__(
        self,
        transport: BaseCustomizationTransport,
        *,
        poll_interval_seconds: float = 0.2,
    ) -> None:
        self._transport = transport
        self._poll_interval_seconds = poll_interval_seconds

    def customize(
        self,
        text: str,
        job_context: JobContext,
        timeout_seconds: float,
        cancel_event: threading.Event | None = None,
    ) -> str:
        """Return the customized resume markdown.

        Raises:
            InvalidJobContextError: if the job description is blank.
            CustomizationRejectedError: if the resume text or the answer is empty.
            CustomizationTimeoutError: if the call exceeds ``timeout_seconds``.
            CustomizationNetworkError: on transport failure.
            AttemptCancelledError: if ``cancel_event`` is set while waiting.
        """
        if not job_context.job_description.strip():
            raise InvalidJobContextError("Job description is required")
        if not text.strip():
            raise CustomizationRejectedError("Resume content is empty")

        request = CustomizationRequest(
            resume_content=text,
            job_description=job_context.job_description,
            job_title=job_context.job_title,
            company_name=job_context.company_name,
        )
        Log.info(
            f"Requesting customization ({len(text)} chars, timeout {timeout_seconds:.0f}s)"
        )
        result = self._call_with_deadline(request, timeout_seconds, cancel_event)
        if not result.strip():
            raise CustomizationRejectedError("Customization endpoint returned an empty resume")
        Log.info(f"Customization returned {len(result)} chars")
        return result

    def _call_with_deadline(
        self,
        request: CustomizationRequest,
        timeout_seconds: float,
        cancel_event: threading.Event | None,
    ) -> str:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="customization-call")
        try:
            future = executor.submit(
                self._transport.send, request, timeout_seconds=timeout_seconds
            )
            deadline = time.monotonic() + timeout_seconds
            while not future.done():
                if cancel_event is not None and cancel_event.is_set():
                    future.cancel()
                    raise AttemptCancelledError("Customization call cancelled by shutdown")
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    future.cancel()
                    raise CustomizationTimeoutError(
                        f"Customization timed out after {timeout_seconds:g}s"
                    )
                wait([future], timeout=min(remaining, self._poll_interval_seconds))
            return future.result()
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
