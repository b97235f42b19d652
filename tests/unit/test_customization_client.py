import threading
import time

import pytest

from fakes import ScriptedTransport
from resume_worker.customization.client import CustomizationClient
from resume_worker.customization.exceptions import (
    CustomizationNetworkError,
    CustomizationRejectedError,
    CustomizationTimeoutError,
    InvalidJobContextError,
)
from resume_worker.database.models import JobContext
from resume_worker.exceptions import AttemptCancelledError, InputError, TransientError

JOB = JobContext(job_description="Backend engineer role", job_title="Engineer", company_name="Acme")


class TestCustomize:
    def test_returns_transport_result(self) -> None:
        transport = ScriptedTransport("# Tailored")
        client = CustomizationClient(transport)

        assert client.customize("# Jane", JOB, timeout_seconds=5) == "# Tailored"

    def test_sends_job_context(self) -> None:
        transport = ScriptedTransport("# Tailored")
        CustomizationClient(transport).customize("# Jane", JOB, timeout_seconds=5)

        request = transport.requests[0]
        assert request.resume_content == "# Jane"
        assert request.job_description == "Backend engineer role"
        assert request.job_title == "Engineer"
        assert request.company_name == "Acme"

    def test_transport_errors_propagate(self) -> None:
        transport = ScriptedTransport(CustomizationNetworkError("connection refused"))
        with pytest.raises(CustomizationNetworkError, match="connection refused"):
            CustomizationClient(transport).customize("# Jane", JOB, timeout_seconds=5)


class TestValidation:
    def test_blank_job_description_is_rejected(self) -> None:
        transport = ScriptedTransport()
        with pytest.raises(InvalidJobContextError):
            CustomizationClient(transport).customize(
                "# Jane", JobContext(job_description="  "), timeout_seconds=5
            )
        assert transport.call_count == 0

    def test_blank_resume_is_rejected(self) -> None:
        transport = ScriptedTransport()
        with pytest.raises(CustomizationRejectedError, match="empty"):
            CustomizationClient(transport).customize("\n", JOB, timeout_seconds=5)
        assert transport.call_count == 0

    def test_empty_answer_is_rejected(self) -> None:
        transport = ScriptedTransport("   ")
        with pytest.raises(CustomizationRejectedError, match="empty resume"):
            CustomizationClient(transport).customize("# Jane", JOB, timeout_seconds=5)


class TestDeadline:
    def test_times_out_slow_transport(self) -> None:
        transport = ScriptedTransport("# late", delay_seconds=2.0)
        client = CustomizationClient(transport, poll_interval_seconds=0.01)

        started = time.monotonic()
        with pytest.raises(CustomizationTimeoutError, match="timed out"):
            client.customize("# Jane", JOB, timeout_seconds=0.1)
        assert time.monotonic() - started < 1.5

    def test_cancel_event_aborts_wait(self) -> None:
        transport = ScriptedTransport("# late", delay_seconds=2.0)
        client = CustomizationClient(transport, poll_interval_seconds=0.01)
        cancel = threading.Event()
        threading.Timer(0.05, cancel.set).start()

        started = time.monotonic()
        with pytest.raises(AttemptCancelledError):
            client.customize("# Jane", JOB, timeout_seconds=30, cancel_event=cancel)
        assert time.monotonic() - started < 1.5

    def test_timeout_is_transient_and_rejection_is_input(self) -> None:
        assert issubclass(CustomizationTimeoutError, TransientError)
        assert issubclass(CustomizationNetworkError, TransientError)
        assert issubclass(CustomizationRejectedError, InputError)
