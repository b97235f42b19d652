from unittest.mock import MagicMock

import pytest

from resume_worker.customization.exceptions import (
    CustomizationRejectedError,
    CustomizationTimeoutError,
)
from resume_worker.pipeline.retry_policy import RetryPolicy
from resume_worker.rendering.exceptions import RenderError


def _policy(max_retries: int = 3) -> RetryPolicy:
    return RetryPolicy(max_retries=max_retries, backoff_base_seconds=2.0, backoff_max_seconds=10.0)


class TestBudget:
    def test_max_attempts(self) -> None:
        assert _policy(3).max_attempts == 4

    def test_has_attempts_left(self) -> None:
        policy = _policy(1)
        assert policy.has_attempts_left(1)
        assert not policy.has_attempts_left(2)


class TestShouldRetry:
    def test_transient_retried_within_budget(self) -> None:
        policy = _policy(2)
        exc = CustomizationTimeoutError("slow")
        assert policy.should_retry(exc, 1)
        assert policy.should_retry(exc, 2)
        assert not policy.should_retry(exc, 3)

    def test_input_error_never_retried(self) -> None:
        assert not _policy(3).should_retry(CustomizationRejectedError("no"), 1)

    def test_resource_error_retried_once(self) -> None:
        policy = _policy(3)
        assert policy.should_retry(RenderError("crash"), 1, resource_failures=1)
        assert not policy.should_retry(RenderError("crash"), 2, resource_failures=2)

    def test_resource_retry_counts_resource_failures_not_attempts(self) -> None:
        policy = _policy(3)
        assert policy.should_retry(RenderError("crash"), 2, resource_failures=1)
        assert not policy.should_retry(RenderError("crash"), 3, resource_failures=2)

    def test_resource_error_respects_budget(self) -> None:
        assert not _policy(0).should_retry(RenderError("crash"), 1)

    def test_unexpected_error_treated_as_transient(self) -> None:
        assert _policy(1).should_retry(RuntimeError("bug"), 1)


class TestBackoff:
    @pytest.mark.parametrize(("attempt", "expected"), [(1, 2.0), (2, 4.0), (3, 8.0), (4, 10.0)])
    def test_exponential_and_capped(self, attempt: int, expected: float) -> None:
        assert _policy().backoff_seconds(attempt) == expected

    def test_from_settings(self) -> None:
        settings = MagicMock(
            customization_max_retries=1,
            retry_backoff_base_seconds=0.5,
            retry_backoff_max_seconds=4.0,
        )
        policy = RetryPolicy.from_settings(settings)
        assert policy.max_attempts == 2
        assert policy.backoff_seconds(1) == 0.5
