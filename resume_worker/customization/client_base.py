from abc import ABC, abstractmethod

from resume_worker.customization.models import CustomizationRequest


class BaseCustomizationTransport(ABC):
    """Contract for provider-specific customization endpoints."""

    @abstractmethod
    def send(self, request: CustomizationRequest, *, timeout_seconds: float) -> str:
        """Return the customized resume as markdown text.

        ``timeout_seconds`` is forwarded to the underlying HTTP client so an
        abandoned call still finishes on its own.

        Raises:
            CustomizationTimeoutError: the provider did not answer in time.
            CustomizationNetworkError: connection failure or a 5xx/429 answer.
            CustomizationRejectedError: any other refusal or an unusable payload.
        """
