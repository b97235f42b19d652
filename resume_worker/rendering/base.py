import threading
from abc import ABC, abstractmethod


class BaseRenderer(ABC):
    """Contract for markdown to PDF renderers."""

    @abstractmethod
    def render(self, markdown: str, cancel_event: threading.Event | None = None) -> bytes:
        """Render customized markdown to PDF bytes.

        Raises:
            RenderError: if rendering fails or exceeds its time budget.
            AttemptCancelledError: if ``cancel_event`` is set before rendering ends.
        """
