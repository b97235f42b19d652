from abc import ABC, abstractmethod


class BaseFormatExtractor(ABC):
    """Contract for all per-format text extraction adapters."""

    @abstractmethod
    def extract(self, data: bytes) -> str:
        """Extract text from a document.

        Args:
            data: Raw file content.

        Returns:
            Extracted text. May already carry markdown headings and bullets.

        Raises:
            DocumentExtractionError: if extraction fails for any reason.
        """
