from resume_worker.exceptions import InputError


class UnsupportedFileTypeError(InputError):
    """Raised when a file type or mime type is not PDF, DOC or DOCX."""


class DocumentExtractionError(InputError):
    """Raised when a supported document cannot be parsed."""
