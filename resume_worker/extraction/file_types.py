from dataclasses import dataclass
from pathlib import PurePosixPath

from resume_worker.extraction.exceptions import UnsupportedFileTypeError

PDF_MIME = "application/pdf"
DOC_MIME = "application/msword"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@dataclass(frozen=True)
class FileType:
    """Supported upload format."""

    name: str
    mime_type: str
    extension: str


PDF = FileType(name="pdf", mime_type=PDF_MIME, extension=".pdf")
DOC = FileType(name="doc", mime_type=DOC_MIME, extension=".doc")
DOCX = FileType(name="docx", mime_type=DOCX_MIME, extension=".docx")

SUPPORTED_FILE_TYPES: tuple[FileType, ...] = (PDF, DOC, DOCX)

_BY_EXTENSION = {file_type.extension: file_type for file_type in SUPPORTED_FILE_TYPES}
_BY_MIME = {file_type.mime_type: file_type for file_type in SUPPORTED_FILE_TYPES}


def file_type_for_filename(filename: str) -> FileType:
    """Resolve the upload format from the filename extension.

    Raises:
        UnsupportedFileTypeError: for anything other than .pdf, .doc or .docx.
    """
    extension = PurePosixPath(filename).suffix.lower()
    file_type = _BY_EXTENSION.get(extension)
    if file_type is None:
        raise UnsupportedFileTypeError(
            "Unsupported file type. Only PDF, DOC, and DOCX files are allowed."
        )
    return file_type


def file_type_for_mime(mime_type: str) -> FileType:
    """Resolve the upload format from a declared mime type.

    Parameters such as ``; charset=binary`` are ignored.

    Raises:
        UnsupportedFileTypeError: for any other mime type.
    """
    base_type = mime_type.split(";", 1)[0].strip().lower()
    file_type = _BY_MIME.get(base_type)
    if file_type is None:
        raise UnsupportedFileTypeError(f"Unsupported mime type '{mime_type}'")
    return file_type
