import pymupdf

from resume_worker.extraction.base import BaseFormatExtractor
from resume_worker.extraction.exceptions import DocumentExtractionError
from resume_worker.logging.logger import Log


class PyMuPdfAdapter(BaseFormatExtractor):
    """Extracts text from PDF using PyMuPDF, page by page in reading order."""

    def extract(self, data: bytes) -> str:
        try:
            with pymupdf.open(stream=data, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text(sort=True) for page in doc]
            return "\n\n".join(pages).strip()
        except Exception as exc:
            Log.warning(f"PyMuPDF could not parse document: {exc}")
            raise DocumentExtractionError("Could not read PDF document") from exc
