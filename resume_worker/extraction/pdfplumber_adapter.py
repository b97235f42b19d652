import io

import pdfplumber

from resume_worker.extraction.base import BaseFormatExtractor
from resume_worker.extraction.exceptions import DocumentExtractionError
from resume_worker.logging.logger import Log


class PdfPlumberAdapter(BaseFormatExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, data: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
            return "\n\n".join(pages).strip()
        except Exception as exc:
            Log.warning(f"pdfplumber could not parse document: {exc}")
            raise DocumentExtractionError("Could not read PDF document") from exc
