from resume_worker.config.settings import Settings
from resume_worker.extraction.base import BaseFormatExtractor
from resume_worker.extraction.docx_adapter import DocxAdapter
from resume_worker.extraction.extractor import DocumentExtractor
from resume_worker.extraction.pdfplumber_adapter import PdfPlumberAdapter
from resume_worker.extraction.pymupdf_adapter import PyMuPdfAdapter


class DocumentExtractorFactory:
    """Creates the document extractor with the PDF engine chosen in settings."""

    PDF_ADAPTERS: dict[str, type[BaseFormatExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> DocumentExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.PDF_ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ADAPTERS)}"
            )
        return DocumentExtractor(pdf_adapter=adapter_cls(), docx_adapter=DocxAdapter())
