from resume_worker.extraction.base import BaseFormatExtractor
from resume_worker.extraction.exceptions import DocumentExtractionError
from resume_worker.extraction.file_types import PDF, file_type_for_mime
from resume_worker.extraction.markdown_normalizer import normalize_markdown


class DocumentExtractor:
    """Turns an uploaded binary into normalized markdown.

    Dispatches on the declared mime type: PDF goes to the configured PDF
    adapter, DOC and DOCX go to the Word adapter.
    """

    def __init__(
        self,
        pdf_adapter: BaseFormatExtractor,
        docx_adapter: BaseFormatExtractor,
    ) -> None:
        self._pdf_adapter = pdf_adapter
        self._docx_adapter = docx_adapter

    def extract(self, data: bytes, declared_mime_type: str) -> str:
        """Extract and normalize the document text.

        Raises:
            UnsupportedFileTypeError: if the mime type is not PDF, DOC or DOCX.
            DocumentExtractionError: if the document is unreadable or has no text.
        """
        file_type = file_type_for_mime(declared_mime_type)
        if not data:
            raise DocumentExtractionError("Document is empty")
        adapter = self._pdf_adapter if file_type == PDF else self._docx_adapter
        markdown = normalize_markdown(adapter.extract(data))
        if not markdown:
            raise DocumentExtractionError(
                f"No text could be extracted from the {file_type.name.upper()} document"
            )
        return markdown
