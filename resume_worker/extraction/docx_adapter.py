import io
import re

from docx import Document
from docx.table import Table
from docx.text.paragraph import Paragraph

from resume_worker.extraction.base import BaseFormatExtractor
from resume_worker.extraction.exceptions import DocumentExtractionError
from resume_worker.logging.logger import Log

_HEADING_STYLE = re.compile(r"^Heading (\d)$")


class DocxAdapter(BaseFormatExtractor):
    """Extracts text from Word documents using python-docx.

    Paragraph styles are mapped to markdown: ``Title`` and ``Heading N``
    become headings, ``List ...`` styles become ``- `` bullets. Tables are
    emitted as pipe-separated rows in document order.

    Only the OOXML container is readable. A legacy binary .doc raises
    DocumentExtractionError.
    """

    def extract(self, data: bytes) -> str:
        try:
            document = Document(io.BytesIO(data))
        except Exception as exc:
            Log.warning(f"python-docx could not parse document: {exc}")
            raise DocumentExtractionError("Could not read Word document") from exc

        blocks: list[str] = []
        for block in document.iter_inner_content():
            if isinstance(block, Paragraph):
                line = self._paragraph_to_markdown(block)
                if line:
                    blocks.append(line)
            elif isinstance(block, Table):
                blocks.extend(self._table_to_rows(block))
        return "\n".join(blocks)

    @staticmethod
    def _paragraph_to_markdown(paragraph: Paragraph) -> str:
        text = paragraph.text.strip()
        if not text:
            return ""
        style_name = paragraph.style.name if paragraph.style is not None else ""
        if style_name == "Title":
            return f"\n# {text}"
        heading = _HEADING_STYLE.match(style_name)
        if heading:
            level = min(int(heading.group(1)), 6)
            return f"\n{'#' * level} {text}"
        if style_name.startswith("List"):
            return f"- {text}"
        return text

    @staticmethod
    def _table_to_rows(table: Table) -> list[str]:
        rows = []
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                rows.append(" | ".join(cells))
        return rows
