from resume_worker.config.settings import Settings
from resume_worker.rendering.base import BaseRenderer
from resume_worker.rendering.html_builder import HtmlBuilder
from resume_worker.rendering.pdf_renderer import ProcessPdfRenderer


class RendererFactory:
    """Creates the PDF renderer."""

    @classmethod
    def create(cls, settings: Settings) -> BaseRenderer:
        return ProcessPdfRenderer(
            html_builder=HtmlBuilder(),
            timeout_seconds=settings.render_timeout_seconds,
        )
