from pathlib import Path

import markdown
from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

_TEMPLATE_DIR = Path(__file__).parent / "templates"


class HtmlBuilder:
    """Converts resume markdown to a styled, self-contained HTML page."""

    def __init__(
        self,
        template_dir: Path | None = None,
        template_name: str = "resume.html",
    ) -> None:
        env = Environment(
            loader=FileSystemLoader(str(template_dir or _TEMPLATE_DIR)),
            autoescape=True,
        )
        self._template = env.get_template(template_name)

    def build(self, resume_markdown: str, title: str = "Resume") -> str:
        body = markdown.markdown(resume_markdown, extensions=["tables", "sane_lists"])
        return self._template.render(title=title, body=Markup(body))
