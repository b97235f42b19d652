"""Tests for prompt template loading."""

from pathlib import Path

import pytest

from resume_worker.customization.prompt_loader import load_prompt_template
from resume_worker.exceptions import ConfigurationError


class TestLoadPromptTemplate:
    def test_loads_default_template(self) -> None:
        template = load_prompt_template()
        for placeholder in ("{job_title}", "{company_name}", "{job_description}", "{resume_content}"):
            assert placeholder in template

    def test_default_template_formats(self) -> None:
        rendered = load_prompt_template().format(
            job_title="T", company_name="C", job_description="D", resume_content="R {x}"
        )
        assert "R {x}" in rendered

    def test_loads_custom_template(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.txt"
        custom.write_text("Tailor {resume_content}")
        assert load_prompt_template(custom) == "Tailor {resume_content}"

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(ConfigurationError, match="Failed to load prompt"):
            load_prompt_template(Path("/nonexistent/file.txt"))
