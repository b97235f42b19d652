from pathlib import Path

from resume_worker.exceptions import ConfigurationError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(path: Path | None = None) -> str:
    """Load the customization prompt template from a file.

    Args:
        path: Path to the prompt template file.
              Defaults to the bundled customization_prompt.txt.

    Returns:
        The raw template string with ``{job_title}``, ``{company_name}``,
        ``{job_description}`` and ``{resume_content}`` placeholders.

    Raises:
        ConfigurationError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "customization_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to load prompt template: {exc}") from exc
