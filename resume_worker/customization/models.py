from dataclasses import dataclass


@dataclass(frozen=True)
class CustomizationRequest:
    """Payload handed to a customization transport."""

    resume_content: str
    job_description: str
    job_title: str = ""
    company_name: str = ""
