"""Example customization transport.

Use this module as a reference when implementing new provider adapters.
Implement BaseCustomizationTransport and register the provider in
CustomizationClientFactory.
"""

from resume_worker.customization.client_base import BaseCustomizationTransport
from resume_worker.customization.models import CustomizationRequest


class ExampleClientAdapter(BaseCustomizationTransport):
    """Example adapter that echoes the resume under a tailored heading.

    No network calls. Useful for local development and tests.
    """

    def send(self, request: CustomizationRequest, *, timeout_seconds: float) -> str:
        _ = timeout_seconds
        target = request.job_title or "the target role"
        if request.company_name:
            target = f"{target} at {request.company_name}"
        return f"## Tailored for {target}\n\n{request.resume_content}"
