import json

import httpx

from resume_worker.customization.client_base import BaseCustomizationTransport
from resume_worker.customization.exceptions import (
    CustomizationNetworkError,
    CustomizationRejectedError,
    CustomizationTimeoutError,
)
from resume_worker.customization.models import CustomizationRequest
from resume_worker.logging.logger import Log


class N8nWebhookAdapter(BaseCustomizationTransport):
    """Customization through an n8n workflow webhook.

    The webhook receives ``{resumeContent, jobDescription, jobTitle, companyName}``
    and may answer with JSON carrying a ``resume`` field, any other JSON
    document, or raw markdown.
    """

    def __init__(
        self,
        *,
        webhook_url: str,
        webhook_path: str = "",
        client: httpx.Client | None = None,
    ) -> None:
        self._url = self._join_url(webhook_url, webhook_path)
        self._client = client or httpx.Client()

    @property
    def url(self) -> str:
        return self._url

    def send(self, request: CustomizationRequest, *, timeout_seconds: float) -> str:
        Log.debug(f"POST {self._url}")
        try:
            response = self._client.post(
                self._url,
                json={
                    "resumeContent": request.resume_content,
                    "jobDescription": request.job_description,
                    "jobTitle": request.job_title,
                    "companyName": request.company_name,
                },
                timeout=timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            Log.warning(f"Customization webhook timed out: {exc}")
            raise CustomizationTimeoutError("Customization service timed out") from exc
        except httpx.TransportError as exc:
            Log.warning(f"Customization webhook network error: {exc}")
            raise CustomizationNetworkError("Customization service unavailable") from exc

        status = response.status_code
        if status >= 500 or status == 429:
            Log.warning(f"Customization webhook answered HTTP {status}: {response.text[:200]}")
            raise CustomizationNetworkError(f"Customization service unavailable (HTTP {status})")
        if status >= 400:
            raise CustomizationRejectedError(
                f"Customization webhook rejected the request with HTTP {status}"
            )
        return self._parse_body(response.text)

    @staticmethod
    def _parse_body(body: str) -> str:
        if not body.strip():
            raise CustomizationRejectedError("Empty response from customization webhook")
        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return body

        if isinstance(payload, dict) and payload.get("resume"):
            resume = payload["resume"]
            return resume if isinstance(resume, str) else json.dumps(resume, indent=2)
        if isinstance(payload, str):
            return payload
        return json.dumps(payload, indent=2)

    @staticmethod
    def _join_url(base: str, path: str) -> str:
        if not path:
            return base
        return f"{base.rstrip('/')}/{path.lstrip('/')}"
