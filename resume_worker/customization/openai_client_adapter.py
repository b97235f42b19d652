from pathlib import Path

import openai

from resume_worker.customization.client_base import BaseCustomizationTransport
from resume_worker.customization.exceptions import (
    CustomizationNetworkError,
    CustomizationRejectedError,
    CustomizationTimeoutError,
)
from resume_worker.customization.models import CustomizationRequest
from resume_worker.customization.prompt_loader import load_prompt_template
from resume_worker.logging.logger import Log


class OpenAIClientAdapter(BaseCustomizationTransport):
    """Customization through an OpenAI-compatible chat completion API."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        temperature: float = 0.7,
        base_url: str | None = None,
        prompt_template_path: Path | None = None,
        system_prompt: str = "",
    ) -> None:
        # No SDK-level retries; failed calls are retried by redelivery.
        self._client = openai.OpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        self._model = model
        self._temperature = temperature
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._system_prompt = system_prompt

    def send(self, request: CustomizationRequest, *, timeout_seconds: float) -> str:
        prompt = self._prompt_template.format(
            job_title=request.job_title or "not specified",
            company_name=request.company_name or "not specified",
            job_description=request.job_description,
            resume_content=request.resume_content,
        )
        Log.debug(f"Customization prompt:\n{prompt}")

        messages = []
        if self._system_prompt:
            messages.append({"role": "system", "content": self._system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                temperature=self._temperature,
                messages=messages,  # type: ignore[arg-type]
                timeout=timeout_seconds,
            )
        except openai.APITimeoutError as exc:
            Log.warning(f"AI provider timed out: {exc}")
            raise CustomizationTimeoutError("Customization service timed out") from exc
        except (
            openai.APIConnectionError,
            openai.RateLimitError,
            openai.InternalServerError,
        ) as exc:
            Log.warning(f"AI provider network error: {exc}")
            raise CustomizationNetworkError("Customization service unavailable") from exc
        except openai.APIStatusError as exc:
            Log.warning(f"AI provider rejected the request: {exc}")
            raise CustomizationRejectedError(
                f"AI provider rejected the request with HTTP {exc.status_code}"
            ) from exc
        except openai.APIError as exc:
            Log.warning(f"AI provider API error: {exc}")
            raise CustomizationNetworkError("Customization service unavailable") from exc

        if not response.choices:
            raise CustomizationRejectedError("AI returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise CustomizationRejectedError("AI returned empty response")
        return self._strip_code_fence(content)

    @staticmethod
    def _strip_code_fence(raw: str) -> str:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)
        return cleaned
