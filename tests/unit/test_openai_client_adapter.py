from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from resume_worker.customization.exceptions import (
    CustomizationNetworkError,
    CustomizationRejectedError,
    CustomizationTimeoutError,
)
from resume_worker.customization.models import CustomizationRequest
from resume_worker.customization.openai_client_adapter import OpenAIClientAdapter

REQUEST = CustomizationRequest(
    resume_content="# Jane Doe\n- Python",
    job_description="Backend engineer role",
    job_title="Backend Engineer",
    company_name="Acme",
)
_HTTP_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _send_with(mock_client: MagicMock) -> str:
    with patch(
        "resume_worker.customization.openai_client_adapter.openai.OpenAI",
        return_value=mock_client,
    ):
        adapter = OpenAIClientAdapter(api_key="k", model="m")
        return adapter.send(REQUEST, timeout_seconds=30)


class TestOpenAIClientAdapter:
    def test_returns_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response("# Tailored")
        assert _send_with(mock_client) == "# Tailored"

    def test_prompt_carries_resume_and_job(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response("# Tailored")
        _send_with(mock_client)

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        prompt = kwargs["messages"][-1]["content"]
        assert "# Jane Doe\n- Python" in prompt
        assert "Backend engineer role" in prompt
        assert "Acme" in prompt
        assert kwargs["timeout"] == 30
        assert kwargs["model"] == "m"

    def test_strips_code_fence(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response(
            "```markdown\n# Tailored\n```"
        )
        assert _send_with(mock_client) == "# Tailored"

    def test_disables_sdk_retries(self) -> None:
        with patch(
            "resume_worker.customization.openai_client_adapter.openai.OpenAI"
        ) as mock_openai:
            OpenAIClientAdapter(api_key="k", model="m", base_url="http://llm.local/v1")
        mock_openai.assert_called_once_with(
            api_key="k", base_url="http://llm.local/v1", max_retries=0
        )

    def test_raises_rejected_for_empty_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response(None)
        with pytest.raises(CustomizationRejectedError, match="empty response"):
            _send_with(mock_client)

    def test_raises_timeout(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APITimeoutError(
            request=_HTTP_REQUEST
        )
        with pytest.raises(CustomizationTimeoutError):
            _send_with(mock_client)

    def test_raises_network_error_on_connection_failure(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=_HTTP_REQUEST
        )
        with pytest.raises(CustomizationNetworkError, match="^Customization service unavailable$"):
            _send_with(mock_client)

    def test_raises_network_error_on_rate_limit(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.RateLimitError(
            "slow down",
            response=httpx.Response(429, request=_HTTP_REQUEST),
            body=None,
        )
        with pytest.raises(CustomizationNetworkError):
            _send_with(mock_client)

    def test_raises_rejected_on_bad_request(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.BadRequestError(
            "context too long",
            response=httpx.Response(400, request=_HTTP_REQUEST),
            body=None,
        )
        with pytest.raises(CustomizationRejectedError, match="HTTP 400"):
            _send_with(mock_client)

    def test_raises_network_error_on_api_error(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIError(
            message="server error",
            request=_HTTP_REQUEST,
            body=None,
        )
        with pytest.raises(CustomizationNetworkError) as exc_info:
            _send_with(mock_client)
        assert "server error" not in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, openai.APIError)
