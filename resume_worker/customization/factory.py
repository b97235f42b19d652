from resume_worker.config.settings import Settings
from resume_worker.customization.client import CustomizationClient
from resume_worker.customization.client_base import BaseCustomizationTransport
from resume_worker.customization.example_client_adapter import ExampleClientAdapter
from resume_worker.customization.n8n_client_adapter import N8nWebhookAdapter
from resume_worker.customization.openai_client_adapter import OpenAIClientAdapter

SUPPORTED_PROVIDERS = ["example", "n8n", "openai", "openai_compatible"]


class CustomizationClientFactory:
    """Creates the customization client for the configured provider."""

    @classmethod
    def create(cls, settings: Settings) -> CustomizationClient:
        return CustomizationClient(cls.create_transport(settings))

    @classmethod
    def create_transport(cls, settings: Settings) -> BaseCustomizationTransport:
        provider = settings.customization_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        if provider == "n8n":
            url = settings.n8n_webhook_url.strip()
            if not url:
                raise ValueError("n8n_webhook_url is required for customization_provider=n8n")
            return N8nWebhookAdapter(webhook_url=url, webhook_path=settings.n8n_webhook_path)
        if provider in ("openai", "openai_compatible"):
            return OpenAIClientAdapter(
                api_key=settings.openai_api_key,
                model=settings.openai_model_name,
                temperature=settings.openai_temperature,
                base_url=cls._resolve_base_url(provider, settings),
            )
        raise ValueError(
            f"Unknown customization provider '{provider}'. Choose from: {SUPPORTED_PROVIDERS}"
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        url = settings.openai_base_url.strip()
        if provider == "openai_compatible" and not url:
            raise ValueError(
                "openai_base_url is required for customization_provider=openai_compatible"
            )
        return url or None
