from pydantic_settings import BaseSettings, SettingsConfigDict

from resume_worker.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "resumes"
    db_username: str = "resumes"
    db_password: str = "secret"
    db_pool_max_size: int = 10
    apply_schema_on_startup: bool = False

    queue_url: str = ""
    queue_lease_seconds: int = 900
    queue_poll_interval_seconds: float = 2.0
    queue_reconnect_max_seconds: float = 60.0

    customization_timeout_ms: int = 120_000
    customization_max_retries: int = 3
    retry_backoff_base_seconds: float = 2.0
    retry_backoff_max_seconds: float = 300.0

    worker_pool_size: int = 2
    shutdown_grace_seconds: float = 30.0
    resume_lock_ttl_seconds: int = 900

    render_timeout_seconds: float = 60.0

    aws_bucket_name: str = ""
    aws_region: str = "us-east-1"
    aws_endpoint_url: str = ""
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""

    pdf_engine: str = "pdfplumber"

    customization_provider: str = "n8n"
    n8n_webhook_url: str = ""
    n8n_webhook_path: str = "customize-resume-ai"
    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_base_url: str = ""
    openai_temperature: float = 0.7

    @property
    def customization_timeout_seconds(self) -> float:
        return self.customization_timeout_ms / 1000

    def require_infrastructure(self) -> None:
        """Fail fast when the queue broker or the artifact bucket is not configured.

        Raises:
            ConfigurationError: if QUEUE_URL or AWS_BUCKET_NAME is empty.
        """
        missing = []
        if not self.queue_url.strip():
            missing.append("QUEUE_URL")
        if not self.aws_bucket_name.strip():
            missing.append("AWS_BUCKET_NAME")
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )
