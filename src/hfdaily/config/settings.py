"""Configuration management using pydantic-settings.

Supports environment variables and .env file loading.
"""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration.

    Missing optional credentials are not errors: without an OpenAI key the
    digest is built deterministically, and without a webhook URL the result
    is only logged.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),  # .env.local overrides .env
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "hfdaily"
    log_level: str = "INFO"
    log_json: bool = False  # Set True in production for structured logs

    # OpenAI (optional)
    openai_api_key: SecretStr | None = Field(
        default=None,
        description="OpenAI API key; absence switches to deterministic summaries",
    )
    openai_base_url: str | None = Field(
        default=None,
        description="Custom OpenAI API base URL (for compatible APIs)",
    )
    openai_model: str = "gpt-4o"
    openai_timeout: int = 60
    openai_tracing_api_key: SecretStr | None = Field(
        default=None,
        description="Separate OpenAI API key for tracing (if using custom base URL)",
    )
    openai_tracing_enabled: bool = Field(
        default=False,
        description="Enable OpenAI Agents SDK tracing",
    )

    # AI processing
    ai_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    ai_max_tokens_summary: int = 4096
    ai_max_tokens_structured: int = 2048
    ai_max_concurrent: int = Field(
        default=5,
        ge=1,
        description="Maximum concurrent per-paper model requests",
    )
    analysis_strategy: Literal["per_item", "batch"] = Field(
        default="per_item",
        description="One model request per paper, or one request for all papers",
    )

    # Google Chat (optional)
    google_chat_webhook_url: SecretStr | None = Field(
        default=None,
        description="Google Chat incoming webhook URL; absence means log-only mode",
    )
    notification_format: Literal["structured", "text"] = Field(
        default="structured",
        description="Card built from structured analysis, or from a free-text summary",
    )

    # Hugging Face
    hf_api_url: str = "https://huggingface.co/api/daily_papers"
    hf_papers_url: str = "https://huggingface.co/papers"
    http_timeout: int = 30
    http_user_agent: str = "Mozilla/5.0 (compatible; HuggingFaceDailyBot/1.0)"

    # Paper display
    top_papers_count: int = Field(default=5, ge=3, le=5)
    max_authors_short: int = Field(default=3, ge=1)
    max_authors_long: int = Field(default=5, ge=1)
    abstract_preview_short: int = Field(default=200, ge=1)
    abstract_preview_long: int = Field(default=300, ge=1)
    max_authors_in_card: int = Field(default=2, ge=1)
    max_summary_length: int = Field(default=300, ge=1)

    # Schedule
    schedule_hour: int = Field(default=9, ge=0, le=23)
    schedule_minute: int = Field(default=0, ge=0, le=59)
    schedule_timezone: str = "Asia/Seoul"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000


# Global singleton instance
settings = Settings()


def get_settings() -> Settings:
    """Return the global settings instance (FastAPI dependency)."""
    return settings
