"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Chat List"
    environment: str = "development"
    log_level: str = "info"

    # Backend
    api_base_url: str = "http://127.0.0.1:8000"
    request_timeout: float = 10.0

    # Share links are built against the frontend origin
    frontend_url: str = "http://localhost:3000"

    # Aggregation
    fetch_retries: int = 2
    retry_backoff_seconds: float = 1.0
    stale_after_seconds: float = 30.0
    partial_results: bool = False

    # Creation
    reconcile_delay_seconds: float = 0.5
    new_chat_prompt: str = "Hello, let's start a new conversation"
    new_chat_title: str = "New Chat"
    initial_message_count: int = 2


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
