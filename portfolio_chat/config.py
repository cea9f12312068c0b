"""Application settings loaded from environment variables."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Portfolio chat configuration. All values come from environment variables."""

    # Anthropic
    anthropic_api_key: str = Field(default="")
    chat_model: str = Field(default="claude-sonnet-4-5-20250929")
    classifier_model: str = Field(default="claude-haiku-4-5-20251001")

    # Generation
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    classifier_max_tokens: int = Field(default=100)
    response_max_tokens: int = Field(default=500)
    max_tool_rounds: int = Field(default=5, ge=1)

    # Retrieval
    max_activities: int = Field(default=5, ge=0)
    recent_activities_limit: int = Field(default=5, ge=0)

    # Timeouts (seconds)
    llm_timeout_seconds: float = Field(default=30.0)
    search_timeout_seconds: float = Field(default=10.0)
    request_timeout_seconds: float = Field(default=90.0)

    # Tavily (primary web search); DuckDuckGo needs no key
    tavily_api_key: str = Field(default="")

    # Database
    database_path: Path = Field(default=Path("data/portfolio.db"))

    # Turso (hosted libSQL); when set, overrides local database_path
    turso_database_url: str = Field(default="")
    turso_auth_token: str = Field(default="")

    # Persona
    assistant_name: str = Field(default="Jess")
    owner_name: str = Field(default="Jason Olefson")

    # HTTP
    http_host: str = Field(default="0.0.0.0")
    http_port: int = Field(default=3001)

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)


settings = Settings()
