"""Configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

ProviderName = Literal["anthropic", "openai", "ollama"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remediation text: when disabled, the built-in report is always used
    ai_enabled: bool = Field(default=True)
    default_ai_provider: ProviderName = Field(default="anthropic")
    ai_max_tokens: int = Field(default=1000, ge=100, le=8000)
    ai_temperature: float = Field(default=0.3, ge=0.0, le=1.0)

    anthropic_api_key: SecretStr | None = Field(default=None)
    anthropic_model: str = Field(default="claude-sonnet-4-20250514")
    openai_api_key: SecretStr | None = Field(default=None)
    openai_model: str = Field(default="gpt-4o")
    ollama_host: str = Field(default="http://localhost:11434")
    ollama_model: str = Field(default="gpt-oss:20b")

    # Storage
    database_url: str = Field(default="sqlite+aiosqlite:///./keyguard.db")
    database_echo: bool = Field(default=False)

    # REST API
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_key: SecretStr | None = Field(
        default=None,
        description="Shared key required in X-API-Key. Unset disables API authentication.",
    )

    # Scanning
    max_concurrent_scans: int = Field(default=5, ge=1, le=50)
    max_concurrent_fetches: int = Field(default=5, ge=1, le=50)
    http_timeout: int = Field(default=30, ge=1, le=120)
    fetch_requests_per_second: int = Field(default=20, ge=1, le=500)
    max_response_bytes: int = Field(default=5_000_000, ge=1024)
    user_agent: str = Field(default="KeyGuard-Scanner/0.1")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "text"] = Field(default="json")

    # CORS: CORS_ORIGINS is a comma-separated list
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
    )
    cors_allow_credentials: bool = Field(default=True)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v: object) -> object:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @staticmethod
    def _reveal(secret: SecretStr | None) -> str | None:
        return secret.get_secret_value() if secret else None

    def get_anthropic_key(self) -> str | None:
        """Get Anthropic API key value."""
        return self._reveal(self.anthropic_api_key)

    def get_openai_key(self) -> str | None:
        """Get OpenAI API key value."""
        return self._reveal(self.openai_api_key)

    def get_api_key(self) -> str | None:
        """Get API authentication key value."""
        return self._reveal(self.api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
