"""Client settings loaded from environment variables and .env file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_GITLAB_URL = "https://gitlab.com/api/v4/"


class Settings(BaseSettings):
    """Settings for talking to a GitLab instance."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    gitlab_token: str | None = None
    gitlab_url: str = DEFAULT_GITLAB_URL
    gitlab_timeout: float = 30.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
