"""Configuration management for the Backlog to Notion task sync."""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Notion
    notion_api_token: str = ""
    notion_task_database_id: str = ""
    notion_project_database_id: str = ""
    notion_api_version: str = "2022-06-28"
    notion_title_property: str = "Name"
    notion_timeout_seconds: float = 30.0

    # Backlog
    backlog_base_url: str = "https://example.backlog.com"
    marker_category: str = "GGJVN"

    # Dates
    user_timezone: str = "UTC"

    # App
    log_level: str = "INFO"
    env: str = "development"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("user_timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        """Reject timezone names the IANA database does not know."""
        if not v:
            raise ValueError("user_timezone must not be empty")
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            raise ValueError(f"Unknown timezone: {v}")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
