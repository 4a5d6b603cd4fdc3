"""
Configuration settings for ProTrack.
All sensitive values are loaded from environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "ProTrack"
    debug: bool = Field(default=False, validation_alias="DEBUG")
    environment: str = Field(default="production", validation_alias="ENVIRONMENT")

    # Server
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")

    # Google Sheets (entity store)
    google_credentials_json: str = Field(default="", validation_alias="GOOGLE_CREDENTIALS_JSON")
    google_sheet_id: str = Field(default="", validation_alias="GOOGLE_SHEET_ID")

    # Summarizer (any OpenAI-compatible endpoint, DeepSeek by default)
    deepseek_api_key: str = Field(default="", validation_alias="DEEPSEEK_API_KEY")
    deepseek_base_url: str = Field(default="https://api.deepseek.com/v1", validation_alias="DEEPSEEK_BASE_URL")
    deepseek_model: str = Field(default="deepseek-chat", validation_alias="DEEPSEEK_MODEL")
    summarizer_timeout_seconds: float = Field(default=60.0, validation_alias="SUMMARIZER_TIMEOUT_SECONDS")

    # Timezone used for "today" in overdue checks and stats windows
    timezone: str = Field(default="UTC", validation_alias="TIMEZONE")

    # Views
    projects_per_page: int = Field(default=9, validation_alias="PROJECTS_PER_PAGE")


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the application settings."""
    return settings
