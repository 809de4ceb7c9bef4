"""Application configuration."""
import logging
from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Server
    port: int = 3000
    cors_origins: str = "*"  # Comma separated

    # Spreadsheet
    spreadsheet_id: str = ""
    hospital_range: str = "A:Z"
    use_mock_data: bool = False  # Serve the built-in fixture sheet instead

    # Google service account
    google_credentials_base64: str = ""  # base64 of the service account JSON
    google_application_credentials: str = ""  # path to the service account JSON

    # App Settings
    log_level: str = "INFO"

    # HTTP
    sheets_timeout: float = 30.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars from Render

    @field_validator("log_level", mode="before")
    @classmethod
    def known_log_level(cls, value) -> str:
        """Unknown level names fall back to INFO."""
        level = str(value or "").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            return "INFO"
        return level

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
