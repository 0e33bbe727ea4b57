"""
Intake Sync - Configuration

Loads settings from environment variables with sensible defaults.
"""

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

REQUIRED_SETTINGS = (
    "NOTION_API_KEY",
    "GAPI_SERVICE_ACCOUNT_KEY",
    "GOOGLE_SHEET_ID",
    "NOTION_DATABASE_ID",
)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or unusable."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Destination (Notion)
    NOTION_API_KEY: str = Field(default="")
    NOTION_DATABASE_ID: str = Field(default="")
    NOTION_VERSION: str = Field(default="2022-06-28")

    # Source (Google Sheets)
    GOOGLE_SHEET_ID: str = Field(default="")
    GAPI_SERVICE_ACCOUNT_KEY: str = Field(default="")
    SHEET_RANGE: str = Field(default="A2:ABY")

    @property
    def project_root(self) -> Path:
        """Return project root directory."""
        return PROJECT_ROOT

    # Application
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # HTTP behaviour shared by both connectors
    HTTP_RETRY_ATTEMPTS: int = Field(default=7)
    HTTP_BACKOFF_FACTOR: float = Field(default=0.6)
    REQUEST_TIMEOUT: int = Field(default=60)
    NOTION_MIN_REQUEST_INTERVAL: float = Field(default=0.35)

    # Referral matching
    FUZZY_MAX_DISTANCE: int = Field(default=2)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def missing_required(self) -> list[str]:
        """Names of required settings that are empty."""
        return [name for name in REQUIRED_SETTINGS if not getattr(self, name).strip()]

    def require(self) -> "Settings":
        """
        Fail fast when a required setting is missing.

        Raises:
            ConfigurationError: listing every missing variable
        """
        missing = self.missing_required()
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}. "
                f"Set them in the environment or in {PROJECT_ROOT / '.env'}."
            )
        return self


settings = Settings()
