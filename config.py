"""
Baztille Hotness Engine - Configuration
"""
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    BASE_DIR: Path = Path(__file__).parent
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).parent / "data")
    DATABASE_PATH: Path = Field(default_factory=lambda: Path(__file__).parent / "data" / "baztille.db")
    LOG_DIR: Optional[Path] = Field(default_factory=lambda: Path(__file__).parent / "data" / "logs")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_ALL_TO_CONSOLE: bool = Field(default=True, description="Mirror every log record to stderr")

    # Clock
    TIMEZONE_FOR_CRONJOBS: str = Field(default="UTC", description="IANA timezone used by cron jobs")
    FAKE_DATE: Optional[str] = Field(default=None, description="ISO datetime that freezes the app clock")

    # Hotness engine
    HOTNESS_UPDATE_HOUR: int = Field(default=12, ge=0, le=23)
    HOTNESS_UPDATE_MINUTE: int = Field(default=0, ge=0, le=59)
    DEFAULT_FEATURED_DECISION_TRIGGER: float = Field(default=10, gt=0)

    # Decision featuring
    FEATURING_DELAY_DAYS: int = Field(default=4, ge=0)
    FEATURING_HOUR: int = Field(default=12, ge=0, le=23)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def ensure_directories():
    """Ensure all required directories exist."""
    dirs = [
        settings.DATA_DIR,
        settings.DATABASE_PATH.parent,
    ]
    if settings.LOG_DIR:
        dirs.append(settings.LOG_DIR)
    for dir_path in dirs:
        dir_path.mkdir(parents=True, exist_ok=True)
