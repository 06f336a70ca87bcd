"""
Centralized configuration settings for the application.
"""

import os
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def _env_bool(key: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Application settings container."""

    # Database Configuration
    db_path: Path = field(default_factory=lambda: Path(
        os.getenv("DB_PATH", str(DATA_DIR / "react_calendar.db"))
    ))
    db_timeout: float = field(default_factory=lambda: float(os.getenv("DB_TIMEOUT", "5")))

    # Stream Configuration
    kafka_enabled: bool = field(default_factory=lambda: _env_bool("KAFKA_ENABLED", True))
    kafka_bootstrap_servers: str = field(
        default_factory=lambda: os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092")
    )
    kafka_topic: str = field(default_factory=lambda: os.getenv("KAFKA_TOPIC", "calendar-events"))
    kafka_client_id: str = field(
        default_factory=lambda: os.getenv("KAFKA_CLIENT_ID", "react-calendar-agent")
    )
    kafka_group_id: str = field(
        default_factory=lambda: os.getenv("KAFKA_GROUP_ID", "react-calendar-group")
    )
    publish_timeout: float = field(default_factory=lambda: float(os.getenv("PUBLISH_TIMEOUT", "5")))

    # API Configuration
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "3001")))
    logs_limit: int = field(default_factory=lambda: int(os.getenv("LOGS_LIMIT", "10")))

    # Logging Configuration
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", "agent.log"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    def __post_init__(self):
        """Ensure the database directory exists."""
        self.db_path = Path(self.db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)


def configure_logging(settings: Settings) -> None:
    """Send log records to both the log file and the console."""
    handlers = [logging.StreamHandler()]
    if settings.log_file:
        handlers.insert(0, logging.FileHandler(settings.log_file))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers
    )


# Singleton settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
