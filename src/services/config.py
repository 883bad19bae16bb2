"""Configuration loading for the billing generator.

Loads settings from .env file and environment variables with sensible defaults.
Validates configuration and provides clear error messages.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///./parking.db"
DEFAULT_LOG_FILE = "logs/billing.log"


@dataclass
class BillingConfig:
    """Configuration for database access and billing runs."""

    database_url: str = DEFAULT_DATABASE_URL
    """SQLAlchemy database URL (default: local SQLite)"""

    log_file: str = DEFAULT_LOG_FILE
    """Path to log file (default: logs/billing.log)"""


def load_config(env_file: str = ".env") -> BillingConfig:
    """
    Load configuration from .env file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (DATABASE_URL, LOG_FILE)
    2. .env file in project root
    3. Default values

    Args:
        env_file: Path to the .env file (default: ./.env)

    Returns:
        BillingConfig with all settings

    Raises:
        ValueError: If DATABASE_URL is not an SQLAlchemy URL
    """
    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(env_path)

    database_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL).strip()
    log_file = os.getenv("LOG_FILE", DEFAULT_LOG_FILE).strip() or DEFAULT_LOG_FILE

    # SQLAlchemy URLs always look like dialect[+driver]://...
    if "://" not in database_url:
        raise ValueError(
            f"DATABASE_URL is not a valid SQLAlchemy URL: {database_url!r}. "
            "Expected e.g. sqlite:///./parking.db"
        )

    return BillingConfig(database_url=database_url, log_file=log_file)


__all__ = ["BillingConfig", "load_config"]
