"""Logging configuration for the billing API server and CLI runs.

Writes to stdout and a log file, level taken from the LOG_LEVEL env var.
Default: INFO. Set LOG_LEVEL=WARNING for production, DEBUG for verbose output.
Billing runs log every created invoice, so the file doubles as an audit trail.
"""

import logging
import os
import sys
from pathlib import Path

from src.services.config import DEFAULT_LOG_FILE

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_level() -> int:
    """Get logging level from LOG_LEVEL environment variable.

    Returns:
        Logging level constant (default: INFO)
    """
    level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_str)
    return level if isinstance(level, int) else logging.INFO


def setup_server_logging(log_file: str = DEFAULT_LOG_FILE) -> logging.Logger:
    """
    Configure root logger for the API server or a CLI billing run.

    Args:
        log_file: Path to log file (default: logs/billing.log)

    Returns:
        Root logger, already configured

    Behavior:
        - Creates the log directory if missing
        - Replaces existing root handlers with stdout + file handlers
        - ISO format timestamps: [YYYY-MM-DD HH:MM:SS]
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    log_level = get_log_level()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Avoid duplicate lines when called twice (tests, reloads)
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(log_level)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)

    file_handler = logging.FileHandler(log_path)
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    return root_logger


__all__ = ["get_log_level", "setup_server_logging"]
