"""Centralized logging and application configuration with environment variable support."""

import os
import logging
import sys
from pythonjsonlogger.json import JsonFormatter


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


class LoggingConfig:
    """Centralized logging configuration."""

    # Environment variable defaults
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json").lower()
    LOG_MASK_SENSITIVE = _env_flag("LOG_MASK_SENSITIVE", "true")
    LOG_CORRELATION_ID_HEADER = os.environ.get("LOG_CORRELATION_ID_HEADER", "X-Correlation-ID")
    LOG_SLOW_OPERATION_THRESHOLD_MS = int(os.environ.get("LOG_SLOW_OPERATION_THRESHOLD_MS", "1000"))

    @classmethod
    def setup_logging(cls) -> None:
        """Configure logging based on environment variables."""
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, cls.LOG_LEVEL, logging.INFO))

        root_logger.handlers.clear()

        # stdout for serverless hosting
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(getattr(logging, cls.LOG_LEVEL, logging.INFO))

        if cls.LOG_FORMAT == "json":
            formatter = JsonFormatter(
                "%(timestamp)s %(levelname)s %(name)s %(message)s",
                timestamp=True
            )
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

        # Suppress noisy third-party loggers
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("hpack").setLevel(logging.WARNING)
        logging.getLogger("supabase").setLevel(logging.WARNING)


class AppConfig:
    """Feature switches and limits for the listing workflow."""

    ENVIRONMENT = os.environ.get("ENVIRONMENT", "production").lower()
    # Status-change notifications are switched off for automated test runs
    NOTIFICATIONS_ENABLED = (
        _env_flag("NOTIFICATIONS_ENABLED", "true") and ENVIRONMENT != "test"
    )
    NOTIFICATION_FEED_LIMIT = int(os.environ.get("NOTIFICATION_FEED_LIMIT", "50"))
    SEARCH_DEFAULT_LIMIT = int(os.environ.get("SEARCH_DEFAULT_LIMIT", "20"))
    SEARCH_MAX_LIMIT = int(os.environ.get("SEARCH_MAX_LIMIT", "100"))
    TOWNSHIP_SCAN_LIMIT = int(os.environ.get("TOWNSHIP_SCAN_LIMIT", "1000"))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)
