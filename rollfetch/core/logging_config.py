"""Logging configuration shared by the API process and Celery workers."""

import logging.config
from typing import Any, Dict

from rollfetch.core.config import settings

LOGGING_CONFIG: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        # Third-party loggers that are chatty at DEBUG
        "urllib3": {"level": "WARNING"},
        "asyncio": {"level": "WARNING"},
    },
    "root": {
        "level": settings.LOG_LEVEL,
        "handlers": ["console"],
    },
}


def setup_logging() -> None:
    """Apply LOGGING_CONFIG to the logging module."""
    logging.config.dictConfig(LOGGING_CONFIG)
