"""
Logging configuration

Console logging through dictConfig. Level comes from LOG_LEVEL (DEBUG mode
forces DEBUG); chatty third-party loggers are pinned to WARNING.
"""
import logging
import logging.config
from typing import Optional

from app.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "urllib3", "multipart")

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once per process."""
    global _configured
    if _configured:
        return

    if level is None:
        level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL.upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            name: {"level": "WARNING", "propagate": True} for name in QUIET_LOGGERS
        },
    })
    _configured = True
