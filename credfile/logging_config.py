"""
Logging configuration that keeps password hashes out of the logs
"""

import logging
import logging.config
import re
from typing import Any, Dict

HASH_PATTERN = re.compile(r"\$2[abxy]\$\d{2}\$[./A-Za-z0-9]{53}|\{SHA\}[A-Za-z0-9+/=]{28}")


class RedactHashFilter(logging.Filter):
    """Filter to mask password hashes in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Replace anything that looks like a stored hash."""
        message = record.getMessage()
        if HASH_PATTERN.search(message):
            record.msg = HASH_PATTERN.sub("[REDACTED]", message)
            record.args = None
        return True  # Never drop records


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration with hash redaction."""
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "redact_hashes": {
                "()": RedactHashFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": ["redact_hashes"]
            }
        },
        "loggers": {
            "credfile": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            "watchdog": {
                "handlers": ["default"],
                "level": "WARNING",
                "propagate": False
            }
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
