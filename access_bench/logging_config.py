"""
Centralized logging configuration for access-bench.

Logs go to stderr; stdout carries only the benchmark report.
"""

import logging
import logging.config
import os
from typing import Any

__all__ = ["get_log_level", "get_logger", "get_logging_config", "setup_logging"]


def get_log_level() -> str:
    """Get log level from environment variable or default to WARNING."""
    return os.getenv("BENCH_LOG_LEVEL", "WARNING").upper()


def get_log_format() -> str:
    """Get log format based on environment."""
    env = os.getenv("BENCH_ENV", "development").lower()

    if env == "production":
        return "%(asctime)s | %(name)s | %(levelname)s | %(message)s | %(pathname)s:%(lineno)d"
    return "%(asctime)s | %(name)-28s | %(levelname)-8s | %(message)s"


def get_logging_config(level: str | None = None) -> dict[str, Any]:
    """Get the logging configuration dictionary."""
    log_level = (level or get_log_level()).upper()

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": get_log_format(),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "access_bench": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            # Third-party loggers
            "httpx": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "asyncpg": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": ["console"],
        },
    }


def setup_logging(level: str | None = None) -> None:
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
    logging.getLogger("access_bench.logging").debug(
        "Logging configured with level: %s", (level or get_log_level()).upper()
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the access_bench hierarchy.

    Args:
        name: Logger name (typically __name__ of the module)
    """
    if not name.startswith("access_bench"):
        name = "access_bench.main" if name == "__main__" else f"access_bench.{name}"
    return logging.getLogger(name)
