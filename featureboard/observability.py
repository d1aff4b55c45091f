"""Logging setup, applied once at startup."""

from logging.config import dictConfig


def init_logging(level: str = "INFO") -> None:
    """Console logs for the ``featureboard`` package and the root logger at ``level``."""
    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"
    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"console": {"format": fmt}},
        "handlers": {"console": {"class": "logging.StreamHandler", "formatter": "console"}},
        "loggers": {"featureboard": {"level": level.upper()}},
        "root": {"level": "WARNING", "handlers": ["console"]},
    })
