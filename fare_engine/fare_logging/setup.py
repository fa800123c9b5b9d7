"""Logging setup and configuration."""

import logging
import sys

from fare_engine.settings import LoggingSettings

from .context import RideContextFilter
from .formatters import DevFormatter, JSONFormatter


def setup_logging(settings: LoggingSettings | None = None) -> None:
    """Send all records to stdout in the configured format, tagged with the active ride."""
    if settings is None:
        settings = LoggingSettings()

    handler = logging.StreamHandler(sys.stdout)
    if settings.format == "json":
        handler.setFormatter(JSONFormatter(settings.environment))
    else:
        handler.setFormatter(DevFormatter())
    handler.addFilter(RideContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.level)
