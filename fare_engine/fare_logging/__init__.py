"""Structured logging tagged with the ride being priced."""

from .context import RideContextFilter, current_ride_fields, log_ride_context
from .formatters import DevFormatter, JSONFormatter
from .setup import setup_logging

__all__ = [
    "setup_logging",
    "log_ride_context",
    "current_ride_fields",
    "RideContextFilter",
    "JSONFormatter",
    "DevFormatter",
]
