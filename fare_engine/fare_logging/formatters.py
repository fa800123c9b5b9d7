"""Log formatters for JSON and human-readable output."""

import json
import logging
from datetime import UTC, datetime

from .context import NO_RIDE, RIDE_FIELDS

JSON_FIELDS = (*RIDE_FIELDS, "error_kind")


class JSONFormatter(logging.Formatter):
    """One JSON document per record; ride fields are included only inside a ride."""

    def __init__(self, environment: str = "development"):
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "env": self.environment,
        }

        for field in JSON_FIELDS:
            value = getattr(record, field, NO_RIDE)
            if value != NO_RIDE:
                log_data[field] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class DevFormatter(logging.Formatter):
    """Human-readable format for development; expects RideContextFilter on the handler."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s [%(levelname)8s] [ride=%(ride_id)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
