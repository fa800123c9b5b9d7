"""Ride-scoped logging context.

The ride being priced is held in a context variable, so every record emitted
while the engine works on it can be tagged without passing ids around.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

RIDE_FIELDS = ("ride_id", "ride_class", "correlation_id")
NO_RIDE = "-"

# Replaced on every entry, never mutated in place.
_ride_fields: ContextVar[dict[str, str]] = ContextVar("ride_log_fields", default={})


def current_ride_fields() -> dict[str, str]:
    return dict(_ride_fields.get())


@contextmanager
def log_ride_context(
    ride_id: str,
    ride_class: str | None = None,
    correlation_id: str | None = None,
) -> Iterator[None]:
    """Tag records emitted inside the block with the ride being priced.

    The correlation id defaults to the ride id. Blocks nest; leaving one
    restores the enclosing ride.
    """
    fields = {"ride_id": ride_id, "correlation_id": correlation_id or ride_id}
    if ride_class is not None:
        fields["ride_class"] = ride_class
    token = _ride_fields.set(fields)
    try:
        yield
    finally:
        _ride_fields.reset(token)


class RideContextFilter(logging.Filter):
    """Copies the active ride's fields onto records.

    Fields passed explicitly through ``extra`` win. Outside a ride, ``ride_id``
    and ``correlation_id`` are set to ``-`` so formatters can always use them.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        fields = _ride_fields.get()
        for name in RIDE_FIELDS:
            if not hasattr(record, name) and name in fields:
                setattr(record, name, fields[name])
        for name in ("ride_id", "correlation_id"):
            if not hasattr(record, name):
                setattr(record, name, NO_RIDE)
        return True
