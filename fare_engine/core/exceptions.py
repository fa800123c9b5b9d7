"""Standardized exception hierarchy for the fare engine."""

from typing import Any


class FareEngineError(Exception):
    """Base exception for all fare engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransientError(FareEngineError):
    """Errors that may succeed on retry."""

    pass


class SnapshotContention(TransientError):
    """Another writer swapped the registry snapshot first."""

    pass


class PermanentError(FareEngineError):
    """Errors that will not succeed on retry."""

    pass


class FareError(PermanentError):
    """Caller-facing failure of a fare operation.

    Each subclass maps to one structured failure response; ``kind`` is the
    stable identifier used at the API boundary.
    """

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.kind, "message": self.message, "details": self.details}


class InvalidRequest(FareError):
    """Malformed ride request (negative distance, empty identifiers)."""

    pass


class UnknownRideClass(FareError):
    """Ride class has no registry entry."""

    pass


class InvalidPolicy(FareError):
    """Rate policy rejected (negative fees, surge multiplier below 1.0)."""

    pass


class DuplicateRide(FareError):
    """A fare is already recorded for this ride."""

    pass


class NotFound(FareError):
    """No fare recorded for the requested ride."""

    pass
