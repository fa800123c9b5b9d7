from .exceptions import (
    DuplicateRide,
    FareEngineError,
    FareError,
    InvalidPolicy,
    InvalidRequest,
    NotFound,
    PermanentError,
    SnapshotContention,
    TransientError,
    UnknownRideClass,
)
from .retry import RetryConfig, with_retry_sync

__all__ = [
    "FareEngineError",
    "TransientError",
    "SnapshotContention",
    "PermanentError",
    "FareError",
    "InvalidRequest",
    "UnknownRideClass",
    "InvalidPolicy",
    "DuplicateRide",
    "NotFound",
    "RetryConfig",
    "with_retry_sync",
]
