"""Fare computation and ride classification engine."""

from fare_engine.core.exceptions import (
    DuplicateRide,
    FareError,
    InvalidPolicy,
    InvalidRequest,
    NotFound,
    UnknownRideClass,
)
from fare_engine.engine import FareEngine, FareResult, RequestState
from fare_engine.fare import compute_fare
from fare_engine.ledger import RideLedger
from fare_engine.models import FareBreakdown, RatePolicy, RideRequest
from fare_engine.registry import RideClassRegistry
from fare_engine.service import FareService, build_service
from fare_engine.surge import SurgeSchedule, SurgeWindow

__all__ = [
    "RideRequest",
    "RatePolicy",
    "FareBreakdown",
    "SurgeSchedule",
    "SurgeWindow",
    "RideClassRegistry",
    "RideLedger",
    "FareEngine",
    "FareResult",
    "RequestState",
    "FareService",
    "build_service",
    "compute_fare",
    "FareError",
    "InvalidRequest",
    "UnknownRideClass",
    "InvalidPolicy",
    "DuplicateRide",
    "NotFound",
]
