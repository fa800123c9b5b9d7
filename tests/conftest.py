from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest

from fare_engine.engine import FareEngine
from fare_engine.ledger import RideLedger
from fare_engine.models import RatePolicy, RideRequest
from fare_engine.registry import RideClassRegistry
from fare_engine.ride_classes import register_default_ride_classes

# Monday, mid-morning: outside every surge window used in the tests.
FIXED_TIMESTAMP = datetime(2024, 3, 4, 10, 30, tzinfo=UTC)


@pytest.fixture
def fixed_timestamp() -> datetime:
    return FIXED_TIMESTAMP


@pytest.fixture
def make_request() -> Callable[..., RideRequest]:
    """Factory for ride requests with sensible defaults."""

    def _make(**overrides: Any) -> RideRequest:
        fields: dict[str, Any] = {
            "ride_id": "R100",
            "pickup_location": "Downtown",
            "dropoff_location": "Airport",
            "distance": 10.5,
            "ride_class": "standard",
            "timestamp": FIXED_TIMESTAMP,
        }
        fields.update(overrides)
        return RideRequest(**fields)

    return _make


@pytest.fixture
def standard_policy() -> RatePolicy:
    return RatePolicy(base_fee=2.0, per_mile_rate=1.5)


@pytest.fixture
def premium_policy() -> RatePolicy:
    return RatePolicy(base_fee=5.0, per_mile_rate=3.0)


@pytest.fixture
def registry() -> RideClassRegistry:
    """Registry preloaded with the built-in standard and premium classes."""
    registry = RideClassRegistry()
    register_default_ride_classes(registry)
    return registry


@pytest.fixture
def ledger() -> RideLedger:
    return RideLedger()


@pytest.fixture
def engine(registry: RideClassRegistry, ledger: RideLedger) -> FareEngine:
    return FareEngine(registry, ledger=ledger)
