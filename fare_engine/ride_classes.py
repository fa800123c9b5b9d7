"""Built-in ride classes."""

from fare_engine.models import RatePolicy
from fare_engine.registry import RideClassRegistry

STANDARD = "standard"
PREMIUM = "premium"

DEFAULT_RATE_POLICIES: dict[str, RatePolicy] = {
    STANDARD: RatePolicy(base_fee=2.0, per_mile_rate=1.5, description="Standard ride"),
    PREMIUM: RatePolicy(base_fee=5.0, per_mile_rate=3.0, description="Premium ride"),
}


def register_default_ride_classes(registry: RideClassRegistry) -> None:
    for class_id, policy in DEFAULT_RATE_POLICIES.items():
        registry.register(class_id, policy)
