"""Fare evaluation: a pure function of a ride request and a rate policy."""

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext

from fare_engine.core.exceptions import InvalidPolicy, InvalidRequest
from fare_engine.models import FareBreakdown, RatePolicy, RideRequest
from fare_engine.registry import normalize_class_id

REQUIRED_TEXT_FIELDS = ("ride_id", "pickup_location", "dropoff_location", "ride_class")

# Enough significant digits for the exact product of three finite floats
# (distance, rate, surge) quantized to cents.
DECIMAL_PRECISION = 1000


def to_decimal(value: float) -> Decimal:
    """Convert via the shortest repr so 6.2 becomes Decimal('6.2'), not its binary expansion."""
    return Decimal(str(value))


def quantize(value: Decimal, precision: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return value.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)


def validate_request(request: RideRequest) -> None:
    """Raise InvalidRequest unless identifiers are non-empty and distance is a finite value >= 0."""
    empty = [name for name in REQUIRED_TEXT_FIELDS if not getattr(request, name).strip()]
    if empty:
        raise InvalidRequest(
            f"Ride request has empty fields: {', '.join(empty)}",
            details={"ride_id": request.ride_id, "fields": empty},
        )
    if not math.isfinite(request.distance) or request.distance < 0:
        raise InvalidRequest(
            "Distance must be a non-negative number",
            details={"ride_id": request.ride_id, "distance": request.distance},
        )


def surge_multiplier_at(policy: RatePolicy, timestamp: datetime) -> Decimal:
    """Evaluate the policy's surge function, refusing failures and multipliers below 1.0."""
    if policy.surge_fn is None:
        return Decimal(1)
    try:
        value = float(policy.surge_fn(timestamp))
    except Exception as e:
        raise InvalidPolicy(
            f"surge_fn failed at {timestamp.isoformat()}: {e}",
            details={"timestamp": timestamp.isoformat()},
        ) from e
    if not math.isfinite(value) or value < 1.0:
        raise InvalidPolicy(
            "Surge multiplier must be >= 1.0",
            details={"timestamp": timestamp.isoformat(), "multiplier": value},
        )
    return to_decimal(value)


def compute_fare(
    request: RideRequest,
    policy: RatePolicy,
    precision: int = 2,
    policy_version: int = 0,
) -> FareBreakdown:
    """
    Compute the fare breakdown for a request under a policy snapshot.

    total = round_half_up(max(base_fee + distance * per_mile_rate, minimum_fare) * surge)

    Arithmetic is done in Decimal with enough digits to stay exact, so identical
    inputs always yield identical breakdowns and currency amounts never carry
    binary float artifacts. A fare too large to report as a float is rejected.
    """
    validate_request(request)
    surge = surge_multiplier_at(policy, request.timestamp)

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        base_fee = to_decimal(policy.base_fee)
        distance_component = to_decimal(request.distance) * to_decimal(policy.per_mile_rate)
        raw_total = max(base_fee + distance_component, to_decimal(policy.minimum_fare))

        subtotal = quantize(raw_total, precision)
        total = quantize(raw_total * surge, precision)
        surge_adjustment = total - subtotal

    if not math.isfinite(float(total)):
        raise InvalidRequest(
            "Fare exceeds the representable range",
            details={"ride_id": request.ride_id, "distance": request.distance},
        )

    return FareBreakdown(
        ride_id=request.ride_id,
        ride_class=normalize_class_id(request.ride_class),
        distance=request.distance,
        base_fee=float(quantize(base_fee, precision)),
        distance_component=float(quantize(distance_component, precision)),
        subtotal=float(subtotal),
        surge_multiplier=float(surge),
        surge_adjustment=float(surge_adjustment),
        total=float(total),
        policy_version=policy_version,
    )
