"""Ride request, rate policy and fare breakdown models."""

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fare_engine.core.exceptions import InvalidPolicy, InvalidRequest

SurgeFn = Callable[[datetime], float]


def validation_messages(error: ValidationError) -> list[str]:
    """Flatten pydantic errors into ``field: message`` strings."""
    return [
        f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
        for err in error.errors()
    ]


class RideRequest(BaseModel):
    """A ride to be priced.

    Only types are enforced here. Range and emptiness checks happen during fare
    validation so a malformed request can still be built and rejected. A naive
    timestamp is taken to be UTC, so surge functions always see an aware one.
    """

    model_config = ConfigDict(frozen=True)

    ride_id: str
    pickup_location: str
    dropoff_location: str
    distance: float
    ride_class: str
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return v if v.tzinfo is not None else v.replace(tzinfo=UTC)

    @classmethod
    def from_payload(cls, payload: str | bytes | Mapping[str, Any]) -> "RideRequest":
        """Decode a JSON document or mapping, raising InvalidRequest if malformed."""
        try:
            if isinstance(payload, (str, bytes)):
                return cls.model_validate_json(payload)
            return cls.model_validate(payload)
        except ValidationError as e:
            raise InvalidRequest(
                "Malformed ride request",
                details={"errors": validation_messages(e)},
            ) from e


class RatePolicy(BaseModel):
    """Pricing for one ride class.

    Instances are immutable, so the policy a computation resolved is the snapshot
    it prices with, whatever is registered afterwards.
    """

    model_config = ConfigDict(frozen=True)

    base_fee: float = Field(ge=0, allow_inf_nan=False)
    per_mile_rate: float = Field(ge=0, allow_inf_nan=False)
    minimum_fare: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    surge_fn: SurgeFn | None = Field(default=None, exclude=True)
    description: str = ""

    @classmethod
    def build(cls, **fields: Any) -> "RatePolicy":
        """Construct a policy, raising InvalidPolicy instead of ValidationError."""
        try:
            return cls(**fields)
        except ValidationError as e:
            raise InvalidPolicy(
                "Invalid rate policy",
                details={"errors": validation_messages(e)},
            ) from e


class FareBreakdown(BaseModel):
    """Itemized fare for one ride."""

    model_config = ConfigDict(frozen=True)

    ride_id: str
    ride_class: str
    distance: float = Field(ge=0)
    base_fee: float = Field(ge=0)
    distance_component: float = Field(ge=0)
    subtotal: float = Field(ge=0)
    surge_multiplier: float = Field(ge=1.0)
    surge_adjustment: float = Field(ge=0)
    total: float = Field(ge=0)
    policy_version: int = Field(default=0, ge=0)

    def describe(self) -> str:
        return (
            f"RideID: {self.ride_id} | Class: {self.ride_class} "
            f"| Distance: {self.distance:.2f} mi | Fare: ${self.total:.2f}"
        )
