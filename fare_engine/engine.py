"""Fare engine: per-request state machine around fare evaluation."""

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from fare_engine.core.exceptions import FareError
from fare_engine.fare import compute_fare, validate_request
from fare_engine.fare_logging import log_ride_context
from fare_engine.ledger import RideLedger
from fare_engine.models import FareBreakdown, RatePolicy, RideRequest
from fare_engine.registry import RideClassRegistry

logger = logging.getLogger(__name__)


class RequestState(str, Enum):
    """Fare request lifecycle states."""

    RECEIVED = "received"
    VALIDATED = "validated"
    POLICY_RESOLVED = "policy_resolved"
    COMPUTED = "computed"
    FINALIZED = "finalized"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


VALID_TRANSITIONS: dict[RequestState, set[RequestState]] = {
    RequestState.RECEIVED: {RequestState.VALIDATED, RequestState.REJECTED},
    RequestState.VALIDATED: {RequestState.POLICY_RESOLVED, RequestState.REJECTED},
    RequestState.POLICY_RESOLVED: {RequestState.COMPUTED, RequestState.REJECTED},
    RequestState.COMPUTED: {RequestState.FINALIZED, RequestState.REJECTED},
    RequestState.FINALIZED: set(),
    RequestState.REJECTED: set(),
}

TERMINAL_STATES = frozenset({RequestState.FINALIZED, RequestState.REJECTED})


class FareComputation(BaseModel):
    """One request's passage through the state machine."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    request: RideRequest
    state: RequestState = RequestState.RECEIVED
    policy: RatePolicy | None = None
    policy_version: int | None = None
    breakdown: FareBreakdown | None = None
    error: FareError | None = None

    def transition_to(self, new_state: RequestState) -> None:
        """Transition to a new state with validation."""
        if self.state.is_terminal:
            raise ValueError(f"Cannot transition from terminal state {self.state.value}")

        if new_state not in VALID_TRANSITIONS[self.state]:
            raise ValueError(f"Invalid transition from {self.state.value} to {new_state.value}")

        self.state = new_state

    def reject(self, error: FareError) -> None:
        self.transition_to(RequestState.REJECTED)
        self.error = error


class FareResult(BaseModel):
    """Outcome of a fare request: a breakdown when finalized, an error when rejected."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ride_id: str
    state: RequestState
    breakdown: FareBreakdown | None = None
    error: FareError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.breakdown is not None

    def unwrap(self) -> FareBreakdown:
        """Return the breakdown, raising the carried error if the request was rejected."""
        if self.error is not None:
            raise self.error
        if self.breakdown is None:
            raise ValueError(f"Fare request {self.ride_id} has no breakdown")
        return self.breakdown

    def to_dict(self) -> dict[str, Any]:
        return {
            "ride_id": self.ride_id,
            "state": self.state.value,
            "breakdown": self.breakdown.model_dump(mode="json") if self.breakdown else None,
            "error": self.error.to_dict() if self.error else None,
        }

    @classmethod
    def from_computation(cls, computation: FareComputation) -> "FareResult":
        return cls(
            ride_id=computation.request.ride_id,
            state=computation.state,
            breakdown=computation.breakdown,
            error=computation.error,
        )


class FareEngine:
    """Validates requests, resolves their policy and prices them.

    Holds no mutable state of its own; any number of threads may call
    ``process`` concurrently. Failures are permanent for a given input and are
    returned, never raised.
    """

    def __init__(
        self,
        registry: RideClassRegistry,
        ledger: RideLedger | None = None,
        precision: int = 2,
    ) -> None:
        self.registry = registry
        self.ledger = ledger
        self.precision = precision

    def process(self, request: RideRequest) -> FareResult:
        """Price a request and record the fare in the ledger, if one is attached."""
        return self._run(request, record=True)

    def quote(self, request: RideRequest) -> FareResult:
        """Price a request without recording it."""
        return self._run(request, record=False)

    def process_many(self, requests: Iterable[RideRequest]) -> list[FareResult]:
        return [self.process(request) for request in requests]

    def _run(self, request: RideRequest, record: bool) -> FareResult:
        computation = FareComputation(request=request)

        with log_ride_context(request.ride_id, ride_class=request.ride_class):
            try:
                validate_request(request)
                computation.transition_to(RequestState.VALIDATED)

                policy, version = self.registry.resolve_snapshot(request.ride_class)
                computation.policy = policy
                computation.policy_version = version
                computation.transition_to(RequestState.POLICY_RESOLVED)

                computation.breakdown = compute_fare(
                    request, policy, precision=self.precision, policy_version=version
                )
                computation.transition_to(RequestState.COMPUTED)

                if record and self.ledger is not None:
                    self.ledger.record(request.ride_id, computation.breakdown)
                computation.transition_to(RequestState.FINALIZED)
            except FareError as e:
                computation.breakdown = None
                computation.reject(e)
                logger.warning(
                    f"Fare request rejected ({e.kind}): {e.message}",
                    extra={"error_kind": e.kind},
                )
            else:
                logger.info(
                    f"Fare finalized: {computation.breakdown.total:.{self.precision}f}"
                )

        return FareResult.from_computation(computation)
