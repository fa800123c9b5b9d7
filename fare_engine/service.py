"""Public operations of the fare engine, as consumed by a dispatch or API layer."""

import logging
from collections.abc import Mapping
from typing import Any

from fare_engine.core.exceptions import FareError, InvalidRequest, NotFound
from fare_engine.engine import FareEngine, FareResult, RequestState
from fare_engine.ledger import RideLedger
from fare_engine.models import FareBreakdown, RatePolicy, RideRequest
from fare_engine.registry import RideClassRegistry
from fare_engine.ride_classes import register_default_ride_classes
from fare_engine.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class FareService:
    """Facade over registry, engine and ledger.

    Every operation returns its failure as a value. Structured ``*_json`` variants
    produce dicts whose field names match the data model.
    """

    def __init__(
        self,
        registry: RideClassRegistry,
        engine: FareEngine,
        ledger: RideLedger | None = None,
    ) -> None:
        self.registry = registry
        self.engine = engine
        self.ledger = ledger

    def register_ride_class(self, class_id: str, policy: RatePolicy) -> FareError | None:
        try:
            self.registry.register(class_id, policy)
        except FareError as e:
            logger.warning(
                f"Ride class {class_id!r} rejected ({e.kind}): {e.message}",
                extra={"error_kind": e.kind},
            )
            return e
        return None

    def compute_fare(self, request: RideRequest) -> FareResult:
        return self.engine.process(request)

    def quote_fare(self, request: RideRequest) -> FareResult:
        return self.engine.quote(request)

    def get_fare_record(self, ride_id: str) -> FareBreakdown | NotFound:
        if self.ledger is None:
            return NotFound("Fare ledger is disabled", details={"ride_id": ride_id})
        try:
            return self.ledger.get(ride_id)
        except NotFound as e:
            return e

    def ride_classes(self) -> list[str]:
        return self.registry.class_ids()

    def total_fares(self) -> float:
        if self.ledger is None:
            return 0.0
        return self.ledger.total_fares(self.engine.precision)

    def compute_fare_json(self, payload: str | bytes | Mapping[str, Any]) -> dict[str, Any]:
        """Decode a ride request document, price it and encode the outcome."""
        try:
            request = RideRequest.from_payload(payload)
        except InvalidRequest as e:
            ride_id = payload.get("ride_id", "") if isinstance(payload, Mapping) else ""
            result = FareResult(ride_id=str(ride_id), state=RequestState.REJECTED, error=e)
            return result.to_dict()
        return self.compute_fare(request).to_dict()

    def get_fare_record_json(self, ride_id: str) -> dict[str, Any]:
        outcome = self.get_fare_record(ride_id)
        if isinstance(outcome, FareError):
            return {"ride_id": ride_id, "breakdown": None, "error": outcome.to_dict()}
        return {"ride_id": ride_id, "breakdown": outcome.model_dump(mode="json"), "error": None}


def build_service(settings: Settings | None = None) -> FareService:
    """Wire registry, ledger and engine from settings."""
    if settings is None:
        settings = get_settings()

    registry = RideClassRegistry.from_settings(settings.registry)
    if settings.engine.register_default_classes:
        register_default_ride_classes(registry)

    ledger = RideLedger() if settings.engine.ledger_enabled else None
    engine = FareEngine(registry, ledger=ledger, precision=settings.engine.currency_precision)

    logger.info(
        f"Fare service ready: classes={registry.class_ids()} "
        f"ledger={'on' if ledger is not None else 'off'}"
    )
    return FareService(registry, engine, ledger)
