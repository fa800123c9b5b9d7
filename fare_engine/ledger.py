"""Append-only record of finalized fares keyed by ride ID."""

import logging
import threading
from decimal import Decimal, localcontext

from fare_engine.core.exceptions import DuplicateRide, InvalidRequest, NotFound
from fare_engine.fare import DECIMAL_PRECISION, quantize, to_decimal
from fare_engine.models import FareBreakdown

logger = logging.getLogger(__name__)


class RideLedger:
    """Single owner of finalized fare records.

    Thread-safe: inserts are an atomic insert-if-absent under a lock, so of
    several concurrent writers for the same ride only the first succeeds.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, FareBreakdown] = {}

    def record(self, ride_id: str, breakdown: FareBreakdown) -> None:
        if breakdown.ride_id != ride_id:
            raise InvalidRequest(
                "Breakdown does not belong to this ride",
                details={"ride_id": ride_id, "breakdown_ride_id": breakdown.ride_id},
            )

        with self._lock:
            existing = self._records.get(ride_id)
            if existing is None:
                self._records[ride_id] = breakdown
                return

        logger.warning(
            f"Fare already recorded for ride {ride_id}",
            extra={"ride_id": ride_id},
        )
        raise DuplicateRide(
            f"Fare already recorded for ride {ride_id}",
            details={"ride_id": ride_id, "recorded_total": existing.total},
        )

    def lookup(self, ride_id: str) -> FareBreakdown | None:
        with self._lock:
            return self._records.get(ride_id)

    def get(self, ride_id: str) -> FareBreakdown:
        breakdown = self.lookup(ride_id)
        if breakdown is None:
            raise NotFound(f"No fare recorded for ride {ride_id}", details={"ride_id": ride_id})
        return breakdown

    def records(self) -> list[FareBreakdown]:
        """Recorded fares in insertion order."""
        with self._lock:
            return list(self._records.values())

    def total_fares(self, precision: int = 2) -> float:
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            total = sum((to_decimal(b.total) for b in self.records()), Decimal(0))
        return float(quantize(total, precision))

    def __contains__(self, ride_id: object) -> bool:
        with self._lock:
            return ride_id in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
