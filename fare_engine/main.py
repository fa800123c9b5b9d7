"""
Fare Engine - Demo Entry Point

Prices a fixed set of standard and premium rides, records them in the ledger
and prints each fare followed by the total.

Usage:
    fare-engine [--json]
"""

import argparse
import json
from datetime import UTC, datetime

from fare_engine.fare_logging import setup_logging
from fare_engine.models import RideRequest
from fare_engine.ride_classes import PREMIUM, STANDARD
from fare_engine.service import build_service
from fare_engine.settings import get_settings

DEMO_RIDES = [
    ("R100", "Downtown", "Airport", 10.5, STANDARD),
    ("R101", "Mall", "University", 6.2, PREMIUM),
    ("R102", "Home", "Office", 3.4, STANDARD),
    ("R103", "Station", "Hotel", 12.0, PREMIUM),
]


def demo_requests(timestamp: datetime) -> list[RideRequest]:
    return [
        RideRequest(
            ride_id=ride_id,
            pickup_location=pickup,
            dropoff_location=dropoff,
            distance=distance,
            ride_class=ride_class,
            timestamp=timestamp,
        )
        for ride_id, pickup, dropoff, distance, ride_class in DEMO_RIDES
    ]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Price the demo rides with the fare engine")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON document per ride instead of text lines",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.logging)

    service = build_service(settings)
    failures = 0

    for request in demo_requests(datetime.now(UTC)):
        result = service.compute_fare(request)
        if args.json:
            print(json.dumps(result.to_dict()))
        elif result.ok:
            breakdown = result.unwrap()
            print(
                f"{breakdown.describe()} | From: {request.pickup_location} "
                f"-> To: {request.dropoff_location}"
            )
        else:
            failures += 1
            print(f"RideID: {request.ride_id} | Rejected: {result.error}")

    if not args.json:
        print(f"Total of fares for all rides: ${service.total_fares():.2f}")

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
