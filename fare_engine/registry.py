"""Ride class registry: maps class identifiers to immutable rate policies."""

import logging
import math
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from types import MappingProxyType

from fare_engine.core.exceptions import InvalidPolicy, SnapshotContention, UnknownRideClass
from fare_engine.core.retry import RetryConfig, with_retry_sync
from fare_engine.models import RatePolicy
from fare_engine.settings import RegistrySettings

logger = logging.getLogger(__name__)

# Surge functions are sampled at every hour of this week (Monday 00:00 UTC onwards).
SURGE_SAMPLE_START = datetime(2024, 1, 1, tzinfo=UTC)
SURGE_SAMPLE_HOURS = 7 * 24


def normalize_class_id(class_id: str) -> str:
    return class_id.strip().casefold()


@dataclass(frozen=True)
class RegistrySnapshot:
    version: int
    policies: Mapping[str, RatePolicy]


def validate_policy(class_id: str, policy: RatePolicy) -> None:
    """Raise InvalidPolicy for negative or non-finite fees or a surge below 1.0."""
    if not isinstance(policy, RatePolicy):
        raise InvalidPolicy(
            f"Policy for {class_id!r} must be a RatePolicy",
            details={"ride_class": class_id, "type": type(policy).__name__},
        )

    for name in ("base_fee", "per_mile_rate", "minimum_fare"):
        value = getattr(policy, name)
        if not math.isfinite(value) or value < 0:
            raise InvalidPolicy(
                f"{name} must be a non-negative number",
                details={"ride_class": class_id, name: value},
            )

    if policy.surge_fn is None:
        return
    if not callable(policy.surge_fn):
        raise InvalidPolicy(
            "surge_fn must be callable",
            details={"ride_class": class_id},
        )

    for hour in range(SURGE_SAMPLE_HOURS):
        timestamp = SURGE_SAMPLE_START + timedelta(hours=hour)
        try:
            multiplier = float(policy.surge_fn(timestamp))
        except Exception as e:
            raise InvalidPolicy(
                f"surge_fn failed at {timestamp.isoformat()}: {e}",
                details={"ride_class": class_id, "timestamp": timestamp.isoformat()},
            ) from e
        if not math.isfinite(multiplier) or multiplier < 1.0:
            raise InvalidPolicy(
                "Surge multiplier must be >= 1.0",
                details={
                    "ride_class": class_id,
                    "timestamp": timestamp.isoformat(),
                    "multiplier": multiplier,
                },
            )


class RideClassRegistry:
    """Registry of rate policies keyed by ride class.

    Readers never lock: ``resolve`` dereferences the current snapshot once, so a
    concurrent registration is seen entirely or not at all. Writers copy the
    mapping, then compare-and-swap the snapshot pointer; a writer that loses the
    race retries against the newer snapshot, and after ``max_attempts`` losses
    it completes the swap while holding the swap lock.
    """

    def __init__(self, retry_config: RetryConfig | None = None) -> None:
        self._swap_lock = threading.Lock()
        self._snapshot = RegistrySnapshot(version=0, policies=MappingProxyType({}))
        self._retry_config = retry_config or RetryConfig(
            max_attempts=5,
            base_delay=0.0,
            retryable_exceptions=(SnapshotContention,),
        )

    @classmethod
    def from_settings(cls, settings: RegistrySettings) -> "RideClassRegistry":
        return cls(
            RetryConfig(
                max_attempts=settings.cas_max_attempts,
                base_delay=settings.cas_base_delay,
                retryable_exceptions=(SnapshotContention,),
            )
        )

    @property
    def version(self) -> int:
        return self._snapshot.version

    def snapshot(self) -> RegistrySnapshot:
        return self._snapshot

    def class_ids(self) -> list[str]:
        return sorted(self._snapshot.policies)

    def __contains__(self, class_id: object) -> bool:
        if not isinstance(class_id, str):
            return False
        return normalize_class_id(class_id) in self._snapshot.policies

    def __len__(self) -> int:
        return len(self._snapshot.policies)

    def __iter__(self) -> Iterator[str]:
        return iter(self.class_ids())

    def register(self, class_id: str, policy: RatePolicy) -> RegistrySnapshot:
        """Insert or replace the policy for a ride class.

        Raises InvalidPolicy if the policy is rejected; the registry is then unchanged.
        """
        key = normalize_class_id(class_id) if isinstance(class_id, str) else ""
        if not key:
            raise InvalidPolicy(
                "Ride class identifier must be a non-empty string",
                details={"ride_class": class_id},
            )
        validate_policy(key, policy)

        def attempt() -> RegistrySnapshot:
            current = self._snapshot
            return self._compare_and_swap(current, self._with_policy(current, key, policy))

        try:
            snapshot = with_retry_sync(
                attempt,
                self._retry_config,
                operation_name=f"register ride class {key}",
            )
        except SnapshotContention:
            with self._swap_lock:
                current = self._snapshot
                snapshot = self._install(current, self._with_policy(current, key, policy))

        logger.info(
            f"Registered ride class {key} (version {snapshot.version})",
            extra={"ride_class": key},
        )
        return snapshot

    def resolve(self, class_id: str) -> RatePolicy:
        """Return the current policy for a ride class or raise UnknownRideClass."""
        policy, _ = self.resolve_snapshot(class_id)
        return policy

    def resolve_snapshot(self, class_id: str) -> tuple[RatePolicy, int]:
        """Return the policy together with the registry version it was read from."""
        snapshot = self._snapshot
        key = normalize_class_id(class_id)
        policy = snapshot.policies.get(key)
        if policy is None:
            raise UnknownRideClass(
                f"Unknown ride class: {class_id!r}",
                details={"ride_class": class_id, "known": sorted(snapshot.policies)},
            )
        return policy, snapshot.version

    @staticmethod
    def _with_policy(
        current: RegistrySnapshot, key: str, policy: RatePolicy
    ) -> dict[str, RatePolicy]:
        policies = dict(current.policies)
        policies[key] = policy
        return policies

    def _compare_and_swap(
        self, expected: RegistrySnapshot, policies: dict[str, RatePolicy]
    ) -> RegistrySnapshot:
        with self._swap_lock:
            if self._snapshot is not expected:
                raise SnapshotContention(
                    "Registry snapshot changed during registration",
                    details={"expected": expected.version, "current": self._snapshot.version},
                )
            return self._install(expected, policies)

    def _install(
        self, current: RegistrySnapshot, policies: dict[str, RatePolicy]
    ) -> RegistrySnapshot:
        snapshot = RegistrySnapshot(
            version=current.version + 1,
            policies=MappingProxyType(policies),
        )
        self._snapshot = snapshot
        return snapshot
