"""Declarative time-of-day surge schedules."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

ALL_WEEKDAYS = frozenset(range(7))


class SurgeWindow(BaseModel):
    """A recurring window of elevated pricing.

    Hours are local to the request timestamp. ``start_hour > end_hour`` wraps past
    midnight and ``start_hour == end_hour`` covers the whole day. Weekdays use
    ``datetime.weekday()`` numbering (Monday is 0) and refer to the timestamp's
    own date.
    """

    model_config = ConfigDict(frozen=True)

    start_hour: int = Field(ge=0, le=23)
    end_hour: int = Field(ge=0, le=24)
    multiplier: float = Field(ge=1.0, allow_inf_nan=False)
    weekdays: frozenset[int] = ALL_WEEKDAYS

    @model_validator(mode="after")
    def check_weekdays(self) -> "SurgeWindow":
        if not self.weekdays or not self.weekdays <= ALL_WEEKDAYS:
            raise ValueError("weekdays must be a non-empty subset of 0..6")
        return self

    def matches(self, timestamp: datetime) -> bool:
        if timestamp.weekday() not in self.weekdays:
            return False
        hour = timestamp.hour
        if self.start_hour < self.end_hour:
            return self.start_hour <= hour < self.end_hour
        if self.start_hour > self.end_hour:
            return hour >= self.start_hour or hour < self.end_hour
        return True


class SurgeSchedule(BaseModel):
    """Surge function built from windows; the first matching window wins."""

    model_config = ConfigDict(frozen=True)

    windows: tuple[SurgeWindow, ...] = ()

    def __call__(self, timestamp: datetime) -> float:
        for window in self.windows:
            if window.matches(timestamp):
                return window.multiplier
        return 1.0
