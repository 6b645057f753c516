"""Rental period value object for booking date ranges."""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


ONE_DAY = timedelta(days=1)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the database columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class RentalPeriod:
    """Immutable value object representing the [start, end] range of a rental."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        """Validate period boundaries."""
        if self.end <= self.start:
            raise ValueError("End date must be after start date")

    @property
    def total_days(self) -> int:
        """Number of billable days; any partial day counts as a full day."""
        return math.ceil((self.end - self.start) / ONE_DAY)

    def price_for(self, price_per_day: float) -> float:
        """Total rental price for a given daily rate."""
        return self.total_days * price_per_day

    def contains(self, moment: datetime) -> bool:
        """Check whether a moment falls inside the period (bounds inclusive)."""
        return self.start <= moment <= self.end

    def overlaps(self, other: "RentalPeriod") -> bool:
        """Check whether two periods share at least one instant (bounds inclusive)."""
        return (
            other.contains(self.start)
            or other.contains(self.end)
            or (self.start <= other.start and other.end <= self.end)
        )

    def has_started(self, now: datetime) -> bool:
        """Check whether the rental start lies in the past."""
        return now > self.start
