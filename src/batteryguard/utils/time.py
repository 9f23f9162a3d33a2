# src/batteryguard/utils/time.py
"""Clock abstraction and date/time helpers."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import Protocol, runtime_checkable

SECONDS_PER_DAY = 24 * 60 * 60


@runtime_checkable
class Clock(Protocol):
    """Source of the current time.

    Injected wherever elapsed time matters so the self-discharge
    simulation can be tested deterministically.
    """

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...


class SystemClock:
    """Clock backed by the system time, in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, current: datetime) -> None:
        self.current = TimeUtils.ensure_utc(current)

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime) -> None:
        self.current = TimeUtils.ensure_utc(current)

    def advance(self, **kwargs: float) -> datetime:
        """Move the clock forward.

        Args:
            kwargs: Any ``timedelta`` keyword (days, hours, minutes...)

        Returns:
            The new current time
        """
        self.current = self.current + timedelta(**kwargs)
        return self.current


class TimeUtils:
    """Time-related utility functions.

    Centralized utilities for working with dates and times:
    - Normalizing naive datetimes to UTC
    - Fractional day differences for decay calculations
    - Whole day differences between calendar dates
    """

    @staticmethod
    def ensure_utc(dt: datetime) -> datetime:
        """Attach UTC to naive datetimes and convert aware ones to UTC.

        Args:
            dt: Datetime to normalize

        Returns:
            Timezone-aware datetime in UTC
        """
        if dt.tzinfo is None:
            return dt.replace(tzinfo=UTC)
        return dt.astimezone(UTC)

    @staticmethod
    def elapsed_days(start: datetime, end: datetime) -> float:
        """Get the fractional number of days between two datetimes.

        Args:
            start: Earlier datetime
            end: Later datetime

        Returns:
            Days elapsed, negative if ``end`` precedes ``start``
        """
        delta = TimeUtils.ensure_utc(end) - TimeUtils.ensure_utc(start)
        return delta.total_seconds() / SECONDS_PER_DAY

    @staticmethod
    def days_between(start: date, end: date) -> int:
        """Get the whole number of days from one calendar date to another."""
        return (end - start).days

    @staticmethod
    def format_datetime(dt: datetime, format_string: str) -> str:
        """Format datetime with specified format string.

        Args:
            dt: Datetime to format
            format_string: strftime format string

        Returns:
            Formatted datetime string
        """
        return dt.strftime(format_string)
