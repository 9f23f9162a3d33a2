"""Common utility functions and helpers for the batteryguard package."""

from batteryguard.utils.file import ensure_directory_exists
from batteryguard.utils.formatting import format_capacity, format_level
from batteryguard.utils.time import Clock, FixedClock, SystemClock, TimeUtils

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "TimeUtils",
    "ensure_directory_exists",
    "format_capacity",
    "format_level",
]
