"""Shared enumerations used across batteryguard packages."""

from batteryguard.common.enums import (
    BatteryType,
    EventMode,
    HealthState,
    LogAction,
    SortKey,
    StatusFilter,
)

__all__ = [
    "BatteryType",
    "EventMode",
    "HealthState",
    "LogAction",
    "SortKey",
    "StatusFilter",
]
