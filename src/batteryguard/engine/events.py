"""Charge, discharge and annotation events.

Every event returns the updated battery together with the log entry that
records it; callers persist both. Level validation ([0, 100]) is the
caller's job and happens before these functions are reached.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Final

from batteryguard.common.enums import EventMode, LogAction
from batteryguard.models.battery import Battery, BatteryLog
from batteryguard.utils.formatting import format_level
from batteryguard.utils.time import TimeUtils

logger: Final = logging.getLogger(__name__)

ANNOTATION_ACTIONS: Final = frozenset({LogAction.MAINTENANCE, LogAction.NOTE})


def describe_event(mode: EventMode, level: float, full_charge: bool, note: str = "") -> str:
    """Compose the human readable summary stored on the log entry.

    Args:
        mode: Charge or discharge
        level: Resulting charge level
        full_charge: Whether a charge completed a full cycle
        note: Free text supplied by the user

    Returns:
        Summary such as ``Charged to 100% (full cycle). Before storage``
    """
    if mode is EventMode.CHARGE:
        summary = f"Charged to {format_level(level)}"
        if full_charge:
            summary += " (full cycle)"
    else:
        summary = f"Discharged/used to {format_level(level)}"
    note = note.strip()
    return f"{summary}. {note}" if note else f"{summary}."


def apply_event(
    battery: Battery,
    mode: EventMode,
    new_level: float,
    new_voltage: float,
    full_charge: bool,
    note: str,
    now: datetime,
) -> tuple[Battery, BatteryLog]:
    """Apply a charge or discharge event to a battery.

    The charge level and voltage are replaced unconditionally. A charge
    sets the last charge date to today and, only when flagged as a full
    charge, advances the cycle count by one. A discharge leaves the last
    charge date alone. The self-discharge clock restarts at ``now`` so the
    level just entered is not decayed straight away.

    Args:
        battery: Battery the event applies to
        mode: Charge or discharge
        new_level: Charge level after the event, already validated to [0, 100]
        new_voltage: Voltage measured after the event
        full_charge: Whether a charge completed a full cycle
        note: Free text for the log entry
        now: Event time

    Returns:
        Tuple of (updated battery, log entry)
    """
    now = TimeUtils.ensure_utc(now)
    updates: dict[str, object] = {
        "charge_level": new_level,
        "voltage": new_voltage,
        "last_auto_update": now,
    }
    counts_cycle = mode is EventMode.CHARGE and full_charge
    if mode is EventMode.CHARGE:
        updates["last_charge_date"] = now.date()
        if full_charge:
            updates["cycle_count"] = battery.cycle_count + 1

    updated = battery.model_copy(update=updates)
    entry = BatteryLog(
        battery_id=battery.id,
        timestamp=now,
        action=mode.action,
        details=describe_event(mode, new_level, counts_cycle, note),
        level_after=new_level,
    )
    logger.debug("%s %s -> %s", mode.value, battery.id, format_level(new_level))
    return updated, entry


def apply_annotation(battery: Battery, action: LogAction, text: str, now: datetime) -> BatteryLog:
    """Record a maintenance entry or free-form note.

    The battery itself is not modified; the entry snapshots its current
    charge level.

    Args:
        battery: Battery being annotated
        action: MAINTENANCE or NOTE
        text: Entry text
        now: Entry time

    Returns:
        The new log entry

    Raises:
        ValueError: If ``action`` is a charge or discharge
    """
    if action not in ANNOTATION_ACTIONS:
        raise ValueError(f"{action.value} entries must be recorded through apply_event")
    return BatteryLog(
        battery_id=battery.id,
        timestamp=TimeUtils.ensure_utc(now),
        action=action,
        details=text.strip(),
        level_after=battery.charge_level,
    )
