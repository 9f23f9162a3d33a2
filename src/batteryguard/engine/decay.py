"""Passive self-discharge simulation.

Stored charge drops linearly with elapsed time at a chemistry specific
rate. The simulation runs over the whole collection on every load and
reports whether anything needs to be written back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Final

from batteryguard.common.enums import BatteryType
from batteryguard.constants import DEFAULT_DECAY_RATE, MIN_DECAY_DROP, MIN_DECAY_INTERVAL_DAYS
from batteryguard.models.battery import Battery
from batteryguard.utils.time import TimeUtils

logger: Final = logging.getLogger(__name__)

# Percentage points of charge lost per day, keyed by chemistry tag
DECAY_RATES: Final[dict[BatteryType, float]] = {
    BatteryType.LI_ION: 0.1,  # ~3% per month
    BatteryType.LI_PO: 0.15,  # ~4.5% per month
    BatteryType.NIMH: 0.5,  # 15-20% per month
    BatteryType.LEAD_ACID: 0.15,  # 4-5% per month
    BatteryType.LIFEPO4: 0.05,
    BatteryType.BUTTON: 0.01,
    BatteryType.OTHER: 0.1,
}


@dataclass
class DecayResult:
    """Outcome of one simulation pass.

    ``batteries`` always holds the full collection in its original order,
    untouched entries included. ``changed`` tells the caller whether the
    collection must be persisted again.
    """

    changed: bool = False
    batteries: list[Battery] = field(default_factory=list)


def decay_rate(battery_type: BatteryType | None) -> float:
    """Return the daily self-discharge rate for a chemistry."""
    if battery_type is None:
        return DEFAULT_DECAY_RATE
    return DECAY_RATES.get(battery_type, DEFAULT_DECAY_RATE)


def decay_battery(battery: Battery, now: datetime) -> Battery | None:
    """Apply self-discharge to a single battery.

    Args:
        battery: Battery to simulate
        now: Current time

    Returns:
        The updated battery, or None when nothing changed
    """
    # Never simulated: start the clock without an artificial drop
    if battery.last_auto_update is None:
        return battery.model_copy(update={"last_auto_update": TimeUtils.ensure_utc(now)})

    elapsed = TimeUtils.elapsed_days(battery.last_auto_update, now)
    if elapsed < MIN_DECAY_INTERVAL_DAYS:
        return None

    drop = elapsed * decay_rate(battery.type)
    if drop < MIN_DECAY_DROP or battery.charge_level <= 0:
        return None

    new_level = max(0.0, round(battery.charge_level - drop, 2))
    logger.debug(
        "Self-discharge %s: %.2f%% -> %.2f%% over %.2f days",
        battery.id,
        battery.charge_level,
        new_level,
        elapsed,
    )
    return battery.model_copy(
        update={"charge_level": new_level, "last_auto_update": TimeUtils.ensure_utc(now)}
    )


def apply_decay(batteries: list[Battery], now: datetime) -> DecayResult:
    """Run the self-discharge simulation over a collection.

    Args:
        batteries: Full persisted collection
        now: Current time

    Returns:
        DecayResult with the updated collection and a persistence flag
    """
    result = DecayResult()
    for battery in batteries:
        updated = decay_battery(battery, now)
        if updated is None:
            result.batteries.append(battery)
        else:
            result.batteries.append(updated)
            result.changed = True
    return result
