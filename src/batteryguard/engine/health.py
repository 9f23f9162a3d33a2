"""State-of-health estimation.

SOH is derived from cumulative wear every time it is needed and never
stored. The battery list's "critical" filter and each battery's health
badge both call ``estimate_health`` so the two cannot disagree.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar

from batteryguard.common.enums import HealthState
from batteryguard.constants import (
    CYCLE_WEAR_PER_CYCLE,
    RESISTANCE_PENALTY_PER_MOHM,
    RESISTANCE_PENALTY_THRESHOLD_MOHM,
)
from batteryguard.models.battery import Battery


@dataclass(frozen=True)
class HealthStatus:
    """Estimated state of health of a single battery."""

    STATUS_COLORS: ClassVar[dict[HealthState, str]] = {
        HealthState.GOOD: "#22c55e",  # Green
        HealthState.FAIR: "#facc15",  # Yellow
        HealthState.POOR: "#f97316",  # Orange
        HealthState.CRITICAL: "#dc2626",  # Red
    }

    soh: int
    status: HealthState

    @property
    def color(self) -> str:
        """Hex colour used to render the health badge."""
        return self.STATUS_COLORS[self.status]

    @property
    def is_critical(self) -> bool:
        return self.status is HealthState.CRITICAL


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def classify_soh(soh: int) -> HealthState:
    """Map an SOH score onto its status band.

    Args:
        soh: State of health (0-100)

    Returns:
        Critical below 60, Poor below 80, Fair below 90, otherwise Good
    """
    if soh < 60:
        return HealthState.CRITICAL
    if soh < 80:
        return HealthState.POOR
    if soh < 90:
        return HealthState.FAIR
    return HealthState.GOOD


def compute_soh(cycle_count: float, internal_resistance: float) -> int:
    """Compute the SOH score from wear indicators.

    Every full cycle costs 0.05 points. Resistance above 50 mOhm costs a
    further 0.2 points per mOhm. Any numeric input is accepted; the result
    is rounded half up and clamped to [0, 100].
    """
    soh = 100.0
    soh -= cycle_count * CYCLE_WEAR_PER_CYCLE
    if internal_resistance > RESISTANCE_PENALTY_THRESHOLD_MOHM:
        soh -= (internal_resistance - RESISTANCE_PENALTY_THRESHOLD_MOHM) * RESISTANCE_PENALTY_PER_MOHM
    return min(max(_round_half_up(soh), 0), 100)


def estimate_health(battery: Battery) -> HealthStatus:
    """Estimate the state of health of a battery.

    Args:
        battery: Battery to assess

    Returns:
        HealthStatus with the SOH score and its classification
    """
    soh = compute_soh(battery.cycle_count, battery.internal_resistance)
    return HealthStatus(soh=soh, status=classify_soh(soh))
