"""Battery simulation and health-estimation engine.

All functions here are pure: they take batteries and a point in time and
return new values without touching storage.
"""

from batteryguard.engine.decay import DECAY_RATES, DecayResult, apply_decay, decay_rate
from batteryguard.engine.events import apply_annotation, apply_event, describe_event
from batteryguard.engine.health import HealthStatus, classify_soh, compute_soh, estimate_health
from batteryguard.engine.views import (
    BatteryCard,
    InventorySummary,
    build_cards,
    filter_batteries,
    group_by_type,
    matches_query,
    sort_cards,
    summarize,
)

__all__ = [
    "DECAY_RATES",
    "BatteryCard",
    "DecayResult",
    "HealthStatus",
    "InventorySummary",
    "apply_annotation",
    "apply_decay",
    "apply_event",
    "build_cards",
    "classify_soh",
    "compute_soh",
    "decay_rate",
    "describe_event",
    "estimate_health",
    "filter_batteries",
    "group_by_type",
    "matches_query",
    "sort_cards",
    "summarize",
]
