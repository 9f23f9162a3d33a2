"""Derived views over the battery collection.

Filtering, search, grouping, sorting and summary statistics for whatever
presents the inventory. Nothing computed here is persisted.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from batteryguard.common.enums import BatteryType, SortKey, StatusFilter
from batteryguard.constants import HIGH_CYCLE_THRESHOLD, LOW_CHARGE_THRESHOLD, STALE_AFTER_DAYS
from batteryguard.engine.health import HealthStatus, estimate_health
from batteryguard.models.battery import Battery
from batteryguard.utils.time import TimeUtils


@dataclass(frozen=True)
class BatteryCard:
    """A battery together with the facts derived from it for display."""

    battery: Battery
    health: HealthStatus
    days_since_charge: int

    @classmethod
    def build(cls, battery: Battery, today: date) -> BatteryCard:
        return cls(
            battery=battery,
            health=estimate_health(battery),
            days_since_charge=TimeUtils.days_between(battery.last_charge_date, today),
        )

    @property
    def is_low_power(self) -> bool:
        return is_low_charge(self.battery)

    @property
    def is_stale(self) -> bool:
        """True if the battery has gone unusually long without a charge."""
        return self.days_since_charge > STALE_AFTER_DAYS

    @property
    def alerts(self) -> list[str]:
        messages: list[str] = []
        if self.health.is_critical:
            messages.append("Health critically low, replacement recommended")
        if self.is_stale:
            messages.append("Not charged for a long time, check voltage")
        return messages


@dataclass
class InventorySummary:
    """Dashboard statistics over the whole (unfiltered) collection."""

    total: int = 0
    full_charge_count: int = 0
    high_cycle_count: int = 0
    total_capacity_mah: float = 0
    type_distribution: list[tuple[BatteryType, int]] = field(default_factory=list)

    @property
    def full_charge_percent(self) -> int:
        """Share of batteries at exactly 100%, as a rounded percentage."""
        if not self.total:
            return 0
        return round(self.full_charge_count / self.total * 100)


def is_low_charge(battery: Battery) -> bool:
    return battery.charge_level < LOW_CHARGE_THRESHOLD


def matches_status(battery: Battery, status_filter: StatusFilter) -> bool:
    """Check a battery against a status filter.

    ``critical`` uses the same estimator as the per-battery health badge.
    """
    if status_filter is StatusFilter.LOW:
        return is_low_charge(battery)
    if status_filter is StatusFilter.CRITICAL:
        return estimate_health(battery).is_critical
    return True


def matches_query(battery: Battery, query: str | None) -> bool:
    """Case-insensitive search over name, chemistry label and notes.

    An empty query matches everything; a missing note never matches.
    """
    if not query:
        return True
    q = query.lower()
    haystacks = [battery.name, battery.type.label]
    if battery.notes:
        haystacks.append(battery.notes)
    return any(q in text.lower() for text in haystacks)


def filter_batteries(
    batteries: Iterable[Battery],
    status_filter: StatusFilter = StatusFilter.ALL,
    query: str | None = None,
) -> list[Battery]:
    """Apply the status filter and free-text search, keeping stored order."""
    return [b for b in batteries if matches_status(b, status_filter) and matches_query(b, query)]


def group_by_type(batteries: Iterable[Battery]) -> dict[BatteryType, list[Battery]]:
    """Partition batteries by chemistry.

    Groups appear in the order their first member is encountered and keep
    the input order inside each group.
    """
    groups: dict[BatteryType, list[Battery]] = {}
    for battery in batteries:
        groups.setdefault(battery.type or BatteryType.OTHER, []).append(battery)
    return groups


def sort_cards(cards: list[BatteryCard], key: SortKey = SortKey.INSERTION) -> list[BatteryCard]:
    """Order cards for display. Sorting is stable."""
    if key is SortKey.NAME:
        return sorted(cards, key=lambda c: c.battery.name.lower())
    if key is SortKey.CHARGE:
        return sorted(cards, key=lambda c: c.battery.charge_level)
    if key is SortKey.HEALTH:
        return sorted(cards, key=lambda c: c.health.soh)
    return list(cards)


def build_cards(
    batteries: Iterable[Battery],
    today: date,
    key: SortKey = SortKey.INSERTION,
) -> list[BatteryCard]:
    """Build display cards for batteries, ordered by ``key``."""
    return sort_cards([BatteryCard.build(b, today) for b in batteries], key)


def summarize(batteries: list[Battery]) -> InventorySummary:
    """Compute dashboard statistics.

    Args:
        batteries: The full collection, not a filtered view

    Returns:
        InventorySummary with counts, total capacity and type distribution
    """
    distribution = Counter(b.type for b in batteries)
    return InventorySummary(
        total=len(batteries),
        full_charge_count=sum(1 for b in batteries if b.charge_level == 100),
        high_cycle_count=sum(1 for b in batteries if b.cycle_count > HIGH_CYCLE_THRESHOLD),
        total_capacity_mah=sum(b.capacity for b in batteries),
        type_distribution=list(distribution.items()),
    )
