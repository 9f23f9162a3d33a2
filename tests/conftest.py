from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any

import pytest

from batteryguard.common.enums import BatteryType
from batteryguard.models.battery import Battery
from batteryguard.utils.time import FixedClock

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)

BatteryFactory = Callable[..., Battery]


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def make_battery() -> BatteryFactory:
    """Factory for batteries with sensible defaults; override any field."""
    counter = {"n": 0}

    def _make(**overrides: Any) -> Battery:
        counter["n"] += 1
        fields: dict[str, Any] = {
            "id": f"b{counter['n']}",
            "name": f"Cell {counter['n']}",
            "type": BatteryType.LI_ION,
            "capacity": 3000,
            "voltage": 3.7,
            "charge_level": 50,
            "cycle_count": 0,
            "internal_resistance": 10,
            "purchase_date": date(2024, 1, 1),
            "last_charge_date": date(2025, 5, 1),
            "last_auto_update": NOW,
            "health_threshold": 80,
            "notes": None,
        }
        fields.update(overrides)
        return Battery(**fields)

    return _make
