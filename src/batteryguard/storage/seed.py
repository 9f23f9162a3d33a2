"""Demo inventory written the first time the store is opened."""

from __future__ import annotations

from datetime import date, datetime

from batteryguard.common.enums import BatteryType
from batteryguard.models.battery import Battery


def demo_batteries(now: datetime) -> list[Battery]:
    """Return the demo inventory.

    Args:
        now: Time recorded as each battery's last self-discharge update

    Returns:
        Four batteries covering common chemistries and health states
    """
    return [
        Battery(
            id="1",
            name="Sony VTC6 - 1",
            type=BatteryType.LI_ION,
            capacity=3000,
            voltage=3.7,
            charge_level=85,
            cycle_count=45,
            internal_resistance=12,
            purchase_date=date(2023, 1, 15),
            last_charge_date=date(2023, 10, 20),
            last_auto_update=now,
            health_threshold=80,
            notes="Flashlight",
        ),
        Battery(
            id="2",
            name="Eneloop Pro AA - Set A",
            type=BatteryType.NIMH,
            capacity=2500,
            voltage=1.2,
            charge_level=20,
            cycle_count=150,
            internal_resistance=45,
            purchase_date=date(2022, 5, 10),
            last_charge_date=date(2023, 9, 1),
            last_auto_update=now,
            health_threshold=70,
            notes="Camera flash spares",
        ),
        Battery(
            id="3",
            name="DJI Mini 2 battery",
            type=BatteryType.LI_PO,
            capacity=2250,
            voltage=7.7,
            charge_level=100,
            cycle_count=8,
            internal_resistance=5,
            purchase_date=date(2023, 8, 5),
            last_charge_date=date(2023, 10, 24),
            last_auto_update=now,
            health_threshold=90,
            notes="Do not store fully charged for long",
        ),
        Battery(
            id="4",
            name="Old e-bike battery",
            type=BatteryType.LEAD_ACID,
            capacity=12000,
            voltage=12,
            charge_level=60,
            cycle_count=400,
            internal_resistance=150,
            purchase_date=date(2020, 3, 1),
            last_charge_date=date(2023, 1, 1),
            last_auto_update=now,
            health_threshold=60,
            notes="Internal resistance too high, needs maintenance",
        ),
    ]
