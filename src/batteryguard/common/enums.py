from enum import Enum


class BatteryType(str, Enum):
    """Battery chemistry.

    The enum value is the stable tag that gets persisted and keys the
    decay-rate table. Use ``label`` for anything shown to a person.
    """

    LI_ION = "LiIon"
    LI_PO = "LiPo"
    NIMH = "NiMH"
    LEAD_ACID = "LeadAcid"
    LIFEPO4 = "LiFePO4"
    BUTTON = "Button"
    OTHER = "Other"

    @property
    def label(self) -> str:
        """Human readable chemistry name."""
        return _TYPE_LABELS[self]


_TYPE_LABELS: dict[BatteryType, str] = {
    BatteryType.LI_ION: "LiIon (18650/21700)",
    BatteryType.LI_PO: "LiPo (drone/pouch)",
    BatteryType.NIMH: "NiMH (AA/AAA)",
    BatteryType.LEAD_ACID: "Lead-acid (car/UPS)",
    BatteryType.LIFEPO4: "LiFePO4",
    BatteryType.BUTTON: "Button cell",
    BatteryType.OTHER: "Other",
}


class LogAction(str, Enum):
    """Kinds of entries in a battery's history."""

    CHARGE = "CHARGE"
    DISCHARGE = "DISCHARGE"
    MAINTENANCE = "MAINTENANCE"
    NOTE = "NOTE"


class EventMode(str, Enum):
    """Charge-level events a user can record."""

    CHARGE = "CHARGE"
    DISCHARGE = "DISCHARGE"

    @property
    def action(self) -> LogAction:
        return LogAction(self.value)


class HealthState(str, Enum):
    """State-of-health classification, best to worst."""

    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    CRITICAL = "Critical"


class StatusFilter(str, Enum):
    """Status filters offered by the battery list."""

    ALL = "all"
    LOW = "low"
    CRITICAL = "critical"


class SortKey(str, Enum):
    """Orderings for the battery list."""

    INSERTION = "insertion"
    NAME = "name"
    CHARGE = "charge"
    HEALTH = "health"
