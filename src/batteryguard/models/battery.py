"""Persisted battery and battery-log records."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from batteryguard.common.enums import BatteryType, LogAction
from batteryguard.models.base import TimeStampModel


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


def _match_battery_type(v: Any) -> BatteryType | None:
    """Find the BatteryType whose tag, display label or name equals ``v``."""
    if isinstance(v, BatteryType):
        return v
    if isinstance(v, str):
        for member in BatteryType:
            if v in (member.value, member.label, member.name):
                return member
    return None


def _coerce_battery_type(v: Any) -> BatteryType:
    """Map stored tags or labels onto a BatteryType; anything unknown is OTHER."""
    return _match_battery_type(v) or BatteryType.OTHER


class BatteryDraft(BaseModel):
    """User input for a new battery.

    Defaults match the blank "add battery" form. Validation here is the
    only place creation input is checked; the engine assumes valid data.
    """

    name: str = Field(..., min_length=1, description="Display name, need not be unique")
    type: BatteryType = BatteryType.LI_ION
    capacity: float = Field(2000, gt=0, description="Rated capacity (mAh)")
    voltage: float = Field(3.7, gt=0, description="Current voltage (V)")
    charge_level: float = Field(50, ge=0, le=100, description="Charge level (%)")
    cycle_count: int = Field(0, ge=0, description="Completed full charge cycles")
    internal_resistance: float = Field(20, ge=0, description="Internal resistance (mOhm)")
    purchase_date: date = Field(default_factory=date.today)
    last_charge_date: date = Field(default_factory=date.today)
    health_threshold: float = Field(80, ge=0, le=100, description="Warning threshold (%)")
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be blank")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v: Any) -> BatteryType:
        battery_type = _match_battery_type(v)
        if battery_type is None:
            raise ValueError(f"unknown battery type: {v!r}")
        return battery_type


class Battery(TimeStampModel):
    """A battery in the inventory.

    Mutated only by the self-discharge simulation (``charge_level`` and
    ``last_auto_update``) and by charge/discharge events (``charge_level``,
    ``voltage``, ``cycle_count``, ``last_charge_date``). ``health_threshold``
    is stored for a future warning rule and not read by health estimation.
    """

    id: str
    name: str
    type: BatteryType = BatteryType.OTHER
    capacity: float = Field(..., gt=0)
    voltage: float = Field(..., gt=0)
    charge_level: float = Field(..., ge=0, le=100)
    cycle_count: int = Field(0, ge=0)
    internal_resistance: float = Field(0, ge=0)
    purchase_date: date
    last_charge_date: date
    last_auto_update: datetime | None = None
    health_threshold: float = 80
    notes: str | None = None

    _validate_last_auto_update = TimeStampModel.timestamp_validator("last_auto_update")

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v: Any) -> Any:
        return _coerce_battery_type(v)

    @classmethod
    def from_draft(cls, draft: BatteryDraft, now: datetime, battery_id: str | None = None) -> Battery:
        """Create a stored battery from validated user input.

        Args:
            draft: Validated creation input
            now: Creation time, recorded as the last self-discharge update
            battery_id: Explicit id (default: a new random id)

        Returns:
            New Battery record
        """
        return cls(
            id=battery_id or new_id(),
            last_auto_update=now,
            **draft.model_dump(),
        )


class BatteryLog(TimeStampModel):
    """One immutable entry in a battery's history."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    battery_id: str
    timestamp: datetime
    action: LogAction
    details: str = ""
    level_after: float

    _validate_timestamp = TimeStampModel.timestamp_validator("timestamp")
