# filepath: src/batteryguard/controller.py
"""Core controller for the battery inventory."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Generic, TypeVar

from pydantic import ValidationError

from batteryguard.advice.api import AdviceProvider, NullAdvisor, create_advisor
from batteryguard.common.enums import EventMode, LogAction, SortKey, StatusFilter
from batteryguard.engine.decay import apply_decay
from batteryguard.engine.events import apply_annotation, apply_event
from batteryguard.engine.views import (
    BatteryCard,
    InventorySummary,
    build_cards,
    filter_batteries,
    group_by_type,
    summarize,
)
from batteryguard.errors import BatteryNotFoundError, InvalidInputError
from batteryguard.models.battery import Battery, BatteryDraft, BatteryLog
from batteryguard.settings.application import ApplicationSettings
from batteryguard.settings.user import UserSettings
from batteryguard.storage.blob import create_file_store, create_memory_store
from batteryguard.storage.protocols import BatteryStore
from batteryguard.storage.seed import demo_batteries
from batteryguard.utils.time import Clock, FixedClock, SystemClock

logger: Final = logging.getLogger(__name__)

T = TypeVar("T")

# Fields a generic update may not touch
_IMMUTABLE_FIELDS: Final = frozenset({"id"})


@dataclass
class OperationResult(Generic[T]):
    """Outcome of an inventory operation.

    Failures the caller can recover from (a battery deleted elsewhere)
    are reported here instead of raised; the caller should reload.
    """

    success: bool
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> OperationResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> OperationResult[T]:
        return cls(success=False, error=error)


def validate_level(level: float) -> float:
    """Check that a charge level lies in [0, 100].

    Raises:
        InvalidInputError: If the level is out of range
    """
    if not 0 <= level <= 100:
        raise InvalidInputError(f"Charge level must be between 0 and 100, got {level}")
    return level



def validate_voltage(voltage: float | None) -> float | None:
    """Check that a measured voltage, when given, is positive.

    Raises:
        InvalidInputError: If the voltage is zero or negative
    """
    if voltage is not None and voltage <= 0:
        raise InvalidInputError(f"Voltage must be positive, got {voltage}")
    return voltage


class BatteryInventory:
    """Main controller class for the battery inventory.

    This class orchestrates every user-facing workflow:
    - Loading the collection and running the self-discharge simulation
    - Adding, updating and deleting batteries (deletes cascade to logs)
    - Recording charge, discharge, maintenance and note events
    - Building the filtered, grouped and summarized views
    - Fetching optional maintenance advice

    The store, clock and advisor are injected so every workflow can run
    against in-memory fakes.
    """

    def __init__(
        self,
        store: BatteryStore,
        clock: Clock | None = None,
        advisor: AdviceProvider | None = None,
        seed_demo_data: bool = False,
        settings: ApplicationSettings | None = None,
    ) -> None:
        """Initialize the inventory.

        Args:
            store: Persistence for batteries and logs
            clock: Source of the current time (default: system clock)
            advisor: Advice provider (default: advice disabled)
            seed_demo_data: Write demo batteries when the store is brand new
            settings: Settings the inventory was built from, if any
        """
        self.store = store
        self.clock = clock or SystemClock()
        self.advisor = advisor or NullAdvisor()
        self.seed_demo_data = seed_demo_data
        self.settings = settings

    @classmethod
    def from_settings(
        cls,
        settings: ApplicationSettings,
        clock: Clock | None = None,
        advisor: AdviceProvider | None = None,
    ) -> BatteryInventory:
        """Create an inventory persisting to the configured data directory."""
        user = settings.user
        return cls(
            store=create_file_store(settings.paths.data_dir),
            clock=clock,
            advisor=advisor or create_advisor(settings.api_key, user.advice_model, user.advice_timeout),
            seed_demo_data=user.seed_demo_data,
            settings=settings,
        )

    @classmethod
    def from_config(cls, config_path: Path | None = None, debug: bool = False) -> BatteryInventory:
        """Load settings, configure logging and build the inventory.

        Args:
            config_path: Path to config.yaml (default: search standard locations)
            debug: Enable debug logging
        """
        logging.basicConfig(
            level=logging.DEBUG if debug else logging.INFO,
            format="%(asctime)s [%(levelname)s] %(message)s",
        )
        settings = ApplicationSettings(UserSettings.load(config_path))
        return cls.from_settings(settings)

    # ── loading ──────────────────────────────────────────────────────────────
    def load(self) -> list[Battery]:
        """Return the collection after applying self-discharge.

        A brand-new store is seeded with demo data (when enabled) and
        returned as written. Otherwise the simulation runs over every
        battery and the collection is persisted only if something changed.
        """
        now = self.clock.now()
        if self.seed_demo_data and not self.store.is_initialized():
            batteries = demo_batteries(now)
            self.store.put_all_batteries(batteries)
            logger.info("Initialized store with %d demo batteries", len(batteries))
            return batteries

        result = apply_decay(self.store.get_all_batteries(), now)
        if result.changed:
            self.store.put_all_batteries(result.batteries)
            logger.debug("Persisted self-discharge updates")
        return result.batteries

    def get_battery(self, battery_id: str) -> Battery | None:
        """Find a battery in the current (simulated) collection."""
        return next((b for b in self.load() if b.id == battery_id), None)

    def _require(self, batteries: list[Battery], battery_id: str) -> int:
        for index, battery in enumerate(batteries):
            if battery.id == battery_id:
                return index
        raise BatteryNotFoundError(battery_id)

    # ── mutations ────────────────────────────────────────────────────────────
    def add_battery(self, draft: BatteryDraft | Mapping[str, Any]) -> Battery:
        """Validate user input and store a new battery at the front of the list.

        Raises:
            InvalidInputError: If required fields are missing or out of range
        """
        if not isinstance(draft, BatteryDraft):
            try:
                draft = BatteryDraft.model_validate(dict(draft))
            except ValidationError as err:
                raise InvalidInputError(f"Invalid battery:\n{err}", err) from err

        battery = Battery.from_draft(draft, self.clock.now())
        self.store.put_all_batteries([battery, *self.load()])
        logger.info("Added battery %s (%s)", battery.id, battery.name)
        return battery

    def update_battery(self, battery_id: str, updates: Mapping[str, Any]) -> OperationResult[Battery]:
        """Merge field updates into a stored battery.

        Changing ``charge_level`` restarts the self-discharge clock. The
        cycle count may only grow.

        Raises:
            InvalidInputError: If the merged record is invalid or the cycle
                count would decrease
        """
        batteries = self.load()
        try:
            index = self._require(batteries, battery_id)
        except BatteryNotFoundError as err:
            logger.warning("%s", err)
            return OperationResult.fail(str(err))

        current = batteries[index]
        merged = current.model_dump()
        merged.update({k: v for k, v in updates.items() if k not in _IMMUTABLE_FIELDS})
        if "charge_level" in updates:
            merged["last_auto_update"] = self.clock.now()
        try:
            updated = Battery.model_validate(merged)
        except ValidationError as err:
            raise InvalidInputError(f"Invalid update for {battery_id}:\n{err}", err) from err
        if updated.cycle_count < current.cycle_count:
            raise InvalidInputError(
                f"Cycle count of {battery_id} cannot decrease "
                f"({current.cycle_count} -> {updated.cycle_count})"
            )

        batteries[index] = updated
        self.store.put_all_batteries(batteries)
        return OperationResult.ok(updated)

    def record_event(
        self,
        battery_id: str,
        mode: EventMode,
        level: float,
        voltage: float | None = None,
        full_charge: bool = False,
        note: str = "",
    ) -> OperationResult[tuple[Battery, BatteryLog]]:
        """Record a charge or discharge and append its log entry.

        Args:
            battery_id: Battery to update
            mode: Charge or discharge
            level: Charge level after the event (0-100)
            voltage: Measured voltage (default: keep the stored voltage)
            full_charge: Whether a charge completed a full cycle
            note: Free text for the log entry

        Raises:
            InvalidInputError: If ``level`` is outside [0, 100] or ``voltage``
                is not positive
        """
        validate_level(level)
        validate_voltage(voltage)
        batteries = self.load()
        try:
            index = self._require(batteries, battery_id)
        except BatteryNotFoundError as err:
            logger.warning("%s", err)
            return OperationResult.fail(str(err))

        battery = batteries[index]
        new_voltage = battery.voltage if voltage is None else voltage
        updated, entry = apply_event(battery, mode, level, new_voltage, full_charge, note, self.clock.now())
        batteries[index] = updated
        self.store.put_all_batteries(batteries)
        self.store.append_log(entry)
        logger.info("%s", entry.details)
        return OperationResult.ok((updated, entry))

    def record_note(
        self,
        battery_id: str,
        text: str,
        action: LogAction = LogAction.NOTE,
    ) -> OperationResult[BatteryLog]:
        """Append a maintenance entry or note without changing the battery."""
        battery = self.get_battery(battery_id)
        if battery is None:
            err = BatteryNotFoundError(battery_id)
            logger.warning("%s", err)
            return OperationResult.fail(str(err))

        entry = apply_annotation(battery, action, text, self.clock.now())
        self.store.append_log(entry)
        return OperationResult.ok(entry)

    def delete_battery(self, battery_id: str) -> OperationResult[None]:
        """Delete a battery together with all of its log entries."""
        try:
            self.store.delete_battery(battery_id)
        except BatteryNotFoundError as err:
            logger.warning("%s", err)
            return OperationResult.fail(str(err))
        return OperationResult.ok()

    # ── queries ──────────────────────────────────────────────────────────────
    def get_logs(self, battery_id: str) -> list[BatteryLog]:
        """Return a battery's history, newest first."""
        return self.store.get_logs(battery_id)

    def cards(
        self,
        status_filter: StatusFilter = StatusFilter.ALL,
        query: str | None = None,
        sort: SortKey = SortKey.INSERTION,
        batteries: list[Battery] | None = None,
    ) -> list[BatteryCard]:
        """Build the filtered, sorted battery list."""
        source = self.load() if batteries is None else batteries
        today = self.clock.now().date()
        return build_cards(filter_batteries(source, status_filter, query), today, sort)

    def grouped_cards(
        self,
        status_filter: StatusFilter = StatusFilter.ALL,
        query: str | None = None,
        sort: SortKey = SortKey.INSERTION,
        batteries: list[Battery] | None = None,
    ) -> dict[str, list[BatteryCard]]:
        """Build the filtered list partitioned by chemistry label."""
        source = self.load() if batteries is None else batteries
        today = self.clock.now().date()
        groups = group_by_type(filter_batteries(source, status_filter, query))
        return {t.label: build_cards(members, today, sort) for t, members in groups.items()}

    def summary(self, batteries: list[Battery] | None = None) -> InventorySummary:
        """Dashboard statistics over the whole collection."""
        return summarize(self.load() if batteries is None else batteries)

    def get_advice(self, battery_id: str) -> str:
        """Return maintenance advice text for a battery.

        Never raises for advice failures; an unknown id yields a message too.
        """
        battery = self.get_battery(battery_id)
        if battery is None:
            return str(BatteryNotFoundError(battery_id))
        return self.advisor.get_advice(battery)

    @classmethod
    def create_for_testing(
        cls,
        batteries: list[Battery] | None = None,
        clock: Clock | None = None,
        advisor: AdviceProvider | None = None,
    ) -> BatteryInventory:
        """Create an in-memory inventory for tests.

        Args:
            batteries: Initial collection (written before the first load)
            clock: Clock to use (default: frozen at the current time)
            advisor: Advice provider (default: advice disabled)
        """
        store = create_memory_store()
        if batteries is not None:
            store.put_all_batteries(batteries)
        return cls(
            store=store,
            clock=clock or FixedClock(SystemClock().now()),
            advisor=advisor,
        )
