"""Tests for the BatteryInventory service."""

from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from batteryguard.common.enums import BatteryType, EventMode, LogAction, SortKey, StatusFilter
from batteryguard.controller import BatteryInventory, OperationResult, validate_level, validate_voltage
from batteryguard.errors import InvalidInputError
from batteryguard.models.battery import BatteryDraft
from batteryguard.storage.blob import create_memory_store


@pytest.fixture
def inventory(make_battery, clock) -> BatteryInventory:
    batteries = [
        make_battery(id="a", name="Torch cell", charge_level=50, cycle_count=3),
        make_battery(id="b", name="Drone pack", type=BatteryType.LI_PO, charge_level=10, cycle_count=900),
    ]
    return BatteryInventory.create_for_testing(batteries, clock=clock)


def test_fresh_store_is_seeded_once(clock) -> None:
    store = create_memory_store()
    inventory = BatteryInventory(store, clock=clock, seed_demo_data=True)

    first = inventory.load()
    assert [b.id for b in first] == ["1", "2", "3", "4"]

    inventory.delete_battery("1")
    second = inventory.load()
    assert [b.id for b in second] == ["2", "3", "4"]


def test_seed_disabled_starts_empty(clock) -> None:
    inventory = BatteryInventory(create_memory_store(), clock=clock)
    assert inventory.load() == []


def test_load_applies_and_persists_decay(inventory: BatteryInventory, clock) -> None:
    clock.advance(days=10)

    batteries = inventory.load()

    assert batteries[0].charge_level == 49.0
    assert inventory.store.get_all_batteries()[0].charge_level == 49.0
    # within the hour nothing else moves
    clock.advance(minutes=30)
    assert inventory.load() == batteries


def test_load_without_changes_does_not_write(make_battery, clock) -> None:
    inventory = BatteryInventory.create_for_testing([make_battery()], clock=clock)
    inventory.store = MagicMock(wraps=inventory.store)

    inventory.load()

    inventory.store.put_all_batteries.assert_not_called()


def test_add_battery_from_mapping(inventory: BatteryInventory, clock) -> None:
    battery = inventory.add_battery({"name": "  New AA  ", "type": "NiMH", "capacity": 1900})

    assert battery.name == "New AA"
    assert battery.type is BatteryType.NIMH
    assert battery.charge_level == 50
    assert battery.last_auto_update == clock.now()
    assert [b.id for b in inventory.load()][0] == battery.id
    assert len(inventory.load()) == 3


def test_add_battery_from_draft(inventory: BatteryInventory) -> None:
    draft = BatteryDraft(name="Button", type=BatteryType.BUTTON, capacity=220, voltage=3.0)
    battery = inventory.add_battery(draft)
    assert battery.type is BatteryType.BUTTON
    assert battery.internal_resistance == 20


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "   "},
        {"capacity": 2000},
        {"name": "x", "charge_level": 140},
        {"name": "x", "type": "Plutonium"},
        {"name": "x", "cycle_count": -1},
    ],
)
def test_add_battery_rejects_invalid_input(inventory: BatteryInventory, payload: dict) -> None:
    with pytest.raises(InvalidInputError):
        inventory.add_battery(payload)
    assert len(inventory.load()) == 2


def test_charge_event_is_persisted_and_logged(inventory: BatteryInventory, clock) -> None:
    result = inventory.record_event("a", EventMode.CHARGE, 100, 4.2, full_charge=True, note="before trip")

    assert result.success is True
    battery, entry = result.data
    assert battery.cycle_count == 4
    assert battery.last_charge_date == clock.now().date()
    stored = inventory.get_battery("a")
    assert stored.charge_level == 100
    assert stored.voltage == 4.2
    assert inventory.get_logs("a") == [entry]
    assert entry.details == "Charged to 100% (full cycle). before trip"


def test_event_without_voltage_keeps_stored_value(inventory: BatteryInventory) -> None:
    result = inventory.record_event("b", EventMode.DISCHARGE, 5)
    battery, _ = result.data
    assert battery.voltage == 3.7


def test_event_for_missing_battery_fails_cleanly(inventory: BatteryInventory) -> None:
    result = inventory.record_event("ghost", EventMode.CHARGE, 80)

    assert result.success is False
    assert result.error == "Battery not found: ghost"
    assert inventory.get_logs("ghost") == []


@pytest.mark.parametrize("level", [-0.5, 100.01, 250])
def test_event_level_out_of_range(inventory: BatteryInventory, level: float) -> None:
    with pytest.raises(InvalidInputError):
        inventory.record_event("a", EventMode.CHARGE, level)
    assert inventory.get_logs("a") == []


def test_validate_level_bounds() -> None:
    assert validate_level(0) == 0
    assert validate_level(100) == 100


def test_record_note(inventory: BatteryInventory) -> None:
    result = inventory.record_note("a", "Cleaned contacts", LogAction.MAINTENANCE)

    assert result.success is True
    assert result.data.level_after == 50
    assert inventory.get_logs("a")[0].action is LogAction.MAINTENANCE
    assert inventory.record_note("ghost", "hi").success is False


def test_update_battery_resets_decay_clock_on_level_change(make_battery, clock) -> None:
    stamp = clock.now() - timedelta(minutes=30)
    inventory = BatteryInventory.create_for_testing([make_battery(id="u", last_auto_update=stamp)], clock=clock)

    result = inventory.update_battery("u", {"notes": "moved to drawer"})
    assert result.data.last_auto_update == stamp

    result = inventory.update_battery("u", {"charge_level": 75})
    assert result.data.charge_level == 75
    assert result.data.last_auto_update == clock.now()


def test_update_battery_keeps_id_and_validates(inventory: BatteryInventory) -> None:
    result = inventory.update_battery("a", {"id": "hijack", "name": "Renamed"})
    assert result.data.id == "a"
    assert inventory.get_battery("a").name == "Renamed"

    with pytest.raises(InvalidInputError):
        inventory.update_battery("a", {"charge_level": 101})


def test_update_missing_battery(inventory: BatteryInventory) -> None:
    assert inventory.update_battery("ghost", {"name": "x"}) == OperationResult(
        success=False, error="Battery not found: ghost"
    )


def test_delete_cascades_and_reports_missing(inventory: BatteryInventory) -> None:
    inventory.record_event("a", EventMode.CHARGE, 90)
    inventory.record_note("a", "note")

    assert inventory.delete_battery("a").success is True
    assert inventory.get_logs("a") == []
    assert [b.id for b in inventory.load()] == ["b"]

    again = inventory.delete_battery("a")
    assert again.success is False
    assert "a" in again.error


def test_cards_filter_query_and_sort(inventory: BatteryInventory) -> None:
    assert [c.battery.id for c in inventory.cards(StatusFilter.LOW)] == ["b"]
    assert [c.battery.id for c in inventory.cards(StatusFilter.CRITICAL)] == ["b"]
    assert [c.battery.id for c in inventory.cards(query="drone")] == ["b"]
    assert [c.battery.id for c in inventory.cards(query="lipo")] == ["b"]
    assert [c.battery.id for c in inventory.cards(sort=SortKey.NAME)] == ["b", "a"]


def test_grouped_cards_keyed_by_label(inventory: BatteryInventory) -> None:
    groups = inventory.grouped_cards()
    assert list(groups) == ["LiIon (18650/21700)", "LiPo (drone/pouch)"]
    assert [c.battery.id for c in groups["LiPo (drone/pouch)"]] == ["b"]


def test_cards_days_since_charge_uses_clock(make_battery, clock) -> None:
    inventory = BatteryInventory.create_for_testing(
        [make_battery(last_charge_date=clock.now().date() - timedelta(days=120))], clock=clock
    )
    card = inventory.cards()[0]
    assert card.days_since_charge == 120
    assert card.is_stale is True


def test_summary_uses_full_collection(inventory: BatteryInventory) -> None:
    summary = inventory.summary()
    assert summary.total == 2
    assert summary.total_capacity_mah == 6000
    assert summary.high_cycle_count == 1


def test_get_advice_delegates_to_advisor(inventory: BatteryInventory) -> None:
    advisor = MagicMock()
    advisor.get_advice.return_value = "Store at 50%."
    inventory.advisor = advisor

    assert inventory.get_advice("b") == "Store at 50%."
    assert advisor.get_advice.call_args.args[0].id == "b"
    assert inventory.get_advice("ghost") == "Battery not found: ghost"


def test_default_advisor_reports_missing_credential(inventory: BatteryInventory) -> None:
    assert "no API key" in inventory.get_advice("a")


def test_seeded_demo_health(clock) -> None:
    inventory = BatteryInventory(create_memory_store(), clock=clock, seed_demo_data=True)
    by_id = {c.battery.id: c for c in inventory.cards()}
    assert by_id["4"].health.soh == 60
    assert by_id["1"].days_since_charge == (clock.now().date() - date(2023, 10, 20)).days


def test_update_rejects_lower_cycle_count(inventory: BatteryInventory) -> None:
    with pytest.raises(InvalidInputError, match="cannot decrease"):
        inventory.update_battery("a", {"cycle_count": 0})
    assert inventory.get_battery("a").cycle_count == 3

    assert inventory.update_battery("a", {"cycle_count": 7}).data.cycle_count == 7


@pytest.mark.parametrize(
    "updates",
    [
        {"capacity": -5},
        {"capacity": 0},
        {"voltage": 0},
        {"internal_resistance": -3},
    ],
)
def test_update_rejects_out_of_range_values(inventory: BatteryInventory, updates: dict) -> None:
    before = inventory.get_battery("a")
    with pytest.raises(InvalidInputError):
        inventory.update_battery("a", updates)
    assert inventory.get_battery("a") == before


@pytest.mark.parametrize("voltage", [0, -2.0])
def test_event_rejects_non_positive_voltage(inventory: BatteryInventory, voltage: float) -> None:
    with pytest.raises(InvalidInputError, match="Voltage"):
        inventory.record_event("a", EventMode.DISCHARGE, 40, voltage)
    assert inventory.get_battery("a").voltage == 3.7
    assert inventory.get_logs("a") == []


def test_validate_voltage() -> None:
    assert validate_voltage(None) is None
    assert validate_voltage(4.2) == 4.2
