"""BatteryGuard CLI application.

This module provides the command-line interface for the battery
inventory: listing and searching batteries, recording charge and
discharge events, viewing history, statistics, advice and reports.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Final, NoReturn

import typer
import yaml
from pydantic import ValidationError

from batteryguard.common.enums import BatteryType, EventMode, HealthState, LogAction, SortKey, StatusFilter
from batteryguard.controller import BatteryInventory, OperationResult
from batteryguard.display.render import ReportRenderer
from batteryguard.engine.views import BatteryCard
from batteryguard.errors import InvalidInputError
from batteryguard.models.battery import BatteryLog
from batteryguard.settings.user import UserSettings
from batteryguard.utils import TimeUtils, format_capacity, format_level

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(help="BatteryGuard battery inventory CLI", add_completion=False)
config_app = typer.Typer(help="Config helpers")
app.add_typer(config_app, name="config")

logger: Final = logging.getLogger(__name__)  # Will be "batteryguard.cli"

CONFIG_OPTION = typer.Option(None, "--config", "-c", exists=True, dir_okay=False)
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")
BATTERY_ID_ARGUMENT = typer.Argument(..., help="Battery id")
LEVEL_OPTION = typer.Option(..., "--level", "-l", min=0, max=100, help="Charge level after the event (%)")
VOLTAGE_OPTION = typer.Option(None, "--voltage", "-v", help="Measured voltage (default: unchanged)")
NOTE_OPTION = typer.Option("", "--note", "-n", help="Free text for the log entry")
FILTER_OPTION = typer.Option(StatusFilter.ALL, "--filter", "-f", help="Status filter")
QUERY_OPTION = typer.Option(None, "--query", "-q", help="Search name, type and notes")
SORT_OPTION = typer.Option(SortKey.INSERTION, "--sort", help="Ordering of the list")
GROUPED_OPTION = typer.Option(False, "--grouped", "-g", help="Group batteries by chemistry")
DST_ARGUMENT = typer.Argument(..., help="Output config.yaml")

STATUS_COLORS: Final = {
    HealthState.GOOD: typer.colors.GREEN,
    HealthState.FAIR: typer.colors.YELLOW,
    HealthState.POOR: typer.colors.YELLOW,
    HealthState.CRITICAL: typer.colors.RED,
}


def _open_inventory(config: Path | None, debug: bool) -> BatteryInventory:
    try:
        return BatteryInventory.from_config(config, debug=debug)
    except (RuntimeError, FileNotFoundError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _check(result: OperationResult[Any]) -> Any:
    if not result.success:
        _fail(result.error or "Operation failed")
    return result.data


def _record_event(
    inventory: BatteryInventory,
    battery_id: str,
    mode: EventMode,
    level: float,
    voltage: float | None,
    full: bool,
    note: str,
) -> BatteryLog:
    try:
        result = inventory.record_event(battery_id, mode, level, voltage, full, note)
    except InvalidInputError as err:
        _fail(err.message)
    _, entry = _check(result)
    return entry


def _echo_card(card: BatteryCard) -> None:
    b = card.battery
    level_color = typer.colors.RED if card.is_low_power else None
    typer.echo(f"{b.id}  {b.name}  [{b.type.label}]")
    typer.secho(f"    charge {format_level(b.charge_level)}", fg=level_color, nl=False)
    typer.secho(
        f"   health {card.health.status.value} ({card.health.soh}%)",
        fg=STATUS_COLORS[card.health.status],
        nl=False,
    )
    typer.echo(
        f"   {format_capacity(b.capacity)}, {b.voltage:g} V, {b.cycle_count} cycles,"
        f" {b.internal_resistance:g} mOhm, last charged {card.days_since_charge} days ago"
    )
    for alert in card.alerts:
        typer.secho(f"    ! {alert}", fg=typer.colors.RED)


# ───────────────────────── inventory commands ───────────────────────────────
@app.command("list")
def list_batteries(
    status: StatusFilter = FILTER_OPTION,
    query: str | None = QUERY_OPTION,
    sort: SortKey = SORT_OPTION,
    grouped: bool = GROUPED_OPTION,
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """List batteries after applying self-discharge."""
    inventory = _open_inventory(config, debug)
    batteries = inventory.load()

    if grouped:
        groups = inventory.grouped_cards(status, query, sort, batteries=batteries)
        shown = sum(len(cards) for cards in groups.values())
    else:
        cards = inventory.cards(status, query, sort, batteries=batteries)
        groups = {"": cards}
        shown = len(cards)

    typer.echo(f"Batteries: {shown}")
    if not shown:
        typer.echo("No matching batteries.")
        return
    for label, cards in groups.items():
        if grouped:
            typer.secho(f"\n{label} ({len(cards)})", bold=True)
        for card in cards:
            _echo_card(card)


@app.command()
def add(
    name: str = typer.Option(..., "--name", help="Display name"),
    battery_type: BatteryType = typer.Option(BatteryType.LI_ION, "--type", help="Chemistry"),
    capacity: float = typer.Option(2000, help="Rated capacity (mAh)"),
    voltage: float = typer.Option(3.7, help="Current voltage (V)"),
    level: float = typer.Option(50, "--level", help="Charge level (%)"),
    cycles: int = typer.Option(0, "--cycles", help="Completed full cycles"),
    resistance: float = typer.Option(20, "--resistance", help="Internal resistance (mOhm)"),
    purchase_date: str | None = typer.Option(None, help="Purchase date (YYYY-MM-DD, default today)"),
    last_charge_date: str | None = typer.Option(None, help="Last charge date (YYYY-MM-DD, default today)"),
    health_threshold: float = typer.Option(80, help="Warning threshold (%)"),
    notes: str | None = typer.Option(None, help="Free-form notes"),
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Add a battery to the inventory."""
    data: dict[str, Any] = {
        "name": name,
        "type": battery_type,
        "capacity": capacity,
        "voltage": voltage,
        "charge_level": level,
        "cycle_count": cycles,
        "internal_resistance": resistance,
        "health_threshold": health_threshold,
        "notes": notes,
    }
    if purchase_date:
        data["purchase_date"] = purchase_date
    if last_charge_date:
        data["last_charge_date"] = last_charge_date

    inventory = _open_inventory(config, debug)
    try:
        battery = inventory.add_battery(data)
    except InvalidInputError as err:
        _fail(err.message)
    typer.secho(f"Added {battery.name} ({battery.id})", fg=typer.colors.GREEN)


@app.command()
def charge(
    battery_id: str = BATTERY_ID_ARGUMENT,
    level: float = LEVEL_OPTION,
    voltage: float | None = VOLTAGE_OPTION,
    full: bool = typer.Option(True, "--full/--partial", help="Count as a full charge cycle"),
    note: str = NOTE_OPTION,
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Record a charge."""
    inventory = _open_inventory(config, debug)
    entry = _record_event(inventory, battery_id, EventMode.CHARGE, level, voltage, full, note)
    typer.secho(entry.details, fg=typer.colors.GREEN)


@app.command()
def discharge(
    battery_id: str = BATTERY_ID_ARGUMENT,
    level: float = LEVEL_OPTION,
    voltage: float | None = VOLTAGE_OPTION,
    note: str = NOTE_OPTION,
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Record a discharge or use."""
    inventory = _open_inventory(config, debug)
    entry = _record_event(inventory, battery_id, EventMode.DISCHARGE, level, voltage, False, note)
    typer.secho(entry.details, fg=typer.colors.GREEN)


@app.command()
def note(
    battery_id: str = BATTERY_ID_ARGUMENT,
    text: str = typer.Option(..., "--text", "-t", help="Entry text"),
    maintenance: bool = typer.Option(False, "--maintenance", help="Record as maintenance"),
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Add a note or maintenance entry to a battery's history."""
    inventory = _open_inventory(config, debug)
    action = LogAction.MAINTENANCE if maintenance else LogAction.NOTE
    _check(inventory.record_note(battery_id, text, action))
    typer.secho("Entry recorded", fg=typer.colors.GREEN)


@app.command()
def delete(
    battery_id: str = BATTERY_ID_ARGUMENT,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Permanently delete a battery and all of its history."""
    if not yes:
        typer.confirm("Delete this battery and all of its records?", abort=True)
    inventory = _open_inventory(config, debug)
    _check(inventory.delete_battery(battery_id))
    typer.secho(f"Deleted {battery_id}", fg=typer.colors.GREEN)


@app.command()
def logs(
    battery_id: str = BATTERY_ID_ARGUMENT,
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Show a battery's history, newest first."""
    inventory = _open_inventory(config, debug)
    entries = inventory.get_logs(battery_id)
    if not entries:
        typer.echo("No history recorded.")
        return
    for entry in entries:
        stamp = TimeUtils.format_datetime(entry.timestamp, "%Y-%m-%d %H:%M")
        typer.echo(f"{stamp}  {entry.action.value:<11} {format_level(entry.level_after):>7}  {entry.details}")


@app.command()
def stats(
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Show dashboard statistics."""
    summary = _open_inventory(config, debug).summary()
    typer.echo(f"Batteries:        {summary.total}")
    typer.echo(f"Fully charged:    {summary.full_charge_count} ({summary.full_charge_percent}%)")
    typer.echo(f"Above 60 cycles:  {summary.high_cycle_count}")
    typer.echo(f"Total capacity:   {format_capacity(summary.total_capacity_mah)}")
    for battery_type, count in summary.type_distribution:
        typer.echo(f"  {battery_type.label}: {count}")


@app.command()
def advise(
    battery_id: str = BATTERY_ID_ARGUMENT,
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Ask the advice service about a battery."""
    typer.echo(_open_inventory(config, debug).get_advice(battery_id))


@app.command()
def report(
    output: Path | None = typer.Option(None, "--output", "-o", dir_okay=False, help="HTML file to write"),
    status: StatusFilter = FILTER_OPTION,
    query: str | None = QUERY_OPTION,
    sort: SortKey = SORT_OPTION,
    grouped: bool = GROUPED_OPTION,
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Write an HTML report of the inventory."""
    inventory = _open_inventory(config, debug)
    batteries = inventory.load()
    if grouped:
        cards: Any = inventory.grouped_cards(status, query, sort, batteries=batteries)
    else:
        cards = inventory.cards(status, query, sort, batteries=batteries)

    renderer = ReportRenderer(inventory.settings.paths.templates_dir if inventory.settings else None)
    if output is None:
        if inventory.settings is None:
            _fail("No output path given")
        output = inventory.settings.paths.report_html
    path = renderer.write(cards, inventory.summary(batteries), output)
    typer.secho(f"Report written to {path}", fg=typer.colors.GREEN)


# ───────────────────────── config sub-commands ───────────────────────────────
@config_app.command("validate")
def validate_config(file: Path):
    """Validate a YAML config file against the schema."""
    try:
        UserSettings.load(file)
        typer.echo("✅ Config valid")
    except (RuntimeError, FileNotFoundError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@config_app.command("wizard")
def wizard(dst: Path = DST_ARGUMENT):
    """Interactive prompt to create a config file."""
    typer.echo("Interactive config builder - press Enter for defaults.")

    while True:
        data: dict[str, Any] = {
            "data_dir": typer.prompt("Data directory", default="~/.local/share/batteryguard"),
            "advice_api_key": typer.prompt(
                "Advice API key (blank to disable)", default="", hide_input=True, show_default=False
            ),
            "advice_model": typer.prompt("Advice model", default="gemini-2.5-flash"),
            "seed_demo_data": typer.confirm("Start with demo batteries?", default=True),
        }
        try:
            cfg = UserSettings(**data)
            break  # valid → exit loop
        except ValidationError as err:
            typer.secho("\nConfig error(s):", fg=typer.colors.RED, err=True)
            for e in err.errors():
                typer.secho(f"  • {e['loc'][0]} - {e['msg']}", fg=typer.colors.RED, err=True)
            typer.echo("Please re-enter the values.\n")

    dst.write_text(yaml.safe_dump(cfg.model_dump(mode="json"), sort_keys=False), encoding="utf-8")
    typer.secho(f"Config written to {dst}", fg=typer.colors.GREEN)


# ───────────────────────── module entrypoint ────────────────────────────────
if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)
