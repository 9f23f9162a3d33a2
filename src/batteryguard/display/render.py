"""HTML report rendering for the battery inventory."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, cast

from jinja2 import Environment, FileSystemLoader, Template, select_autoescape

from batteryguard.engine.views import BatteryCard, InventorySummary
from batteryguard.settings.application import PACKAGE_DIR
from batteryguard.utils import ensure_directory_exists, format_capacity, format_level


def level_bar_color(card: BatteryCard) -> str:
    """CSS colour for the charge bar: red when low, brand blue otherwise."""
    return "#ef4444" if card.is_low_power else "#3b82f6"


class ReportRenderer:
    """Handles the Jinja2 environment and report rendering.

    The environment registers formatting filters for charge levels and
    capacities so the template itself stays free of logic.
    """

    report_template: Template

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        """Initialize the report renderer.

        Args:
            templates_dir: Directory containing templates (default: packaged templates)
        """
        self.templates_dir = templates_dir or PACKAGE_DIR / "templates"

        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=select_autoescape(["html", "j2"]),
        )
        self._register_filters()
        self.report_template = self.env.get_template("report.html.j2")

    def _register_filters(self) -> None:
        """Register custom filters with the Jinja environment."""
        self.env.filters.update(
            {
                "level": format_level,
                "capacity": format_capacity,
                "bar_color": level_bar_color,
            }
        )

    def build_context(
        self,
        cards: list[BatteryCard] | dict[str, list[BatteryCard]],
        summary: InventorySummary,
    ) -> dict[str, Any]:
        """Build the template context.

        Args:
            cards: A flat list, or cards grouped under a heading
            summary: Dashboard statistics

        Returns:
            Dictionary with values ready for template rendering
        """
        groups = cards if isinstance(cards, dict) else {"": cards}
        return {
            "groups": groups,
            "grouped": isinstance(cards, dict),
            "shown": sum(len(members) for members in groups.values()),
            "summary": summary,
            "distribution": [(t.label, count) for t, count in summary.type_distribution],
        }

    def render(
        self,
        cards: list[BatteryCard] | dict[str, list[BatteryCard]],
        summary: InventorySummary,
    ) -> str:
        """Render the report.

        Returns:
            Rendered HTML
        """
        ctx = self.build_context(cards, summary)
        return cast(str, self.report_template.render(**ctx))

    def write(
        self,
        cards: list[BatteryCard] | dict[str, list[BatteryCard]],
        summary: InventorySummary,
        output_path: Path,
    ) -> Path:
        """Render the report and write it to ``output_path``."""
        ensure_directory_exists(output_path.parent)
        output_path.write_text(self.render(cards, summary), encoding="utf-8")
        return output_path
