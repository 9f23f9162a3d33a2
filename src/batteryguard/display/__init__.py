"""Presentation helpers for the battery inventory."""

from batteryguard.display.render import ReportRenderer

__all__ = ["ReportRenderer"]
