"""Text and number formatting utilities."""

from __future__ import annotations


def format_level(level: float) -> str:
    """Format a charge level as a percentage without trailing zeros.

    Args:
        level: Charge level (0-100)

    Returns:
        Formatted percentage string, e.g. ``49.37%`` or ``100%``
    """
    return f"{level:g}%"


def format_capacity(mah: float) -> str:
    """Format a capacity, switching to Ah above 10 000 mAh."""
    if mah >= 10_000:
        return f"{mah / 1000:g} Ah"
    return f"{mah:g} mAh"
