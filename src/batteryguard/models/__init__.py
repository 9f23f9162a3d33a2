"""Data models for batteryguard.

Battery and BatteryLog are the persisted records; BatteryDraft validates
user input for new batteries. Derived health figures live in
batteryguard.engine and are never stored on these models.
"""

from batteryguard.models.battery import Battery, BatteryDraft, BatteryLog

__all__ = ["Battery", "BatteryDraft", "BatteryLog"]
