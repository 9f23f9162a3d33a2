"""Exception classes for the battery inventory.

Engine functions never raise; these are used by stores and by the
inventory service to report problems with a specific request.
"""

from __future__ import annotations


class BatteryGuardError(Exception):
    """Base class for all batteryguard errors."""


class BatteryNotFoundError(BatteryGuardError):
    """Raised when an operation targets a battery id that is not stored."""

    def __init__(self, battery_id: str) -> None:
        """Initialize the exception.

        Args:
            battery_id: The id that could not be found
        """
        super().__init__(f"Battery not found: {battery_id}")
        self.battery_id = battery_id


class InvalidInputError(BatteryGuardError):
    """Raised when user supplied values fail validation."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """Initialize with validation details.

        Args:
            message: Description of what was rejected
            original_error: The underlying validation error, if any
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error
