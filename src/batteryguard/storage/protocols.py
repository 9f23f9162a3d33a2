# src/batteryguard/storage/protocols.py
from __future__ import annotations

from typing import Protocol, runtime_checkable

from batteryguard.models.battery import Battery, BatteryLog


@runtime_checkable
class BlobBackend(Protocol):
    """Protocol for a key-value store of text blobs.

    Backends hold one blob per collection and perform no validation;
    last write wins.
    """

    def read(self, key: str) -> str | None:
        """Return the blob stored under ``key``, or None if never written."""
        ...

    def write(self, key: str, value: str) -> None:
        """Replace the blob stored under ``key``."""
        ...


@runtime_checkable
class BatteryStore(Protocol):
    """Protocol defining the persistence the inventory needs.

    The battery collection is read and written as a whole snapshot.
    Logs are append-only apart from the cascade in ``delete_battery``.
    """

    def is_initialized(self) -> bool:
        """Return True once the battery collection has ever been written."""
        ...

    def get_all_batteries(self) -> list[Battery]:
        """Return every stored battery in stored order."""
        ...

    def put_all_batteries(self, batteries: list[Battery]) -> None:
        """Replace the stored battery collection."""
        ...

    def get_logs(self, battery_id: str) -> list[BatteryLog]:
        """Return a battery's log entries, newest first."""
        ...

    def append_log(self, entry: BatteryLog) -> None:
        """Append a log entry."""
        ...

    def delete_battery(self, battery_id: str) -> None:
        """Remove a battery and every log entry that belongs to it.

        Raises:
            BatteryNotFoundError: If no battery has this id
        """
        ...


class MemoryBlobBackend:
    """In-memory BlobBackend, for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.blobs: dict[str, str] = dict(initial or {})
        self.write_calls: list[str] = []

    def read(self, key: str) -> str | None:
        return self.blobs.get(key)

    def write(self, key: str, value: str) -> None:
        """Store the blob and record which key was written."""
        self.blobs[key] = value
        self.write_calls.append(key)

    def reset_call_history(self) -> None:
        """Reset the call history for testing."""
        self.write_calls = []


class ErrorSimulatingBackend(MemoryBlobBackend):
    """Backend mock that can simulate storage failures."""

    def __init__(self, fail_on_methods: list[str] | None = None):
        """Initialize with optional methods that should fail.

        Args:
            fail_on_methods: List of method names that should raise exceptions
        """
        super().__init__()
        self.fail_on_methods = fail_on_methods or []

    def read(self, key: str) -> str | None:
        if "read" in self.fail_on_methods:
            raise OSError("Simulated storage read failure")
        return super().read(key)

    def write(self, key: str, value: str) -> None:
        if "write" in self.fail_on_methods:
            raise OSError("Simulated storage write failure")
        super().write(key, value)
