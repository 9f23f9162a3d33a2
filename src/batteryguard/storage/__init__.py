"""Persistence for batteries and their logs."""

from batteryguard.storage.blob import (
    BlobBatteryStore,
    FileBlobBackend,
    create_file_store,
    create_memory_store,
)
from batteryguard.storage.protocols import (
    BatteryStore,
    BlobBackend,
    ErrorSimulatingBackend,
    MemoryBlobBackend,
)
from batteryguard.storage.seed import demo_batteries

__all__ = [
    "BatteryStore",
    "BlobBackend",
    "BlobBatteryStore",
    "ErrorSimulatingBackend",
    "FileBlobBackend",
    "MemoryBlobBackend",
    "create_file_store",
    "create_memory_store",
    "demo_batteries",
]
