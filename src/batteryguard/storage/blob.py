"""Battery store on top of a key-value blob backend.

Each collection (batteries, logs) is one JSON document. Every mutation
reads the whole document, changes it and writes it back.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Final

from batteryguard.constants import BATTERIES_KEY, LOGS_KEY
from batteryguard.errors import BatteryNotFoundError
from batteryguard.models.battery import Battery, BatteryLog
from batteryguard.storage.protocols import BlobBackend, MemoryBlobBackend
from batteryguard.utils.file import ensure_directory_exists

logger: Final = logging.getLogger(__name__)


class FileBlobBackend:
    """BlobBackend keeping each key in ``<data_dir>/<key>.json``."""

    def __init__(self, data_dir: Path) -> None:
        """Initialize the backend.

        Args:
            data_dir: Directory holding the blob files (created on first write)
        """
        self.data_dir = data_dir

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, value: str) -> None:
        ensure_directory_exists(self.data_dir)
        self._path(key).write_text(value, encoding="utf-8")


class BlobBatteryStore:
    """BatteryStore implementation backed by a BlobBackend."""

    def __init__(self, backend: BlobBackend) -> None:
        self.backend = backend

    # ── raw blob helpers ─────────────────────────────────────────────────────
    def _load(self, key: str) -> list[dict[str, Any]]:
        raw = self.backend.read(key)
        if not raw:
            return []
        return json.loads(raw)

    def _save(self, key: str, records: list[dict[str, Any]]) -> None:
        self.backend.write(key, json.dumps(records, ensure_ascii=False, indent=2))

    def _load_logs(self) -> list[BatteryLog]:
        return [BatteryLog.model_validate(r) for r in self._load(LOGS_KEY)]

    def _save_logs(self, logs: list[BatteryLog]) -> None:
        self._save(LOGS_KEY, [log.model_dump(mode="json") for log in logs])

    # ── batteries ────────────────────────────────────────────────────────────
    def is_initialized(self) -> bool:
        return self.backend.read(BATTERIES_KEY) is not None

    def get_all_batteries(self) -> list[Battery]:
        return [Battery.model_validate(r) for r in self._load(BATTERIES_KEY)]

    def put_all_batteries(self, batteries: list[Battery]) -> None:
        self._save(BATTERIES_KEY, [b.model_dump(mode="json") for b in batteries])

    def delete_battery(self, battery_id: str) -> None:
        batteries = self.get_all_batteries()
        remaining = [b for b in batteries if b.id != battery_id]
        if len(remaining) == len(batteries):
            raise BatteryNotFoundError(battery_id)
        self.put_all_batteries(remaining)

        logs = self._load_logs()
        kept = [log for log in logs if log.battery_id != battery_id]
        if len(kept) != len(logs):
            self._save_logs(kept)
        logger.info("Deleted battery %s and %d log entries", battery_id, len(logs) - len(kept))

    # ── logs ─────────────────────────────────────────────────────────────────
    def get_logs(self, battery_id: str) -> list[BatteryLog]:
        logs = [log for log in self._load_logs() if log.battery_id == battery_id]
        return sorted(logs, key=lambda log: log.timestamp, reverse=True)

    def append_log(self, entry: BatteryLog) -> None:
        logs = self._load_logs()
        logs.append(entry)
        self._save_logs(logs)


def create_memory_store() -> BlobBatteryStore:
    """Create an empty store that lives only in memory."""
    return BlobBatteryStore(MemoryBlobBackend())


def create_file_store(data_dir: Path) -> BlobBatteryStore:
    """Create a store persisting JSON blobs under ``data_dir``."""
    return BlobBatteryStore(FileBlobBackend(data_dir))
