from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Dict

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, data: str) -> None:
    """Write *data* to *path* via a temp file in the same directory."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile(
        "w", dir=path.parent, delete=False, encoding="utf-8"
    ) as tmp:
        tmp.write(data)
        tmp.flush()
        os.fsync(tmp.fileno())
        temp_name = tmp.name
    os.replace(temp_name, path)


class KeyValueStore:
    """JSON-file backed key-value store for sync bookkeeping and personal notes."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._values: Dict[str, Any] = {}
        self._load_from_disk()

    @property
    def path(self) -> Path:
        return self._path

    def _load_from_disk(self) -> None:
        if not self._path.exists():
            return
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            logger.warning(
                "ignoring unreadable key-value store", extra={"path": str(self._path)}
            )
            return
        if isinstance(payload, dict):
            self._values = payload

    def _flush_to_disk(self) -> None:
        atomic_write_text(self._path, json.dumps(self._values, sort_keys=True))

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value
            self._flush_to_disk()

    def delete(self, key: str) -> None:
        with self._lock:
            if key not in self._values:
                return
            del self._values[key]
            self._flush_to_disk()

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._values)


__all__ = ["KeyValueStore", "atomic_write_text"]
