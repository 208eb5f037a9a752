"""Durable string key-value storage (the server-side stand-in for localStorage).

JsonFileStorage keeps one JSON object per device fingerprint and rewrites
the whole file on every write, swapping it in with an atomic rename so a
reader never sees a half-written selection.
"""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

from routine_builder.errors import StorageError


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Process-local storage, used by tests and as a throwaway default."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class JsonFileStorage:
    def __init__(self, path: Path) -> None:
        self.path = path

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            # ValueError covers JSONDecodeError and UnicodeDecodeError
            raise StorageError(f"Cannot read storage file {str(self.path)!r}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {str(self.path)!r} does not hold a JSON object")
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            items = self._read_all()
        except StorageError:
            # An unreadable file is overwritten rather than blocking every future write
            items = {}
        items[key] = value
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, ensure_ascii=False)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise StorageError(f"Cannot write storage file {str(self.path)!r}: {exc}") from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)


def storage_for_device(storage_dir: str | Path, device_fingerprint: str) -> JsonFileStorage:
    """Map a client-supplied fingerprint onto a file name it cannot escape from."""
    digest = hashlib.sha256(device_fingerprint.encode()).hexdigest()[:20]
    return JsonFileStorage(Path(storage_dir) / f"{digest}.json")
