"""Selection Store — the user's chosen products and their persistence.

Mutation helpers are pure (new list in, new list out); SelectionStore only
moves the whole sequence to and from durable storage.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

import structlog
from pydantic import ValidationError

from routine_builder.core.storage import KeyValueStorage
from routine_builder.errors import StorageError
from routine_builder.models.contracts import DisplayProduct

logger = structlog.get_logger()

STORAGE_KEY = "loreal_selected_products"


def is_selected(selection: Sequence[DisplayProduct], pid: str) -> bool:
    return any(entry.pid == pid for entry in selection)


def toggle_selection(
    selection: Sequence[DisplayProduct],
    pid: str,
    visible: Sequence[DisplayProduct],
) -> list[DisplayProduct]:
    """Remove ``pid`` if selected, else append it.

    The appended entry is the visible record with that pid, or a
    ``{name: pid, pid}`` stand-in when the pid is not on screen.
    """
    if is_selected(selection, pid):
        return [entry for entry in selection if entry.pid != pid]
    record = next((p for p in visible if p.pid == pid), None)
    if record is None:
        record = DisplayProduct(name=pid, pid=pid)
    return [*selection, record]


def serialize_selection(selection: Sequence[DisplayProduct]) -> str:
    return json.dumps(
        [entry.model_dump(by_alias=True, exclude_none=True) for entry in selection],
        ensure_ascii=False,
    )


def deserialize_selection(raw: str) -> list[DisplayProduct]:
    """Parse a stored payload. Any malformed entry rejects the whole payload."""
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("stored selection is not a JSON array")
    return [DisplayProduct.model_validate(item) for item in data]


class SelectionStore:
    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def persist(self, selection: Sequence[DisplayProduct]) -> bool:
        """Overwrite the stored selection. Failures are logged, never raised."""
        try:
            self.storage.set_item(STORAGE_KEY, serialize_selection(selection))
        except StorageError as exc:
            logger.error("selection_persist_failed", count=len(selection), error=str(exc))
            return False
        logger.info("selection_persisted", count=len(selection))
        return True

    def restore(self) -> list[DisplayProduct]:
        """Stored selection, or [] when the key is missing or unreadable."""
        try:
            raw = self.storage.get_item(STORAGE_KEY)
        except StorageError as exc:
            logger.error("selection_restore_failed", error=str(exc))
            return []
        if raw is None:
            return []
        try:
            selection = deserialize_selection(raw)
        except (ValueError, ValidationError) as exc:
            # json.JSONDecodeError is a ValueError
            logger.warning("selection_restore_corrupt", error=str(exc)[:200])
            return []
        logger.info("selection_restored", count=len(selection))
        return selection
