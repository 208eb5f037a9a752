"""Persisted text direction preference (``preferredDirection``)."""

from __future__ import annotations

from typing import Literal

import structlog

from routine_builder.core.storage import KeyValueStorage
from routine_builder.errors import StorageError

logger = structlog.get_logger()

DIRECTION_KEY = "preferredDirection"

Direction = Literal["ltr", "rtl"]


def lang_for(direction: Direction) -> str:
    return "ar" if direction == "rtl" else "en"


def flip(direction: Direction) -> Direction:
    return "ltr" if direction == "rtl" else "rtl"


def load_direction(storage: KeyValueStorage) -> Direction:
    try:
        saved = storage.get_item(DIRECTION_KEY)
    except StorageError as exc:
        logger.error("direction_restore_failed", error=str(exc))
        return "ltr"
    return "rtl" if saved == "rtl" else "ltr"


def save_direction(storage: KeyValueStorage, direction: Direction) -> None:
    try:
        storage.set_item(DIRECTION_KEY, direction)
    except StorageError as exc:
        logger.error("direction_persist_failed", direction=direction, error=str(exc))
