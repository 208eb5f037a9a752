"""Filter/view derivation: which catalog records are on screen, under which pid."""

from __future__ import annotations

import hashlib
import json
import re
from collections.abc import Sequence
from typing import Literal

from routine_builder.models.contracts import DisplayProduct, FilterState, Product

PidMode = Literal["positional", "content_hash"]

NO_CATEGORY_MESSAGE = "Select a category to view products"

_WHITESPACE_RE = re.compile(r"\s+")


def _slug(name: str) -> str:
    return _WHITESPACE_RE.sub("-", name)


def _content_digest(product: Product) -> str:
    payload = json.dumps(product.model_dump(), sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(payload.encode()).hexdigest()[:12]


def assign_pids(products: Sequence[Product], mode: PidMode = "positional") -> list[DisplayProduct]:
    """Attach a pid to every record of one displayed batch.

    A record's own id always wins. Otherwise ``positional`` uses the
    whitespace-slugged name plus the index within this batch, so the same
    record can get a different pid under a different filter.
    ``content_hash`` derives the pid from the record itself, which keeps it
    stable across views; identical records get ``~n`` suffixes to stay unique.
    """
    seen: set[str] = set()
    result: list[DisplayProduct] = []
    for index, product in enumerate(products):
        if product.id is not None:
            pid = product.id
        elif mode == "content_hash":
            base = f"{_slug(product.name)}-{_content_digest(product)}"
            pid = base
            n = 1
            while pid in seen:
                pid = f"{base}~{n}"
                n += 1
        else:
            pid = f"{_slug(product.name)}-{index}"
        seen.add(pid)
        result.append(DisplayProduct(**product.model_dump(), pid=pid))
    return result


def _contains(field: str | None, needle: str) -> bool:
    return field is not None and needle in field.lower()


def matches_filter(product: Product, filter_state: FilterState) -> bool:
    """Category equality AND case-insensitive search over name/brand/description."""
    if filter_state.category and product.category != filter_state.category:
        return False
    if filter_state.search_term:
        needle = filter_state.search_term.lower()
        return (
            _contains(product.name, needle)
            or _contains(product.brand, needle)
            or _contains(product.description, needle)
        )
    return True


def compute_visible(
    catalog: Sequence[Product],
    filter_state: FilterState,
    pid_mode: PidMode = "positional",
) -> list[DisplayProduct]:
    """Pure: same catalog and filter always give the same list, pids included."""
    return assign_pids([p for p in catalog if matches_filter(p, filter_state)], pid_mode)


def empty_state_message(filter_state: FilterState, *, filter_applied: bool) -> str:
    """Copy for an empty grid. Before any filter input the grid asks for a category."""
    if not filter_applied:
        return NO_CATEGORY_MESSAGE
    hint = "search term" if filter_state.search_term else "category"
    return f"No products found. Try a different {hint}."
