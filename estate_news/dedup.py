from __future__ import annotations

from typing import Iterable, List, Set

from .models import UnifiedItem


def deduplicate(items: Iterable[UnifiedItem]) -> List[UnifiedItem]:
    """
    Remove duplicates by priority: id -> url -> title+source.
    Keeps the first occurrence and preserves original order.
    """
    seen: Set[str] = set()
    out: List[UnifiedItem] = []

    def make_keys(it: UnifiedItem) -> List[str]:
        keys = []
        if it.id:
            keys.append(f"id::{it.id}")
        if it.url:
            keys.append(f"url::{it.url}")
        if not keys:
            keys.append(f"ts::{it.title}::{it.source}")
        return keys

    for it in items:
        keys = make_keys(it)
        if any(k in seen for k in keys):
            continue
        seen.update(keys)
        out.append(it)
    return out
