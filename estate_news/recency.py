from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, List, Optional, TypeVar

from .parser import parse_datetime

T = TypeVar("T")


def is_within_last_days(published: Any, days: int, *, now: Optional[datetime] = None) -> bool:
    """
    True when `published` falls no earlier than `now - days`.

    Timestamps that cannot be parsed are never recent. Future dates are kept.
    """
    dt = parse_datetime(published)
    if dt is None:
        return False
    now = now or datetime.now(timezone.utc)
    return now - dt <= timedelta(days=days)


def filter_recent(
    items: Iterable[T],
    days: int,
    *,
    key: Callable[[T], Any],
    now: Optional[datetime] = None,
) -> List[T]:
    """Keep the items whose `key(item)` timestamp is inside the recency window."""
    now = now or datetime.now(timezone.utc)
    return [it for it in items if is_within_last_days(key(it), days, now=now)]


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def published_key(published: Any) -> datetime:
    """Sort key for ISO timestamps; unparseable values sort last when descending."""
    return parse_datetime(published) or _EPOCH
