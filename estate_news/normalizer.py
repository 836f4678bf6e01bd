from __future__ import annotations

import html
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .models import RawFeedItem, UnifiedItem

DESCRIPTION_LIMIT = 500
UNKNOWN_AUTHOR = "未知"
UNKNOWN_SOURCE_AUTHOR = "未知来源"

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def strip_html(text: Optional[str]) -> str:
    """Drop tags, decode entities and collapse whitespace."""
    if not text:
        return ""
    cleaned = _TAG_RE.sub(" ", text)
    cleaned = html.unescape(cleaned)
    return _WS_RE.sub(" ", cleaned).strip()


def truncate(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    # Hard cut on code points, no word boundary handling.
    if limit <= 0:
        return ""
    return text[:limit]


def join_authors(authors: Sequence[str], unknown: str = UNKNOWN_AUTHOR) -> str:
    names = [a.strip() for a in authors if a and a.strip()]
    if not names:
        return unknown
    return ", ".join(names)


def to_unified_item(
    raw: RawFeedItem,
    category: str,
    *,
    default_source: str,
    unknown_author: str = UNKNOWN_AUTHOR,
    details: Optional[Dict[str, Any]] = None,
) -> UnifiedItem:
    """
    Convert a RawFeedItem into a UnifiedItem of the given category.

    The HTML body goes to details["content_html"]; `description` is its
    plain-text excerpt.
    """
    if not category:
        raise ValueError("UnifiedItem requires a category")

    content_html = raw.description or ""
    extra: Dict[str, Any] = {"content_html": content_html}
    if details:
        extra.update(details)

    return UnifiedItem(
        id=raw.id or "",
        type=category,
        url=raw.link,
        title=raw.title,
        description=truncate(strip_html(content_html)),
        published_date=raw.published_at,
        authors=join_authors(raw.authors, unknown_author),
        source=raw.source or default_source,
        details=extra,
    )


def to_unified_items(
    items: Iterable[RawFeedItem],
    category: str,
    *,
    default_source: str,
    unknown_author: str = UNKNOWN_AUTHOR,
) -> List[UnifiedItem]:
    return [
        to_unified_item(it, category, default_source=default_source, unknown_author=unknown_author)
        for it in items
    ]
