from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class RawFeedItem:
    """
    An article as a source adapter sees it, before normalization.

    `published_at` is an ISO-8601 string. The RSS parser fills at most one
    author; API entries may carry several.
    """
    title: str
    link: str
    description: str = ""
    published_at: str = ""
    authors: Tuple[str, ...] = ()
    source: str = ""
    id: Optional[str] = None
    feed_url: Optional[str] = None


@dataclass
class SourcePayload:
    """What a source's fetch() hands to its transform()."""
    title: str
    items: List[RawFeedItem] = field(default_factory=list)


@dataclass(frozen=True)
class UnifiedItem:
    """
    Stable public model representing a normalized news item.

    WARNING: Do not change fields lightly. The publishing side consumes
    `to_dict()` as-is.
    """
    id: str
    type: str
    url: str
    title: str
    description: str
    published_date: str
    authors: str
    source: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "published_date": self.published_date,
            "authors": self.authors,
            "source": self.source,
            "details": dict(self.details),
        }
