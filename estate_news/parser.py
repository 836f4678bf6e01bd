from __future__ import annotations

import calendar
import io
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, Union

import feedparser
from feedparser.datetimes import _parse_date

from .models import RawFeedItem

logger = logging.getLogger(__name__)

ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def clean_text(text: Optional[str]) -> str:
    """Text as feedparser decoded it, with non-breaking spaces turned into plain ones."""
    if not text:
        return ""
    return text.replace("\xa0", " ").strip()


def to_iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime(ISO_FORMAT)


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse a feed/API timestamp (RFC 822, ISO 8601, W3C-DTF ...) into an aware
    UTC datetime. Returns None when the value cannot be understood.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, time.struct_time):
        return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    except ValueError:
        pass
    try:
        parsed = _parse_date(value)
    except Exception:
        return None
    if isinstance(parsed, time.struct_time):
        return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
    return None


def load_feed(data: Union[str, bytes]) -> feedparser.FeedParserDict:
    """
    Parse an RSS/Atom document held in memory.

    The payload is wrapped in a stream so feedparser never mistakes it for a
    URL or a file name. Bytes keep the encoding from the XML declaration.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        feed = feedparser.parse(
            io.BytesIO(data or b""),
            sanitize_html=False,
            resolve_relative_uris=False,
        )
    except Exception as e:  # pragma: no cover - feedparser reports problems via bozo
        logger.warning("Feed document could not be parsed: %s", e)
        return feedparser.FeedParserDict(feed=feedparser.FeedParserDict(), entries=[], bozo=1)
    if getattr(feed, "bozo", 0):
        logger.debug("Feed is not well-formed, using recovered entries: %s", feed.get("bozo_exception"))
    return feed


def feed_title(feed: feedparser.FeedParserDict) -> str:
    meta = feed.get("feed") or {}
    return clean_text(meta.get("title"))


def _entry_link(entry: Dict[str, Any]) -> str:
    # feedparser already prefers rel="alternate" for Atom entries
    link = entry.get("link")
    if isinstance(link, str) and link.strip():
        return link.strip()
    for ln in entry.get("links") or []:
        href = ln.get("href") if isinstance(ln, dict) else None
        if isinstance(href, str) and href.strip():
            return href.strip()
    guid = entry.get("id")
    if isinstance(guid, str) and guid.strip():
        return guid.strip()
    return ""


def _entry_description(entry: Dict[str, Any]) -> str:
    summary = entry.get("summary")
    if isinstance(summary, str) and summary.strip():
        return summary.strip()
    for c in entry.get("content") or []:
        value = c.get("value") if isinstance(c, dict) else None
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _entry_published(entry: Dict[str, Any], now: datetime) -> str:
    """
    Priority: published (pubDate) -> updated (dc:date). A missing or unparseable
    date is replaced with `now`.
    """
    # "updated" is read only when present, feedparser aliases it to "published" otherwise
    for key in ("published_parsed", "updated_parsed"):
        dt = parse_datetime(entry[key]) if key in entry else None
        if dt is not None:
            return to_iso(dt)
    for key in ("published", "updated"):
        dt = parse_datetime(entry[key]) if key in entry else None
        if dt is not None:
            return to_iso(dt)
    logger.debug("No usable date on %r, using current time", entry.get("link") or entry.get("title"))
    return to_iso(now)


def iter_items(feed: feedparser.FeedParserDict, now: Optional[datetime] = None) -> Iterator[RawFeedItem]:
    """
    Yield the articles of a parsed feed in document order.

    Entries lacking a title or a link are skipped. Title and author are
    taken as feedparser decoded them; the description is kept as the
    upstream HTML, unsanitized.
    """
    now = now or datetime.now(timezone.utc)
    for entry in feed.get("entries") or []:
        title = clean_text(entry.get("title"))
        link = _entry_link(entry)
        if not title or not link:
            continue
        author = clean_text(entry.get("author"))
        yield RawFeedItem(
            title=title,
            link=link,
            description=_entry_description(entry),
            published_at=_entry_published(entry, now),
            authors=(author,) if author else (),
        )


def parse_feed(data: Union[str, bytes], now: Optional[datetime] = None) -> Iterator[RawFeedItem]:
    return iter_items(load_feed(data), now=now)
