from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests

from ..config import Settings
from ..exceptions import ApiFetchError
from ..fetcher import polite_sleep, post_json, random_user_agent
from ..ids import generate_item_id
from ..models import RawFeedItem, SourcePayload, UnifiedItem
from ..normalizer import UNKNOWN_SOURCE_AUTHOR, to_unified_item
from ..recency import is_within_last_days
from ..render import render_item

logger = logging.getLogger(__name__)

FOLO_ORIGIN = "https://app.follow.is"
FOLO_APP_NAME = "Folo Web"
FOLO_APP_VERSION = "0.4.9"


def build_headers(cookie: Optional[str] = None) -> Dict[str, str]:
    headers = {
        "User-Agent": random_user_agent(),
        "Content-Type": "application/json",
        "accept": "application/json",
        "accept-language": "zh-CN,zh;q=0.9",
        "origin": FOLO_ORIGIN,
        "x-app-name": FOLO_APP_NAME,
        "x-app-version": FOLO_APP_VERSION,
    }
    if cookie:
        headers["Cookie"] = cookie
    return headers


def entry_to_raw(record: Mapping[str, Any]) -> Optional[RawFeedItem]:
    """
    Map one element of the API's `data` array to a RawFeedItem.

    Returns None for records without an `entries` object or without a url.
    """
    entry = record.get("entries") if isinstance(record, Mapping) else None
    if not isinstance(entry, Mapping):
        return None
    feed = record.get("feeds")
    if not isinstance(feed, Mapping):
        feed = {}

    url = str(entry.get("url") or "").strip()
    if not url:
        return None
    feed_title = str(feed.get("title") or "").strip()
    author = str(entry.get("author") or "").strip() or feed_title
    return RawFeedItem(
        id=str(entry.get("id") or "") or generate_item_id(url),
        link=url,
        title=str(entry.get("title") or "").strip(),
        description=entry.get("content") or "",
        published_at=entry.get("publishedAt") or "",
        authors=(author,) if author else (),
        source=feed_title,
        feed_url=feed.get("url") or None,
    )


@dataclass
class FoloListSource:
    """
    One Folo list, read page by page (newest first) through the aggregation API.

    Every real-estate category uses this same class; only the configuration
    keys, page default and display options differ.
    """
    type: str
    name: str
    list_id_key: str
    pages_key: str
    default_pages: int = 1
    glyph: str = "🏠"
    time_label: str = "发布时间: "
    read_more_label: str = "阅读原文 →"
    include_feed_url: bool = False
    delay: tuple = (1.0, 4.0)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(timezone.utc), repr=False)

    @property
    def filter_days_key(self) -> str:
        return self.list_id_key.replace("_LIST_ID", "_FILTER_DAYS")

    def filter_days(self, settings: Settings) -> int:
        return settings.get_int(self.filter_days_key, settings.folo_filter_days)

    def fetch(self, settings: Settings, cookie: Optional[str] = None, *,
              session: Optional[requests.Session] = None) -> SourcePayload:
        list_id = settings.get(self.list_id_key)
        if not list_id:
            logger.warning("%s is not set. Skipping %s fetch.", self.list_id_key, self.name)
            return SourcePayload(title=self.name)

        pages = settings.get_int(self.pages_key, self.default_pages)
        days = self.filter_days(settings)
        cookie = cookie or settings.cookie
        collected: List[RawFeedItem] = []
        published_after: Optional[str] = None

        for page in range(1, pages + 1):
            if page > 1:
                polite_sleep(*self.delay, sleep=self.sleep)
            body: Dict[str, Any] = {"listId": list_id, "view": 1, "withContent": True}
            if published_after:
                body["publishedAfter"] = published_after

            logger.info("Fetching %s, page %d...", self.name, page)
            try:
                data = post_json(
                    settings.api_url,
                    body,
                    headers=build_headers(cookie),
                    session=session,
                    timeout=settings.request_timeout,
                )
            except ApiFetchError as e:
                logger.error("Failed to fetch %s, page %d: %s", self.name, page, e)
                break

            records = data.get("data")
            if not isinstance(records, list) or not records:
                logger.info("No more data for %s, page %d.", self.name, page)
                break

            now = self.clock()
            kept = 0
            for record in records:
                raw = entry_to_raw(record)
                if raw is None:
                    continue
                if not is_within_last_days(raw.published_at, days, now=now):
                    continue
                collected.append(raw)
                kept += 1
            logger.info("Kept %d of %d entries from %s, page %d", kept, len(records), self.name, page)

            last = records[-1].get("entries") if isinstance(records[-1], Mapping) else None
            if isinstance(last, Mapping):
                published_after = last.get("publishedAt") or published_after

        return SourcePayload(title=self.name, items=collected)

    def transform(self, payload: SourcePayload, category: str) -> List[UnifiedItem]:
        if not payload or not payload.items:
            return []
        out = []
        for it in payload.items:
            details = {"feed_url": it.feed_url or ""} if self.include_feed_url else None
            out.append(to_unified_item(
                it,
                category,
                default_source=self.name,
                unknown_author=UNKNOWN_SOURCE_AUTHOR,
                details=details,
            ))
        return out

    def render(self, item: UnifiedItem) -> str:
        return render_item(
            item,
            glyph=self.glyph,
            time_label=self.time_label,
            read_more_label=self.read_more_label,
        )
