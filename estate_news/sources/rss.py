from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, List, Optional
from urllib.parse import urlparse

import requests

from ..config import Settings
from ..exceptions import FeedFetchError
from ..fetcher import fetch_feed, polite_sleep
from ..ids import generate_item_id
from ..models import RawFeedItem, SourcePayload, UnifiedItem
from ..normalizer import UNKNOWN_AUTHOR, to_unified_items
from ..parser import feed_title, iter_items, load_feed
from ..recency import filter_recent, published_key
from ..render import render_item

logger = logging.getLogger(__name__)


@dataclass
class RSSSource:
    """
    Plain RSS/Atom feeds listed (comma-separated) under one configuration key.

    Feeds are fetched one after another with a short random pause; a feed that
    fails is logged and skipped.
    """
    type: str
    name: str
    env_key: str
    glyph: str = "📰"
    read_more_label: str = "阅读原文 →"
    delay: tuple = (0.5, 1.5)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(timezone.utc), repr=False)

    def filter_days(self, settings: Settings) -> int:
        return settings.get_int(f"{self.env_key}_FILTER_DAYS", settings.rss_filter_days)

    def fetch(self, settings: Settings, cookie: Optional[str] = None, *,
              session: Optional[requests.Session] = None) -> SourcePayload:
        urls = settings.get_list(self.env_key)
        if not urls:
            logger.warning("%s is not set. Skipping %s fetch.", self.env_key, self.name)
            return SourcePayload(title=self.name)

        days = self.filter_days(settings)
        collected: List[RawFeedItem] = []
        for i, url in enumerate(urls):
            if i:
                polite_sleep(*self.delay, sleep=self.sleep)
            collected.extend(self._fetch_one(url, days, settings, session))

        collected.sort(key=lambda it: published_key(it.published_at), reverse=True)
        return SourcePayload(title=self.name, items=collected)

    def _fetch_one(self, url: str, days: int, settings: Settings,
                   session: Optional[requests.Session]) -> List[RawFeedItem]:
        logger.info("Fetching RSS: %s", url)
        try:
            body = fetch_feed(url, session=session, timeout=settings.request_timeout)
        except FeedFetchError as e:
            logger.error("%s", e)
            return []

        now = self.clock()
        feed = load_feed(body)
        label = feed_title(feed) or urlparse(url).hostname or url
        recent = filter_recent(iter_items(feed, now=now), days, key=lambda it: it.published_at, now=now)
        items = [replace(it, source=label, id=generate_item_id(it.link)) for it in recent]
        logger.info("Fetched %d items from %s", len(items), label)
        return items

    def transform(self, payload: SourcePayload, category: str) -> List[UnifiedItem]:
        if not payload or not payload.items:
            return []
        return to_unified_items(payload.items, category, default_source=self.name, unknown_author=UNKNOWN_AUTHOR)

    def render(self, item: UnifiedItem) -> str:
        return render_item(item, glyph=self.glyph, read_more_label=self.read_more_label)
