from __future__ import annotations

import concurrent.futures as _fut
import logging
from typing import Dict, List, Mapping, Optional

import requests

from .config import Settings
from .dedup import deduplicate
from .models import UnifiedItem
from .recency import published_key
from .registry import Registry, build_default_registry

logger = logging.getLogger(__name__)


def sort_newest_first(items: List[UnifiedItem]) -> List[UnifiedItem]:
    # sorted() is stable: equal timestamps keep fetch order
    return sorted(items, key=lambda it: published_key(it.published_date), reverse=True)


class NewsAggregator:
    """
    High-level API: run every source of a category and return one list of
    UnifiedItem, newest first.

    Pipeline per source: fetch → transform. Per category: concatenate →
    deduplicate → sort. A failing source is logged and skipped; the rest of
    the category is kept.
    """

    def __init__(
        self,
        registry: Registry,
        settings: Settings,
        *,
        cookie: Optional[str] = None,
        session: Optional[requests.Session] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.registry = registry
        self.settings = settings
        self.cookie = cookie or settings.cookie
        self.session = session
        self.max_workers = max_workers

    def fetch_category(self, key: str) -> List[UnifiedItem]:
        reg = self.registry.get(key)
        if reg is None:
            logger.warning("Attempted to fetch data for unknown category: %s", key)
            return []
        if not reg.sources:
            logger.error("No data sources registered for type: %s", key)
            return []

        collected: List[UnifiedItem] = []
        for source in reg.sources:
            try:
                payload = source.fetch(self.settings, self.cookie, session=self.session)
                collected.extend(source.transform(payload, key))
            except Exception as e:
                # Keep going with the remaining sources of this category
                logger.error("Error fetching or transforming data from source %s for type %s: %s",
                             getattr(source, "type", source), key, e)
                continue

        items = sort_newest_first(deduplicate(collected))
        logger.info("Category %s: %d items", key, len(items))
        return items

    def fetch_all(self) -> Dict[str, List[UnifiedItem]]:
        """Run all categories concurrently and wait for every one of them."""
        keys = list(self.registry)
        if not keys:
            return {}
        workers = max(1, int(self.max_workers or len(keys)))
        out: Dict[str, List[UnifiedItem]] = {}
        with _fut.ThreadPoolExecutor(max_workers=workers) as ex:
            futures = {ex.submit(self.fetch_category, key): key for key in keys}
            _fut.wait(futures)
        for fu, key in futures.items():
            try:
                out[key] = fu.result()
            except Exception as e:  # pragma: no cover - fetch_category already isolates sources
                logger.error("Category %s failed: %s", key, e)
                out[key] = []
        # registry order, not completion order
        return {key: out[key] for key in keys}


def fetch_all_data(settings: Settings, cookie: Optional[str] = None, *,
                   registry: Optional[Registry] = None) -> Dict[str, List[UnifiedItem]]:
    registry = build_default_registry() if registry is None else registry
    return NewsAggregator(registry, settings, cookie=cookie).fetch_all()


def fetch_data_by_category(settings: Settings, category: str, cookie: Optional[str] = None, *,
                           registry: Optional[Registry] = None) -> List[UnifiedItem]:
    registry = build_default_registry() if registry is None else registry
    return NewsAggregator(registry, settings, cookie=cookie).fetch_category(category)


def count_items(data: Mapping[str, List[UnifiedItem]]) -> int:
    return sum(len(v) for v in data.values())
