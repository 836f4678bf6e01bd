from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from .models import UnifiedItem
from .render import render_item
from .sources import FoloListSource, RSSSource, Source


@dataclass(frozen=True)
class SourceRegistration:
    """A category: its display name and the sources feeding it, in order."""
    key: str
    name: str
    sources: Tuple[Source, ...] = ()

    def render(self, item: UnifiedItem) -> str:
        if self.sources:
            return self.sources[0].render(item)
        return render_item(item)


Registry = Dict[str, SourceRegistration]


def make_registry(registrations: Iterable[SourceRegistration]) -> Registry:
    registry: Registry = {}
    for reg in registrations:
        if not reg.key:
            raise ValueError("category key must not be empty")
        if reg.key in registry:
            raise ValueError(f"duplicate category key: {reg.key}")
        registry[reg.key] = reg
    return registry


def rss_sources() -> Dict[str, RSSSource]:
    return {
        "news": RSSSource("rss-realestate-news", "楼市资讯", "RSS_REALESTATE_NEWS", glyph="🏠"),
        "finance": RSSSource("rss-finance-news", "财经资讯", "RSS_FINANCE_NEWS", glyph="📊"),
        "policy": RSSSource("rss-policy-news", "政策动态", "RSS_POLICY_NEWS", glyph="📜"),
        "general": RSSSource("rss-general-news", "综合资讯", "RSS_GENERAL_NEWS", glyph="📰"),
    }


def folo_sources() -> Dict[str, FoloListSource]:
    return {
        "news": FoloListSource(
            "realestate-news", "楼市资讯",
            list_id_key="REALESTATE_NEWS_LIST_ID",
            pages_key="REALESTATE_NEWS_FETCH_PAGES",
            default_pages=2,
            glyph="🏠",
            include_feed_url=True,
        ),
        "policy": FoloListSource(
            "realestate-policy", "政策动态",
            list_id_key="REALESTATE_POLICY_LIST_ID",
            pages_key="REALESTATE_POLICY_FETCH_PAGES",
            glyph="📜",
            read_more_label="查看政策详情 →",
        ),
        "market": FoloListSource(
            "realestate-market", "市场数据",
            list_id_key="REALESTATE_MARKET_LIST_ID",
            pages_key="REALESTATE_MARKET_FETCH_PAGES",
            glyph="📊",
            read_more_label="查看详细数据 →",
        ),
        "city": FoloListSource(
            "realestate-city", "城市聚焦",
            list_id_key="REALESTATE_CITY_LIST_ID",
            pages_key="REALESTATE_CITY_FETCH_PAGES",
            glyph="🏙️",
            read_more_label="查看详情 →",
        ),
    }


def build_default_registry(*, rss: Optional[Dict[str, RSSSource]] = None,
                           folo: Optional[Dict[str, FoloListSource]] = None) -> Registry:
    """
    The standard categories. Sources with no configuration skip themselves at
    fetch time, so every category is always registered.
    """
    rss = rss_sources() if rss is None else rss
    folo = folo_sources() if folo is None else folo

    def sources_for(key: str) -> Tuple[Source, ...]:
        return tuple(s for s in (rss.get(key), folo.get(key)) if s is not None)

    return make_registry([
        SourceRegistration("news", "楼市资讯", sources_for("news")),
        SourceRegistration("finance", "财经资讯", sources_for("finance")),
        SourceRegistration("policy", "政策动态", sources_for("policy")),
        SourceRegistration("market", "市场数据", sources_for("market")),
        SourceRegistration("city", "城市聚焦", sources_for("city")),
        SourceRegistration("general", "综合资讯", sources_for("general")),
    ])
