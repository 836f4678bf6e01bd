"""
estate_news

Collects real-estate news from RSS/Atom feeds and Folo lists and returns
normalized items grouped by category.

Core ideas:
- Input: feed URLs and Folo list ids, read from the environment
- Process: fetch → parse → recency filter → normalize → deduplicate → sort (newest first)
- Output: Dict[str, List[UnifiedItem]], plus an HTML fragment per item

Example
-------
from estate_news import NewsAggregator, Settings, build_default_registry

settings = Settings.from_env({
    "RSS_REALESTATE_NEWS": "https://example.com/house.xml,https://example.org/feed",
    "REALESTATE_MARKET_LIST_ID": "123456",
})
registry = build_default_registry()
data = NewsAggregator(registry, settings).fetch_all()

for item in data["news"]:
    print(item.published_date, item.source, item.title)
    html = registry["news"].render(item)
"""
from .config import Settings
from .core import NewsAggregator, fetch_all_data, fetch_data_by_category
from .models import RawFeedItem, SourcePayload, UnifiedItem
from .registry import SourceRegistration, build_default_registry

__all__ = [
    "Settings",
    "NewsAggregator",
    "fetch_all_data",
    "fetch_data_by_category",
    "RawFeedItem",
    "SourcePayload",
    "UnifiedItem",
    "SourceRegistration",
    "build_default_registry",
]
