from .base import Source
from .folo import FoloListSource
from .rss import RSSSource

__all__ = ["Source", "RSSSource", "FoloListSource"]
