from __future__ import annotations

from typing import List, Optional, Protocol

import requests

from ..config import Settings
from ..models import SourcePayload, UnifiedItem


class Source(Protocol):
    """What the aggregator needs from a data source."""

    type: str
    name: str

    def fetch(self, settings: Settings, cookie: Optional[str] = None, *,
              session: Optional[requests.Session] = None) -> SourcePayload:  # pragma: no cover - interface
        ...

    def transform(self, payload: SourcePayload, category: str) -> List[UnifiedItem]:  # pragma: no cover - interface
        ...

    def render(self, item: UnifiedItem) -> str:  # pragma: no cover - interface
        ...
