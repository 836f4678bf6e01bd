from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from .exceptions import ConfigError

DEFAULT_FOLO_API = "https://api.follow.is/entries"
DEFAULT_RSS_FILTER_DAYS = 2
DEFAULT_FOLO_FILTER_DAYS = 1
DEFAULT_REQUEST_TIMEOUT = 30.0


def _to_int(key: str, v: Optional[str], default: int) -> int:
    if v is None or not v.strip():
        return default
    try:
        return int(v.strip())
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer, got {v!r}") from e


def _to_float(key: str, v: Optional[str], default: float) -> float:
    if v is None or not v.strip():
        return default
    try:
        return float(v.strip())
    except ValueError as e:
        raise ConfigError(f"{key} must be a number, got {v!r}") from e


def _to_list(v: Optional[str]) -> List[str]:
    if v is None or not v.strip():
        return []
    return [x.strip() for x in v.split(",") if x.strip()]


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, read once from environment-style key/values.

    Sources look up their own keys (feed URL lists, list ids, page limits,
    per-source recency overrides) through the typed getters below.
    """
    api_url: str = DEFAULT_FOLO_API
    cookie: Optional[str] = None
    rss_filter_days: int = DEFAULT_RSS_FILTER_DAYS
    folo_filter_days: int = DEFAULT_FOLO_FILTER_DAYS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = "INFO"
    env: Mapping[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = dict(os.environ if environ is None else environ)
        return cls(
            api_url=(env.get("FOLO_DATA_API") or "").strip() or DEFAULT_FOLO_API,
            cookie=(env.get("FOLO_COOKIE") or "").strip() or None,
            rss_filter_days=_to_int("RSS_FILTER_DAYS", env.get("RSS_FILTER_DAYS"), DEFAULT_RSS_FILTER_DAYS),
            folo_filter_days=_to_int("FOLO_FILTER_DAYS", env.get("FOLO_FILTER_DAYS"), DEFAULT_FOLO_FILTER_DAYS),
            request_timeout=_to_float("REQUEST_TIMEOUT", env.get("REQUEST_TIMEOUT"), DEFAULT_REQUEST_TIMEOUT),
            log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
            env=env,
        )

    def get(self, key: str) -> Optional[str]:
        v = self.env.get(key)
        if v is None or not v.strip():
            return None
        return v.strip()

    def get_int(self, key: str, default: int) -> int:
        return _to_int(key, self.env.get(key), default)

    def get_list(self, key: str) -> List[str]:
        return _to_list(self.env.get(key))
