from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Dict, Mapping, Optional

import requests

from .exceptions import ApiFetchError, FeedFetchError

logger = logging.getLogger(__name__)

FEED_ACCEPT = "application/rss+xml, application/xml, text/xml, */*"

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) "
    "Version/17.4 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36 Edg/124.0.0.0",
)


def random_user_agent() -> str:
    return random.choice(USER_AGENTS)


def polite_sleep(low: float, high: float, sleep: Callable[[float], None] = time.sleep) -> float:
    """Wait a random number of seconds in [low, high] between two requests."""
    delay = random.uniform(low, high)
    sleep(delay)
    return delay


def fetch_feed(url: str, *, session: Optional[requests.Session] = None, timeout: float = 30.0) -> bytes:
    """
    GET a single feed URL and return the raw body.

    Raises FeedFetchError on transport errors and non-2xx responses.
    """
    http = session or requests
    headers = {
        "User-Agent": random_user_agent(),
        "Accept": FEED_ACCEPT,
    }
    try:
        resp = http.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise FeedFetchError(f"Failed to fetch feed: {url} ({e})", url=url) from e

    if not resp.ok:
        raise FeedFetchError(f"Failed to fetch feed: {url} (HTTP {resp.status_code})", url=url, status=resp.status_code)
    return resp.content


def post_json(
    url: str,
    body: Mapping[str, Any],
    *,
    headers: Optional[Mapping[str, str]] = None,
    session: Optional[requests.Session] = None,
    timeout: float = 30.0,
) -> Dict[str, Any]:
    """
    POST a JSON body and decode the JSON reply.

    Raises ApiFetchError on transport errors, non-2xx responses and bodies that
    are not a JSON object.
    """
    http = session or requests
    try:
        resp = http.post(url, json=dict(body), headers=dict(headers or {}), timeout=timeout)
    except requests.RequestException as e:
        raise ApiFetchError(f"Request to {url} failed ({e})", url=url) from e

    if not resp.ok:
        raise ApiFetchError(f"Request to {url} failed (HTTP {resp.status_code} {resp.reason})", url=url, status=resp.status_code)

    try:
        data = resp.json()
    except ValueError as e:
        raise ApiFetchError(f"Response from {url} is not JSON", url=url, status=resp.status_code) from e
    if not isinstance(data, dict):
        raise ApiFetchError(f"Response from {url} is not a JSON object", url=url, status=resp.status_code)
    return data
