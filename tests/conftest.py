"""
Shared pytest fixtures: fake HTTP sessions and small feed builders.
"""
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from xml.sax.saxutils import escape

import pytest
import requests

NOW = datetime(2024, 5, 10, 12, 0, 0, tzinfo=timezone.utc)


class FakeResponse:
    def __init__(self, status_code=200, content=b"", json_data=None, reason="OK"):
        self.status_code = status_code
        self.content = content
        self.reason = reason
        self._json = json_data

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("no JSON body")
        return self._json


class FakeSession:
    """
    Stand-in for requests.Session.

    GET answers come from a url -> response (or exception) mapping; POST
    answers are consumed in order.
    """

    def __init__(self, get_map=None, post_queue=None):
        self.get_map = dict(get_map or {})
        self.post_queue = list(post_queue or [])
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append(("GET", url, dict(headers or {}), None))
        answer = self.get_map.get(url)
        if answer is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(answer, Exception):
            raise answer
        return answer

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append(("POST", url, dict(headers or {}), json))
        if not self.post_queue:
            raise AssertionError("unexpected POST")
        answer = self.post_queue.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer


def rfc822(dt):
    return format_datetime(dt)


def iso(dt):
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def rss_document(title, items):
    """items: iterable of (title, link, published datetime)."""
    parts = [
        '<?xml version="1.0" encoding="utf-8"?>',
        '<rss version="2.0"><channel>',
    ]
    if title:
        parts.append(f"<title>{escape(title)}</title>")
    parts.append("<link>http://example.com/</link><description>feed</description>")
    for t, link, dt in items:
        parts.append(
            f"<item><title>{escape(t)}</title><link>{escape(link)}</link>"
            f"<description>&lt;p&gt;{escape(escape(t))} body&lt;/p&gt;</description>"
            f"<pubDate>{rfc822(dt)}</pubDate></item>"
        )
    parts.append("</channel></rss>")
    return "\n".join(parts).encode("utf-8")


def folo_record(entry_id, url, published, *, title=None, author=None, feed_title="Feed A",
                feed_url="http://feeds.example.com/a", content="<p>body</p>"):
    return {
        "entries": {
            "id": entry_id,
            "url": url,
            "title": title or f"Entry {entry_id}",
            "content": content,
            "publishedAt": published,
            "author": author,
        },
        "feeds": {"title": feed_title, "url": feed_url},
    }


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def days_ago(now):
    def _days_ago(d, hours=0):
        return now - timedelta(days=d, hours=hours)
    return _days_ago


@pytest.fixture
def no_sleep():
    calls = []

    def _sleep(seconds):
        calls.append(seconds)

    _sleep.calls = calls
    return _sleep
