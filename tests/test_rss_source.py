from estate_news.config import Settings
from estate_news.fetcher import FEED_ACCEPT, USER_AGENTS
from estate_news.ids import generate_item_id
from estate_news.sources import RSSSource

from .conftest import FakeResponse, FakeSession, rss_document


def _source(no_sleep, now):
    return RSSSource("rss-realestate-news", "楼市资讯", "RSS_REALESTATE_NEWS", glyph="🏠",
                     sleep=no_sleep, clock=lambda: now)


def test_missing_url_list_skips_without_network(no_sleep, now):
    session = FakeSession()
    payload = _source(no_sleep, now).fetch(Settings.from_env({}), session=session)
    assert payload.items == []
    assert payload.title == "楼市资讯"
    assert session.calls == []


def test_failing_feed_does_not_hide_the_others(no_sleep, now, days_ago):
    urls = ["http://a.example.com/rss", "http://b.example.com/rss", "http://c.example.com/rss"]
    session = FakeSession(get_map={
        urls[0]: FakeResponse(content=rss_document("Feed A", [("A1", "http://a/1", days_ago(0, 3))])),
        urls[1]: FakeResponse(status_code=500, reason="Server Error"),
        urls[2]: FakeResponse(content=rss_document("Feed C", [("C1", "http://c/1", days_ago(0, 1))])),
    })
    settings = Settings.from_env({"RSS_REALESTATE_NEWS": ", ".join(urls)})
    payload = _source(no_sleep, now).fetch(settings, session=session)

    assert [it.title for it in payload.items] == ["C1", "A1"]
    assert [it.source for it in payload.items] == ["Feed C", "Feed A"]
    assert [c[1] for c in session.calls] == urls
    assert len(no_sleep.calls) == 2
    assert all(0.5 <= s <= 1.5 for s in no_sleep.calls)


def test_transport_error_is_skipped(no_sleep, now, days_ago):
    session = FakeSession(get_map={
        "http://ok.example.com/rss": FakeResponse(content=rss_document("OK", [("K", "http://k/1", days_ago(0, 1))])),
    })
    settings = Settings.from_env({"RSS_REALESTATE_NEWS": "http://down.example.com/rss,http://ok.example.com/rss"})
    payload = _source(no_sleep, now).fetch(settings, session=session)
    assert [it.title for it in payload.items] == ["K"]


def test_request_headers(no_sleep, now):
    session = FakeSession(get_map={"http://a.example.com/rss": FakeResponse(content=rss_document("A", []))})
    settings = Settings.from_env({"RSS_REALESTATE_NEWS": "http://a.example.com/rss"})
    _source(no_sleep, now).fetch(settings, session=session)
    headers = session.calls[0][2]
    assert headers["Accept"] == FEED_ACCEPT
    assert headers["User-Agent"] in USER_AGENTS


def test_recency_window_ids_and_host_label(no_sleep, now, days_ago):
    doc = rss_document("", [
        ("new", "http://h/new", days_ago(1)),
        ("edge", "http://h/edge", days_ago(2)),
        ("old", "http://h/old", days_ago(3)),
    ])
    session = FakeSession(get_map={"https://house.example.cn/feed": FakeResponse(content=doc)})
    settings = Settings.from_env({"RSS_REALESTATE_NEWS": "https://house.example.cn/feed"})
    payload = _source(no_sleep, now).fetch(settings, session=session)

    assert [it.title for it in payload.items] == ["new", "edge"]
    assert {it.source for it in payload.items} == {"house.example.cn"}
    assert [it.id for it in payload.items] == [generate_item_id("http://h/new"), generate_item_id("http://h/edge")]


def test_per_source_window_override(no_sleep, now, days_ago):
    doc = rss_document("F", [("new", "http://h/new", days_ago(1)), ("old", "http://h/old", days_ago(5))])
    session = FakeSession(get_map={"http://f/rss": FakeResponse(content=doc)})
    settings = Settings.from_env({
        "RSS_REALESTATE_NEWS": "http://f/rss",
        "RSS_FILTER_DAYS": "2",
        "RSS_REALESTATE_NEWS_FILTER_DAYS": "7",
    })
    payload = _source(no_sleep, now).fetch(settings, session=session)
    assert [it.title for it in payload.items] == ["new", "old"]


def test_transform_and_render(no_sleep, now, days_ago):
    doc = rss_document("Feed <A>", [("Title & more", "http://a/1?x=1&y=2", days_ago(0, 2))])
    session = FakeSession(get_map={"http://a/rss": FakeResponse(content=doc)})
    src = _source(no_sleep, now)
    payload = src.fetch(Settings.from_env({"RSS_REALESTATE_NEWS": "http://a/rss"}), session=session)
    [item] = src.transform(payload, "news")

    assert item.type == "news"
    assert item.title == "Title & more"
    assert item.authors == "未知"
    assert item.source == "Feed <A>"
    assert item.description == "Title & more body"
    assert "<p>" in item.details["content_html"]

    html = src.render(item)
    assert "🏠 Title &amp; more" in html
    assert "Feed &lt;A&gt;" in html
    assert 'href="http://a/1?x=1&amp;y=2"' in html
    assert "阅读原文 →" in html


def test_transform_of_empty_payload(no_sleep, now):
    src = _source(no_sleep, now)
    assert src.transform(src.fetch(Settings.from_env({})), "news") == []
