from __future__ import annotations

from datetime import datetime
from html import escape
from typing import TYPE_CHECKING, Mapping, Optional, Sequence
from zoneinfo import ZoneInfo

from .models import UnifiedItem
from .parser import parse_datetime

if TYPE_CHECKING:  # pragma: no cover
    from .registry import SourceRegistration

DISPLAY_TZ = ZoneInfo("Asia/Shanghai")
EMPTY_CONTENT = "暂无详细内容"
DEFAULT_DIGEST_TITLE = "楼市洞察日报"


def format_datetime_zh(value: str) -> str:
    """'2024-01-02T07:04:00Z' -> '2024年1月2日 15:04' (Beijing time)."""
    dt = parse_datetime(value)
    if dt is None:
        return value or ""
    local = dt.astimezone(DISPLAY_TZ)
    return f"{local.year}年{local.month}月{local.day}日 {local:%H:%M}"


def render_item(
    item: UnifiedItem,
    *,
    glyph: str = "📰",
    source_label: str = "来源: ",
    time_label: str = "",
    read_more_label: str = "阅读原文 →",
) -> str:
    """
    HTML fragment for one item.

    Title, source and url are escaped. content_html is upstream rich text and
    is embedded as-is.
    """
    content = item.details.get("content_html") or EMPTY_CONTENT
    return (
        f"<strong>{glyph} {escape(item.title)}</strong><br>\n"
        f"<small>{source_label}{escape(item.source)} | {time_label}{format_datetime_zh(item.published_date)}</small>\n"
        f"<div class=\"content-html\">{content}</div>\n"
        f"<a href=\"{escape(item.url)}\" target=\"_blank\" rel=\"noopener noreferrer\">{read_more_label}</a>\n"
    )


def render_digest(
    data: Mapping[str, Sequence[UnifiedItem]],
    registry: Mapping[str, "SourceRegistration"],
    *,
    title: str = DEFAULT_DIGEST_TITLE,
    generated_at: Optional[datetime] = None,
) -> str:
    """Full HTML page: one section per category that has items, in registry order."""
    generated_at = generated_at or datetime.now(DISPLAY_TZ)
    parts = [
        "<!DOCTYPE html>",
        "<html lang=\"zh-CN\">",
        "<head><meta charset=\"utf-8\">",
        f"<title>{escape(title)}</title></head>",
        "<body>",
        f"<h1>{escape(title)}</h1>",
        f"<p class=\"generated\">{generated_at.astimezone(DISPLAY_TZ):%Y-%m-%d %H:%M}</p>",
    ]
    for key, reg in registry.items():
        items = data.get(key) or []
        if not items:
            continue
        parts.append(f"<section class=\"category\" id=\"{escape(key)}\">")
        parts.append(f"<h2>{escape(reg.name)}</h2>")
        for it in items:
            parts.append(f"<div class=\"item\">\n{reg.render(it)}</div>")
        parts.append("</section>")
    parts.append("</body>")
    parts.append("</html>")
    return "\n".join(parts) + "\n"
