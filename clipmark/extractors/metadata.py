"""Best-effort metadata extraction from a page document.

Priority chain for each field (first usable hit wins):
    author:       meta tags → schema.org microdata → class conventions → platform selectors
    published_at: meta tags → schema.org microdata → <time> → visible date text
    site_name:    og:site_name
    favicon:      link[rel=icon] → link[rel="shortcut icon"]

Nothing here raises on odd markup; missing or unparsable values are None.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any
from urllib.parse import urlparse

import dateparser
from bs4 import BeautifulSoup, Tag

from clipmark.extractors import dom
from clipmark.extractors.urlnorm import resolve_url
from clipmark.items import ClipMetadata

logger = logging.getLogger(__name__)

DATETIME_FORMAT = "%Y-%m-%d %H:%M"

_AUTHOR_MAX_CHARS = 100
_RAW_DATE_MAX_CHARS = 50

# ---------------------------------------------------------------------------
# Selector catalogues (order is priority)
# ---------------------------------------------------------------------------

AUTHOR_SELECTORS: tuple[str, ...] = (
    # Meta tags
    'meta[name="author"]',
    'meta[property="article:author"]',
    'meta[property="og:article:author"]',
    'meta[name="twitter:creator"]',
    # Schema.org
    '[itemprop="author"] [itemprop="name"]',
    '[itemprop="author"]',
    # Common class conventions
    ".author-name",
    ".author__name",
    ".byline__name",
    ".article-author",
    ".post-author",
    # WeChat
    "#js_name",
    ".rich_media_meta_nickname",
    # Zhihu
    ".AuthorInfo-name",
    ".UserLink-link",
    # Generic
    '[rel="author"]',
    ".byline a",
    ".author a",
)

# (selector, attribute); attribute None means the element's text
DATE_SELECTORS: tuple[tuple[str, str | None], ...] = (
    ('meta[property="article:published_time"]', "content"),
    ('meta[name="date"]', "content"),
    ('meta[name="pubdate"]', "content"),
    ('meta[property="og:updated_time"]', "content"),
    ('meta[name="DC.date.issued"]', "content"),
    ('[itemprop="datePublished"]', "content"),
    ('[itemprop="datePublished"]', "datetime"),
    ('[itemprop="dateCreated"]', "content"),
    ("time[datetime]", "datetime"),
    ("time[pubdate]", "datetime"),
    ("article time", "datetime"),
    ("#publish_time", None),
    (".publish-time", None),
    (".post-date", None),
    (".article-date", None),
    (".entry-date", None),
    (".date", None),
)

FAVICON_SELECTORS: tuple[str, ...] = (
    'link[rel="icon"]',
    'link[rel="shortcut icon"]',
)

# 2024年1月15日, 2024-1-15, 2024/01/15
_YMD_RE = re.compile(r"(\d{4})[年\-/](\d{1,2})[月\-/](\d{1,2})[日]?")
_WHITESPACE_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _safe_str(val: Any, default: str = "") -> str:
    """Safely convert a BeautifulSoup attribute value (str | list | None) to str."""
    if val is None:
        return default
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val)


def _select_first(soup: BeautifulSoup, selector: str) -> Tag | None:
    try:
        return soup.select_one(selector)
    except Exception as exc:
        logger.debug("CSS selector %r failed: %s", selector, exc)
        return None


def _parse_date(raw: str) -> str | None:
    """Parse *raw* with dateparser and format it; None on failure.

    The wall-clock time is kept as written (no timezone conversion), and
    years outside 1990-2099 are treated as parse failures.
    """
    try:
        parsed = dateparser.parse(
            raw,
            settings={
                "PREFER_DAY_OF_MONTH": "first",
                "PREFER_LOCALE_DATE_ORDER": False,
            },
        )
    except Exception as exc:
        logger.debug("Date parse failed for %r: %s", raw, exc)
        return None
    if parsed is None or not (1990 <= parsed.year <= 2099):
        return None
    return parsed.strftime(DATETIME_FORMAT)


def format_published_date(raw: str | None) -> str | None:
    """Normalize a published-date string.

    1. generic parse → ``YYYY-MM-DD HH:MM``
    2. year/month/day pattern (``2024年1月15日``) → ``YYYY-MM-DD``
    3. the trimmed raw string, when shorter than 50 characters
    """
    if not raw:
        return None
    cleaned = _WHITESPACE_RE.sub(" ", raw.strip())
    if not cleaned:
        return None

    formatted = _parse_date(cleaned)
    if formatted:
        return formatted

    match = _YMD_RE.search(cleaned)
    if match:
        year, month, day = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    if len(cleaned) < _RAW_DATE_MAX_CHARS:
        return cleaned
    logger.debug("Discarding unparsable date %r", cleaned[:80])
    return None


# ---------------------------------------------------------------------------
# Field extractors
# ---------------------------------------------------------------------------

def extract_author(soup: BeautifulSoup) -> str | None:
    for selector in AUTHOR_SELECTORS:
        el = _select_first(soup, selector)
        if el is None:
            continue
        content = _safe_str(el.get("content")).strip() or el.get_text().strip()
        if content and len(content) < _AUTHOR_MAX_CHARS:
            return content
    return None


def extract_published_at(soup: BeautifulSoup) -> str | None:
    for selector, attr in DATE_SELECTORS:
        el = _select_first(soup, selector)
        if el is None:
            continue
        raw = el.get_text().strip() if attr is None else _safe_str(el.get(attr))
        formatted = format_published_date(raw)
        if formatted:
            return formatted
    return None


def extract_site_name(soup: BeautifulSoup) -> str | None:
    el = _select_first(soup, 'meta[property="og:site_name"]')
    if el is None:
        return None
    return _safe_str(el.get("content")).strip() or None


def extract_favicon(soup: BeautifulSoup, page_url: str) -> str | None:
    """Favicon link resolved against the page origin."""
    parsed = urlparse(page_url)
    origin = f"{parsed.scheme}://{parsed.netloc}" if parsed.scheme and parsed.netloc else page_url
    for selector in FAVICON_SELECTORS:
        el = _select_first(soup, selector)
        if el is None:
            continue
        href = _safe_str(el.get("href")).strip()
        if href:
            return resolve_url(href, origin)
    return None


def _document_title(soup: BeautifulSoup) -> str:
    title_tag = soup.find("title")
    return title_tag.get_text().strip() if isinstance(title_tag, Tag) else ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_metadata(
    document: str | bytes | BeautifulSoup,
    url: str,
    title: str | None = None,
    now: datetime | None = None,
) -> ClipMetadata:
    """Extract :class:`ClipMetadata` from *document*.

    Args:
        document: Raw HTML or a parsed soup (read only).
        url:      Page URL, used as-is and for favicon resolution.
        title:    Page title override; defaults to the document ``<title>``.
        now:      Capture time; defaults to the current local time.
    """
    soup = dom.ensure_document(document)
    captured = (now or datetime.now()).strftime(DATETIME_FORMAT)

    return ClipMetadata(
        url=url,
        title=title if title is not None else _document_title(soup),
        site_name=extract_site_name(soup),
        author=extract_author(soup),
        published_at=extract_published_at(soup),
        captured_at=captured,
        favicon=extract_favicon(soup, url),
    )
