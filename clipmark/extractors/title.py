"""Remove a heading that repeats the page title.

Clipped notes render the title separately, so the first heading (or
short leading block) that restates it is dropped from the article body.
"""

from __future__ import annotations

import logging
import re

from bs4 import Tag

from clipmark.extractors import dom

logger = logging.getLogger(__name__)

# "Title | Site", "Title - Site", "Title_Site" ...
# Any hyphen or underscore counts as a separator: "Self-Driving Cars" -> "Self".
_SITE_SUFFIX_RE = re.compile(r"[|｜\-–—_]\s*[^|\-–—_]*$")
_DASH_SUFFIX_RE = re.compile(r"\s*[-–—]\s*[^-–—]*$")
_LEADING_BRACKET_RE = re.compile(r"^[【\[(（]")
_TRAILING_BRACKET_RE = re.compile(r"[】\])）]$")
_WHITESPACE_RE = re.compile(r"\s+")

_H2_SCAN_LIMIT = 3
_LEADING_BLOCK_SCAN_LIMIT = 5
_LEADING_BLOCK_MAX_CHARS = 300
_LEADING_BLOCK_MIN_CHARS = 5
_CONTAINMENT_MIN_CHARS = 10
_CONTAINMENT_MIN_RATIO = 0.7


def normalize_title(title: str) -> str:
    """Strip a trailing site-name suffix and wrapping brackets, collapse spaces."""
    text = _SITE_SUFFIX_RE.sub("", title)
    text = _DASH_SUFFIX_RE.sub("", text)
    text = text.strip()
    text = _LEADING_BRACKET_RE.sub("", text)
    text = _TRAILING_BRACKET_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def is_title_match(a: str, b: str) -> bool:
    """Exact (case-insensitive) match, or near-complete containment."""
    if a == b or a.lower() == b.lower():
        return True
    shorter, longer = (a, b) if len(a) < len(b) else (b, a)
    if len(shorter) > _CONTAINMENT_MIN_CHARS and len(shorter) >= len(longer) * _CONTAINMENT_MIN_RATIO:
        return shorter in longer or longer.startswith(shorter)
    return False


def _matches(el: Tag, page_title: str) -> bool:
    text = normalize_title(el.get_text())
    return bool(text) and is_title_match(text, page_title)


def remove_duplicate_title(root: Tag, page_title: str) -> Tag | None:
    """Remove the first element of *root* that restates *page_title*.

    Checks every ``h1``, then the first three ``h2``, then short text in
    the first five direct children.  Returns the removed element, if any.
    """
    if not page_title:
        return None
    normalized = normalize_title(page_title)
    if not normalized:
        return None

    candidates: list[Tag] = list(root.find_all("h1"))
    candidates += root.find_all("h2", limit=_H2_SCAN_LIMIT)
    for heading in candidates:
        if _matches(heading, normalized):
            return _remove(heading)

    for el in dom.element_children(root)[:_LEADING_BLOCK_SCAN_LIMIT]:
        text = el.get_text().strip()
        if not _LEADING_BLOCK_MIN_CHARS < len(text) < _LEADING_BLOCK_MAX_CHARS:
            continue
        if _matches(el, normalized):
            return _remove(el)
    return None


def _remove(el: Tag) -> Tag:
    logger.debug("Removing duplicate title <%s>: %r", el.name, el.get_text().strip()[:80])
    return el.extract()
