"""Destructive noise removal over a cloned article subtree.

Every function here mutates the tag it is given.  Callers must pass a
:func:`clipmark.extractors.dom.clone` of the page tree, never the tree
itself.  Elements are only ever removed when an explicit rule (selector,
keyword, or text pattern) matches them; the root tag is never removed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bs4 import Tag

from clipmark.extractors import dom
from clipmark.extractors.patterns import (
    MEDIA_TAGS,
    METADATA_PATTERNS,
    NOISE_PHRASES,
    NOISE_TEXT_PATTERNS,
    PRESERVED_EMPTY_TAGS,
    SUSPICIOUS_KEYWORDS,
    UNWANTED_SELECTORS,
    site_selectors,
)
from clipmark.extractors.urlnorm import extract_domain

logger = logging.getLogger(__name__)

# Keyword hits on elements with at least this much text are kept
_KEYWORD_KEEP_CHARS = 500
# Metadata chips are short
_METADATA_MAX_CHARS = 200
# Free-text noise pass limits
_NOISE_TEXT_MAX_CHARS = 150
_LINK_CLUSTER_MAX_CHARS = 30
_LINK_CLUSTER_RATIO = 0.8
_NOISE_PHRASE_MAX_CHARS = 50


def _live_descendants(root: Tag) -> list[Tag]:
    """Snapshot of element descendants in document order."""
    return list(root.find_all(True))


def _remove_all(root: Tag, selectors: Iterable[str]) -> int:
    removed = 0
    for selector in selectors:
        for el in dom.select_safe(root, selector):
            if dom.is_removed(el):
                continue
            el.decompose()
            removed += 1
    return removed


# ---------------------------------------------------------------------------
# Pass 1: site-specific overrides
# ---------------------------------------------------------------------------

def _plugin_site_selectors(hostname: str) -> list[str]:
    from clipmark.plugins import get_site_rules

    selectors: list[str] = []
    for plugin in get_site_rules():
        try:
            if plugin.matches(hostname):
                selectors.extend(plugin.selectors)
        except Exception as exc:
            logger.warning("Site rule plugin %s failed: %s", plugin.name, exc)
    return selectors


def apply_site_rules(
    root: Tag,
    url: str = "",
    extra_selectors: Iterable[str] = (),
) -> int:
    """Remove elements targeted by the site table, plugins and *extra_selectors*."""
    hostname = extract_domain(url)
    selectors: list[str] = list(extra_selectors)
    if hostname:
        selectors.extend(site_selectors(hostname))
        selectors.extend(_plugin_site_selectors(hostname))
    return _remove_all(root, selectors)


# ---------------------------------------------------------------------------
# Pass 2: unwanted selectors
# ---------------------------------------------------------------------------

def remove_unwanted(root: Tag) -> int:
    return _remove_all(root, UNWANTED_SELECTORS)


# ---------------------------------------------------------------------------
# Pass 3: suspicious class/id keywords
# ---------------------------------------------------------------------------

def matching_keyword(el: Tag) -> str | None:
    """Return the first suspicious keyword found in *el*'s class or id."""
    class_name = dom.attr_str(el, "class").lower()
    el_id = dom.attr_str(el, "id").lower()
    for keyword in SUSPICIOUS_KEYWORDS:
        if keyword in class_name or keyword in el_id:
            return keyword
    return None


def remove_suspicious(root: Tag) -> int:
    """Drop keyword-matching elements unless they carry media or long prose."""
    removed = 0
    for el in _live_descendants(root):
        if dom.is_removed(el) or matching_keyword(el) is None:
            continue
        if dom.has_descendant(el, MEDIA_TAGS):
            continue
        if dom.collapsed_text_length(el) >= _KEYWORD_KEEP_CHARS:
            continue
        el.decompose()
        removed += 1
    return removed


# ---------------------------------------------------------------------------
# Pass 4: inline metadata blocks
# ---------------------------------------------------------------------------

def remove_metadata_blocks(root: Tag) -> int:
    removed = 0
    for el in _live_descendants(root):
        if dom.is_removed(el):
            continue
        text = el.get_text().strip()
        if len(text) > _METADATA_MAX_CHARS:
            continue
        if any(pattern.search(text) for pattern in METADATA_PATTERNS):
            el.decompose()
            removed += 1
    return removed


# ---------------------------------------------------------------------------
# Pass 5: empty elements
# ---------------------------------------------------------------------------

def remove_empty_elements(root: Tag) -> int:
    """Remove text-less, media-less elements, innermost first."""
    removed = 0
    for el in reversed(_live_descendants(root)):
        if dom.is_removed(el):
            continue
        if el.name in PRESERVED_EMPTY_TAGS:
            continue
        if dom.has_descendant(el, PRESERVED_EMPTY_TAGS):
            continue
        if el.get_text().strip():
            continue
        el.decompose()
        removed += 1
    return removed


# ---------------------------------------------------------------------------
# Free-text noise (article mode)
# ---------------------------------------------------------------------------

def remove_noise_elements(root: Tag) -> int:
    """Remove short interaction/navigation snippets by their visible text."""
    removed = 0

    for el in _live_descendants(root):
        if dom.is_removed(el):
            continue
        text = el.get_text().strip()
        if len(text) > _NOISE_TEXT_MAX_CHARS:
            continue
        if any(pattern.search(text) for pattern in NOISE_TEXT_PATTERNS):
            el.decompose()
            removed += 1

    # Short link clusters
    for el in _live_descendants(root):
        if dom.is_removed(el):
            continue
        text = el.get_text().strip()
        if len(text) >= _LINK_CLUSTER_MAX_CHARS:
            continue
        links = el.find_all("a")
        if not links:
            continue
        link_text = "".join(a.get_text().strip() for a in links)
        if len(link_text) >= len(text) * _LINK_CLUSTER_RATIO:
            el.decompose()
            removed += 1

    for el in _live_descendants(root):
        if dom.is_removed(el) or el.name not in ("p", "div", "span"):
            continue
        text = el.get_text().strip()
        if len(text) >= _NOISE_PHRASE_MAX_CHARS:
            continue
        lowered = text.lower()
        if any(phrase in lowered for phrase in NOISE_PHRASES):
            el.decompose()
            removed += 1

    return removed + remove_empty_elements(root)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def clean(
    root: Tag,
    url: str = "",
    extra_selectors: Iterable[str] = (),
) -> Tag:
    """Run every cleaning pass over *root* in place and return it."""
    counts = {
        "site": apply_site_rules(root, url, extra_selectors),
        "selectors": remove_unwanted(root),
        "keywords": remove_suspicious(root),
        "metadata": remove_metadata_blocks(root),
        "empty": remove_empty_elements(root),
    }
    logger.debug("Cleaner removals for %s: %s", url or "<no url>", counts)
    return root
