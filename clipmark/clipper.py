"""High-level extraction entry points: article, full page, and selection.

All three take a page document that they never mutate, and return an
:class:`~clipmark.items.ExtractedContent`::

    from clipmark import extract_article

    content = extract_article(html, url="https://example.com/post")
    print(content.metadata.title)
    print(content.markdown)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from bs4 import BeautifulSoup, Tag

from clipmark.extractors import dom
from clipmark.extractors.cleaner import clean, remove_noise_elements
from clipmark.extractors.main_content import locate
from clipmark.extractors.markdown import html_to_markdown
from clipmark.extractors.metadata import extract_metadata
from clipmark.extractors.patterns import MEDIA_TAGS
from clipmark.extractors.title import remove_duplicate_title
from clipmark.items import ClipMetadata, ExtractedContent

logger = logging.getLogger(__name__)

MODES: tuple[str, ...] = ("article", "full-page", "selection")


class ClipError(RuntimeError):
    """Raised when a page cannot be clipped.

    Attributes:
        url -- the page URL the clip was requested for
    """

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class NoSelectionError(ClipError):
    """Raised in selection mode when nothing (or only whitespace) is selected."""

    def __init__(self, url: str = "") -> None:
        super().__init__("No text selected", url=url)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _profile_list(profile: Mapping[str, Any] | None, key: str) -> list[str]:
    if not profile:
        return []
    value = profile.get(key) or []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _locate_with_plugins(root: Tag) -> tuple[Tag | None, str]:
    from clipmark.plugins import get_locators

    for plugin in get_locators():
        try:
            node = plugin.locate(root)
        except Exception as exc:
            logger.warning("Locator plugin %s failed: %s", plugin.name, exc)
            continue
        if isinstance(node, Tag):
            return node, plugin.name
    return None, "none"


def _result(
    fragment: Tag,
    url: str,
    metadata: ClipMetadata,
    mode: str,
    method: str,
) -> ExtractedContent:
    return ExtractedContent(
        html=dom.inner_html(fragment),
        markdown=html_to_markdown(fragment, base_url=url),
        metadata=metadata,
        mode=mode,
        extraction_method=method,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_article(
    document: str | bytes | BeautifulSoup,
    url: str,
    title: str | None = None,
    profile: Mapping[str, Any] | None = None,
) -> ExtractedContent:
    """Locate the article in *document*, clean it, and convert it to Markdown.

    Args:
        document: Raw HTML or a parsed soup (never mutated).
        url:      Page URL; base for relative links and key for site rules.
        title:    Page title; defaults to the document ``<title>``.  Used for
                  metadata and to drop a heading that repeats it.
        profile:  Optional settings from :func:`clipmark.profiles.load_profile`
                  (``content_selectors``, ``remove_selectors``).

    The article root is chosen by priority selectors, then the scored
    heuristic, then registered locator plugins, then the whole ``<body>``;
    ``extraction_method`` records which one won.
    """
    soup = dom.ensure_document(document)
    metadata = extract_metadata(soup, url, title)
    body = dom.body_of(soup)

    node, method = locate(body, _profile_list(profile, "content_selectors"))
    if node is None:
        node, method = _locate_with_plugins(body)
    if node is None:
        node, method = body, "body"
    logger.debug("Article root for %s: <%s> via %s", url, node.name, method)

    fragment = dom.clone(node)
    clean(fragment, url, _profile_list(profile, "remove_selectors"))
    remove_noise_elements(fragment)
    remove_duplicate_title(fragment, metadata.title)
    return _result(fragment, url, metadata, "article", method)


def extract_full_page(
    document: str | bytes | BeautifulSoup,
    url: str,
    title: str | None = None,
    profile: Mapping[str, Any] | None = None,
) -> ExtractedContent:
    """Clean and convert the whole ``<body>`` without locating an article."""
    soup = dom.ensure_document(document)
    metadata = extract_metadata(soup, url, title)

    fragment = dom.clone(dom.body_of(soup))
    clean(fragment, url, _profile_list(profile, "remove_selectors"))
    return _result(fragment, url, metadata, "full-page", "body")


def _selection_root(selection: Tag | str) -> Tag:
    if isinstance(selection, Tag):
        wrapper = BeautifulSoup("", "lxml").new_tag("div")
        wrapper.append(dom.clone(selection))
        return wrapper
    return dom.body_of(dom.parse_html(selection))


def _is_collapsed(root: Tag) -> bool:
    return not root.get_text().strip() and not dom.has_descendant(root, MEDIA_TAGS)


def extract_selection(
    selection: Tag | str | None,
    url: str,
    document: str | bytes | BeautifulSoup | None = None,
    title: str | None = None,
    profile: Mapping[str, Any] | None = None,
) -> ExtractedContent:
    """Convert a user selection instead of locating the article.

    *selection* is the selected range's container element or its markup.
    Metadata is read from *document* when given, otherwise only url, title
    and capture time are filled in.

    Raises:
        NoSelectionError: *selection* is None or holds no text and no media.
    """
    if selection is None or (isinstance(selection, str) and not selection.strip()):
        raise NoSelectionError(url)

    root = _selection_root(selection)
    if _is_collapsed(root):
        raise NoSelectionError(url)

    if document is not None:
        metadata = extract_metadata(document, url, title)
    else:
        metadata = extract_metadata("", url, title)

    clean(root, url, _profile_list(profile, "remove_selectors"))
    return _result(root, url, metadata, "selection", "selection")


def extract(
    document: str | bytes | BeautifulSoup,
    url: str,
    mode: str = "article",
    title: str | None = None,
    profile: Mapping[str, Any] | None = None,
    selection: Tag | str | None = None,
) -> ExtractedContent:
    """Dispatch to the extractor for *mode* (``article``, ``full-page``, ``selection``)."""
    if mode == "article":
        return extract_article(document, url, title=title, profile=profile)
    if mode == "full-page":
        return extract_full_page(document, url, title=title, profile=profile)
    if mode == "selection":
        return extract_selection(selection, url, document=document, title=title, profile=profile)
    raise ValueError(f"Unknown mode {mode!r}; expected one of {', '.join(MODES)}")
