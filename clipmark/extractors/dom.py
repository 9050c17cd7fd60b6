"""Read-only helpers over a parsed BeautifulSoup tree.

The engine treats the page tree as owned by the caller: nothing in this
package mutates it.  Anything that needs to be changed is first copied
with :func:`clone`, and only the copy is cleaned and serialized.
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Iterable

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_DISPLAY_NONE_RE = re.compile(r"display\s*:\s*none", re.IGNORECASE)
_VISIBILITY_HIDDEN_RE = re.compile(r"visibility\s*:\s*hidden", re.IGNORECASE)

# Tags whose text never counts towards "clean" text length
_NON_TEXT_TAGS: frozenset[str] = frozenset({"script", "style", "noscript", "iframe"})


def parse_html(html: str | bytes) -> BeautifulSoup:
    """Parse *html* with the lxml builder."""
    return BeautifulSoup(html, "lxml")


def ensure_document(document: str | bytes | BeautifulSoup) -> BeautifulSoup:
    """Return *document* parsed; an already-parsed soup is passed through."""
    if isinstance(document, BeautifulSoup):
        return document
    return parse_html(document)


def body_of(document: BeautifulSoup | Tag) -> Tag:
    """Return ``<body>`` of *document*, or the document itself if it has none."""
    body = document.find("body")
    return body if isinstance(body, Tag) else document


def clone(tag: Tag) -> Tag:
    """Return a detached deep copy of *tag*."""
    return copy.copy(tag)


def inner_html(tag: Tag) -> str:
    return tag.decode_contents()


def attr_str(tag: Tag, name: str, default: str = "") -> str:
    """Safely read an attribute value (str | list | None) as a string."""
    val = tag.get(name)
    if val is None:
        return default
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val)


def class_id_string(tag: Tag) -> str:
    """Return ``"<classes> <id>"`` for keyword matching."""
    return attr_str(tag, "class") + " " + attr_str(tag, "id")


def text_content(tag: Tag) -> str:
    return tag.get_text()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def collapsed_text_length(tag: Tag) -> int:
    return len(collapse_whitespace(tag.get_text()))


def clean_text_length(tag: Tag) -> int:
    """Length of the visible text of *tag*, scripts/styles/iframes excluded."""
    parts: list[str] = []
    for node in tag.descendants:
        if not isinstance(node, NavigableString) or isinstance(node, PreformattedString):
            continue
        if _inside(node, _NON_TEXT_TAGS, tag):
            continue
        parts.append(str(node))
    return len(collapse_whitespace("".join(parts)))


def _inside(node: NavigableString, names: frozenset[str], stop: Tag) -> bool:
    parent = node.parent
    while parent is not None and parent is not stop:
        if parent.name in names:
            return True
        parent = parent.parent
    return False


def has_descendant(tag: Tag, names: Iterable[str]) -> bool:
    return tag.find(list(names)) is not None


def is_hidden(tag: Tag) -> bool:
    """Return True if *tag* is explicitly hidden.

    Only the markup is available, so inline ``style`` stands in for the
    computed style.
    """
    if tag.has_attr("hidden"):
        return True
    if attr_str(tag, "aria-hidden").strip().lower() == "true":
        return True
    style = attr_str(tag, "style")
    return bool(
        style and (_DISPLAY_NONE_RE.search(style) or _VISIBILITY_HIDDEN_RE.search(style)),
    )


def select_safe(root: Tag, selector: str) -> list[Tag]:
    """``root.select(selector)`` that logs and skips invalid selectors."""
    try:
        return [el for el in root.select(selector) if isinstance(el, Tag)]
    except Exception as exc:
        logger.debug("CSS selector %r failed: %s", selector, exc)
        return []


def depth_below(tag: Tag, root: Tag | None, limit: int = 20) -> int:
    """Number of ancestors between *tag* and *root* (capped at *limit*)."""
    depth = 0
    parent = tag.parent
    while parent is not None and parent is not root and depth < limit:
        if isinstance(parent, BeautifulSoup):
            break
        depth += 1
        parent = parent.parent
    return depth


def element_children(tag: Tag) -> list[Tag]:
    return [child for child in tag.children if isinstance(child, Tag)]


def is_removed(tag: Tag) -> bool:
    """True once *tag* (or an ancestor) has been decomposed."""
    return bool(getattr(tag, "decomposed", False))
