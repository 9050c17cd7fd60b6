"""Article container location with a two-phase cascade.

Phase 1: priority CSS selectors  (first acceptable match wins)
Phase 2: scored DOM heuristic     (paragraph quality, link density, structure)

Both phases read the page tree only; nothing here mutates it.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import NamedTuple

from bs4 import Tag

from clipmark.extractors import dom
from clipmark.extractors.patterns import (
    ARTICLE_SELECTORS,
    CANDIDATE_TAGS,
    NEGATIVE,
    NON_CONTENT_ANCESTOR_TAGS,
    POSITIVE,
    SENTENCE_END_RE,
    is_unlikely_candidate,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Thresholds (tuned against real pages; keep in sync with tests)
# ---------------------------------------------------------------------------

# Phase 1: minimum clean text for a selector match to be accepted
_SELECTOR_MIN_CHARS = 200

# Phase 2: candidates shorter than this score 0
_HEURISTIC_MIN_CHARS = 200
_BASE_SCORE_CAP = 500
_PARAGRAPH_BONUS = 10
_QUALITY_PARAGRAPH_BONUS = 15
_QUALITY_PARAGRAPH_RANGE = (50, 500)
_SENTENCE_PARAGRAPH_BONUS = 5
_MIN_SENTENCES = 2

_LINK_DENSITY_REJECT = 0.5
# (density above, multiplier) checked in order
_LINK_DENSITY_STEPS: tuple[tuple[float, float], ...] = ((0.3, 0.3), (0.2, 0.5), (0.1, 0.8))

_HEADING_BONUS, _HEADING_CAP = 15, 60
_BLOCKQUOTE_BONUS = 10
_IMAGE_BONUS, _IMAGE_CAP = 5, 30
_CODE_BONUS, _CODE_CAP = 8, 40
_LIST_BONUS, _LIST_CAP = 5, 25

_POSITIVE_MULTIPLIER = 1.3
_NEGATIVE_MULTIPLIER = 0.2
_UNLIKELY_MULTIPLIER = 0.1

_DEEP_NESTING = ((10, 0.7), (15, 0.5))

_SIBLING_MIN_COUNT = 10
_SIMILAR_SIBLING_MIN = 5
_SIBLING_LENGTH_TOLERANCE = 0.3
_SIBLING_MULTIPLIER = 0.3


class Candidate(NamedTuple):
    node: Tag
    score: float


class LocateResult(NamedTuple):
    node: Tag | None
    method: str  # "selector" | "heuristic" | "none"


# ---------------------------------------------------------------------------
# Shared rejection rules
# ---------------------------------------------------------------------------

def is_inside_unwanted_container(el: Tag, root: Tag) -> bool:
    """True if any ancestor of *el* below *root* is navigation-like."""
    parent = el.parent
    while parent is not None and parent is not root:
        if parent.name in NON_CONTENT_ANCESTOR_TAGS:
            return True
        if is_unlikely_candidate(dom.class_id_string(parent)):
            return True
        parent = parent.parent
    return False


# ---------------------------------------------------------------------------
# Phase 1: priority selectors
# ---------------------------------------------------------------------------

def find_by_selectors(
    root: Tag,
    selectors: Iterable[str] = ARTICLE_SELECTORS,
) -> Tag | None:
    """Return the first selector match that looks like article content."""
    for selector in selectors:
        for el in dom.select_safe(root, selector):
            if is_unlikely_candidate(dom.class_id_string(el)):
                continue
            if is_inside_unwanted_container(el, root):
                continue
            if dom.clean_text_length(el) > _SELECTOR_MIN_CHARS:
                logger.debug("Selector %r matched <%s>", selector, el.name)
                return el
    return None


# ---------------------------------------------------------------------------
# Phase 2: scored heuristic
# ---------------------------------------------------------------------------

def link_density(el: Tag, text_length: int | None = None) -> float:
    """Ratio of anchor text to total collapsed text of *el*."""
    if text_length is None:
        text_length = dom.collapsed_text_length(el)
    if text_length <= 0:
        return 1.0
    link_chars = sum(len(a.get_text()) for a in el.find_all("a"))
    return link_chars / text_length


def content_score(el: Tag, root: Tag | None = None) -> float:
    """Score *el* as a potential article root; 0 means rejected."""
    text_length = dom.collapsed_text_length(el)
    if text_length < _HEURISTIC_MIN_CHARS:
        return 0.0

    score = min(math.sqrt(text_length) * 2, _BASE_SCORE_CAP)

    paragraphs = el.find_all("p")
    score += len(paragraphs) * _PARAGRAPH_BONUS
    low, high = _QUALITY_PARAGRAPH_RANGE
    quality = 0
    for p in paragraphs:
        p_text = p.get_text().strip()
        if low <= len(p_text) <= high:
            quality += 1
        if len(SENTENCE_END_RE.findall(p_text)) >= _MIN_SENTENCES:
            score += _SENTENCE_PARAGRAPH_BONUS
    score += quality * _QUALITY_PARAGRAPH_BONUS

    density = link_density(el, text_length)
    if density > _LINK_DENSITY_REJECT:
        return 0.0
    for threshold, multiplier in _LINK_DENSITY_STEPS:
        if density > threshold:
            score *= multiplier
            break
    else:
        score *= 1 - density * 0.5

    score += min(len(el.find_all(["h1", "h2", "h3", "h4", "h5", "h6"])) * _HEADING_BONUS,
                 _HEADING_CAP)
    score += len(el.find_all("blockquote")) * _BLOCKQUOTE_BONUS
    score += min(len(el.find_all("img", alt=True)) * _IMAGE_BONUS, _IMAGE_CAP)
    score += min(len(el.find_all(["pre", "code"])) * _CODE_BONUS, _CODE_CAP)
    score += min(len(el.find_all(["ul", "ol"])) * _LIST_BONUS, _LIST_CAP)

    match_string = dom.class_id_string(el)
    if POSITIVE.search(match_string):
        score *= _POSITIVE_MULTIPLIER
    if NEGATIVE.search(match_string):
        score *= _NEGATIVE_MULTIPLIER
    if is_unlikely_candidate(match_string):
        score *= _UNLIKELY_MULTIPLIER

    depth = dom.depth_below(el, root)
    for limit, multiplier in _DEEP_NESTING:
        if depth > limit:
            score *= multiplier

    score *= _sibling_penalty(el, text_length)
    return score


def _sibling_penalty(el: Tag, text_length: int) -> float:
    """Penalise one teaser among many look-alike siblings."""
    parent = el.parent
    if parent is None:
        return 1.0
    siblings = dom.element_children(parent)
    if len(siblings) <= _SIBLING_MIN_COUNT:
        return 1.0
    similar = sum(
        1
        for s in siblings
        if s.name == el.name
        and abs(len(s.get_text()) - text_length) < text_length * _SIBLING_LENGTH_TOLERANCE
    )
    return _SIBLING_MULTIPLIER if similar > _SIMILAR_SIBLING_MIN else 1.0


def find_by_score(root: Tag) -> Candidate | None:
    """Return the highest-scoring candidate below *root*, first seen on ties."""
    best: Candidate | None = None
    for el in root.find_all(list(CANDIDATE_TAGS)):
        if is_inside_unwanted_container(el, root):
            continue
        score = content_score(el, root)
        if score > (best.score if best else 0):
            best = Candidate(el, score)
    if best is not None:
        logger.debug("Heuristic winner <%s class=%r> score=%.1f",
                     best.node.name, dom.attr_str(best.node, "class"), best.score)
    return best


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def locate(root: Tag, extra_selectors: Iterable[str] = ()) -> LocateResult:
    """Find the article container below *root* (normally ``<body>``).

    *extra_selectors* are scanned before the built-in catalogue with the
    same acceptance rules.  Returns ``LocateResult(None, "none")`` when
    neither phase finds anything; callers then fall back to the body.
    """
    selectors = (*extra_selectors, *ARTICLE_SELECTORS)
    found = find_by_selectors(root, selectors)
    if found is not None:
        return LocateResult(found, "selector")

    candidate = find_by_score(root)
    if candidate is not None:
        return LocateResult(candidate.node, "heuristic")

    logger.debug("No article container located")
    return LocateResult(None, "none")
