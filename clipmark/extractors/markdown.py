"""Convert a cleaned HTML subtree to Markdown, preserving code, tables, and structure."""

from __future__ import annotations

import logging
import re

from bs4 import NavigableString, Tag
from bs4.element import PreformattedString
from markdownify import ATX, MarkdownConverter

from clipmark.extractors import dom
from clipmark.extractors.urlnorm import escape_title, is_safe_url, resolve_url

logger = logging.getLogger(__name__)

_EXCESSIVE_BLANK_LINES_RE = re.compile(r"\n{3,}")
_INLINE_WHITESPACE_RE = re.compile(r"[ \t\n\r]*[\t\n\r][ \t\n\r]*")
_CODE_LANG_RE = re.compile(r"(?:language-|lang-)(\w+)", re.IGNORECASE)

# Rendered as nothing, children included
_SKIP_TAGS: frozenset[str] = frozenset({
    "script", "style", "noscript", "template", "svg", "canvas",
    "video", "audio", "iframe", "object", "embed",
})

# Converted from the element itself rather than from pre-rendered children
_OPAQUE_TAGS: frozenset[str] = frozenset({"pre", "table", "dl"})

# Real image URL holders, tried in order when ``src`` is a placeholder
LAZY_SRC_ATTRS: tuple[str, ...] = (
    "data-src",
    "data-original",
    "data-lazy-src",
    "data-actualsrc",
    "data-original-src",
    "data-echo",
    "data-lazyload",
    "data-source",
    "data-url",
    "data-img-src",
    "data-real-src",
    "srcset",
)

_PLACEHOLDER_MARKERS: tuple[str, ...] = (
    "data:image/gif",
    "data:image/png;base64,iVBOR",
    "placeholder",
    "loading",
    "blank",
)
_SHORT_DATA_URI_CHARS = 50


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

def is_placeholder_src(src: str) -> bool:
    if not src:
        return True
    if any(marker in src for marker in _PLACEHOLDER_MARKERS):
        return True
    return len(src) < _SHORT_DATA_URI_CHARS and src.startswith("data:")


def _first_srcset_url(srcset: str) -> str:
    first = srcset.split(",")[0].strip()
    return first.split(" ")[0] if first else ""


def image_source(img: Tag) -> str:
    """Return the best raw source for *img*, following lazy-load attributes."""
    src = dom.attr_str(img, "src").strip()
    if not is_placeholder_src(src):
        return src
    for attr in LAZY_SRC_ATTRS:
        lazy = dom.attr_str(img, attr).strip()
        if not lazy or lazy.startswith("data:"):
            continue
        if attr == "srcset":
            lazy = _first_srcset_url(lazy)
            if not lazy:
                continue
        return lazy
    return src


def resolve_image_url(img: Tag, base_url: str) -> str | None:
    """Absolute, safe image URL for *img*, or None if it should be dropped."""
    src = image_source(img)
    if not src or src.startswith(("data:image/gif", "data:image/svg+xml")):
        return None
    absolute = resolve_url(src, base_url)
    if absolute.startswith("//"):
        absolute = "https:" + absolute
    if not is_safe_url(absolute):
        return None
    return absolute


def _image_markdown(alt: str, url: str, title: str = "") -> str:
    if title:
        return f'![{alt}]({url} "{escape_title(title)}")'
    return f"![{alt}]({url})"


def code_language(el: Tag) -> str:
    """Language hint from ``language-*``/``lang-*`` classes or data attributes."""
    match = _CODE_LANG_RE.search(dom.attr_str(el, "class"))
    if match:
        return match.group(1)
    return dom.attr_str(el, "data-language") or dom.attr_str(el, "data-lang")


def _int_attr(el: Tag, name: str, default: int) -> int:
    try:
        return int(dom.attr_str(el, name, str(default)).strip())
    except ValueError:
        return default


def _inline_wrapper(markup: str):
    def convert(self, el, text, parent_tags):
        trimmed = text.strip()
        return f"{markup}{trimmed}{markup}" if trimmed else ""

    return convert


def _block(self, el, text, parent_tags):
    trimmed = text.strip()
    return f"\n\n{trimmed}\n\n" if trimmed else ""


# ---------------------------------------------------------------------------
# Converter
# ---------------------------------------------------------------------------

class ClipConverter(MarkdownConverter):
    """markdownify converter for clipped article fragments.

    Resolves links and images against *base_url*, neutralises unsafe URLs,
    follows lazy-load image attributes, fences code with its language,
    and renders tables with a header row even when the source has none.
    """

    def __init__(self, base_url: str = "", **options):
        options.setdefault("heading_style", ATX)
        options.setdefault("bullets", "-")
        options.setdefault("escape_asterisks", False)
        options.setdefault("escape_underscores", False)
        options.setdefault("escape_misc", False)
        super().__init__(**options)
        self.base_url = base_url

    # -- traversal ----------------------------------------------------------

    def process_tag(self, node, parent_tags=None):
        if node.name in _SKIP_TAGS or dom.is_hidden(node):
            return ""
        if node.name in _OPAQUE_TAGS:
            convert_fn = getattr(self, f"convert_{node.name}")
            return convert_fn(node, "", parent_tags=set(parent_tags or ()))
        return super().process_tag(node, parent_tags=parent_tags)

    def process_text(self, el, parent_tags=None):
        text = super().process_text(el, parent_tags=parent_tags)
        return _INLINE_WHITESPACE_RE.sub(" ", text)

    def convert_children(self, el: Tag, parent_tags: set[str] | None = None) -> str:
        """Markdown for the children of *el*, without *el*'s own markup."""
        tags = set(parent_tags or ()) | {el.name}
        parts: list[str] = []
        for child in el.children:
            if isinstance(child, Tag):
                parts.append(self.process_tag(child, parent_tags=tags))
            elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
                parts.append(self.process_text(child, parent_tags=tags))
        return "".join(parts)

    # -- blocks -------------------------------------------------------------

    def _convert_hn(self, n, el, text, parent_tags):
        content = text.strip()
        if not content:
            return ""
        return f"\n\n{'#' * n} {content}\n\n"

    convert_p = _block
    convert_div = _block
    convert_section = _block
    convert_article = _block
    convert_main = _block
    convert_header = _block
    convert_footer = _block
    convert_aside = _block

    def convert_br(self, el, text, parent_tags):
        return "\n"

    def convert_hr(self, el, text, parent_tags):
        return "\n\n---\n\n"

    def convert_blockquote(self, el, text, parent_tags):
        content = _EXCESSIVE_BLANK_LINES_RE.sub("\n\n", text.strip())
        if not content:
            return ""
        quoted = "\n".join(f"> {line}" if line else ">" for line in content.split("\n"))
        return f"\n\n{quoted}\n\n"

    def convert_pre(self, el, text, parent_tags):
        code_el = el.find("code")
        source = code_el if isinstance(code_el, Tag) else el
        code = source.get_text()
        if not code.strip():
            return ""
        return f"\n\n```{code_language(source)}\n{code.rstrip()}\n```\n\n"

    # -- inline -------------------------------------------------------------

    convert_b = convert_strong = _inline_wrapper("**")
    convert_i = convert_em = _inline_wrapper("*")
    convert_s = convert_del = convert_strike = _inline_wrapper("~~")
    convert_mark = _inline_wrapper("==")

    def convert_u(self, el, text, parent_tags):
        trimmed = text.strip()
        return f"<u>{trimmed}</u>" if trimmed else ""

    def convert_sup(self, el, text, parent_tags):
        return f"<{el.name}>{text}</{el.name}>"

    convert_sub = convert_sup

    def convert_code(self, el, text, parent_tags):
        code = el.get_text()
        if not code:
            return ""
        if "`" in code:
            return f"`` {code} ``"
        return f"`{code}`"

    def convert_a(self, el, text, parent_tags):
        href = resolve_url(dom.attr_str(el, "href").strip(), self.base_url)
        if not is_safe_url(href):
            return text
        label = text.strip() or href
        title = dom.attr_str(el, "title")
        if title:
            return f'[{label}]({href} "{escape_title(title)}")'
        return f"[{label}]({href})"

    def convert_img(self, el, text, parent_tags):
        url = resolve_image_url(el, self.base_url)
        if url is None:
            return ""
        return _image_markdown(dom.attr_str(el, "alt"), url, dom.attr_str(el, "title"))

    def convert_figure(self, el, text, parent_tags):
        img = el.find("img")
        if isinstance(img, Tag) and not dom.is_hidden(img):
            url = resolve_image_url(img, self.base_url)
            if url is not None:
                caption = el.find("figcaption")
                alt = (caption.get_text().strip() if isinstance(caption, Tag) else "") or dom.attr_str(img, "alt")
                return f"\n\n{_image_markdown(alt, url, dom.attr_str(img, 'title'))}\n\n"
        return _block(self, el, text, parent_tags)

    # -- lists --------------------------------------------------------------

    def convert_li(self, el, text, parent_tags):
        content = text.strip()
        parent = el.parent
        if parent is None or parent.name not in ("ul", "ol"):
            return content
        if parent.name == "ol":
            marker = f"{_int_attr(parent, 'start', 1) + len(el.find_previous_siblings('li'))}. "
        else:
            marker = "- "
        depth = sum(1 for ancestor in el.parents if ancestor.name in ("ul", "ol")) - 1
        indent = "  " * depth

        lines = content.split("\n")
        rest = "\n".join(f"{indent}  {line}" if line else "" for line in lines[1:])
        item = f"{indent}{marker}{lines[0]}"
        return f"{item}\n{rest}\n" if rest else f"{item}\n"

    def convert_ul(self, el, text, parent_tags):
        items = text.strip("\n")
        if not items.strip():
            return ""
        return f"\n{items}\n\n"

    convert_ol = convert_ul

    # -- tables -------------------------------------------------------------

    def _table_cells(self, tr: Tag, parent_tags: set[str]) -> list[str]:
        cells: list[str] = []
        for cell in tr.find_all(["th", "td"], recursive=False):
            if dom.is_hidden(cell):
                content = ""
            else:
                content = self.convert_children(cell, parent_tags).strip()
            cells.append(content.replace("|", "\\|").replace("\n", " "))
            cells.extend([""] * (_int_attr(cell, "colspan", 1) - 1))
        return cells

    def convert_table(self, el, text, parent_tags):
        own_rows = [tr for tr in el.find_all("tr") if tr.find_parent("table") is el]
        head_rows = [tr for tr in own_rows if tr.parent.name == "thead"]
        body_rows = [tr for tr in own_rows if tr.parent.name != "thead"]

        inner_tags = parent_tags | {"table"}
        rows = [cells for cells in (self._table_cells(tr, inner_tags) for tr in head_rows + body_rows) if cells]
        if not rows:
            return ""

        # The first row is the header: an explicit thead, a leading row of th
        # cells, or (Markdown needs one) whatever the first row holds.
        col_count = max(len(row) for row in rows)
        rows = [row + [""] * (col_count - len(row)) for row in rows]
        lines = [
            "| " + " | ".join(rows[0]) + " |",
            "| " + " | ".join("---" for _ in rows[0]) + " |",
        ]
        lines.extend("| " + " | ".join(row) + " |" for row in rows[1:])
        return "\n\n" + "\n".join(lines) + "\n\n"

    def convert_dl(self, el, text, parent_tags):
        parts = ["\n\n"]
        term = ""
        for child in dom.element_children(el):
            if dom.is_hidden(child):
                continue
            content = self.convert_children(child, parent_tags).strip()
            if child.name == "dt":
                term = content
            elif child.name == "dd":
                parts.append(f"**{term}**\n: {content}\n\n")
        return "".join(parts)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize_output(text: str) -> str:
    """Unify line endings, strip trailing whitespace, cap blank runs, trim."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = "\n".join(line.rstrip() for line in text.split("\n"))
    text = _EXCESSIVE_BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def html_to_markdown(html: str | Tag, base_url: str = "") -> str:
    """Convert *html* (markup or an already-parsed tag) to clean Markdown.

    The children of the given tag are converted; for markup, the children
    of the parsed ``<body>``.  Relative links and images are resolved
    against *base_url*.
    """
    if isinstance(html, Tag):
        root = html
    else:
        if not html or not html.strip():
            return ""
        root = dom.body_of(dom.parse_html(html))

    converter = ClipConverter(base_url=base_url)
    return normalize_output(converter.convert_children(root))
