"""clipmark - clip the readable content of any web page to clean Markdown.

Quick usage::

    from clipmark import extract_article

    content = extract_article(html, url="https://example.com/blog/some-post")
    print(content.metadata.title)
    print(content.markdown)

Selection and full-page modes::

    from clipmark import extract_full_page, extract_selection

    page = extract_full_page(html, url=url)
    clip = extract_selection(soup.select_one("#picked"), url=url, document=soup)

Plugin extension points::

    from clipmark import register_locator

    class DocsLocator:
        name = "docs_locator"
        priority = 10
        def locate(self, root):
            return root.select_one(".docs-body")

    register_locator(DocsLocator())
"""

from clipmark.clipper import (
    ClipError,
    NoSelectionError,
    extract,
    extract_article,
    extract_full_page,
    extract_selection,
)
from clipmark.extractors.markdown import html_to_markdown
from clipmark.items import ClipMetadata, ExtractedContent
from clipmark.plugins import register_locator, register_site_rule

__version__ = "0.1.0"
__all__ = [
    "ClipError",
    "ClipMetadata",
    "ExtractedContent",
    "NoSelectionError",
    "extract",
    "extract_article",
    "extract_full_page",
    "extract_selection",
    "html_to_markdown",
    "register_locator",
    "register_site_rule",
]
