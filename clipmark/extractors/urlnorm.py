"""URL resolution and link-safety utilities."""

from __future__ import annotations

from urllib.parse import urljoin, urlparse

# Schemes neutralized in links and images
_DANGEROUS_PREFIXES: tuple[str, ...] = (
    "javascript:",
    "vbscript:",
    "data:text/html",
    "data:application/",
)


def resolve_url(url: str, base_url: str = "") -> str:
    """Return *url* made absolute against *base_url*.

    - ``http(s)://`` URLs are returned unchanged
    - protocol-relative ``//host/path`` is upgraded to ``https:``
    - anything else carrying a scheme (``mailto:``, ``data:``, ...) is kept as is
    - relative paths are joined onto *base_url*
    """
    if not url:
        return ""
    if url.startswith("//"):
        return "https:" + url
    if url.startswith(("http://", "https://")):
        return url
    if ":" in url:
        return url
    try:
        return urljoin(base_url, url)
    except ValueError:
        return url


def is_safe_url(url: str) -> bool:
    """Return False for empty URLs and script-bearing schemes."""
    if not url:
        return False
    lower = url.strip().lower()
    return not lower.startswith(_DANGEROUS_PREFIXES)


def escape_title(text: str) -> str:
    """Escape double quotes for a Markdown link/image title clause."""
    return text.replace('"', '\\"')


def extract_domain(url: str) -> str:
    """Return the hostname of *url*, lowercased ("" when absent)."""
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""
