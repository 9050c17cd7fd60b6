"""Extraction sub-package: deterministic, site-agnostic content extraction."""

from .cleaner import clean, remove_noise_elements
from .main_content import locate
from .markdown import html_to_markdown
from .metadata import extract_metadata, format_published_date
from .title import remove_duplicate_title
from .urlnorm import is_safe_url, resolve_url

__all__ = [
    "clean",
    "extract_metadata",
    "format_published_date",
    "html_to_markdown",
    "is_safe_url",
    "locate",
    "remove_duplicate_title",
    "remove_noise_elements",
    "resolve_url",
]
