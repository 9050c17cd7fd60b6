"""Pydantic output schema for clipped pages."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

# Serialized field names follow the browser-side wire shape (siteName, capturedAt, ...)
_CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


class ClipMetadata(BaseModel):
    """Best-effort page metadata.  Only url, title and captured_at are guaranteed."""

    model_config = _CAMEL_CONFIG

    url: str
    title: str = ""
    site_name: str | None = None
    author: str | None = None
    published_at: str | None = None   # "YYYY-MM-DD HH:MM", "YYYY-MM-DD" or a short raw string
    captured_at: str = ""             # "YYYY-MM-DD HH:MM", local time
    favicon: str | None = None

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v or ""

    @field_validator("site_name", "author", "published_at", "favicon", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip() or None
        return v


class ExtractedContent(BaseModel):
    """Canonical result of one extraction call."""

    model_config = _CAMEL_CONFIG

    html: str = ""
    markdown: str = ""
    metadata: ClipMetadata
    mode: str = "article"                # article | full-page | selection
    extraction_method: str = "body"      # selector | heuristic | <plugin name> | body | selection

    def to_wire(self) -> dict[str, Any]:
        """Return the camelCase dict handed to downstream collaborators."""
        return self.model_dump(by_alias=True)
