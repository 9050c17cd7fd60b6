"""Note templates for clipped content.

A template is a title line plus a body, both with ``{{variable}}``
placeholders filled from :func:`template_variables`::

    from clipmark.templates import apply_template, get_template, template_variables

    rendered = apply_template(get_template("article"), template_variables(content))
    print(rendered.title_line)
    print(rendered.content)
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import NamedTuple

from pydantic import BaseModel, Field

from clipmark.items import ClipMetadata, ExtractedContent

_PLACEHOLDER_RE = re.compile(r"\{\{[^}]+\}\}")
_EXCESSIVE_BLANK_LINES_RE = re.compile(r"\n{3,}")

# Variable name → description, for help output
TEMPLATE_VARIABLES: dict[str, str] = {
    "title": "Page title",
    "url": "Page URL",
    "siteName": "Site name",
    "author": "Author",
    "publishedAt": "Published date",
    "capturedAt": "Capture date",
    "content": "Main content (Markdown)",
    "note": "User note/annotation",
    "favicon": "Favicon URL",
    "date": "Current date (YYYY-MM-DD)",
    "time": "Current time (HH:MM)",
}


class ClipTemplate(BaseModel):
    id: str
    name: str
    title_line: str
    content: str
    is_default: bool = False
    tags: list[str] = Field(default_factory=list)


class RenderedTemplate(NamedTuple):
    title_line: str
    content: str

    def to_markdown(self) -> str:
        return f"{self.title_line}\n\n{self.content}".strip()


DEFAULT_TEMPLATES: tuple[ClipTemplate, ...] = (
    ClipTemplate(
        id="default",
        name="General",
        is_default=True,
        tags=["WebClip"],
        title_line="{{title}} #WebClip",
        content=(
            "Source:: {{url}}\n"
            "Clipped:: {{capturedAt}}\n"
            "Author:: {{author}}\n"
            "Published:: {{publishedAt}}\n"
            "{{content}}\n"
            "{{note}}"
        ),
    ),
    ClipTemplate(
        id="article",
        name="Article",
        tags=["WebClip", "Article"],
        title_line="{{title}} #WebClip #Article",
        content=(
            "Source:: {{url}}\n"
            "Clipped:: {{capturedAt}}\n"
            "Site:: {{siteName}}\n"
            "Author:: {{author}}\n"
            "Published:: {{publishedAt}}\n"
            "---\n"
            "{{content}}\n"
            "---\n"
            "**My Notes**\n"
            "{{note}}"
        ),
    ),
    ClipTemplate(
        id="bookmark",
        name="Bookmark",
        tags=["WebClip", "Bookmark"],
        title_line="[{{title}}]({{url}}) #WebClip #Bookmark",
        content=(
            "Source:: {{url}}\n"
            "Clipped:: {{capturedAt}}\n"
            "Site: {{siteName}}\n"
            "{{note}}"
        ),
    ),
    ClipTemplate(
        id="research",
        name="Research",
        tags=["WebClip", "Research"],
        title_line="{{title}} #WebClip #Research",
        content=(
            "Source:: {{url}}\n"
            "Clipped:: {{capturedAt}}\n"
            "**Metadata**\n"
            "- Author: {{author}}\n"
            "- Published: {{publishedAt}}\n"
            "**Notes**\n"
            "{{note}}\n"
            "**Full Content**\n"
            "{{content}}"
        ),
    ),
)


def get_template(template_id: str) -> ClipTemplate | None:
    """Return the built-in template with *template_id*, or None."""
    for template in DEFAULT_TEMPLATES:
        if template.id == template_id:
            return template
    return None


def get_default_template() -> ClipTemplate:
    for template in DEFAULT_TEMPLATES:
        if template.is_default:
            return template
    return DEFAULT_TEMPLATES[0]


def _render(text: str, data: dict[str, str]) -> str:
    for name, value in data.items():
        text = text.replace("{{" + name + "}}", value or "")
    text = _PLACEHOLDER_RE.sub("", text)
    text = _EXCESSIVE_BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def apply_template(template: ClipTemplate, data: dict[str, str]) -> RenderedTemplate:
    """Fill *template* with *data*; unknown or missing placeholders become empty."""
    return RenderedTemplate(
        title_line=_render(template.title_line, data),
        content=_render(template.content, data),
    )


def template_variables(
    content: ExtractedContent,
    note: str = "",
    now: datetime | None = None,
) -> dict[str, str]:
    """Build the placeholder map for *content*."""
    meta = content.metadata
    now = now or datetime.now()
    return {
        "title": meta.title,
        "url": meta.url,
        "siteName": meta.site_name or "",
        "author": meta.author or "",
        "publishedAt": meta.published_at or "",
        "capturedAt": meta.captured_at,
        "content": content.markdown,
        "note": note,
        "favicon": meta.favicon or "",
        "date": now.strftime("%Y-%m-%d"),
        "time": now.strftime("%H:%M"),
    }


def create_metadata_block(metadata: ClipMetadata) -> str:
    """Return the ``#WebClip`` bullet header placed above a clip."""
    lines = ["#WebClip", "", f"- **Source**: [{metadata.title}]({metadata.url})"]
    if metadata.site_name:
        lines.append(f"- **Site**: {metadata.site_name}")
    if metadata.author:
        lines.append(f"- **Author**: {metadata.author}")
    if metadata.published_at:
        lines.append(f"- **Published**: {metadata.published_at}")
    lines.append(f"- **Clipped**: {metadata.captured_at}")
    lines += ["", "---", ""]
    return "\n".join(lines)
