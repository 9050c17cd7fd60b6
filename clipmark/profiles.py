"""YAML-based per-domain clip profiles.

Example file::

    default:
      mode: article
      template: default
    domains:
      example.com:
        content_selectors: [".story-body"]
        remove_selectors: [".story-toolbar"]
      blog.example.com:
        template: research
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from clipmark.extractors.urlnorm import extract_domain

PROFILE_KEYS: frozenset[str] = frozenset({
    "content_selectors",
    "remove_selectors",
    "template",
    "mode",
})


def select_profile(data: Any, url: str) -> dict[str, Any]:
    """Merge the ``default`` block with the longest domain entry matching *url*."""
    default = data.get("default", {}) if isinstance(data, dict) else {}
    domains = data.get("domains", {}) if isinstance(data, dict) else {}

    host = extract_domain(url)
    best_key = ""
    best_cfg: dict[str, Any] = {}
    if isinstance(domains, dict):
        for key, cfg in domains.items():
            if not isinstance(key, str) or not isinstance(cfg, dict):
                continue
            key_lower = key.lower()
            if (host == key_lower or host.endswith("." + key_lower)) and (
                len(key_lower) > len(best_key)
            ):
                best_key = key_lower
                best_cfg = cfg

    merged: dict[str, Any] = {}
    if isinstance(default, dict):
        merged.update(default)
    merged.update(best_cfg)
    return {k: v for k, v in merged.items() if k in PROFILE_KEYS}


def load_profile(path: str | Path, url: str) -> dict[str, Any]:
    """Load YAML profile and return merged settings for the given URL.

    Raises ``OSError`` if the file cannot be read and ``yaml.YAMLError`` if
    it is not valid YAML.
    """
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    return select_profile(data, url)
