"""clipmark.plugins: extension point registry for site rules and locators.

Usage::

    from clipmark import register_site_rule

    class ExampleNews:
        name = "example_news"
        selectors = (".story-toolbar", ".story-paywall-teaser")
        def matches(self, hostname: str) -> bool:
            return hostname.endswith("news.example.com")

    register_site_rule(ExampleNews())

Both plugin types follow ``runtime_checkable`` ``Protocol`` contracts so
you can use ``isinstance()`` checks in tests without inheriting from a base
class.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from bs4 import Tag

# ---------------------------------------------------------------------------
# Protocol definitions
# ---------------------------------------------------------------------------

@runtime_checkable
class SiteRulePlugin(Protocol):
    """Extra removal selectors applied by the cleaner on matching hosts."""

    name: str
    selectors: Sequence[str]

    def matches(self, hostname: str) -> bool:
        """Return True if *selectors* apply to pages on *hostname*."""
        ...


@runtime_checkable
class LocatorPlugin(Protocol):
    """Custom article locator, tried after both built-in phases fail."""

    name: str
    priority: int  # Higher = tried first among registered plugins

    def locate(self, root: Tag) -> Tag | None:
        """Return the article container below *root*, or None to skip."""
        ...


# ---------------------------------------------------------------------------
# Module-level registry
# ---------------------------------------------------------------------------

_registry: dict[str, list[Any]] = {
    "site_rules": [],
    "locators": [],
}


def register_site_rule(plugin: SiteRulePlugin) -> None:
    """Register a custom :class:`SiteRulePlugin`."""
    _registry["site_rules"].append(plugin)


def register_locator(plugin: LocatorPlugin) -> None:
    """Register a custom :class:`LocatorPlugin`."""
    _registry["locators"].append(plugin)


def get_site_rules() -> list[SiteRulePlugin]:
    """Return all registered site-rule plugins."""
    return list(_registry["site_rules"])


def get_locators() -> list[LocatorPlugin]:
    """Return all registered locator plugins, highest priority first."""
    return sorted(_registry["locators"], key=lambda p: p.priority, reverse=True)


def clear_plugins() -> None:
    """Remove all registered plugins. Primarily for use in tests."""
    for value in _registry.values():
        value.clear()
