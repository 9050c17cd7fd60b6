"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

ARTICLE_URL = "https://blog.example.com/posts/better-parsers"
WECHAT_URL = "https://mp.weixin.qq.com/s/abc123"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture(autouse=True)
def _reset_plugins():
    from clipmark.plugins import clear_plugins

    clear_plugins()
    yield
    clear_plugins()


@pytest.fixture
def article_html() -> str:
    return _read_fixture("article.html")


@pytest.fixture
def heuristic_html() -> str:
    return _read_fixture("heuristic.html")


@pytest.fixture
def wechat_html() -> str:
    return _read_fixture("wechat.html")


@pytest.fixture
def profile_path() -> Path:
    return FIXTURES_DIR / "profiles.yaml"


@pytest.fixture
def long_paragraph() -> str:
    """A paragraph long enough to survive every cleaner pass."""
    return (
        "The committee met on Tuesday to review the proposal in detail. Members "
        "raised questions about the budget, the schedule and the staffing plan, "
        "and agreed to publish a revised draft for public comment next month."
    )
