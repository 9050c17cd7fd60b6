"""Unit tests for duplicate-title removal."""

from __future__ import annotations

from clipmark.extractors import dom
from clipmark.extractors.title import is_title_match, normalize_title, remove_duplicate_title


def _root(html: str):
    return dom.body_of(dom.parse_html(html))


class TestNormalizeTitle:
    def test_pipe_suffix(self):
        assert normalize_title("My Great Article | SiteName") == "My Great Article"

    def test_dash_suffix(self):
        assert normalize_title("My Great Article - SiteName") == "My Great Article"

    def test_fullwidth_pipe_suffix(self):
        assert normalize_title("深度学习入门｜知乎") == "深度学习入门"

    def test_brackets_stripped(self):
        assert normalize_title("【公告】") == "公告"

    def test_whitespace_collapsed(self):
        assert normalize_title("  Many    spaces\nhere ") == "Many spaces here"

    def test_plain_unchanged(self):
        assert normalize_title("Plain title") == "Plain title"

    def test_inner_hyphen_treated_as_separator(self):
        assert normalize_title("Self-Driving Cars") == "Self"
        assert normalize_title("snake_case_names") == "snake_case"


class TestIsTitleMatch:
    def test_exact(self):
        assert is_title_match("Hello", "Hello")

    def test_case_insensitive(self):
        assert is_title_match("hello world", "Hello World")

    def test_containment_above_ratio(self):
        assert is_title_match("Building a Parser", "Building a Parser Today")

    def test_containment_below_ratio(self):
        assert not is_title_match("Building a Parser", "Building a Parser: the complete illustrated guide")

    def test_short_strings_need_exact_match(self):
        assert not is_title_match("Parser", "Parsers")

    def test_unrelated(self):
        assert not is_title_match("Completely Different Story", "My Great Article")


class TestRemoveDuplicateTitle:
    def test_h1_removed_when_title_has_site_suffix(self):
        root = _root("<h1>My Great Article</h1><p>Body text</p>")
        removed = remove_duplicate_title(root, "My Great Article | SiteName")
        assert removed is not None and removed.name == "h1"
        assert root.find("h1") is None
        assert root.find("p") is not None

    def test_h1_kept_for_unrelated_title(self):
        root = _root("<h1>My Great Article</h1><p>Body text</p>")
        assert remove_duplicate_title(root, "Completely Different Story") is None
        assert root.find("h1") is not None

    def test_falls_back_to_h2(self):
        root = _root("<h1>Section index</h1><h2>Release Notes 2024</h2><p>Body</p>")
        removed = remove_duplicate_title(root, "Release Notes 2024 - Example")
        assert removed is not None and removed.name == "h2"
        assert root.find("h1") is not None

    def test_only_first_three_h2_checked(self):
        html = "".join(f"<h2>Other {i}</h2>" for i in range(5)) + "<h2>Release Notes 2024</h2>"
        root = _root(html)
        assert remove_duplicate_title(root, "Release Notes 2024") is None

    def test_leading_block_checked(self):
        root = _root('<div class="title">Release Notes 2024</div><p>Body</p>')
        removed = remove_duplicate_title(root, "Release Notes 2024")
        assert removed is not None and removed.name == "div"

    def test_removes_at_most_one(self):
        root = _root("<h1>Release Notes 2024</h1><h1>Release Notes 2024</h1>")
        remove_duplicate_title(root, "Release Notes 2024")
        assert len(root.find_all("h1")) == 1

    def test_empty_title_noop(self):
        root = _root("<h1>Anything</h1>")
        assert remove_duplicate_title(root, "") is None
        assert root.find("h1") is not None
