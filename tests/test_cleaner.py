"""Unit tests for the noise-removal passes."""

from __future__ import annotations

from clipmark.extractors import dom
from clipmark.extractors.cleaner import (
    apply_site_rules,
    clean,
    matching_keyword,
    remove_empty_elements,
    remove_metadata_blocks,
    remove_noise_elements,
    remove_suspicious,
    remove_unwanted,
)
from clipmark.extractors.patterns import site_selectors
from clipmark.plugins import register_site_rule


def _root(html: str):
    return dom.clone(dom.body_of(dom.parse_html(f"<div id='root'>{html}</div>")).find(id="root"))


class TestSiteRules:
    def test_table_lookup_by_hostname_substring(self):
        assert ".Reward" in site_selectors("www.zhihu.com")
        assert site_selectors("example.org") == []

    def test_site_selectors_removed_for_matching_host(self, long_paragraph):
        root = _root(f'<p>{long_paragraph}</p><div class="reward_area">Tip the author</div>')
        removed = apply_site_rules(root, "https://mp.weixin.qq.com/s/abc")
        assert removed == 1
        assert root.find(class_="reward_area") is None

    def test_site_selectors_ignored_for_other_hosts(self):
        root = _root('<div class="reward_area">Tip the author</div>')
        assert apply_site_rules(root, "https://example.com/post") == 0
        assert root.find(class_="reward_area") is not None

    def test_extra_selectors_applied(self):
        root = _root('<div class="promo-banner">Buy</div><p>Keep</p>')
        apply_site_rules(root, "https://example.com/", extra_selectors=[".promo-banner"])
        assert root.find(class_="promo-banner") is None

    def test_registered_plugin_applied(self):
        class ExampleRule:
            name = "example_rule"
            selectors = (".story-toolbar",)

            def matches(self, hostname: str) -> bool:
                return hostname.endswith("example.com")

        register_site_rule(ExampleRule())
        root = _root('<div class="story-toolbar">Tools</div><p>Keep</p>')
        apply_site_rules(root, "https://news.example.com/a")
        assert root.find(class_="story-toolbar") is None

    def test_failing_plugin_does_not_abort(self):
        class Broken:
            name = "broken"
            selectors = (".x",)

            def matches(self, hostname: str) -> bool:
                raise RuntimeError("boom")

        register_site_rule(Broken())
        root = _root('<div class="x">x</div>')
        assert apply_site_rules(root, "https://example.com/") == 0


class TestUnwantedSelectors:
    def test_semantic_chrome_removed(self, long_paragraph):
        root = _root(
            f"<nav>Menu</nav><header>Top</header><p>{long_paragraph}</p>"
            "<footer>Bottom</footer><aside>Side</aside><script>x()</script>",
        )
        remove_unwanted(root)
        for tag in ("nav", "header", "footer", "aside", "script"):
            assert root.find(tag) is None
        assert root.find("p") is not None

    def test_video_host_iframes_kept(self):
        root = _root(
            '<iframe src="https://www.youtube.com/embed/x"></iframe>'
            '<iframe src="https://tracker.example.com/frame"></iframe>',
        )
        remove_unwanted(root)
        frames = root.find_all("iframe")
        assert len(frames) == 1
        assert "youtube" in frames[0]["src"]

    def test_hidden_and_share_widgets_removed(self):
        root = _root(
            '<div class="share-buttons">Share</div><div style="display:none">Hidden</div>'
            '<div aria-hidden="true">Aria</div><p>Keep</p>',
        )
        remove_unwanted(root)
        assert root.get_text(strip=True) == "Keep"

    def test_invalid_selector_skipped(self):
        root = _root("<p>Keep</p>")
        apply_site_rules(root, "", extra_selectors=["[[[", "p"])
        assert root.find("p") is None


class TestSuspiciousKeywords:
    def test_keyword_in_class(self):
        root = _root('<div class="newsletter-box">Sign up</div>')
        assert matching_keyword(root.find("div")) == "newsletter"

    def test_keyword_in_id(self):
        root = _root('<div id="trending-now">Hot</div>')
        assert matching_keyword(root.find("div")) == "trending"

    def test_short_keyword_block_removed(self):
        root = _root('<div class="carousel">Slides</div><p>Keep</p>')
        assert remove_suspicious(root) == 1
        assert root.find(class_="carousel") is None

    def test_media_bearing_block_kept(self):
        root = _root('<div class="gallery"><img src="https://x/a.png" alt="a"></div>')
        remove_suspicious(root)
        assert root.find(class_="gallery") is not None

    def test_long_prose_block_kept(self, long_paragraph):
        root = _root(f'<div class="slider-caption"><p>{long_paragraph} {long_paragraph} {long_paragraph}</p></div>')
        remove_suspicious(root)
        assert root.find(class_="slider-caption") is not None

    def test_root_never_removed(self):
        root = dom.clone(dom.parse_html('<div class="popup-root"><p>x</p></div>').find("div"))
        remove_suspicious(root)
        assert root.name == "div"
        assert not dom.is_removed(root)


class TestMetadataBlocks:
    def test_byline_and_counters_removed(self, long_paragraph):
        root = _root(
            "<p>By Jane Smith</p><span>1200 views</span><div>作者：张三</div>"
            f"<p>{long_paragraph}</p>",
        )
        assert remove_metadata_blocks(root) == 3
        assert root.get_text(strip=True) == long_paragraph

    def test_long_block_kept_even_if_pattern_matches(self, long_paragraph):
        root = _root(f"<p>By the way, {long_paragraph}</p>")
        remove_metadata_blocks(root)
        assert root.find("p") is not None


class TestEmptyElements:
    def test_empty_wrappers_pruned_innermost_first(self):
        root = _root("<div><span> </span><div><p></p></div></div><p>Keep</p>")
        remove_empty_elements(root)
        assert str(root).count("<div") == 1  # only the root remains
        assert root.find("p").get_text() == "Keep"

    def test_media_and_tables_preserved(self):
        root = _root(
            '<div><img src="https://x/a.png"></div><table><tr><td>1</td></tr></table>'
            "<figure></figure>",
        )
        remove_empty_elements(root)
        assert root.find("img") is not None
        assert root.find("table") is not None
        assert root.find("figure") is not None


class TestNoiseElements:
    def test_short_interaction_text_removed(self, long_paragraph):
        root = _root(f"<p>Read more</p><p>Comments: 12</p><p>{long_paragraph}</p>")
        remove_noise_elements(root)
        assert root.get_text(strip=True) == long_paragraph

    def test_link_cluster_removed(self, long_paragraph):
        root = _root(
            '<div class="tags"><a href="/a">python</a> <a href="/b">web</a></div>'
            f"<p>{long_paragraph}</p>",
        )
        remove_noise_elements(root)
        assert root.find("a") is None

    def test_noise_phrase_removed(self, long_paragraph):
        root = _root(f"<span>展开全文</span><p>{long_paragraph}</p>")
        remove_noise_elements(root)
        assert "展开全文" not in root.get_text()

    def test_prose_with_links_kept(self, long_paragraph):
        root = _root(f'<p>{long_paragraph} See <a href="/x">the minutes</a>.</p>')
        remove_noise_elements(root)
        assert root.find("a") is not None


class TestClean:
    def test_full_pipeline_on_fixture(self, article_html):
        body = dom.body_of(dom.parse_html(article_html))
        fragment = dom.clone(body)
        clean(fragment, "https://blog.example.com/posts/better-parsers")
        text = fragment.get_text()
        assert "Popular posts" not in text
        assert "All rights reserved" not in text
        assert "Great post" not in text
        assert "Posted on" not in text
        assert "window.analytics" not in text
        assert "recursive descent parser" in text

    def test_source_tree_untouched(self, article_html):
        soup = dom.parse_html(article_html)
        before = str(soup)
        clean(dom.clone(dom.body_of(soup)), "https://blog.example.com/")
        assert str(soup) == before
