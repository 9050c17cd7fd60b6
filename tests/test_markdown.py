"""Unit tests for the HTML to Markdown converter."""

from __future__ import annotations

import re

from clipmark.extractors import dom
from clipmark.extractors.markdown import (
    code_language,
    html_to_markdown,
    image_source,
    is_placeholder_src,
    normalize_output,
)

BASE = "https://example.com/a/page.html"


class TestBlocks:
    def test_paragraphs_joined_by_blank_line(self):
        assert html_to_markdown("<p>A</p><p>B</p>") == "A\n\nB"

    def test_conversion_is_deterministic(self):
        html = "<h2>T</h2><p>A</p><ul><li>x</li></ul><p>B</p>"
        assert html_to_markdown(html) == html_to_markdown(html)

    def test_heading_levels(self):
        md = html_to_markdown("<h1>One</h1><h3>Three</h3><p>Body</p>")
        assert md == "# One\n\n### Three\n\nBody"

    def test_empty_heading_dropped(self):
        assert html_to_markdown("<h1>  </h1><p>x</p>") == "x"

    def test_generic_container_padding(self):
        assert html_to_markdown("<div>one</div><div>two</div>") == "one\n\ntwo"

    def test_empty_paragraph_dropped(self):
        assert html_to_markdown("<p> </p><p>kept</p>") == "kept"

    def test_line_break_and_rule(self):
        assert html_to_markdown("<p>a<br>b</p><hr><p>c</p>") == "a\nb\n\n---\n\nc"

    def test_unknown_tags_pass_through(self):
        assert html_to_markdown("<p><span>in</span> <custom-tag>side</custom-tag></p>") == "in side"

    def test_empty_input(self):
        assert html_to_markdown("") == ""
        assert html_to_markdown("   ") == ""

    def test_accepts_parsed_tag(self):
        soup = dom.parse_html("<div id='x'><p>Inside</p></div><p>Outside</p>")
        assert html_to_markdown(soup.find(id="x")) == "Inside"


class TestInline:
    def test_emphasis(self):
        md = html_to_markdown(
            "<p><strong>bold</strong> <b>b</b> <em>it</em> <i>i</i> "
            "<del>gone</del> <s>s</s> <mark>hi</mark></p>",
        )
        assert md == "**bold** **b** *it* *i* ~~gone~~ ~~s~~ ==hi=="

    def test_empty_emphasis_is_noop(self):
        assert html_to_markdown("<p>a<strong> </strong>b</p>") == "ab"

    def test_html_passthrough_tags(self):
        md = html_to_markdown("<p>H<sub>2</sub>O x<sup>2</sup> <u>under</u></p>")
        assert md == "H<sub>2</sub>O x<sup>2</sup> <u>under</u>"

    def test_inline_code(self):
        assert html_to_markdown("<p>Use <code>x = 1</code> here</p>") == "Use `x = 1` here"

    def test_inline_code_with_backtick(self):
        assert html_to_markdown("<p><code>a`b</code></p>") == "`` a`b ``"

    def test_whitespace_collapsed_in_text(self):
        assert html_to_markdown("<p>one\n   two\tthree</p>") == "one two three"


class TestCodeBlocks:
    def test_fenced_with_language_class(self):
        md = html_to_markdown('<pre><code class="language-python">print("hi")\n</code></pre>')
        assert md == '```python\nprint("hi")\n```'

    def test_lang_prefix_class(self):
        md = html_to_markdown('<pre><code class="lang-rust">fn main() {}</code></pre>')
        assert md.startswith("```rust\n")

    def test_data_lang_on_pre(self):
        assert html_to_markdown('<pre data-lang="sh">ls -la</pre>') == "```sh\nls -la\n```"

    def test_no_language(self):
        assert html_to_markdown("<pre>plain</pre>") == "```\nplain\n```"

    def test_inner_whitespace_preserved(self):
        md = html_to_markdown("<pre><code>if x:\n    return  y</code></pre>")
        assert "    return  y" in md

    def test_code_inside_pre_not_wrapped_in_backticks(self):
        md = html_to_markdown("<pre><code>value</code></pre>")
        assert "`value`" not in md

    def test_empty_block_dropped(self):
        assert html_to_markdown("<pre><code>   </code></pre><p>x</p>") == "x"

    def test_code_language_helper(self):
        soup = dom.parse_html('<code data-language="go">x</code>')
        assert code_language(soup.find("code")) == "go"


class TestLinks:
    def test_relative_link_resolved(self):
        md = html_to_markdown('<p><a href="/docs">Docs</a></p>', BASE)
        assert md == "[Docs](https://example.com/docs)"

    def test_title_clause_escaped(self):
        md = html_to_markdown('<a href="https://x.org/" title="The &quot;docs&quot;">Docs</a>')
        assert md == '[Docs](https://x.org/ "The \\"docs\\"")'

    def test_javascript_link_neutralized(self):
        assert html_to_markdown('<a href="javascript:alert(1)">click</a>') == "click"

    def test_data_html_link_neutralized(self):
        assert html_to_markdown('<a href="data:text/html,hi">x</a>') == "x"

    def test_empty_text_uses_url(self):
        md = html_to_markdown('<a href="https://x.org/"></a>')
        assert md == "[https://x.org/](https://x.org/)"

    def test_missing_href_keeps_text(self):
        assert html_to_markdown("<a>plain</a>") == "plain"


class TestImages:
    def test_plain_image(self):
        md = html_to_markdown('<img src="/i/a.png" alt="A">', BASE)
        assert md == "![A](https://example.com/i/a.png)"

    def test_lazy_image_prefers_data_src(self):
        md = html_to_markdown('<img src="placeholder.gif" data-src="https://x/real.jpg" alt="alt">')
        assert md == "![alt](https://x/real.jpg)"

    def test_lazy_fallback_order(self):
        md = html_to_markdown(
            '<img src="data:image/gif;base64,R0lGODlhAQABAAAAACw=" '
            'data-original="https://x/original.jpg" data-lazy-src="https://x/lazy.jpg">',
        )
        assert md == "![](https://x/original.jpg)"

    def test_srcset_first_candidate(self):
        md = html_to_markdown('<img src="" srcset="/a-1x.png 1x, /a-2x.png 2x" alt="a">', BASE)
        assert md == "![a](https://example.com/a-1x.png)"

    def test_protocol_relative_upgraded(self):
        assert html_to_markdown('<img src="//cdn.ex.com/i.png">') == "![](https://cdn.ex.com/i.png)"

    def test_title_clause(self):
        md = html_to_markdown('<img src="https://x/a.png" alt="A" title="T">')
        assert md == '![A](https://x/a.png "T")'

    def test_javascript_image_dropped(self):
        assert html_to_markdown('<img src="javascript:alert(1)">') == ""

    def test_gif_data_uri_dropped(self):
        assert html_to_markdown('<img src="data:image/gif;base64,R0lGODlhAQABAAAAACw=">') == ""

    def test_svg_data_uri_dropped(self):
        svg = (
            "data:image/svg+xml;base64,"
            "PHN2ZyB4bWxucz0iaHR0cDovL3d3dy53My5vcmcvMjAwMC9zdmciIHdpZHRoPSIxIi8+"
        )
        assert html_to_markdown(f'<img src="{svg}">') == ""

    def test_placeholder_markers(self):
        assert is_placeholder_src("") is True
        assert is_placeholder_src("/img/loading.png") is True
        assert is_placeholder_src("/img/blank.jpg") is True
        assert is_placeholder_src("data:image/png;base64,iVBORw0KGgo") is True
        assert is_placeholder_src("data:image/webp;x") is True
        assert is_placeholder_src("https://x/photo.jpg") is False

    def test_image_source_keeps_real_src(self):
        soup = dom.parse_html('<img src="https://x/a.jpg" data-src="https://x/b.jpg">')
        assert image_source(soup.find("img")) == "https://x/a.jpg"

    def test_figure_caption_used_as_alt(self):
        md = html_to_markdown(
            '<figure><img src="https://x/a.png" alt="own">'
            "<figcaption>Caption text</figcaption></figure>",
        )
        assert md == "![Caption text](https://x/a.png)"

    def test_figure_keeps_image_title(self):
        md = html_to_markdown(
            '<figure><img src="https://x/a.png" alt="own" title="T">'
            "<figcaption>Cap</figcaption></figure>",
        )
        assert md == '![Cap](https://x/a.png "T")'

    def test_figure_without_image(self):
        assert html_to_markdown("<figure><blockquote>Quote</blockquote></figure>") == "> Quote"


class TestLists:
    def test_unordered(self):
        assert html_to_markdown("<ul><li>One</li><li>Two</li></ul>") == "- One\n- Two"

    def test_ordered_with_start(self):
        assert html_to_markdown('<ol start="3"><li>a</li><li>b</li></ol>') == "3. a\n4. b"

    def test_ordered_default_start(self):
        assert html_to_markdown("<ol><li>a</li><li>b</li></ol>") == "1. a\n2. b"

    def test_nested_list_indented(self):
        md = html_to_markdown("<ul><li>Item<ul><li>Sub</li></ul></li></ul>")
        assert md == "- Item\n    - Sub"

    def test_multiline_item_continuation(self):
        md = html_to_markdown("<ul><li><p>First para</p><p>Second</p></li></ul>")
        assert md == "- First para\n\n  Second"


class TestBlockquote:
    def test_every_line_prefixed(self):
        md = html_to_markdown("<blockquote><p>Line one</p><p>Line two</p></blockquote>")
        assert md == "> Line one\n>\n> Line two"

    def test_empty_blockquote_dropped(self):
        assert html_to_markdown("<blockquote> </blockquote><p>x</p>") == "x"


class TestTables:
    def test_header_synthesized_without_th(self):
        md = html_to_markdown(
            "<table><tr><td>a</td><td>b</td><td>c</td></tr>"
            "<tr><td>1</td><td>2</td><td>3</td></tr></table>",
        )
        lines = md.split("\n")
        assert lines[0] == "| a | b | c |"
        assert lines[1] == "| --- | --- | --- |"
        assert lines[2] == "| 1 | 2 | 3 |"

    def test_thead_and_pipe_escape(self):
        md = html_to_markdown(
            "<table><thead><tr><th>H1</th><th>H2</th></tr></thead>"
            "<tbody><tr><td>x|y</td><td>z</td></tr></tbody></table>",
        )
        assert md == "| H1 | H2 |\n| --- | --- |\n| x\\|y | z |"

    def test_colspan_pads_cells(self):
        md = html_to_markdown(
            '<table><tr><th colspan="2">Wide</th></tr><tr><td>a</td><td>b</td></tr></table>',
        )
        assert md.split("\n")[0] == "| Wide |  |"
        assert md.split("\n")[1] == "| --- | --- |"

    def test_cell_newlines_flattened(self):
        md = html_to_markdown("<table><tr><td>line1<br>line2</td></tr></table>")
        assert "| line1 line2 |" in md

    def test_empty_table_dropped(self):
        assert html_to_markdown("<table></table><p>x</p>") == "x"

    def test_nested_table_keeps_outer_rows(self):
        md = html_to_markdown(
            "<table><tr><td>A</td><td><table><tbody><tr><td>x</td></tr></tbody></table></td></tr>"
            "<tr><td>B</td><td>C</td></tr></table>",
        )
        lines = md.split("\n")
        assert len(lines) == 3
        assert lines[0].startswith("| A | ")
        assert "x" in lines[0]
        assert lines[1] == "| --- | --- |"
        assert lines[2] == "| B | C |"

    def test_nested_thead_not_hoisted(self):
        md = html_to_markdown(
            "<table><tr><td>Outer</td><td>"
            "<table><thead><tr><th>Inner</th></tr></thead></table></td></tr></table>",
        )
        assert md.split("\n")[0].startswith("| Outer | ")


class TestDefinitionList:
    def test_term_and_definition(self):
        md = html_to_markdown("<dl><dt>Term</dt><dd>Definition</dd></dl>")
        assert md == "**Term**\n: Definition"


class TestSkippedAndHidden:
    def test_skipped_tags_emit_nothing(self):
        md = html_to_markdown(
            "<p>x</p><script>alert(1)</script><style>p{}</style><noscript>n</noscript>"
            "<video>v</video><audio>a</audio><svg><text>s</text></svg>"
            '<iframe src="https://youtube.com/embed/x"></iframe>',
        )
        assert md == "x"

    def test_hidden_elements_skipped(self):
        md = html_to_markdown(
            "<p>shown</p><div hidden><p>no</p></div>"
            '<p aria-hidden="true">no2</p><p style="display: none">no3</p>'
            '<span style="visibility:hidden">no4</span>',
        )
        assert md == "shown"

    def test_comments_ignored(self):
        assert html_to_markdown("<p>a<!-- note -->b</p>") == "ab"


class TestNormalization:
    def test_blank_runs_collapsed(self):
        md = html_to_markdown("<p>a</p><br><br><br><br><p>b</p>")
        assert "\n\n\n" not in md
        assert md == "a\n\nb"

    def test_no_trailing_whitespace(self):
        md = html_to_markdown("<p>trailing   <br>next</p><div>tail  </div>")
        assert all(line == line.rstrip() for line in md.split("\n"))

    def test_non_breaking_space_before_break_stripped(self):
        md = html_to_markdown("<p>foo&nbsp;<br>bar</p>")
        assert md == "foo\nbar"
        assert all(line == line.rstrip() for line in md.split("\n"))

    def test_normalize_output(self):
        assert normalize_output("\r\na  \r\n\r\n\r\n\r\nb\t\n") == "a\n\nb"

    def test_property_over_mixed_markup(self):
        html = (
            "<div><p>x</p>\n\n\n<br><br><br><section><h2>H</h2>\n\n</section>"
            "<blockquote><p>q</p><p></p><p>r</p></blockquote></div>"
        )
        md = html_to_markdown(html)
        assert not re.search(r"\n{3,}", md)
        assert all(line == line.rstrip() for line in md.split("\n"))
