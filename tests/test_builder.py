"""
Span builder tests

Tests the per-category segment layouts, focus-dependent visibility, and
the malformed-pattern fallback.
"""

import pytest

from livemark.config import AppSettings
from livemark.lib.builder import SpanBuilder
from livemark.lib.collector import MatchCollector
from livemark.lib.focus import FocusTracker
from livemark.lib.patterns import PatternTable, ACCENT, BREAK_COLOR
from livemark.lib.resolver import OverlapResolver
from livemark.models import (
    ImagePolicy,
    Pattern,
    PatternCategory,
    StyleAttributes,
    Visibility,
)


VISIBLE = Visibility.VISIBLE
COLLAPSED = Visibility.COLLAPSED


def build(text, focused_line=None, table=None, settings=None, base_style=None, **kwargs):
    """Run collect -> resolve -> build for a text"""
    ranges = OverlapResolver().ranges_resolve(MatchCollector(table).matches_collect(text))
    focus_range = None
    if focused_line is not None:
        focus_range = FocusTracker.lineRange_get(text, focused_line)
    builder = SpanBuilder(settings=settings or AppSettings(), **kwargs)
    segments, activations = builder.spans_build(text, ranges, focus_range, base_style)
    return segments, activations


def layout(segments):
    return [(s.text, s.visibility) for s in segments]


class TestPlainText:
    """Test gaps between ranges"""

    def test_empty(self):
        """Empty text builds no segments"""
        assert build("") == ([], [])

    def test_plain_only(self):
        """Text without syntax is one plain segment with the base style"""
        base = StyleAttributes(font_size=12)
        segments, _ = build("just words", base_style=base)
        assert layout(segments) == [("just words", VISIBLE)]
        assert segments[0].style == base
        assert segments[0].category is None

    def test_bold_in_sentence(self):
        """Gap, three bold segments, gap"""
        segments, _ = build("This is **bold** text")
        assert [s.text for s in segments] == ["This is ", "**", "bold", "**", " text"]
        assert segments[2].style.font_weight == 700
        assert segments[0].style.font_weight is None


class TestFocusToggling:
    """Test marker visibility against the focused line"""

    TEXT = "# Header\n\n**Bold**"

    def test_focus_on_header(self):
        """Header prefix visible, bold delimiters collapsed"""
        segments, _ = build(self.TEXT, focused_line=0)
        assert layout(segments) == [
            ("# ", VISIBLE),
            ("Header", VISIBLE),
            ("\n\n", VISIBLE),
            ("**", COLLAPSED),
            ("Bold", VISIBLE),
            ("**", COLLAPSED),
        ]

    def test_focus_on_bold(self):
        """Header prefix collapsed, bold delimiters visible"""
        segments, _ = build(self.TEXT, focused_line=2)
        assert layout(segments) == [
            ("# ", COLLAPSED),
            ("Header", VISIBLE),
            ("\n\n", VISIBLE),
            ("**", VISIBLE),
            ("Bold", VISIBLE),
            ("**", VISIBLE),
        ]

    def test_no_focus_shows_syntax_by_default(self):
        """No focused line: syntax stays visible"""
        segments, _ = build(self.TEXT)
        assert all(s.visibility is VISIBLE for s in segments)

    def test_no_focus_collapsed_when_configured(self):
        """No focused line with syntax_visible_without_focus off: all collapsed"""
        settings = AppSettings(syntax_visible_without_focus=False)
        segments, _ = build(self.TEXT, settings=settings)
        collapsed = [s.text for s in segments if s.visibility is COLLAPSED]
        assert collapsed == ["# ", "**", "**"]
        assert "".join(s.text for s in segments) == self.TEXT

    def test_focus_past_end(self):
        """A focused line beyond the text collapses everything"""
        segments, _ = build(self.TEXT, focused_line=7)
        collapsed = [s.text for s in segments if s.visibility is COLLAPSED]
        assert collapsed == ["# ", "**", "**"]


class TestHeader:
    """Test header layout"""

    def test_two_segments(self):
        """Prefix and heading text, both styled per level"""
        segments, _ = build("## Sub", focused_line=1)
        assert layout(segments) == [("## ", COLLAPSED), ("Sub", VISIBLE)]
        assert segments[1].style.font_size == 24.0
        assert segments[1].category is PatternCategory.HEADER

    def test_base_style_merged(self):
        """Pattern style overrides the base, other base attributes survive"""
        base = StyleAttributes(font_size=10, font_family="serif")
        segments, _ = build("# Top", base_style=base)
        assert segments[1].style.font_size == 28.0
        assert segments[1].style.font_family == "serif"

    def test_crlf_heading_text(self):
        """A CRLF line ending stays out of the styled heading text"""
        text = "# Head\r\nx"
        segments, _ = build(text, focused_line=1)
        assert [s.text for s in segments] == ["# ", "Head", "\r\nx"]
        assert segments[2].category is None


class TestList:
    """Test list marker layout"""

    def test_unordered_focused(self):
        """Focused: literal marker in the accent color"""
        segments, _ = build("- item", focused_line=0)
        assert [s.text for s in segments] == ["", "- ", "item"]
        assert segments[1].style.color == ACCENT

    def test_unordered_unfocused(self):
        """Unfocused: bullet glyph in bold, standing for the marker"""
        segments, _ = build("  + nested", focused_line=5)
        assert [s.text for s in segments] == ["  ", "• ", "nested"]
        assert segments[1].style.font_weight == 700
        assert segments[1].source_text == "+ "
        assert segments[1].visibility is VISIBLE

    def test_indent_uses_base_style(self):
        """Indentation keeps the default style"""
        base = StyleAttributes(color="#000000")
        segments, _ = build("  - x", base_style=base)
        assert segments[0].style == base

    def test_ordered_keeps_digits(self):
        """Ordered markers keep their digits and dot"""
        segments, _ = build("12. twelve", focused_line=5)
        assert [s.text for s in segments] == ["", "12. ", "twelve"]
        assert segments[1].source is None
        assert segments[1].style.font_weight == 700

    def test_custom_bullet(self):
        """Bullet glyph comes from settings"""
        segments, _ = build("* x", focused_line=5, settings=AppSettings(bullet_glyph="◦"))
        assert segments[1].text == "◦ "


class TestDelimited:
    """Test emphasis, strikethrough and code layouts"""

    @pytest.mark.parametrize("text,content,attribute,value", [
        ("*it*", "it", "font_style", "italic"),
        ("_it_", "it", "font_style", "italic"),
        ("__b__", "b", "font_weight", 700),
        ("~~s~~", "s", "decoration", "line-through"),
        ("`c`", "c", "font_family", "monospace"),
    ])
    def test_content_styled(self, text, content, attribute, value):
        """Content is always visible and carries the category style"""
        segments, _ = build(text, focused_line=3)
        assert [s.visibility for s in segments] == [COLLAPSED, VISIBLE, COLLAPSED]
        assert segments[1].text == content
        assert getattr(segments[1].style, attribute) == value

    def test_fenced_block(self):
        """Fenced code keeps newlines in its content"""
        segments, _ = build("```\nx = 1\n```", focused_line=0)
        assert [s.text for s in segments] == ["```", "\nx = 1\n", "```"]
        assert segments[0].visibility is VISIBLE

    def test_fenced_block_focus_by_start(self):
        """A multi-line range is focused only through its first line"""
        segments, _ = build("```\nx = 1\n```", focused_line=1)
        assert segments[0].visibility is COLLAPSED


class TestThematicBreak:
    """Test thematic break layout"""

    def test_focused_literal(self):
        """Focused: literal text in break style"""
        segments, _ = build("---", focused_line=0)
        assert layout(segments) == [("---", VISIBLE)]
        assert segments[0].style.color == BREAK_COLOR

    def test_unfocused_rule(self):
        """Unfocused: rule glyph repeated to the same length, no embed"""
        segments, _ = build(" - - - ", focused_line=3)
        assert len(segments) == 1
        assert segments[0].text == "─" * 7
        assert segments[0].source_text == " - - - "
        assert segments[0].embed is None
        assert segments[0].style.letter_spacing == 0

    def test_line_flow_preserved(self):
        """Newline count around a rule is untouched"""
        text = "a\n***\nb"
        segments, _ = build(text, focused_line=0)
        drawn = "".join(s.text for s in segments)
        assert drawn == "a\n───\nb"
        assert drawn.count("\n") == text.count("\n")


class TestLink:
    """Test link layout"""

    def test_unfocused(self):
        """Label visible with activation, the rest collapsed"""
        segments, activations = build("See [docs](http://x) now", focused_line=4)
        assert layout(segments) == [
            ("See ", VISIBLE),
            ("[", COLLAPSED),
            ("docs", VISIBLE),
            ("](", COLLAPSED),
            ("http://x", COLLAPSED),
            (")", COLLAPSED),
            (" now", VISIBLE),
        ]
        assert segments[2].activation is activations[0]
        assert activations[0].kind == "link"
        assert activations[0].target == "http://x"

    def test_focused(self):
        """Focused: all five parts visible, label still activatable"""
        segments, activations = build("[docs](http://x)", focused_line=0)
        assert all(s.visibility is VISIBLE for s in segments)
        assert segments[1].activation is not None
        assert len(activations) == 1

    def test_handler_called(self):
        """Activation passes the url to the handler"""
        seen = []
        _, activations = build("[a](u)", on_link_activate=seen.append)
        assert activations[0].activate() is True
        assert seen == ["u"]

    def test_activations_in_segment_order(self):
        """One activation per link label, in text order"""
        segments, activations = build("[a](u) and [b](v)", focused_line=3)
        assert [a.target for a in activations] == ["u", "v"]
        assert activations == [s.activation for s in segments if s.activation is not None]


class TestImageInline:
    """Test the inline image placeholder policy"""

    def test_embed_replaces_bang(self):
        """Empty collapsed lead, then the embed in the '!' slot; the rest collapses"""
        text = "![alt](http://img.com)"
        segments, activations = build(text, focused_line=5)
        assert len(segments) >= 3
        assert (segments[0].text, segments[0].visibility) == ("", COLLAPSED)
        embed = segments[1]
        assert embed.is_embed
        assert embed.source_text == "!"
        assert len(embed.text) == 1
        assert [s.text for s in segments[2:]] == ["[", "alt", "](", "http://img.com", ")"]
        assert all(s.visibility is COLLAPSED for s in segments[2:])
        assert "".join(s.source_text for s in segments) == text
        assert activations == [embed.activation]

    def test_embed_after_text(self):
        """Leading text comes before the image's lead and embed"""
        segments, _ = build("See ![alt](http://img.com)", focused_line=5)
        assert segments[0].text == "See "
        assert segments[1].text == ""
        assert segments[2].is_embed

    def test_embed_height(self):
        """Height is five line heights of the base font"""
        segments, _ = build("![a](u)", focused_line=5, base_style=StyleAttributes(font_size=10))
        embed = segments[1].embed
        assert embed.height == pytest.approx(70.0)
        assert embed.width is None
        assert embed.policy is ImagePolicy.INLINE
        assert embed.alignment == "middle"
        assert (embed.target, embed.alt) == ("u", "a")

    def test_default_font_height(self):
        """Without a base font size the default (16) is used"""
        segments, _ = build("![a](u)", focused_line=5)
        assert segments[1].embed.height == pytest.approx(16 * 1.4 * 5)

    def test_focused_literal(self):
        """Focused: full literal markdown, no embed"""
        segments, _ = build("![alt](u)", focused_line=0)
        assert [s.text for s in segments] == ["![", "alt", "](", "u", ")"]
        assert not any(s.is_embed for s in segments)


class TestImageBlock:
    """Test the block image placeholder policy"""

    def test_markdown_collapses_then_embed(self):
        """Markdown collapses; the embed takes the ')' slot"""
        segments, _ = build("![alt](u)", focused_line=5, image_policy=ImagePolicy.BLOCK)
        assert [s.text for s in segments[:5]] == ["!", "[", "alt", "](", "u"]
        assert all(s.visibility is COLLAPSED for s in segments[:5])
        embed = segments[5]
        assert embed.is_embed
        assert embed.source_text == ")"
        assert embed.embed.policy is ImagePolicy.BLOCK
        assert (embed.embed.height, embed.embed.width) == (200.0, 300.0)


class TestFallback:
    """Test the malformed pattern fallback"""

    def table_with(self, expression, category=PatternCategory.INLINE_EMPHASIS):
        table = PatternTable(defaults=False)
        table.register(Pattern(
            name="broken",
            expression=expression,
            style_fn=lambda groups: StyleAttributes(color="#FF0000"),
            category=category,
        ))
        return table

    def test_wrong_group_count(self):
        """Too few groups: whole match as one visible segment"""
        segments, _ = build("a ==hi== b", table=self.table_with(r'(==)(.+?)=='), focused_line=3)
        assert layout(segments) == [("a ", VISIBLE), ("==hi==", VISIBLE), (" b", VISIBLE)]
        assert segments[1].style.color == "#FF0000"

    def test_groups_not_tiling(self):
        """Groups that skip characters fall back instead of dropping text"""
        segments, _ = build("<ab>>", table=self.table_with(r'(<)(\w+)>(>)'), focused_line=3)
        assert [s.text for s in segments] == ["<ab>>"]

    def test_link_with_missing_groups(self):
        """Link layout needs five groups"""
        table = self.table_with(r'\[(\w+)\]', category=PatternCategory.LINK)
        segments, activations = build("[x]", table=table)
        assert [s.text for s in segments] == ["[x]"]
        assert activations == []
