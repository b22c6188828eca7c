"""
Pattern table for markdown syntax

Each pattern pairs a regular expression with a style function, a category
and a priority. Table order only decides match generation order; final
precedence between overlapping matches belongs to the OverlapResolver.
"""

import re
from typing import Dict, List, Optional, Tuple

from ..models.patterns import Pattern, PatternCategory
from ..models.segments import StyleAttributes


# Palette
ACCENT = "#448AFF"
LINK_COLOR = "#2196F3"
LINK_URL_COLOR = "#64B5F6"
IMAGE_COLOR = "#009688"
IMAGE_URL_COLOR = "#4DB6AC"
BREAK_COLOR = "#9E9E9E"
CODE_BACKGROUND = "#EEEEEE80"

BOLD = 700
MEDIUM = 500

HEADING_FONT_SIZES = (28.0, 24.0, 20.0, 18.0, 16.0, 14.0)

# Heading styles indexed by level - 1
HEADING_STYLES: Tuple[StyleAttributes, ...] = tuple(
    StyleAttributes(font_weight=BOLD, font_size=size, color=ACCENT)
    for size in HEADING_FONT_SIZES
)


def heading_style(level: int) -> StyleAttributes:
    """
    Style for a heading level

    Args:
        level: Heading level; clamped into 1..6

    Returns:
        Immutable StyleAttributes for the level

    Example:
        >>> heading_style(1).font_size
        28.0
        >>> heading_style(9).font_size
        14.0
    """
    return HEADING_STYLES[min(max(level, 1), 6) - 1]


def _header_style(groups: Tuple[str, ...]) -> StyleAttributes:
    return heading_style(len(groups[0].strip()) if groups else 1)


LIST_STYLE = StyleAttributes(font_weight=MEDIUM)
BOLD_STYLE = StyleAttributes(font_weight=BOLD)
ITALIC_STYLE = StyleAttributes(font_style="italic")
STRIKE_STYLE = StyleAttributes(decoration="line-through")
CODE_STYLE = StyleAttributes(font_family="monospace", background_color=CODE_BACKGROUND)
IMAGE_STYLE = StyleAttributes(color=IMAGE_COLOR)
LINK_STYLE = StyleAttributes(color=LINK_COLOR, decoration="underline")
BREAK_STYLE = StyleAttributes(color=BREAK_COLOR)

IMAGE_EXPRESSION = r'(!\[)([^\]]*?)(\]\()([^\)]+)(\))'

THEMATIC_BREAK_EXPRESSION = r'^ {0,3}((\*[ \t]*){3,}|(-[ \t]*){3,}|(_[ \t]*){3,})$'


class PatternTable:
    """
    Ordered table of markdown patterns

    Registers the built-in patterns on construction. Further patterns can be
    registered by name; registering an existing name replaces the pattern in
    place, keeping its position.
    """

    def __init__(self, defaults: bool = True) -> None:
        """
        Initialize the pattern table

        Args:
            defaults: Register the built-in markdown patterns
        """
        self.specs: Dict[str, Pattern] = {}
        if defaults:
            self.blockPatterns_register()
            self.inlinePatterns_register()
            self.referencePatterns_register()
            self.breakPatterns_register()

    def register(self, pattern: Pattern) -> None:
        """Register a pattern (dict order is generation order)"""
        self.specs[pattern.name] = pattern

    def get(self, name: str) -> Optional[Pattern]:
        return self.specs.get(name)

    def __iter__(self):
        return iter(self.specs.values())

    def __len__(self) -> int:
        return len(self.specs)

    def patterns_listByCategory(self, category: PatternCategory) -> List[Pattern]:
        """Get all patterns in a category, in table order"""
        return [spec for spec in self.specs.values() if spec.category == category]

    def blockPatterns_register(self) -> None:
        """Register line-scoped structural patterns (headers, lists)"""

        self.register(Pattern(
            name="header",
            expression=r'^(#{1,6}[ \t]+)([^\r\n]*)',
            style_fn=_header_style,
            category=PatternCategory.HEADER,
            flags=re.MULTILINE,
        ))

        self.register(Pattern(
            name="list-unordered",
            expression=r'^([ \t]*)([*+-])([ \t]+)',
            style_fn=lambda groups: LIST_STYLE,
            category=PatternCategory.LIST,
            flags=re.MULTILINE,
        ))

        self.register(Pattern(
            name="list-ordered",
            expression=r'^([ \t]*)(\d+\.)([ \t]+)',
            style_fn=lambda groups: LIST_STYLE,
            category=PatternCategory.LIST,
            flags=re.MULTILINE,
        ))

    def inlinePatterns_register(self) -> None:
        """Register emphasis, strikethrough and code patterns"""

        self.register(Pattern(
            name="bold-asterisk",
            expression=r'(\*\*)(.+?)(\*\*)',
            style_fn=lambda groups: BOLD_STYLE,
            category=PatternCategory.INLINE_EMPHASIS,
        ))

        self.register(Pattern(
            name="bold-underscore",
            expression=r'(__)(.+?)(__)',
            style_fn=lambda groups: BOLD_STYLE,
            category=PatternCategory.INLINE_EMPHASIS,
        ))

        self.register(Pattern(
            name="italic-asterisk",
            expression=r'(\*)(.+?)(\*)',
            style_fn=lambda groups: ITALIC_STYLE,
            category=PatternCategory.INLINE_EMPHASIS,
        ))

        self.register(Pattern(
            name="italic-underscore",
            expression=r'(_)(.+?)(_)',
            style_fn=lambda groups: ITALIC_STYLE,
            category=PatternCategory.INLINE_EMPHASIS,
        ))

        self.register(Pattern(
            name="strikethrough",
            expression=r'(~~)(.+?)(~~)',
            style_fn=lambda groups: STRIKE_STYLE,
            category=PatternCategory.INLINE_EMPHASIS,
        ))

        self.register(Pattern(
            name="code-inline",
            expression=r'(`)([^`]+)(`)',
            style_fn=lambda groups: CODE_STYLE,
            category=PatternCategory.CODE,
        ))

        # Spans newlines, non-greedy
        self.register(Pattern(
            name="code-fenced",
            expression=r'(```)([\s\S]*?)(```)',
            style_fn=lambda groups: CODE_STYLE,
            category=PatternCategory.CODE,
        ))

    def referencePatterns_register(self) -> None:
        """Register image and link references (image first)"""

        self.register(Pattern(
            name="image",
            expression=IMAGE_EXPRESSION,
            style_fn=lambda groups: IMAGE_STYLE,
            category=PatternCategory.IMAGE,
        ))

        self.register(Pattern(
            name="link",
            expression=r'(\[)([^\]]+)(\]\()([^\)]+)(\))',
            style_fn=lambda groups: LINK_STYLE,
            category=PatternCategory.LINK,
        ))

    def breakPatterns_register(self) -> None:
        """Register the thematic break"""

        # Priority 1 so it beats an emphasis match over the same run
        self.register(Pattern(
            name="thematic-break",
            expression=THEMATIC_BREAK_EXPRESSION,
            style_fn=lambda groups: BREAK_STYLE,
            category=PatternCategory.THEMATIC_BREAK,
            priority=1,
            flags=re.MULTILINE,
        ))
