"""
Span builder

Walks the source text left to right, anchored on the resolved ranges, and
emits a flat sequence of segments: one plain segment per gap between
ranges, and a category-specific layout per range.

Every emitted segment stands for exactly as many characters as it draws,
so the concatenated source text of the segments reconstructs the source
text (or, with the block image policy, the display text) and cursor
offsets never drift.
"""

import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from ..config import AppSettings, appsettings
from ..models.patterns import PatternCategory, ResolvedRange
from ..models.segments import (
    Activation,
    EmbedDescriptor,
    ImagePolicy,
    Segment,
    StyleAttributes,
    Visibility,
)
from ..models.spacing import SpacingRegion
from .patterns import ACCENT, BOLD, BREAK_COLOR, IMAGE_URL_COLOR, LINK_URL_COLOR
from .log import LOG


_ORDERED_MARKER = re.compile(r'^\d+\.$')

FocusRange = Optional[Tuple[int, int]]
Handler = Callable[[str], None]


class SpanBuilder:
    """
    Builds segments from resolved ranges

    Holds configuration only; every spans_build() call is independent.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        image_policy: Optional[ImagePolicy] = None,
        on_link_activate: Optional[Handler] = None,
        on_image_activate: Optional[Handler] = None,
    ) -> None:
        """
        Initialize the builder

        Args:
            settings: AppSettings (defaults to the appsettings singleton)
            image_policy: Image policy; defaults to settings.image_policy
            on_link_activate: Handler for link activations, receives the url
            on_image_activate: Handler for image activations, receives the url
        """
        self.settings = settings if settings is not None else appsettings
        self.image_policy = ImagePolicy(image_policy or self.settings.image_policy)
        self.on_link_activate = on_link_activate
        self.on_image_activate = on_image_activate

        self.handlers: Dict[PatternCategory, Callable[..., List[Segment]]] = {
            PatternCategory.HEADER: self.header_build,
            PatternCategory.LIST: self.list_build,
            PatternCategory.INLINE_EMPHASIS: self.delimited_build,
            PatternCategory.CODE: self.delimited_build,
            PatternCategory.THEMATIC_BREAK: self.thematicBreak_build,
            PatternCategory.LINK: self.link_build,
            PatternCategory.IMAGE: self.image_build,
        }

    def spans_build(
        self,
        text: str,
        ranges: Sequence[ResolvedRange],
        focus_range: FocusRange = None,
        base_style: Optional[StyleAttributes] = None,
        regions: Sequence[SpacingRegion] = (),
    ) -> Tuple[List[Segment], List[Activation]]:
        """
        Build the segment sequence for a text

        Args:
            text: Source text
            ranges: Resolved ranges, ascending and non-overlapping
            focus_range: [start, end) of the focused line, or None when no
                         line is focused
            base_style: Style inherited from the host
            regions: Spacing regions (block image policy) whose newlines
                     are emitted around the image range starting at
                     region.source_start

        Returns:
            (segments, activations) where activations are the callbacks
            attached to the segments, in segment order

        Example:
            For "This is **bold** text" with no focus:
            "This is " | "**" | "bold" | "**" | " text"
        """
        base = base_style if base_style is not None else StyleAttributes()
        spacing = {region.source_start: region for region in regions}

        segments: List[Segment] = []
        cursor = 0
        for rng in ranges:
            if rng.start > cursor:
                segments.append(Segment(text=text[cursor:rng.start], style=base))

            region = spacing.get(rng.start)
            if region is not None and region.newlines_before:
                segments.append(self.spacing_make(region.newlines_before, base))

            shown = self.syntax_isShown(rng.start, focus_range)
            segments.extend(self.range_build(text, rng, shown, base))
            LOG(
                f"Range {rng.start}..{rng.end} {rng.category.value} "
                f"({'shown' if shown else 'collapsed'})",
                level=3,
            )

            if region is not None and region.newlines_after:
                segments.append(self.spacing_make(region.newlines_after, base))
            cursor = rng.end

        if cursor < len(text):
            segments.append(Segment(text=text[cursor:], style=base))

        activations = [s.activation for s in segments if s.activation is not None]
        return segments, activations

    def syntax_isShown(self, start: int, focus_range: FocusRange) -> bool:
        """
        Decide whether syntax of a match starting at `start` is drawn

        Shown when the match starts on the focused line, or when no line is
        focused and the settings keep syntax visible without focus.
        """
        if focus_range is None:
            return self.settings.syntax_visible_without_focus
        return focus_range[0] <= start < focus_range[1]

    def range_build(
        self, text: str, rng: ResolvedRange, shown: bool, base: StyleAttributes
    ) -> List[Segment]:
        """Dispatch a resolved range to its category handler"""
        pattern_style = rng.pattern.style_fn(rng.groups) if rng.pattern else None
        combined = base.merge(pattern_style)
        matched = text[rng.start:rng.end]

        if rng.pattern is not None and not rng.pattern.groups_valid(rng.groups, matched):
            return self.fallback_build(rng, matched, combined)

        handler = self.handlers[rng.category]
        return handler(rng, matched, shown, combined, base)

    def fallback_build(
        self, rng: ResolvedRange, matched: str, combined: StyleAttributes
    ) -> List[Segment]:
        """Emit the whole match as one visible segment with the pattern style"""
        logger.warning(
            f"Pattern '{rng.pattern.name}' produced {len(rng.groups)} group(s) "
            f"not fitting the {rng.category.value} layout; rendering {rng.start}..{rng.end} as text"
        )
        return [Segment(text=matched, style=combined, category=rng.category)]

    def spacing_make(self, count: int, base: StyleAttributes) -> Segment:
        return Segment(text='\n' * count, style=base, synthetic=True)

    def marker_make(
        self, text: str, shown: bool, style: StyleAttributes, category: PatternCategory
    ) -> Segment:
        """Syntax marker: drawn when shown, collapsed otherwise"""
        visibility = Visibility.VISIBLE if shown else Visibility.COLLAPSED
        return Segment(text=text, style=style, visibility=visibility, category=category)

    # Category handlers

    def header_build(self, rng, matched, shown, combined, base) -> List[Segment]:
        """Header: syntax prefix, then heading text styled per level"""
        prefix, content = rng.groups
        return [
            self.marker_make(prefix, shown, combined, rng.category),
            Segment(text=content, style=combined, category=rng.category),
        ]

    def list_build(self, rng, matched, shown, combined, base) -> List[Segment]:
        """
        List item: indentation, then the marker and its trailing space

        Unfocused unordered markers are drawn as the bullet glyph in bold;
        ordered markers keep their digits.
        """
        indent, marker, space = rng.groups
        segments = [Segment(text=indent, style=base, category=rng.category)]

        if shown:
            segments.append(Segment(
                text=marker + space,
                style=combined.copy_with(color=ACCENT),
                category=rng.category,
            ))
        else:
            replacement = marker if _ORDERED_MARKER.match(marker) else self.settings.bullet_glyph
            segments.append(Segment(
                text=replacement + space,
                style=combined.copy_with(font_weight=BOLD),
                source=None if replacement == marker else marker + space,
                category=rng.category,
            ))
        return segments

    def delimited_build(self, rng, matched, shown, combined, base) -> List[Segment]:
        """Emphasis, strikethrough and code: delimiters around styled content"""
        opening, content, closing = rng.groups
        return [
            self.marker_make(opening, shown, combined, rng.category),
            Segment(text=content, style=combined, category=rng.category),
            self.marker_make(closing, shown, combined, rng.category),
        ]

    def thematicBreak_build(self, rng, matched, shown, combined, base) -> List[Segment]:
        """
        Thematic break: literal text when shown, otherwise a rule glyph run
        of the same length. Never an embed, so line flow is untouched.
        """
        if shown:
            return [Segment(
                text=matched,
                style=combined.copy_with(color=BREAK_COLOR),
                category=rng.category,
            )]
        return [Segment(
            text=self.settings.rule_glyph * len(matched),
            style=combined.copy_with(color=BREAK_COLOR, letter_spacing=0),
            source=matched,
            category=rng.category,
        )]

    def link_build(self, rng, matched, shown, combined, base) -> List[Segment]:
        """Link: the label is always drawn and carries the activation"""
        opening, label, middle, url, closing = rng.groups
        activation = Activation(kind="link", target=url, handler=self.on_link_activate)
        category = rng.category

        url_style = combined.copy_with(color=LINK_URL_COLOR) if shown else combined
        return [
            self.marker_make(opening, shown, combined, category),
            Segment(text=label, style=combined, activation=activation, category=category),
            self.marker_make(middle, shown, combined, category),
            self.marker_make(url, shown, url_style, category),
            self.marker_make(closing, shown, combined, category),
        ]

    def image_build(self, rng, matched, shown, combined, base) -> List[Segment]:
        """
        Image: literal markdown when shown, otherwise an embed

        Inline policy: an empty collapsed lead opens the range, then the
        embed takes the slot of the leading "!" and the rest of the markdown
        collapses, so the embed is the second segment of the range. Block policy: the markdown collapses
        and the embed takes the slot of the closing ")".
        """
        bang_bracket, alt, middle, url, closing = rng.groups
        category = rng.category

        if shown:
            return [
                Segment(text=bang_bracket, style=combined, category=category),
                Segment(text=alt, style=combined, category=category),
                Segment(text=middle, style=combined, category=category),
                Segment(text=url, style=combined.copy_with(color=IMAGE_URL_COLOR), category=category),
                Segment(text=closing, style=combined, category=category),
            ]

        activation = Activation(kind="image", target=url, handler=self.on_image_activate)
        hidden = [
            self.marker_make(part, False, combined, category)
            for part in (bang_bracket[1:], alt, middle, url)
        ]

        if self.image_policy is ImagePolicy.BLOCK:
            embed = EmbedDescriptor(
                kind="image",
                target=url,
                alt=alt,
                height=self.settings.block_image_height,
                width=self.settings.block_image_width,
                policy=ImagePolicy.BLOCK,
            )
            return [
                self.marker_make(bang_bracket[:1], False, combined, category),
                *hidden,
                Segment(
                    text=self.settings.embed_glyph,
                    style=combined,
                    source=closing,
                    embed=embed,
                    activation=activation,
                    category=category,
                ),
            ]

        embed = EmbedDescriptor(
            kind="image",
            target=url,
            alt=alt,
            height=self.settings.inlineImageHeight_compute(base.font_size),
            width=None,
            policy=ImagePolicy.INLINE,
        )
        return [
            self.marker_make("", False, combined, category),
            Segment(
                text=self.settings.embed_glyph,
                style=combined,
                source=bang_bracket[:1],
                embed=embed,
                activation=activation,
                category=category,
            ),
            *hidden,
            self.marker_make(closing, False, combined, category),
        ]
