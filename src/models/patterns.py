"""
Pattern specification and match models

Defines the categories of markdown syntax the engine recognizes, the
immutable Pattern record used by the PatternTable, and the match records
that flow from the MatchCollector through the OverlapResolver.
"""

import re
from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .segments import StyleAttributes


class LivemarkError(Exception):
    """Base class for errors raised by livemark"""
    pass


class PatternError(LivemarkError):
    """Raised when a pattern definition cannot be compiled"""
    pass


class PatternCategory(Enum):
    """
    Categories of markdown syntax

    The category decides how the SpanBuilder splits a match into segments.
    """
    HEADER = "header"                      # # Title
    LIST = "list"                          # * item, 1. item
    INLINE_EMPHASIS = "inline-emphasis"    # **bold**, *italic*, ~~strike~~
    CODE = "code"                          # `code`, ```block```
    IMAGE = "image"                        # ![alt](url)
    LINK = "link"                          # [text](url)
    THEMATIC_BREAK = "thematic-break"      # ---


# Capture groups each category's segment layout consumes. None accepts any.
EXPECTED_GROUPS = {
    PatternCategory.HEADER: 2,
    PatternCategory.LIST: 3,
    PatternCategory.INLINE_EMPHASIS: 3,
    PatternCategory.CODE: 3,
    PatternCategory.IMAGE: 5,
    PatternCategory.LINK: 5,
    PatternCategory.THEMATIC_BREAK: None,
}


@dataclass(frozen=True)
class Pattern:
    """
    Specification for one markdown matcher

    Attributes:
        name: Identifier used in logs (e.g., "bold-asterisk")
        expression: Regular expression source
        style_fn: Callable mapping the captured groups to StyleAttributes
        category: PatternCategory deciding the segment layout
        priority: Tie-break weight for equal ranges (higher wins)
        flags: re module flags used when compiling the expression

    Example:
        Pattern(
            name="strikethrough",
            expression=r'(~~)(.+?)(~~)',
            style_fn=lambda groups: StyleAttributes(decoration="line-through"),
            category=PatternCategory.INLINE_EMPHASIS,
        )
    """
    name: str
    expression: str
    style_fn: Callable[[Tuple[str, ...]], 'StyleAttributes']
    category: PatternCategory
    priority: int = 0
    flags: int = 0
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.category, PatternCategory):
            raise TypeError(f"Pattern '{self.name}' has invalid category {self.category!r}")
        try:
            compiled = re.compile(self.expression, self.flags)
        except re.error as e:
            raise PatternError(f"Pattern '{self.name}' failed to compile: {e}") from e
        object.__setattr__(self, 'regex', compiled)

    def groups_valid(self, groups: Tuple[str, ...], text: str) -> bool:
        """
        Check that captured groups fit this pattern's category layout

        The groups must have the count the category expects and, where a
        count is expected, concatenate back to the full matched text.

        Args:
            groups: Captured substrings (non-participating groups as "")
            text: The full matched text

        Returns:
            True if the SpanBuilder can split the match by its groups
        """
        expected = EXPECTED_GROUPS[self.category]
        if expected is None:
            return True
        if len(groups) != expected:
            return False
        return ''.join(groups) == text


@dataclass(frozen=True)
class RawMatch:
    """
    One occurrence of one pattern in the source text

    Produced by MatchCollector.matches_collect(). Many RawMatches may overlap
    across different patterns; the OverlapResolver decides which survive.

    Attributes:
        start: Inclusive start offset in the source text
        end: Exclusive end offset in the source text
        groups: Captured substrings in group order
        category: Category copied from the pattern
        priority: Priority copied from the pattern
        pattern: The Pattern that produced this match

    Example:
        For "a **b**" and the bold pattern:
        RawMatch(start=2, end=7, groups=("**", "b", "**"), ...)
    """
    start: int
    end: int
    groups: Tuple[str, ...]
    category: PatternCategory
    priority: int = 0
    pattern: Optional[Pattern] = field(default=None, compare=False, repr=False)

    @property
    def length(self) -> int:
        return self.end - self.start


# A RawMatch that survived overlap resolution
ResolvedRange = RawMatch
