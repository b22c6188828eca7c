"""
Spacing region model for the block image policy
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SpacingRegion:
    """
    Synthetic newlines inserted around one image range

    Recomputed wholesale whenever the text changes.

    Attributes:
        source_start: Image range start in source text
        source_end: Image range end in source text
        newlines_before: Newlines inserted before the image
        newlines_after: Newlines inserted after the image
        shift: Newlines inserted by earlier regions (0 for the first one)

    Example:
        For "![a](u)" with 2 newlines each side:
        SpacingRegion(0, 7, 2, 2) -> display_start 2, display_end 9
    """
    source_start: int
    source_end: int
    newlines_before: int
    newlines_after: int
    shift: int = 0

    @property
    def display_start(self) -> int:
        return self.source_start + self.shift + self.newlines_before

    @property
    def display_end(self) -> int:
        return self.source_end + self.shift + self.newlines_before

    @property
    def inserted(self) -> int:
        return self.newlines_before + self.newlines_after
