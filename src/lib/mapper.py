"""
Text space mapper for the block image policy

Builds a display text that has synthetic newlines around every image range
and converts offsets between source space (the text the user edits) and
display space (the text the host lays out).

Offsets inside an inserted newline run have no source counterpart. They
snap to the nearest edge of the image: the run before an image snaps to
its source start, the run after it snaps to its source end. The mapping is
therefore many-to-one there, and a round trip source -> display -> source
is exact everywhere else.
"""

import re
from typing import Callable, List, Optional, Sequence, Tuple

from ..models.spacing import SpacingRegion
from .patterns import IMAGE_EXPRESSION
from .log import LOG


_IMAGE_REGEX = re.compile(IMAGE_EXPRESSION)


class TextSpaceMapper:
    """
    Source/display offset conversion

    State (display text and regions) is recomputed wholesale by each
    displayText_compute() call; nothing is maintained incrementally.
    """

    def __init__(
        self,
        newlines_for: Callable[[int, int], int],
        image_regex: Optional[re.Pattern] = None,
    ) -> None:
        """
        Initialize the mapper

        Args:
            newlines_for: Callable (source_start, source_end) -> newlines to
                          insert on each side of that image
            image_regex: Regex used when no explicit image spans are given
        """
        self.newlines_for = newlines_for
        self.image_regex = image_regex if image_regex is not None else _IMAGE_REGEX
        self.source = ""
        self.display = ""
        self.regions: List[SpacingRegion] = []

    def displayText_compute(
        self, source: str, image_spans: Optional[Sequence[Tuple[int, int]]] = None
    ) -> str:
        """
        Build the display text for a source text

        Copies the source verbatim, inserting newlines immediately before and
        after each image range, and records one SpacingRegion per image in
        source order.

        Args:
            source: Source text
            image_spans: (start, end) image ranges, ascending and
                         non-overlapping; scanned with the image pattern
                         when omitted

        Returns:
            The display text

        Example:
            With 2 newlines per side, "a![x](u)b" becomes "a\\n\\n![x](u)\\n\\nb"
        """
        if image_spans is None:
            image_spans = [(m.start(), m.end()) for m in self.image_regex.finditer(source)]

        parts: List[str] = []
        regions: List[SpacingRegion] = []
        cursor = 0
        shift = 0
        for start, end in image_spans:
            count = max(0, self.newlines_for(start, end))
            regions.append(SpacingRegion(
                source_start=start,
                source_end=end,
                newlines_before=count,
                newlines_after=count,
                shift=shift,
            ))
            parts.append(source[cursor:start])
            parts.append('\n' * count)
            parts.append(source[start:end])
            parts.append('\n' * count)
            cursor = end
            shift += 2 * count
        parts.append(source[cursor:])

        self.source = source
        self.display = ''.join(parts)
        self.regions = regions
        LOG(f"Display text has {len(regions)} spacing region(s), +{shift} newlines", level=2)
        return self.display

    def offset_sourceToDisplay(self, offset: int) -> int:
        """
        Convert a source offset to a display offset

        Adds the newlines of every region that precedes the offset, and the
        leading newlines of a region that contains it.

        Args:
            offset: Source offset, clamped into [0, len(source)]

        Returns:
            Display offset
        """
        offset = min(max(offset, 0), len(self.source))
        shift = 0
        for region in self.regions:
            if region.source_end <= offset:
                shift += region.inserted
            elif region.source_start <= offset:
                shift += region.newlines_before
            else:
                break
        return offset + shift

    def offset_displayToSource(self, offset: int) -> int:
        """
        Convert a display offset to a source offset

        Offsets in a newline run before an image snap to the image's source
        start; offsets in the run after it snap to its source end.

        Args:
            offset: Display offset, clamped into [0, len(display)]

        Returns:
            Source offset, clamped into [0, len(source)]
        """
        offset = min(max(offset, 0), len(self.display))
        shift = 0
        for region in self.regions:
            before_start = region.source_start + shift
            if offset < before_start:
                break
            if offset < region.display_start:
                return region.source_start
            if offset < region.display_end:
                return offset - shift - region.newlines_before
            if offset < region.display_end + region.newlines_after:
                return region.source_end
            shift += region.inserted
        return min(max(offset - shift, 0), len(self.source))

    def offset_isInSpacing(self, offset: int) -> bool:
        """True if a display offset falls inside an inserted newline run"""
        for region in self.regions:
            before_start = region.display_start - region.newlines_before
            if before_start <= offset < region.display_start:
                return True
            if region.display_end <= offset < region.display_end + region.newlines_after:
                return True
        return False
