"""
Render state model and pipeline helper

Defines RenderState dataclass for the functional render pipeline and the
pipeline() helper for composing transformation stages.
"""

from typing import Any, Optional, Tuple, TypeVar, List, Callable
from dataclasses import dataclass, field

from .segments import StyleAttributes, Segment, Activation
from .spacing import SpacingRegion


RS = TypeVar("RS", bound="RenderState")


@dataclass
class RenderState:
    """
    Central state container for one render (state bus pattern).

    This dataclass carries all render state through the functional pipeline,
    with each stage adding new fields as the render progresses.

    Pipeline stages and their state additions:
        - Initial: source, focusedLine, baseStyle, verbosity
        - focus_locate: focusRange
        - matches_collect: rawMatches
        - ranges_resolve: resolvedRanges
        - display_compute: displayText, spacingRegions
        - spans_build: segments, activations

    Attributes:
        source: Source text being rendered
        focusedLine: Focused line index, or None
        baseStyle: Style inherited from the host
        verbosity: Logging verbosity level (0-3)
        focusRange: [start, end) of the focused line, or None
        rawMatches: Every pattern occurrence (List[RawMatch])
        resolvedRanges: Non-overlapping survivors (List[ResolvedRange])
        displayText: Source text plus any synthetic spacing
        spacingRegions: Spacing inserted around block images
        segments: Built segments
        activations: Activation callbacks attached to the segments
    """

    source: str = field(default="")
    focusedLine: Optional[int] = field(default=None)
    baseStyle: StyleAttributes = field(default_factory=StyleAttributes)
    verbosity: int = field(default=0)

    # Pipeline state
    focusRange: Optional[Tuple[int, int]] = field(default=None)
    rawMatches: List[Any] = field(default_factory=list)
    resolvedRanges: List[Any] = field(default_factory=list)
    displayText: str = field(default="")
    spacingRegions: List[SpacingRegion] = field(default_factory=list)
    segments: List[Segment] = field(default_factory=list)
    activations: List[Activation] = field(default_factory=list)

    def copy(self: RS) -> RS:
        """
        Creates a shallow copy of the RenderState instance.

        Returns:
            A new RenderState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: RenderState, *stages: Callable[[RenderState], RenderState]
) -> RenderState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (RenderState) -> RenderState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting RenderState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final RenderState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            focus_locate,
            matches_collect,
            ranges_resolve,
            display_compute,
            spans_build,
        )

    This is equivalent to:
        spans_build(display_compute(ranges_resolve(matches_collect(focus_locate(initial_state)))))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
