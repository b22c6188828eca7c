"""
Markdown render engine

Renders plain markdown text as a styled span tree while the text itself
stays plain and editable. One render runs the state-bus pipeline

    focus_locate -> matches_collect -> ranges_resolve -> display_compute -> spans_build

to completion and publishes one immutable span tree. The only state kept
between renders is the live generation of activation callbacks, the
focused line, and the text space mapping of the last render.

Example:
    >>> engine = MarkdownEngine(on_link_activate=print)
    >>> result = engine.render("# Title\\n\\nSee [docs](http://x)", focused_line=0)
    >>> result.tree.text_reconstruct()
    '# Title\\n\\nSee [docs](http://x)'
    >>> result.activations[0].activate()
    http://x
    True
"""

from typing import Callable, List, Optional

from ..config import AppSettings, appsettings
from ..models.patterns import PatternCategory
from ..models.segments import (
    Activation,
    ImagePolicy,
    RenderResult,
    SpanTree,
    StyleAttributes,
)
from ..models.state import RenderState, pipeline
from .builder import SpanBuilder
from .collector import MatchCollector
from .focus import FocusTracker
from .log import LOG, state_connectToLogger
from .mapper import TextSpaceMapper
from .patterns import PatternTable
from .resolver import OverlapResolver


class MarkdownEngine:
    """
    Text-to-span annotation engine

    Responsibilities:
    - Render text + focused line to a span tree
    - Own and release the activation callbacks of each render
    - Track the focused line from host cursor offsets
    - Convert offsets between source and display space
    """

    def __init__(
        self,
        table: Optional[PatternTable] = None,
        settings: Optional[AppSettings] = None,
        image_policy: Optional[ImagePolicy] = None,
        on_link_activate: Optional[Callable[[str], None]] = None,
        on_image_activate: Optional[Callable[[str], None]] = None,
        verbosity: Optional[int] = None,
    ) -> None:
        """
        Initialize the engine

        Args:
            table: PatternTable (defaults to the built-in markdown patterns)
            settings: AppSettings (defaults to the appsettings singleton)
            image_policy: ImagePolicy override for this engine
            on_link_activate: Called with the url when a link label is activated
            on_image_activate: Called with the url when an image embed is activated
            verbosity: Log verbosity override (0-3)

        Raises:
            ValueError: If image_policy is not a valid ImagePolicy value
        """
        self.settings = settings if settings is not None else appsettings
        self.table = table if table is not None else PatternTable()
        self.image_policy = ImagePolicy(image_policy or self.settings.image_policy)
        self.verbosity = verbosity if verbosity is not None else self.settings.verbosity

        self.collector = MatchCollector(self.table)
        self.resolver = OverlapResolver()
        self.builder = SpanBuilder(
            settings=self.settings,
            image_policy=self.image_policy,
            on_link_activate=on_link_activate,
            on_image_activate=on_image_activate,
        )
        self.mapper = TextSpaceMapper(self.spacing_newlinesFor)

        self.source = ""
        self.focused_line: Optional[int] = None
        self.activations: List[Activation] = []
        self._font_size: Optional[float] = None

    # Public surface

    def render(
        self,
        source_text: str,
        focused_line: Optional[int] = None,
        base_style: Optional[StyleAttributes] = None,
    ) -> RenderResult:
        """
        Render source text to a span tree

        Releases the previous generation of activation callbacks before
        building the new one. Must be called again whenever the text or the
        focused line changes.

        Args:
            source_text: Text the user edits
            focused_line: Line under the cursor, or None
            base_style: Style inherited from the host control

        Returns:
            RenderResult with the span tree and the activations it owns
        """
        self.activations_release()

        state = RenderState(
            source=source_text,
            focusedLine=focused_line,
            baseStyle=base_style if base_style is not None else StyleAttributes(),
            verbosity=self.verbosity,
        )
        state_connectToLogger(state)

        final = pipeline(
            state,
            self.focus_locate,
            self.matches_collect,
            self.ranges_resolve,
            self.display_compute,
            self.spans_build,
        )

        self.source = source_text
        self.focused_line = focused_line
        self.activations = final.activations

        LOG(
            f"Rendered {len(source_text)} chars into {len(final.segments)} segments "
            f"({len(final.activations)} activation(s))",
            level=1,
        )

        return RenderResult(
            tree=SpanTree(style=final.baseStyle, children=tuple(final.segments)),
            activations=list(final.activations),
            ranges=list(final.resolvedRanges),
            display_text=final.displayText,
        )

    def focusedLine_updateFromOffset(
        self, offset: int, display_space: Optional[bool] = None, text: Optional[str] = None
    ) -> int:
        """
        Recompute the focused line from a host cursor offset

        Args:
            offset: Cursor offset reported by the host
            display_space: Whether the offset is in display space; defaults
                           to True under the block image policy
            text: Source text to measure against (defaults to the last
                  rendered text)

        Returns:
            The new focused line index (also stored on the engine)
        """
        if display_space is None:
            display_space = self.image_policy is ImagePolicy.BLOCK
        if text is None:
            text = self.source

        if display_space:
            offset = self.mapper.offset_displayToSource(offset)

        self.focused_line = FocusTracker.lineIndex_get(text, offset)
        LOG(f"Focused line -> {self.focused_line}", level=2)
        return self.focused_line

    def offset_sourceToDisplay(self, offset: int) -> int:
        """Convert a source offset of the last render to display space"""
        return self.mapper.offset_sourceToDisplay(offset)

    def offset_displayToSource(self, offset: int) -> int:
        """Convert a display offset of the last render to source space"""
        return self.mapper.offset_displayToSource(offset)

    def activations_release(self) -> None:
        """Release the live generation of activation callbacks"""
        if self.activations:
            LOG(f"Releasing {len(self.activations)} activation(s)", level=2)
        for activation in self.activations:
            activation.release()
        self.activations = []

    def dispose(self) -> None:
        """Release everything the engine still owns"""
        self.activations_release()

    def spacing_newlinesFor(self, start: int, end: int) -> int:
        return self.settings.spacingNewlines_compute(self._font_size)

    # Pipeline stages

    def focus_locate(self, inputstate: RenderState) -> RenderState:
        """Resolve the focused line to its [start, end) range"""
        state = inputstate.copy()
        if state.focusedLine is not None:
            state.focusRange = FocusTracker.lineRange_get(state.source, state.focusedLine)
            LOG(f"Focused line {state.focusedLine} spans {state.focusRange}", level=2)
        return state

    def matches_collect(self, inputstate: RenderState) -> RenderState:
        """Run every pattern over the source text"""
        state = inputstate.copy()
        state.rawMatches = self.collector.matches_collect(state.source)
        LOG(f"Collected {len(state.rawMatches)} raw matches", level=2)
        return state

    def ranges_resolve(self, inputstate: RenderState) -> RenderState:
        """Filter raw matches into non-overlapping ranges"""
        state = inputstate.copy()
        state.resolvedRanges = self.resolver.ranges_resolve(state.rawMatches)
        return state

    def display_compute(self, inputstate: RenderState) -> RenderState:
        """
        Compute the display text

        Under the block image policy, spacing newlines surround every
        resolved image range; otherwise display text equals source text.
        """
        state = inputstate.copy()
        if self.image_policy is ImagePolicy.BLOCK:
            self._font_size = state.baseStyle.font_size
            image_spans = [
                (rng.start, rng.end)
                for rng in state.resolvedRanges
                if rng.category is PatternCategory.IMAGE
            ]
            state.displayText = self.mapper.displayText_compute(state.source, image_spans)
        else:
            state.displayText = self.mapper.displayText_compute(state.source, [])
        state.spacingRegions = list(self.mapper.regions)
        return state

    def spans_build(self, inputstate: RenderState) -> RenderState:
        """Build segments and collect their activations"""
        state = inputstate.copy()
        state.segments, state.activations = self.builder.spans_build(
            state.source,
            state.resolvedRanges,
            focus_range=state.focusRange,
            base_style=state.baseStyle,
            regions=state.spacingRegions,
        )
        return state
