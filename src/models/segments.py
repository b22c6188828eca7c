"""
Segment and span tree models

Type-safe structures for the engine's output: styled text segments, embed
placeholders, activation callbacks, and the span tree that bundles them.
"""

from enum import Enum
from dataclasses import dataclass, field, fields, replace
from typing import Callable, Iterator, List, Optional, TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from .patterns import PatternCategory, ResolvedRange


class Visibility(Enum):
    """Whether a segment is drawn or collapsed to zero size by the host"""
    VISIBLE = "visible"
    COLLAPSED = "collapsed"


class ImagePolicy(Enum):
    """
    How image references are turned into embeds

    INLINE: embed replaces the leading "!" and sits in the text line
    BLOCK: embed follows the collapsed markdown on dedicated lines, with
           synthetic newlines from the TextSpaceMapper around it
    """
    INLINE = "inline"
    BLOCK = "block"


@dataclass(frozen=True)
class StyleAttributes:
    """
    Immutable style record

    Every attribute is optional; None means "inherit". Collapsing syntax is
    never expressed here, see Visibility.
    """
    font_size: Optional[float] = None
    font_weight: Optional[int] = None
    font_style: Optional[str] = None
    font_family: Optional[str] = None
    color: Optional[str] = None
    background_color: Optional[str] = None
    decoration: Optional[str] = None
    letter_spacing: Optional[float] = None

    def merge(self, other: Optional['StyleAttributes']) -> 'StyleAttributes':
        """
        Overlay another style on this one

        Args:
            other: Style whose non-None attributes win

        Returns:
            New StyleAttributes with the combined attributes

        Example:
            >>> StyleAttributes(font_size=10).merge(StyleAttributes(color="#000"))
            StyleAttributes(font_size=10, ..., color='#000', ...)
        """
        if other is None:
            return self
        changes = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name) is not None
        }
        return replace(self, **changes)

    def copy_with(self, **changes) -> 'StyleAttributes':
        """Return a copy with the given attributes replaced"""
        return replace(self, **changes)


@dataclass(frozen=True)
class EmbedDescriptor:
    """
    Non-text placeholder the host realizes (e.g., an image widget)

    Attributes:
        kind: Embed kind, currently always "image"
        target: Raw URL of the embedded resource
        alt: Alternative text (shown by hosts when loading fails)
        height: Fixed height in logical pixels
        width: Fixed width, or None to keep the resource's aspect ratio
        policy: ImagePolicy that produced the embed
        alignment: Vertical alignment within the line
        padding: Horizontal padding on each side
    """
    kind: str
    target: str
    alt: str
    height: float
    width: Optional[float] = None
    policy: ImagePolicy = ImagePolicy.INLINE
    alignment: str = "middle"
    padding: float = 4.0


@dataclass(eq=False)
class Activation:
    """
    Opaque activation callback owned by one render generation

    Attached to link labels and image embeds. Hit-testing is the host's
    job; the host only calls activate(). Once released (the next render
    started, or the engine was disposed) the handler is never invoked.

    Attributes:
        kind: "link" or "image"
        target: Raw URL/target string
        handler: Callable receiving the target, or None
        released: True once the owning generation was released
    """
    kind: str
    target: str
    handler: Optional[Callable[[str], None]] = None
    released: bool = False

    def activate(self) -> bool:
        """
        Invoke the handler with the target

        Returns:
            True if the handler ran, False if released or no handler
        """
        if self.released:
            logger.warning(f"Ignoring activation of released {self.kind} '{self.target}'")
            return False
        if self.handler is None:
            return False
        self.handler(self.target)
        return True

    def release(self) -> None:
        """Drop the handler so stale content can no longer trigger it"""
        self.released = True
        self.handler = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Activation):
            return NotImplemented
        return self.kind == other.kind and self.target == other.target

    def __hash__(self) -> int:
        return hash((self.kind, self.target))


@dataclass(frozen=True)
class Segment:
    """
    One styled, contiguous unit of engine output

    Attributes:
        text: What the renderer draws
        style: Style of the drawn text
        visibility: VISIBLE, or COLLAPSED for hidden syntax
        source: Source characters this segment stands for when they differ
                from text (bullet and rule glyphs, embed placeholders);
                always the same length as text
        embed: Embed descriptor for placeholder segments
        activation: Activation callback for link labels and image embeds
        category: Category of the range that produced the segment, or None
                  for plain gaps
        synthetic: True for spacing newlines that exist only in display text

    Example:
        A collapsed bold delimiter:
        Segment(text="**", style=..., visibility=Visibility.COLLAPSED,
                category=PatternCategory.INLINE_EMPHASIS)
    """
    text: str
    style: StyleAttributes
    visibility: Visibility = Visibility.VISIBLE
    source: Optional[str] = None
    embed: Optional[EmbedDescriptor] = None
    activation: Optional[Activation] = None
    category: Optional['PatternCategory'] = None
    synthetic: bool = False

    @property
    def source_text(self) -> str:
        return self.text if self.source is None else self.source

    @property
    def is_embed(self) -> bool:
        return self.embed is not None

    @property
    def is_collapsed(self) -> bool:
        return self.visibility is Visibility.COLLAPSED


@dataclass(frozen=True)
class SpanTree:
    """
    Ordered segment sequence under a root style

    Published as one immutable value per render call.
    """
    style: StyleAttributes
    children: tuple = ()

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    def __getitem__(self, index: int) -> Segment:
        return self.children[index]

    def text_reconstruct(self) -> str:
        """
        Join the source characters of every segment

        Equals the source text under the inline image policy and the
        display text under the block policy.
        """
        return ''.join(segment.source_text for segment in self.children)

    def plainText_get(self) -> str:
        """Join the drawn text of every segment, collapsed ones included"""
        return ''.join(segment.text for segment in self.children)

    def visibleText_get(self) -> str:
        """Join the drawn text of visible segments only"""
        return ''.join(
            segment.text for segment in self.children if not segment.is_collapsed
        )

    def embeds_get(self) -> List[Segment]:
        return [segment for segment in self.children if segment.is_embed]


@dataclass
class RenderResult:
    """
    Result of MarkdownEngine.render()

    Attributes:
        tree: The span tree to hand to the host text control
        activations: Callbacks owned by this render generation
        ranges: Resolved ranges the tree was built from
        display_text: Text the tree reconstructs (source text unless the
                      block image policy inserted spacing)
    """
    tree: SpanTree
    activations: List[Activation] = field(default_factory=list)
    ranges: List['ResolvedRange'] = field(default_factory=list)
    display_text: str = ""

    def __iter__(self):
        # Unpacks as (tree, activations)
        return iter((self.tree, self.activations))
