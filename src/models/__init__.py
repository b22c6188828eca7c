"""
Models package for livemark

Contains data structures and type definitions for the render pipeline.
"""

from .state import RenderState, pipeline
from .patterns import (
    LivemarkError,
    PatternError,
    PatternCategory,
    Pattern,
    RawMatch,
    ResolvedRange,
    EXPECTED_GROUPS,
)
from .segments import (
    Visibility,
    ImagePolicy,
    StyleAttributes,
    EmbedDescriptor,
    Activation,
    Segment,
    SpanTree,
    RenderResult,
)
from .spacing import SpacingRegion

__all__ = [
    "RenderState",
    "pipeline",
    "LivemarkError",
    "PatternError",
    "PatternCategory",
    "Pattern",
    "RawMatch",
    "ResolvedRange",
    "EXPECTED_GROUPS",
    "Visibility",
    "ImagePolicy",
    "StyleAttributes",
    "EmbedDescriptor",
    "Activation",
    "Segment",
    "SpanTree",
    "RenderResult",
    "SpacingRegion",
]
