"""
livemark - Live markdown span engine

Renders plain markdown text as a styled span tree for an editable text
control, hiding syntax everywhere except on the focused line.
"""

__version__ = "1.0.0"

from .lib import MarkdownEngine, PatternTable, TextSpaceMapper, LOG, state_connectToLogger
from .models import RenderResult, SpanTree, Segment, StyleAttributes, ImagePolicy, Visibility

__all__ = [
    "MarkdownEngine",
    "PatternTable",
    "TextSpaceMapper",
    "RenderResult",
    "SpanTree",
    "Segment",
    "StyleAttributes",
    "ImagePolicy",
    "Visibility",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
