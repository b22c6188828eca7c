"""
livemark - Live markdown span engine

Renders plain markdown text as a styled span tree for an editable text
control, hiding syntax everywhere except on the focused line.
"""

__version__ = "1.0.0"

from .patterns import PatternTable, heading_style
from .collector import MatchCollector
from .resolver import OverlapResolver
from .focus import FocusTracker
from .builder import SpanBuilder
from .mapper import TextSpaceMapper
from .engine import MarkdownEngine
from .log import LOG, state_connectToLogger

__all__ = [
    "PatternTable",
    "heading_style",
    "MatchCollector",
    "OverlapResolver",
    "FocusTracker",
    "SpanBuilder",
    "TextSpaceMapper",
    "MarkdownEngine",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
