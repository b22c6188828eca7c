"""
Render logging

LOG() writes through loguru when the verbosity of the RenderState bound to
the current context reaches the message level. The engine binds its state
once per render; components deeper in the pipeline log without being
handed the state.

Levels:
    1  one summary line per render
    2  stage counts (matches collected, ranges resolved, spacing regions)
    3  per-pattern and per-range traces
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

_render_state: ContextVar[Optional[Any]] = ContextVar('render_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """Bind a RenderState (anything with a `verbosity`) to the current context"""
    _render_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log a render message at debug level if the bound verbosity allows it.

    Nothing is written when no state is bound. The record is attributed
    to the caller, not to this helper.

    Args:
        message: Message text
        level: Verbosity the bound state needs for the message to appear
        **kwargs: Passed through to loguru

    Example:
        LOG(f"Resolved {len(resolved)} of {len(ordered)} matches", level=2)
    """
    state = _render_state.get()
    if state is not None and getattr(state, 'verbosity', 0) >= level:
        logger.opt(depth=1).debug(message, **kwargs)
