"""
Centralized logging using Loguru with context-aware verbosity.

The CLI connects its ProgramState once; from then on LOG() calls anywhere in
the engine, the directive handlers or the transforms respect the requested
verbosity without the state being passed around. When no state is connected
(library use, tests) LOG() is silent unless PREP_DEBUG_MODE is set.

Usage:
    from preposterous.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)

    LOG("Processing main.c.prep", level=1)
    LOG("Including header.h", level=2)
    LOG("$PREP define VERSION (2 args)", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

from ..config import appsettings

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# Diagnostics go to stderr; stdout carries the processed output
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <16}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=trace)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        0 = Silent (default, only the processed output is printed)
        1 = Progress (-v)
        2 = File reads and includes (-vv)
        3 = Per-directive trace (-vvv)

    PREP_DEBUG_MODE=true emits every level, with or without a connected state.
    """
    state = _program_state.get()
    verbose = state is not None and getattr(state, 'verbosity', 0) >= level

    if appsettings.debug_mode or verbose:
        # depth=1 attributes the record to the caller, not to LOG itself
        logger.opt(depth=1).debug(message, **kwargs)
