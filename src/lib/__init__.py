"""
preposterous - line-oriented text preprocessor

Expands $PREP directives (include, define, concat, stringify) in text files.
"""

__version__ = "1.0.0"

from .context import Context
from .directives import DirectiveRegistry
from .engine import Preprocessor, process_file
from .errors import (
    PrepError,
    ArgumentCountError,
    InvalidIdentifierError,
    UnknownDirectiveError,
    IoFailureError,
)
from .log import LOG, state_connectToLogger

__all__ = [
    "Context",
    "DirectiveRegistry",
    "Preprocessor",
    "process_file",
    "PrepError",
    "ArgumentCountError",
    "InvalidIdentifierError",
    "UnknownDirectiveError",
    "IoFailureError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
