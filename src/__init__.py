"""
preposterous - line-oriented text preprocessor

Expands $PREP directives (include, define, concat, stringify) embedded in
arbitrary text files.
"""

__version__ = "1.0.0"

from .lib import (
    Context,
    Preprocessor,
    process_file,
    PrepError,
    ArgumentCountError,
    InvalidIdentifierError,
    UnknownDirectiveError,
    IoFailureError,
    LOG,
    state_connectToLogger,
)
from .models import Token, TokenKind, TokenSequence

__all__ = [
    "Context",
    "Preprocessor",
    "process_file",
    "PrepError",
    "ArgumentCountError",
    "InvalidIdentifierError",
    "UnknownDirectiveError",
    "IoFailureError",
    "Token",
    "TokenKind",
    "TokenSequence",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
