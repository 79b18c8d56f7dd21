"""
Error types raised while preprocessing

Every failure in the recursive include/stringify call tree surfaces as a
PrepError subclass and propagates unchanged to the caller of process_file.
Nothing in the engine catches these; the CLI reports them and exits.
"""

from pathlib import Path
from typing import Union


class PrepError(Exception):
    """Base class for all preprocessing failures"""
    pass


class ArgumentCountError(PrepError):
    """Raised when a directive receives the wrong number of arguments"""

    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"Expected {expected} arguments, got {got}")


class InvalidIdentifierError(PrepError):
    """Raised when a variable name contains non-identifier characters"""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Invalid identifier: `{name}`")


class UnknownDirectiveError(PrepError):
    """Raised for a $PREP line that matches no registered directive"""

    def __init__(self, directive: str) -> None:
        self.directive = directive
        super().__init__(f"Unknown directive: `{directive}`")


class IoFailureError(PrepError):
    """
    Raised when a source file cannot be read

    The originating exception is kept as ``cause`` and is also chained as
    ``__cause__`` by the raising site (``raise ... from e``).
    """

    def __init__(self, path: Union[str, Path], cause: BaseException) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")
