"""
Variable context shared across one preprocessing run

A Context is created once per top-level run and handed by reference to every
nested include/stringify, so definitions made anywhere in the call tree are
visible to everything processed after them (depth-first, left to right).
"""

from typing import Dict, Iterator, MutableMapping, Optional, Tuple

from ..config import appsettings
from .errors import InvalidIdentifierError
from .transform import identifier_is


class Context(MutableMapping[str, str]):
    """
    Insertion-ordered mapping of variable name to value

    Writes are validated: a name that is not an identifier raises
    InvalidIdentifierError and leaves the mapping untouched.

    Example:
        >>> ctx = Context({"GREETING": "hi"})
        >>> ctx["GREETING"]
        'hi'
        >>> ctx["a-b"] = "x"
        Traceback (most recent call last):
            ...
        preposterous.lib.errors.InvalidIdentifierError: Invalid identifier: `a-b`
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.variables: Dict[str, str] = {}
        if initial:
            self.update(initial)

    def __getitem__(self, name: str) -> str:
        return self.variables[name]

    def __setitem__(self, name: str, value: str) -> None:
        if not identifier_is(name):
            raise InvalidIdentifierError(name)
        self.variables[name] = value

    def __delitem__(self, name: str) -> None:
        del self.variables[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.variables)

    def __len__(self) -> int:
        return len(self.variables)

    def __repr__(self) -> str:
        return f"Context({self.variables!r})"

    def delimiters_resolve(self) -> Tuple[str, str]:
        """
        Resolve the opening/closing delimiters for stringify and concat.

        Both configured variables must be set; otherwise both sides fall
        back to the default delimiter.

        Returns:
            (opening, closing) delimiter pair
        """
        opening = self.variables.get(appsettings.opening_delimiter_variable)
        closing = self.variables.get(appsettings.closing_delimiter_variable)
        if opening is None or closing is None:
            return appsettings.default_delimiter, appsettings.default_delimiter
        return opening, closing
