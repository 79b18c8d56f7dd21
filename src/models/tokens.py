"""
Token model for escaped prep text

Text that has been through the escaping pass is never handled as a plain
string again. Instead it travels as a TokenSequence, where every unit is
either a line marker (an unescaped ``$`` at the start of a line), a variable
marker (an unescaped ``%``) or a literal character.

Two renderings exist:

    render()   plain output: markers collapse to their glyph, literals verbatim
    display()  human/rescan form: like render(), but literal ``$`` and ``%``
               are written back as ``\\$`` and ``\\%`` so that escaping the
               display text again yields the same tokens

Example:
    >>> from preposterous.lib.transform import escape
    >>> seq = escape("$PREP x \\\\%")
    >>> seq.render()
    '$PREP x %'
    >>> seq.display()
    '$PREP x \\\\%'
"""

from enum import Enum
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Union, overload


class TokenKind(Enum):
    """Classification of a single unit of escaped text"""
    LINE_MARKER = "line_marker"            # $ at start of line
    VARIABLE_MARKER = "variable_marker"    # unescaped %
    LITERAL = "literal"                    # any plain or escaped character


@dataclass(frozen=True)
class Token:
    """
    One classified character of escaped text

    Attributes:
        kind: Marker or literal classification
        char: The character carried by the token. For markers this is the
              glyph they render to ('$' or '%').
    """
    kind: TokenKind
    char: str

    @classmethod
    def literal(cls, char: str) -> "Token":
        """Build a literal token for a single character"""
        return cls(TokenKind.LITERAL, char)

    @property
    def is_marker(self) -> bool:
        return self.kind is not TokenKind.LITERAL

    def is_literal(self, char: str) -> bool:
        """Check whether this is a literal token carrying ``char``"""
        return self.kind is TokenKind.LITERAL and self.char == char

    def render(self) -> str:
        return self.char

    def display(self) -> str:
        if self.kind is TokenKind.LITERAL and self.char in ("$", "%"):
            return "\\" + self.char
        return self.char


LINE_MARKER = Token(TokenKind.LINE_MARKER, "$")
VARIABLE_MARKER = Token(TokenKind.VARIABLE_MARKER, "%")
NEWLINE = Token.literal("\n")
SPACE = Token.literal(" ")


class TokenSequence:
    """
    Ordered sequence of tokens, the in-flight form of "text with escape state"

    Behaves like an immutable-ish list: supports len(), iteration, indexing,
    slicing (slices are TokenSequences), concatenation and equality. A few
    mutating helpers (append, extend) are provided for building output.
    """

    def __init__(self, tokens: Iterable[Token] = ()) -> None:
        self.tokens: List[Token] = list(tokens)

    @classmethod
    def from_literal_text(cls, text: str) -> "TokenSequence":
        """
        Wrap raw text as all-literal tokens, without any escaping

        Used for pass-through files and for values that must never be
        interpreted (e.g. delimiter strings inserted by macros).
        """
        return cls(Token.literal(ch) for ch in text)

    @classmethod
    def join(cls, separator: Token, parts: Iterable["TokenSequence"]) -> "TokenSequence":
        """Join sequences with a single separator token between each"""
        joined = cls()
        for index, part in enumerate(parts):
            if index:
                joined.append(separator)
            joined.extend(part)
        return joined

    # ------------------------------------------------------------------
    # sequence protocol

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    @overload
    def __getitem__(self, index: int) -> Token: ...

    @overload
    def __getitem__(self, index: slice) -> "TokenSequence": ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Token, "TokenSequence"]:
        if isinstance(index, slice):
            return TokenSequence(self.tokens[index])
        return self.tokens[index]

    def __add__(self, other: "TokenSequence") -> "TokenSequence":
        return TokenSequence(self.tokens + list(other))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TokenSequence):
            return NotImplemented
        return self.tokens == other.tokens

    def __repr__(self) -> str:
        return f"TokenSequence({self.display()!r})"

    def __str__(self) -> str:
        return self.display()

    def append(self, token: Token) -> None:
        self.tokens.append(token)

    def extend(self, tokens: Iterable[Token]) -> None:
        self.tokens.extend(tokens)

    # ------------------------------------------------------------------
    # queries

    def startswith(self, prefix: "TokenSequence") -> bool:
        """Check whether the sequence begins with ``prefix`` token for token"""
        return self.tokens[:len(prefix)] == prefix.tokens

    def find(self, token: Token) -> int:
        """Index of the first occurrence of ``token``, or -1"""
        try:
            return self.tokens.index(token)
        except ValueError:
            return -1

    def split(self, separator: Token) -> List["TokenSequence"]:
        """
        Split on every occurrence of ``separator``

        Mirrors str.split(sep): adjacent separators yield empty parts and an
        empty sequence splits into one empty part.
        """
        parts: List[TokenSequence] = [TokenSequence()]
        for token in self.tokens:
            if token == separator:
                parts.append(TokenSequence())
            else:
                parts[-1].append(token)
        return parts

    # ------------------------------------------------------------------
    # rendering

    def render(self) -> str:
        """Production output: markers collapse to their glyphs"""
        return "".join(token.render() for token in self.tokens)

    def display(self) -> str:
        """Display form: literal $ and % are re-escaped"""
        return "".join(token.display() for token in self.tokens)
