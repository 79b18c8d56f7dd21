r"""
Text transforms for prep sources

Three passes operate on source text before and during directive dispatch:

1. decomment: drop every line starting with the comment prefix ($$)
2. escape: classify raw text into a TokenSequence
3. substitute_variables: replace %NAME% references from a Context

Escaping rules (single left-to-right scan):
    \$  \%      literal $ / % (backslash dropped)
    \x          literal backslash followed by literal x
    $           line marker at the start of a line, literal elsewhere
    %           variable marker
"""

import string
from typing import List, Mapping

from ..config import appsettings
from ..models.tokens import (
    LINE_MARKER,
    VARIABLE_MARKER,
    Token,
    TokenKind,
    TokenSequence,
)
from .errors import InvalidIdentifierError
from .log import LOG


IDENTIFIER_CHARS = frozenset(string.ascii_letters + string.digits + "_")


def decomment(text: str, prefix: str | None = None) -> str:
    r"""
    Strip comment lines from raw source text.

    Lines are split on newlines; a trailing carriage return is dropped from
    each line and the final newline of the input does not survive the join.

    Args:
        text: Raw source text (header already removed)
        prefix: Comment prefix, defaults to appsettings.comment_prefix

    Returns:
        Text with every comment line removed, lines rejoined with newlines

    Example:
        >>> decomment("a\n$$ note\nb\n")
        'a\nb'
    """
    prefix = appsettings.comment_prefix if prefix is None else prefix

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    lines = [line[:-1] if line.endswith("\r") else line for line in lines]

    return "\n".join(line for line in lines if not line.startswith(prefix))


def escape(text: str) -> TokenSequence:
    """
    Classify raw text into markers and literal characters.

    Args:
        text: Raw (decommented) text

    Returns:
        TokenSequence with escape state resolved
    """
    tokens: List[Token] = []
    start_of_line = True
    pos = 0

    while pos < len(text):
        ch = text[pos]

        if ch == "\\":
            if pos + 1 < len(text):
                pos += 1
                escaped = text[pos]
                if escaped not in ("$", "%"):
                    tokens.append(Token.literal("\\"))
                tokens.append(Token.literal(escaped))
            else:
                tokens.append(Token.literal("\\"))
        elif ch == "$":
            tokens.append(LINE_MARKER if start_of_line else Token.literal("$"))
        elif ch == "%":
            tokens.append(VARIABLE_MARKER)
        else:
            tokens.append(Token.literal(ch))

        # An escape sequence never starts a line, even \ followed by newline
        start_of_line = ch == "\n"
        pos += 1

    return TokenSequence(tokens)


def substitute_variables(seq: TokenSequence, context: Mapping[str, str]) -> TokenSequence:
    r"""
    Replace %NAME% references with their values from the context.

    Each variable, in insertion order, gets one literal search-and-replace
    over the display text followed by a full re-escape. Escaped \% therefore
    never forms part of a reference, and text inserted by one replacement
    is only seen by the variables that come after it.

    The rescan treats a literal backslash like any other literal. With a
    non-empty context, a literal ``\`` in front of a literal ``$`` or ``%``
    comes back doubled: an included pass-through file containing ``\$``
    therefore emits ``\\$``. With an empty context the text is untouched.

    Args:
        seq: Escaped text
        context: Variable name -> value mapping

    Returns:
        New TokenSequence; ``seq`` itself when the context is empty
    """
    for name, value in context.items():
        reference = f"%{name}%"
        text = seq.display()
        if reference in text:
            LOG(f"Substituting {reference}", level=3)
        seq = escape(text.replace(reference, value))
    return seq


def identifier_is(name: str) -> bool:
    """
    Check that a name is a valid variable identifier.

    Identifiers are non-empty, use only [A-Za-z0-9_] and do not start
    with a digit.

    Example:
        >>> identifier_is("valid_Name1"), identifier_is("2bad"), identifier_is("a-b")
        (True, False, False)
    """
    return bool(name) and not name[0].isdigit() and all(ch in IDENTIFIER_CHARS for ch in name)


def identifier_check(name: TokenSequence) -> str:
    """
    Validate a directive's target name and return it as a plain string.

    Markers can never be part of an identifier, so the check runs on the
    tokens rather than on rendered text.

    Raises:
        InvalidIdentifierError: if the name is not a valid identifier
    """
    if any(token.kind is not TokenKind.LITERAL for token in name) or not identifier_is(name.render()):
        raise InvalidIdentifierError(name.display())
    return name.render()
