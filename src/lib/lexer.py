"""
Custom Pygments lexer for prep syntax highlighting

Used by ``prep --highlight`` to show a prep source in the terminal.

Token types:
- Comment.Preproc: The $PREP enable header and $PREP disable
- Keyword: The $PREP directive prefix
- Name.Builtin: Known directive names (include, define, concat, stringify)
- Error: Unknown directive names
- Comment.Single: $$ comment lines
- Name.Variable: %NAME% references
- String.Escape: \\$ and \\% escapes
"""

import re

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Whitespace,
    Name,
    String,
    Keyword,
    Comment,
    Error,
)


class PrepLexer(RegexLexer):
    """
    Lexer for prep directive sources

    Example:
        $PREP enable
        $PREP define GREETING hello
        %GREETING%, world

    Tokens:
        $PREP → Keyword
        define → Name.Builtin
        %GREETING% → Name.Variable
    """

    name = 'Prep'
    aliases = ['prep', 'preposterous']
    filenames = ['*.prep']

    flags = re.MULTILINE

    tokens = {
        'root': [
            # $$ comments (whole line)
            (r'^\$\$.*?$', Comment.Single),

            # Mode switches
            (r'^(\$PREP)( )(enable|disable)\b(.*?)$',
             bygroups(Keyword, Whitespace, Comment.Preproc, Text)),

            # Built-in directives; arguments are lexed in the root state
            (r'^(\$PREP)( )(include|define|concat|stringify)\b',
             bygroups(Keyword, Whitespace, Name.Builtin)),

            # Anything else after $PREP is a fatal unknown directive
            (r'^(\$PREP)( )(\S+)', bygroups(Keyword, Whitespace, Error)),

            # Escapes
            (r'\\[$%]', String.Escape),

            # Variable references
            (r'%[A-Za-z_][A-Za-z0-9_]*%', Name.Variable),

            (r'\n', Whitespace),
            (r'[^\\%$\n]+', Text),
            (r'.', Text),
        ],
    }


def get_lexer() -> PrepLexer:
    """
    Get the PrepLexer instance

    Returns:
        PrepLexer instance ready for use with Pygments
    """
    return PrepLexer()
