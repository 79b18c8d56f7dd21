"""
Directive engine for prep sources

Reads a file, decides between pass-through and directive mode, and
dispatches each escaped line to a directive handler or to plain variable
substitution. Handlers for include/stringify call back into the same
Preprocessor, so the whole include tree shares one Context.
"""

from pathlib import Path
from typing import List, Optional, Union

from ..config import appsettings
from ..models.tokens import NEWLINE, TokenSequence
from .context import Context
from .directives import DirectiveRegistry
from .errors import IoFailureError, UnknownDirectiveError
from .log import LOG
from .transform import decomment, escape, substitute_variables


class Preprocessor:
    """
    Processes prep source files against one shared Context

    Responsibilities:
    - Read sources (pass-through unless enabled by the header line)
    - Strip comments and escape text
    - Dispatch directive lines to registered handlers
    - Substitute variables in every emitted line

    Includes are not checked for cycles; a file that includes itself
    recurses until the interpreter's recursion limit is hit.
    """

    def __init__(
        self,
        context: Optional[Context] = None,
        registry: Optional[DirectiveRegistry] = None,
    ) -> None:
        """
        Initialize preprocessor

        Args:
            context: Variable context for this run (fresh if not given)
            registry: Directive registry (built-in directives if not given)
        """
        self.context = context if context is not None else Context()
        self.directives = registry or DirectiveRegistry()
        self.depth = 0

    def source_read(self, path: Union[str, Path]) -> str:
        """
        Read a whole source file, newlines untranslated

        Raises:
            IoFailureError: wrapping the OS or decoding error
        """
        try:
            with open(path, encoding=appsettings.file_encoding, newline="") as handle:
                source = handle.read()
        except (OSError, UnicodeDecodeError) as e:
            raise IoFailureError(path, e) from e
        LOG(f"Read {len(source)} characters from {path}", level=2)
        return source

    def process_file(self, path: Union[str, Path]) -> TokenSequence:
        """
        Process one file and everything it includes

        Args:
            path: Source file path

        Returns:
            Processed text as a TokenSequence. Files without the enable
            header come back unchanged as literal tokens.

        Raises:
            PrepError: from any directive in this file or its includes
        """
        source = self.source_read(path)

        body = appsettings.body_extract(source)
        if body is None:
            LOG(f"{path}: no enable header, passing through", level=2)
            return TokenSequence.from_literal_text(source)

        self.depth += 1
        try:
            chunks = self.lines_process(escape(decomment(body)))
        finally:
            self.depth -= 1

        LOG(f"{path}: emitted {len(chunks)} lines", level=3)
        return TokenSequence.join(NEWLINE, chunks)

    def lines_process(self, text: TokenSequence) -> List[TokenSequence]:
        """
        Dispatch every line of an escaped body

        Args:
            text: Escaped, decommented source body

        Returns:
            Output lines in order (joined with newlines by the caller)
        """
        chunks: List[TokenSequence] = []

        for line in text.split(NEWLINE):
            invocation = self.directives.line_match(line)

            if invocation is None:
                if self.directives.directive_is(line):
                    remainder = line[len(self.directives.directive_prefix):]
                    raise UnknownDirectiveError(remainder.display())
                chunks.append(substitute_variables(line, self.context))
                continue

            spec = invocation.spec
            LOG(f"{'  ' * self.depth}$PREP {spec.name} ({len(invocation.arguments)} args)", level=3)

            if spec.terminates:
                break

            result = spec.handler(invocation.arguments, self)
            if spec.emits_output:
                chunks.append(substitute_variables(result, self.context))

        return chunks


def process_file(path: Union[str, Path], context: Optional[Context] = None) -> TokenSequence:
    """
    Process a file with a fresh (or supplied) context

    Example:
        >>> output = process_file("main.c.prep")
        >>> print(output.render())
    """
    return Preprocessor(context=context).process_file(path)
