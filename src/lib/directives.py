"""
Directive implementations for prep

Each directive consumes the arguments parsed from its $PREP line and either
returns content for the output or updates the shared Context. Uses
DirectiveSpec for metadata and argument parsing.
"""

from typing import Any, Dict, List, Optional

from ..config import appsettings
from ..models.directives import (
    ArgumentStyle,
    DirectiveCategory,
    DirectiveInvocation,
    DirectiveSpec,
)
from ..models.tokens import SPACE, TokenKind, TokenSequence
from .errors import ArgumentCountError
from .log import LOG
from .transform import escape, identifier_check, substitute_variables


def arity_check(arguments: List[TokenSequence], expected: int, at_least: bool = False) -> None:
    """Raise ArgumentCountError unless the argument count fits"""
    got = len(arguments)
    if at_least:
        valid = got >= expected
    else:
        valid = got == expected
    if not valid:
        raise ArgumentCountError(expected, got)


class DirectiveRegistry:
    """
    Registry of directive specifications and handlers

    Maps directive names to DirectiveSpec objects and matches escaped lines
    against their prefixes. Registration order is match order.
    """

    def __init__(self) -> None:
        """Initialize the directive registry and register all built-in directives"""
        self.specs: Dict[str, DirectiveSpec] = {}
        self.prefixes: Dict[str, TokenSequence] = {}
        self.directive_prefix: TokenSequence = escape(appsettings.directive_prefix)
        self.controlDirectives_register()
        self.macroDirectives_register()

    def register(self, spec: DirectiveSpec) -> None:
        """Register a directive specification"""
        self.specs[spec.name] = spec
        self.prefixes[spec.name] = escape(
            appsettings.directivePrefix_make(spec.name, spec.takes_arguments)
        )

    def get(self, name: str) -> Optional[DirectiveSpec]:
        """Get full directive specification by name"""
        return self.specs.get(name)

    def directives_listByCategory(self, category: DirectiveCategory) -> list[DirectiveSpec]:
        """Get all directives in a category"""
        return [spec for spec in self.specs.values() if spec.category == category]

    def directive_is(self, line: TokenSequence) -> bool:
        """Check whether a line starts with the directive prefix at all"""
        return line.startswith(self.directive_prefix)

    def line_match(self, line: TokenSequence) -> Optional[DirectiveInvocation]:
        """
        Match an escaped line against the registered directives

        First registered match wins. The directive prefix only matches a
        line marker, so an escaped \\$PREP line is never a directive.

        Args:
            line: One line of escaped source

        Returns:
            DirectiveInvocation with parsed arguments, or None if no
            registered directive matches

        Raises:
            ArgumentCountError: if a name/value directive has no value
        """
        for name, spec in self.specs.items():
            prefix = self.prefixes[name]
            if line.startswith(prefix):
                arguments = self.arguments_parse(spec, line[len(prefix):])
                return DirectiveInvocation(spec=spec, arguments=arguments)
        return None

    @staticmethod
    def arguments_parse(spec: DirectiveSpec, remainder: TokenSequence) -> List[TokenSequence]:
        """
        Split the text after a directive prefix into arguments

        Args:
            spec: Matched directive
            remainder: Tokens following the directive prefix

        Returns:
            List of argument token sequences
        """
        if spec.argument_style is ArgumentStyle.NONE:
            return []

        if spec.argument_style is ArgumentStyle.NAME_VALUE:
            separator = remainder.find(SPACE)
            if separator < 0:
                raise ArgumentCountError(2, 1)
            return [remainder[:separator], remainder[separator + 1:]]

        return remainder.split(SPACE)

    def controlDirectives_register(self) -> None:
        """Register directives handled directly by the engine"""

        self.register(DirectiveSpec(
            name='disable',
            category=DirectiveCategory.CONTROL,
            description='Stop processing; the rest of the file is discarded',
            argument_style=ArgumentStyle.NONE,
            terminates=True,
            examples=['$PREP disable'],
        ))

    def macroDirectives_register(self) -> None:
        """Register include, concat, stringify and define"""

        def include_handler(arguments: List[TokenSequence], preprocessor: Any) -> TokenSequence:
            """Handle $PREP include - process another file in the same context"""
            arity_check(arguments, 1)
            path = arguments[0].render()
            LOG(f"Including {path}", level=2)
            return preprocessor.process_file(path)

        def concat_handler(arguments: List[TokenSequence], preprocessor: Any) -> TokenSequence:
            """Handle $PREP concat - join values into a delimited string variable"""
            arity_check(arguments, 2, at_least=True)
            name = identifier_check(arguments[0])
            context = preprocessor.context

            joined = substitute_variables(TokenSequence.join(SPACE, arguments[1:]), context)

            parts: List[str] = []
            pos = 0
            while pos < len(joined):
                token = joined[pos]
                if token.is_marker:
                    parts.append(token.char)
                elif token.char == '\\':
                    # Backslash keeps the following token verbatim; a lone
                    # trailing backslash is dropped
                    pos += 1
                    if pos < len(joined):
                        parts.append('\\')
                        parts.append(joined[pos].char)
                elif token.char != '"':
                    parts.append(token.char)
                pos += 1

            opening, closing = context.delimiters_resolve()
            context[name] = f"{opening}{''.join(parts)}{closing}"
            LOG(f"Concatenated {name} = {context[name]!r}", level=3)
            return TokenSequence()

        def stringify_handler(arguments: List[TokenSequence], preprocessor: Any) -> TokenSequence:
            """Handle $PREP stringify - store a processed file as a string literal"""
            arity_check(arguments, 2)
            name = identifier_check(arguments[0])
            path = arguments[1].render()
            LOG(f"Stringifying {path} into {name}", level=2)

            content = preprocessor.process_file(path)

            parts: List[str] = []
            for token in content:
                if token.kind is TokenKind.LITERAL and token.char in ('\n', '"'):
                    parts.append('\\')
                parts.append(token.char)

            context = preprocessor.context
            opening, closing = context.delimiters_resolve()
            context[name] = f"{opening}{''.join(parts)}{closing}"
            return TokenSequence()

        def define_handler(arguments: List[TokenSequence], preprocessor: Any) -> TokenSequence:
            """Handle $PREP define - set a variable to the substituted value"""
            arity_check(arguments, 2)
            name = identifier_check(arguments[0])
            context = preprocessor.context
            context[name] = substitute_variables(arguments[1], context).render()
            LOG(f"Defined {name} = {context[name]!r}", level=3)
            return TokenSequence()

        self.register(DirectiveSpec(
            name='include',
            category=DirectiveCategory.EXPANSION,
            description='Insert the processed contents of another file',
            handler=include_handler,
            emits_output=True,
            examples=['$PREP include header.txt'],
        ))

        self.register(DirectiveSpec(
            name='concat',
            category=DirectiveCategory.DEFINITION,
            description='Join arguments with spaces into a delimited string variable',
            handler=concat_handler,
            examples=['$PREP concat FLAGS -O2 %EXTRA%'],
        ))

        self.register(DirectiveSpec(
            name='stringify',
            category=DirectiveCategory.DEFINITION,
            description='Store the processed contents of a file as a delimited string',
            handler=stringify_handler,
            examples=['$PREP stringify SHADER shader.glsl'],
        ))

        self.register(DirectiveSpec(
            name='define',
            category=DirectiveCategory.DEFINITION,
            description='Define a variable; the value is the rest of the line',
            handler=define_handler,
            argument_style=ArgumentStyle.NAME_VALUE,
            emits_output=True,
            examples=['$PREP define GREETING hello world'],
        ))

