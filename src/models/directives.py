"""
Directive specification and metadata models

Defines the structure and categories of prep directives for dispatch,
argument parsing, and registry management.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .tokens import TokenSequence


class DirectiveCategory(Enum):
    """
    Categories of prep directives

    Used for organization and documentation.
    """
    CONTROL = "control"          # $PREP disable
    EXPANSION = "expansion"      # $PREP include
    DEFINITION = "definition"    # $PREP define, concat, stringify


class ArgumentStyle(Enum):
    """
    How the text after a directive name is turned into arguments
    """
    NONE = "none"                # nothing is parsed, e.g. disable
    WORDS = "words"              # split on every literal space
    NAME_VALUE = "name_value"    # name up to the first space, value is the rest


@dataclass
class DirectiveSpec:
    """
    Specification for a prep directive

    Attributes:
        name: Directive name as written after the directive prefix
        category: Category for organization
        description: Human-readable description
        handler: Function (arguments, preprocessor) -> TokenSequence,
                 None for directives handled by the engine itself
        argument_style: How to split the directive's arguments
        emits_output: Whether the handler result becomes an output line
        terminates: Whether the directive stops processing of the file
        examples: Example usage strings
    """
    name: str
    category: DirectiveCategory
    description: str
    handler: Optional[Callable] = None
    argument_style: ArgumentStyle = ArgumentStyle.WORDS
    emits_output: bool = False
    terminates: bool = False
    examples: List[str] = field(default_factory=list)

    @property
    def takes_arguments(self) -> bool:
        """Directives with arguments need a space after their name"""
        return self.argument_style is not ArgumentStyle.NONE


@dataclass
class DirectiveInvocation:
    """
    A directive line matched against the registry

    Attributes:
        spec: The matched directive
        arguments: Parsed arguments as escaped token sequences

    Example:
        For line "$PREP include header.txt":
        DirectiveInvocation(spec=<include>, arguments=[TokenSequence('header.txt')])
    """
    spec: DirectiveSpec
    arguments: List["TokenSequence"]
