"""
Models package for preposterous

Contains data structures and type definitions for the preprocessing pipeline.
"""

from .state import ProgramState, pipeline
from .directives import DirectiveSpec, DirectiveCategory, ArgumentStyle, DirectiveInvocation
from .tokens import Token, TokenKind, TokenSequence

__all__ = [
    "ProgramState",
    "pipeline",
    "DirectiveSpec",
    "DirectiveCategory",
    "ArgumentStyle",
    "DirectiveInvocation",
    "Token",
    "TokenKind",
    "TokenSequence",
]
