"""Syntax module: tokens, trivia and lexers feeding the analysis."""

from .c_family_lexer import CFamilyLexer
from .generated import is_generated, is_generated_path
from .lexer_interface import LexerBase
from .line_index import LineIndex
from .models import (
    LinePosition,
    SyntaxTree,
    TextSpan,
    Token,
    TokenKind,
    Trivia,
    TriviaKind,
    end_of_line,
)

__all__ = [
    "LexerBase",
    "CFamilyLexer",
    "LineIndex",
    "LinePosition",
    "SyntaxTree",
    "TextSpan",
    "Token",
    "TokenKind",
    "Trivia",
    "TriviaKind",
    "end_of_line",
    "is_generated",
    "is_generated_path",
]
