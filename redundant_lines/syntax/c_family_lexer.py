"""Lexer for C-family languages (C#, Java, JavaScript, C/C++, Go, ...)."""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from .generated import is_generated
from .lexer_interface import LexerBase
from .line_index import LINE_BREAK_PATTERN
from .models import SyntaxTree, TextSpan, Token, TokenKind, Trivia, TriviaKind


logger = logging.getLogger(__name__)


WHITESPACE_PATTERN = re.compile(r'[ \t\f\v\u00a0\ufeff]+')
QUOTE_RUN_PATTERN = re.compile(r'"{3,}')
NUMBER_PATTERN = re.compile(r'\.?\d[\w.]*')
IDENTIFIER_PATTERN = re.compile(r'@?(?:[^\W\d]|\$)[\w$]*')
# $"..." interpolated, @"..." verbatim and combinations of both
STRING_PREFIX_PATTERN = re.compile(r'[$@]+(?=")')

# Languages with a line-oriented preprocessor (#if, #region, #define ...)
PREPROCESSOR_EXTENSIONS = frozenset({
    ".cs", ".c", ".h", ".cc", ".cpp", ".cxx", ".hh", ".hpp", ".hxx", ".m", ".mm",
})


class CFamilyLexer(LexerBase):
    """Splits C-family source into tokens carrying leading and trailing trivia.

    Trivia attachment:
    - Trailing trivia is everything on the token's own line after it, up to
      and including the first line break.
    - Everything else before the next token is that token's leading trivia.
    - The end-of-file token owns whatever trivia ends the document.

    Unterminated strings and comments run to the end of their line or of
    the input, so lexing never fails.
    """

    extensions = frozenset({
        ".cs", ".java", ".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx",
        ".c", ".h", ".cc", ".cpp", ".cxx", ".hh", ".hpp", ".hxx", ".m", ".mm",
        ".go", ".rs", ".kt", ".kts", ".swift", ".scala", ".dart", ".php",
    })

    def __init__(self, preprocessor: Optional[bool] = None):
        """Initialize the lexer.

        Args:
            preprocessor: Treat lines starting with ``#`` as directive trivia.
                When None, decided per file from its suffix.
        """
        self.preprocessor = preprocessor

    @property
    def name(self) -> str:
        return "c-family"

    def lex(self, text: str, path: Optional[Union[str, Path]] = None) -> SyntaxTree:
        """Tokenize source text.

        Args:
            text: Source text of one analysis unit.
            path: Optional path the text was read from.

        Returns:
            SyntaxTree whose ``to_text()`` equals ``text``.
        """
        directives = self._directives_enabled(path)
        n = len(text)
        tokens: list[Token] = []

        leading, pos = self._scan_trivia(text, 0, trailing=False, directives=directives)
        while pos < n:
            kind, end = self._scan_token(text, pos)
            trailing, after = self._scan_trivia(text, end, trailing=True, directives=directives)
            tokens.append(Token(
                kind=kind,
                text=text[pos:end],
                span=TextSpan(pos, end),
                leading_trivia=tuple(leading),
                trailing_trivia=tuple(trailing),
            ))
            leading, pos = self._scan_trivia(text, after, trailing=False, directives=directives)

        tokens.append(Token(
            kind=TokenKind.END_OF_FILE,
            text="",
            span=TextSpan(n, n),
            leading_trivia=tuple(leading),
        ))

        generated = is_generated(path, tokens[0].leading_trivia)
        logger.debug(f"Lexed {len(tokens)} tokens from {path or '<text>'}")
        return SyntaxTree(
            text=text,
            tokens=tuple(tokens),
            path=str(path) if path is not None else None,
            is_generated=generated,
        )

    def _directives_enabled(self, path: Optional[Union[str, Path]]) -> bool:
        if self.preprocessor is not None:
            return self.preprocessor
        if path is None:
            return True
        return Path(path).suffix.lower() in PREPROCESSOR_EXTENSIONS

    def _scan_trivia(
        self,
        text: str,
        pos: int,
        trailing: bool,
        directives: bool
    ) -> tuple[list[Trivia], int]:
        """Collect trivia starting at ``pos``.

        Args:
            text: Source text.
            pos: Offset to start scanning from.
            trailing: Stop right after the first line break.
            directives: Recognize ``#`` directive lines.

        Returns:
            Tuple of (trivia list, offset after the last trivia).
        """
        trivia: list[Trivia] = []
        n = len(text)

        while pos < n:
            match = WHITESPACE_PATTERN.match(text, pos)
            if match:
                trivia.append(self._trivia(TriviaKind.WHITESPACE, text, pos, match.end()))
                pos = match.end()
                continue

            match = LINE_BREAK_PATTERN.match(text, pos)
            if match:
                trivia.append(self._trivia(TriviaKind.END_OF_LINE, text, pos, match.end()))
                pos = match.end()
                if trailing:
                    break
                continue

            if text.startswith('//', pos):
                end = self._line_end(text, pos)
                trivia.append(self._trivia(TriviaKind.COMMENT, text, pos, end))
            elif text.startswith('/*', pos):
                close = text.find('*/', pos + 2)
                end = n if close == -1 else close + 2
                trivia.append(self._trivia(TriviaKind.COMMENT, text, pos, end))
            elif (
                directives
                and not trailing
                and text[pos] == '#'
                and self._at_line_start(text, pos)
            ):
                end = self._line_end(text, pos)
                trivia.append(self._trivia(TriviaKind.OTHER, text, pos, end))
            else:
                break
            pos = end

        return trivia, pos

    def _scan_token(self, text: str, pos: int) -> tuple[TokenKind, int]:
        """Find the kind and end offset of the token starting at ``pos``."""
        prefix = STRING_PREFIX_PATTERN.match(text, pos)
        quote = prefix.end() if prefix else pos

        if text.startswith('"', quote):
            if text.startswith('"""', quote):
                return TokenKind.STRING, self._scan_raw_string(text, quote)
            if prefix and '@' in prefix.group():
                return TokenKind.STRING, self._scan_verbatim_string(text, quote + 1)
            return TokenKind.STRING, self._scan_quoted(text, quote + 1, '"')

        char = text[pos]
        if char == "'":
            return TokenKind.CHARACTER, self._scan_quoted(text, pos + 1, "'")
        if char == '`':
            return TokenKind.STRING, self._scan_template(text, pos + 1)

        match = NUMBER_PATTERN.match(text, pos)
        if match:
            return TokenKind.NUMBER, match.end()

        match = IDENTIFIER_PATTERN.match(text, pos)
        if match:
            return TokenKind.IDENTIFIER, match.end()

        return TokenKind.PUNCTUATION, pos + 1

    def _scan_quoted(self, text: str, pos: int, quote: str) -> int:
        # Regular literals cannot span lines; stop before the break if unterminated
        n = len(text)
        while pos < n:
            char = text[pos]
            if char == '\\':
                pos += 2
                continue
            if char == quote:
                return pos + 1
            if char in '\r\n':
                return pos
            pos += 1
        return n

    def _scan_verbatim_string(self, text: str, pos: int) -> int:
        n = len(text)
        while pos < n:
            if text[pos] == '"':
                if text.startswith('""', pos):
                    pos += 2
                    continue
                return pos + 1
            pos += 1
        return n

    def _scan_raw_string(self, text: str, pos: int) -> int:
        # """...""" closes with the same number of quotes that opened it
        count = len(QUOTE_RUN_PATTERN.match(text, pos).group())
        close = text.find('"' * count, pos + count)
        if close == -1:
            return len(text)
        return close + count

    def _scan_template(self, text: str, pos: int) -> int:
        n = len(text)
        while pos < n:
            char = text[pos]
            if char == '\\':
                pos += 2
                continue
            if char == '`':
                return pos + 1
            pos += 1
        return n

    @staticmethod
    def _line_end(text: str, pos: int) -> int:
        match = LINE_BREAK_PATTERN.search(text, pos)
        return match.start() if match else len(text)

    @staticmethod
    def _at_line_start(text: str, pos: int) -> bool:
        i = pos - 1
        while i >= 0 and WHITESPACE_PATTERN.match(text[i]):
            i -= 1
        return i < 0 or LINE_BREAK_PATTERN.match(text[i]) is not None

    @staticmethod
    def _trivia(kind: TriviaKind, text: str, start: int, end: int) -> Trivia:
        return Trivia(kind=kind, text=text[start:end], span=TextSpan(start, end))
