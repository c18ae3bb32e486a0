"""Data models for tokens, trivia and syntax trees."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional


class TriviaKind(Enum):
    """Kind of non-semantic text attached to a token."""
    WHITESPACE = "whitespace"
    END_OF_LINE = "end_of_line"
    COMMENT = "comment"
    OTHER = "other"


class TokenKind(Enum):
    """Kind of significant text."""
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"
    CHARACTER = "character"
    PUNCTUATION = "punctuation"
    END_OF_FILE = "end_of_file"


@dataclass(frozen=True)
class TextSpan:
    """Half-open range ``[start, end)`` of character offsets."""
    start: int
    end: int

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"Invalid span: end {self.end} < start {self.start}")

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def overlaps(self, other: "TextSpan") -> bool:
        """Check whether two spans share at least one character."""
        return max(self.start, other.start) < min(self.end, other.end)

    def contains(self, other: "TextSpan") -> bool:
        return self.start <= other.start and other.end <= self.end

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class LinePosition:
    """Zero-based line and character offset within that line."""
    line: int
    character: int


@dataclass(frozen=True)
class Trivia:
    """A piece of whitespace, line break, comment or directive text.

    ``span`` is ``None`` for trivia that was synthesized by a rewrite and
    therefore has no location in the original source.
    """
    kind: TriviaKind
    text: str
    span: Optional[TextSpan] = None

    @property
    def is_blank(self) -> bool:
        return self.kind in (TriviaKind.WHITESPACE, TriviaKind.END_OF_LINE)

    @property
    def is_synthetic(self) -> bool:
        return self.span is None

    def overlaps(self, span: TextSpan) -> bool:
        if self.span is None:
            return False
        return self.span.overlaps(span)


def end_of_line(text: str = "\n") -> Trivia:
    """Create a synthetic line break trivia."""
    return Trivia(kind=TriviaKind.END_OF_LINE, text=text)


@dataclass(frozen=True)
class Token:
    """Smallest unit of significant source text and its attached trivia."""
    kind: TokenKind
    text: str
    span: TextSpan
    leading_trivia: tuple[Trivia, ...] = ()
    trailing_trivia: tuple[Trivia, ...] = ()

    @property
    def full_span(self) -> TextSpan:
        """Span covering leading trivia, the token text and trailing trivia."""
        start = self.span.start
        for trivia in self.leading_trivia:
            if trivia.span is not None:
                start = trivia.span.start
                break
        end = self.span.end
        for trivia in reversed(self.trailing_trivia):
            if trivia.span is not None:
                end = trivia.span.end
                break
        return TextSpan(start, end)

    @property
    def leading_span(self) -> TextSpan:
        """Span covering only the leading trivia."""
        return TextSpan(self.full_span.start, self.span.start)

    def with_leading_trivia(self, trivia) -> "Token":
        return replace(self, leading_trivia=tuple(trivia))

    def to_text(self) -> str:
        return (
            "".join(t.text for t in self.leading_trivia)
            + self.text
            + "".join(t.text for t in self.trailing_trivia)
        )


@dataclass(frozen=True)
class SyntaxTree:
    """Flat, immutable token sequence for one analysis unit.

    Trees are never edited in place: ``replace_token`` returns a new tree
    that shares every untouched token with the original. ``text`` stays the
    source the tokens were lexed from; use ``to_text()`` after replacements.
    """
    text: str
    tokens: tuple[Token, ...]
    path: Optional[str] = None
    is_generated: bool = False
    _positions: dict = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(
            self,
            "_positions",
            {token.span.start: i for i, token in enumerate(self.tokens)},
        )

    def find_token(self, position: int) -> Optional[Token]:
        """Find the token whose significant text starts at ``position``."""
        index = self._positions.get(position)
        if index is None:
            return None
        return self.tokens[index]

    def replace_token(self, old: Token, new: Token) -> "SyntaxTree":
        """Return a new tree with ``old`` swapped for ``new``.

        Raises:
            KeyError: If ``old`` is not part of this tree.
        """
        index = self._positions.get(old.span.start)
        if index is None or self.tokens[index] != old:
            raise KeyError(f"Token at {old.span.start} is not part of this tree")
        tokens = self.tokens[:index] + (new,) + self.tokens[index + 1:]
        return replace(self, tokens=tokens)

    def replace_tokens(self, replacements: dict) -> "SyntaxTree":
        """Return a new tree with several tokens swapped at once.

        Args:
            replacements: Mapping of token start offset -> new token.
        """
        if not replacements:
            return self
        tokens = list(self.tokens)
        for position, new in replacements.items():
            index = self._positions.get(position)
            if index is None:
                raise KeyError(f"No token starts at {position}")
            tokens[index] = new
        return replace(self, tokens=tuple(tokens))

    def to_text(self) -> str:
        """Re-emit the source text from tokens and trivia."""
        return "".join(token.to_text() for token in self.tokens)
