"""Abstract base class for lexers.

This module defines the interface that all lexers must implement,
allowing for pluggable language backends.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from .models import SyntaxTree


class LexerBase(ABC):
    """Abstract base class for source lexers.

    Implement this interface to add new language backends. A lexer must
    produce a tree whose ``to_text()`` reproduces its input exactly.
    """

    # File suffixes (lowercase, with dot) handled by this backend
    extensions: frozenset = frozenset()

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this lexer backend."""
        pass

    @abstractmethod
    def lex(self, text: str, path: Optional[Union[str, Path]] = None) -> SyntaxTree:
        """Split source text into tokens with leading and trailing trivia.

        Args:
            text: Source text of one analysis unit.
            path: Optional path the text was read from.

        Returns:
            SyntaxTree covering the whole text.
        """
        pass

    def supports(self, path: Union[str, Path]) -> bool:
        """Check if a file can be handled by this lexer.

        Args:
            path: Path to the source file.

        Returns:
            True if the file suffix is handled, False otherwise.
        """
        return Path(path).suffix.lower() in self.extensions
