"""Offset <-> line/column mapping for source text."""

import re
from bisect import bisect_right

from .models import LinePosition, TextSpan


# \r\n must be tried before \r so a Windows line break counts once
LINE_BREAK_PATTERN = re.compile(r'\r\n|[\n\r\u2028\u2029\x85]')


class LineIndex:
    """Maps absolute character offsets to zero-based line positions and back.

    Line starts are computed once; lookups are O(log n) via ``bisect``.
    """

    def __init__(self, text: str):
        """Initialize the index.

        Args:
            text: Full source text of the analysis unit.
        """
        self.text = text
        self._line_starts = [0]
        for match in LINE_BREAK_PATTERN.finditer(text):
            self._line_starts.append(match.end())

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_start(self, line: int) -> int:
        """Get the offset of the first character of ``line``."""
        if line < 0 or line >= len(self._line_starts):
            raise IndexError(f"Line {line} out of range (0..{len(self._line_starts) - 1})")
        return self._line_starts[line]

    def position(self, offset: int) -> LinePosition:
        """Convert an absolute offset to a line position.

        Args:
            offset: Character offset, ``0 <= offset <= len(text)``.

        Returns:
            LinePosition for the offset.
        """
        if offset < 0 or offset > len(self.text):
            raise IndexError(f"Offset {offset} out of range (0..{len(self.text)})")
        line = bisect_right(self._line_starts, offset) - 1
        return LinePosition(line=line, character=offset - self._line_starts[line])

    def offset(self, line: int, character: int) -> int:
        """Convert a line position back to an absolute offset."""
        return self.line_start(line) + character

    def line_span(self, span: TextSpan) -> tuple[LinePosition, LinePosition]:
        """Get the start and end line positions of a span."""
        return self.position(span.start), self.position(span.end)
