"""Rewriting of token trivia to remove redundant blank lines."""

import logging
from typing import Iterable, Optional

from ..errors import StaleLocation
from ..syntax.models import SyntaxTree, TextSpan, Token, Trivia, TriviaKind, end_of_line
from .detector import DetectorConfig
from .models import Diagnostic


logger = logging.getLogger(__name__)


class TriviaRewriter:
    """Reduces a reported blank-line run to ``threshold - 1`` blank lines.

    Only trivia overlapping the reported span is touched:
    - The first overlapping element is kept as the anchor. When it is
      whitespace it keeps the indentation of the remaining blank line; when
      it is a line break it counts as one of the kept line breaks.
    - Line breaks are added after the anchor until ``threshold - 1`` remain.
    - Every later overlapping element is dropped.

    Trees and trivia are never modified; new values are returned.
    """

    def __init__(self, config: Optional[DetectorConfig] = None):
        """Initialize the rewriter.

        Args:
            config: Detection configuration the diagnostics were produced with.
        """
        self.config = config or DetectorConfig()

    @property
    def kept_line_breaks(self) -> int:
        return self.config.min_blank_lines - 1

    def rewrite(self, trivia: Iterable[Trivia], report_span: TextSpan) -> tuple[Trivia, ...]:
        """Build the reduced trivia sequence for one reported run.

        Args:
            trivia: Original leading trivia of the anchor token.
            report_span: Reported span of the run.

        Returns:
            New trivia sequence; elements outside the span are unchanged.
        """
        trivia = tuple(trivia)
        newline = self._newline_style(trivia, report_span)
        result: list[Trivia] = []
        anchored = False

        for element in trivia:
            if not element.overlaps(report_span):
                result.append(element)
                continue
            if anchored:
                continue

            anchored = True
            result.append(element)
            missing = self.kept_line_breaks
            if element.kind == TriviaKind.END_OF_LINE:
                missing -= 1
            result.extend(end_of_line(newline) for _ in range(missing))

        return tuple(result)

    def resolve_anchor(self, tree: SyntaxTree, diagnostic: Diagnostic) -> Token:
        """Find the token a diagnostic was reported on.

        Raises:
            StaleLocation: If the token is gone or its leading trivia no
                longer holds a blank run at the reported span.
        """
        token = tree.find_token(diagnostic.anchor)
        if token is None:
            raise StaleLocation(diagnostic.anchor)
        return self._check_anchor(token, diagnostic)

    def rewrite_token(self, token: Token, diagnostic: Diagnostic) -> Token:
        """Return a copy of ``token`` with the reported run reduced."""
        self._check_anchor(token, diagnostic)
        return token.with_leading_trivia(self.rewrite(token.leading_trivia, diagnostic.span))

    def fix(self, tree: SyntaxTree, diagnostic: Diagnostic) -> SyntaxTree:
        """Apply the fix for a single diagnostic.

        A stale diagnostic leaves the tree unchanged.

        Args:
            tree: Tree the diagnostic should apply to.
            diagnostic: Diagnostic produced by ``BlankRunDetector``.

        Returns:
            New tree, or ``tree`` itself if nothing could be fixed.
        """
        try:
            token = self.resolve_anchor(tree, diagnostic)
        except StaleLocation as e:
            logger.debug(f"Skipping fix: {e}")
            return tree

        return tree.replace_token(token, self.rewrite_token(token, diagnostic))

    def _check_anchor(self, token: Token, diagnostic: Diagnostic) -> Token:
        if not token.leading_span.contains(diagnostic.span):
            raise StaleLocation(diagnostic.anchor, "span outside leading trivia")

        overlapping = [t for t in token.leading_trivia if t.overlaps(diagnostic.span)]
        if not overlapping:
            raise StaleLocation(diagnostic.anchor, "no trivia at reported span")
        if any(not t.is_blank for t in overlapping):
            raise StaleLocation(diagnostic.anchor, "reported span is no longer blank")
        return token

    @staticmethod
    def _newline_style(trivia: tuple[Trivia, ...], report_span: TextSpan) -> str:
        for element in trivia:
            if element.kind == TriviaKind.END_OF_LINE and element.overlaps(report_span):
                return element.text
        return "\n"
