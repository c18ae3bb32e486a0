"""Fix-all support: apply many blank-line fixes to one tree at once."""

import logging
from typing import Iterable, Optional

from ..errors import RedundantLinesError
from ..syntax.models import SyntaxTree, Token
from .models import Diagnostic, FixResult
from .rewriter import TriviaRewriter


logger = logging.getLogger(__name__)


class BatchFixer:
    """Applies every fix for a tree in one pass.

    Diagnostics are processed in reverse source order against the original
    tree; fixes sharing an anchor token are chained on that token. Each
    diagnostic is handled on its own, so a stale one is skipped without
    affecting the rest.
    """

    def __init__(self, rewriter: Optional[TriviaRewriter] = None):
        """Initialize the fixer.

        Args:
            rewriter: Rewriter used for each diagnostic.
        """
        self.rewriter = rewriter or TriviaRewriter()

    def fix_all(self, tree: SyntaxTree, diagnostics: Iterable[Diagnostic]) -> FixResult:
        """Apply all fixes that still apply to ``tree``.

        Args:
            tree: Tree the diagnostics were reported against.
            diagnostics: Diagnostics to fix, in any order.

        Returns:
            FixResult with the new tree and applied/skipped diagnostics.
        """
        ordered = sorted(diagnostics, key=lambda d: (d.span.start, d.anchor), reverse=True)
        updated: dict[int, Token] = {}
        applied: list[Diagnostic] = []
        skipped: list[Diagnostic] = []

        for diagnostic in ordered:
            try:
                token = updated.get(diagnostic.anchor)
                if token is None:
                    token = self.rewriter.resolve_anchor(tree, diagnostic)
                updated[diagnostic.anchor] = self.rewriter.rewrite_token(token, diagnostic)
            except RedundantLinesError as e:
                logger.debug(f"Skipping fix in {tree.path or '<text>'}: {e}")
                skipped.append(diagnostic)
                continue
            applied.append(diagnostic)

        applied.reverse()
        skipped.reverse()
        if applied:
            logger.debug(f"Applied {len(applied)} fixes to {tree.path or '<text>'}")

        return FixResult(
            tree=tree.replace_tokens(updated),
            applied=applied,
            skipped=skipped,
        )
