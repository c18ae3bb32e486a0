"""Detection of redundant blank-line runs in token trivia."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from ..errors import ThresholdMisconfiguration
from ..syntax.line_index import LineIndex
from ..syntax.models import SyntaxTree, TextSpan, Token, Trivia, TriviaKind
from .models import Diagnostic, RULE_ID, Severity


logger = logging.getLogger(__name__)

# A single blank line is never redundant
MIN_THRESHOLD = 2


@dataclass
class DetectorConfig:
    """Configuration for blank-run detection."""
    # Minimum fully blank lines in one run that trigger a diagnostic
    min_blank_lines: int = 2
    # Severity attached to emitted diagnostics
    severity: Severity = Severity.ERROR

    def __post_init__(self):
        if self.min_blank_lines < MIN_THRESHOLD:
            raise ThresholdMisconfiguration(self.min_blank_lines, MIN_THRESHOLD)


@dataclass(frozen=True)
class BlankRun:
    """A run of blank trivia that reached the threshold."""
    # Whole run, from its first trivia element to its last line break
    span: TextSpan
    # Only the fully blank lines of the run
    report_span: TextSpan
    blank_lines: int


class _ScanState(Enum):
    IDLE = "idle"
    RUN_OPEN = "run_open"


class BlankRunDetector:
    """Finds runs of blank lines in each token's leading trivia.

    The scan is token-local: a run is only ever seen in the leading trivia
    of the token that follows it, so nothing is counted twice.
    """

    def __init__(self, config: Optional[DetectorConfig] = None):
        """Initialize the detector.

        Args:
            config: Detection configuration options.
        """
        self.config = config or DetectorConfig()

    @property
    def threshold(self) -> int:
        return self.config.min_blank_lines

    def analyze(self, tree: SyntaxTree) -> list[Diagnostic]:
        """Report every redundant blank-line run in a tree.

        Args:
            tree: Tree produced by a lexer.

        Returns:
            Diagnostics in source order. Generated trees yield none.
        """
        if tree.is_generated:
            logger.debug(f"Skipping generated unit {tree.path or '<text>'}")
            return []

        line_index = LineIndex(tree.text)
        diagnostics: list[Diagnostic] = []
        for token in tree.tokens:
            diagnostics.extend(self.analyze_token(token, line_index, path=tree.path))

        if diagnostics:
            logger.debug(
                f"Found {len(diagnostics)} redundant blank-line runs in {tree.path or '<text>'}"
            )
        return diagnostics

    def analyze_token(
        self,
        token: Token,
        line_index: LineIndex,
        path: Optional[str] = None
    ) -> list[Diagnostic]:
        """Report the redundant runs in one token's leading trivia."""
        # A run of two or more blank lines needs at least two trivia elements
        if len(token.leading_trivia) < 2:
            return []

        diagnostics = []
        for run in self.scan_trivia(token.leading_trivia, line_index):
            diagnostics.append(Diagnostic(
                span=run.report_span,
                anchor=token.span.start,
                blank_lines=run.blank_lines,
                message=self._message(run.blank_lines),
                rule_id=RULE_ID,
                severity=self.config.severity,
                path=path,
            ))
        return diagnostics

    def scan_trivia(self, trivia: Iterable[Trivia], line_index: LineIndex) -> list[BlankRun]:
        """Measure every candidate run and keep those at or above the threshold."""
        runs = []
        for candidate in self.find_candidates(trivia):
            run = self.measure(candidate, line_index)
            if run is not None:
                runs.append(run)
        return runs

    def find_candidates(self, trivia: Iterable[Trivia]) -> list[TextSpan]:
        """Split a trivia sequence into maximal runs of blank trivia.

        Whitespace or a line break opens a run. Only line breaks extend it,
        so indentation in front of the next token stays outside the run.
        A comment or directive closes it.

        Args:
            trivia: Leading trivia of one token, in source order.

        Returns:
            Candidate spans in source order.
        """
        candidates: list[TextSpan] = []
        state = _ScanState.IDLE
        start = end = 0

        for element in trivia:
            kind = element.kind
            if kind == TriviaKind.WHITESPACE:
                if state == _ScanState.IDLE:
                    state = _ScanState.RUN_OPEN
                    start, end = element.span.start, element.span.end
            elif kind == TriviaKind.END_OF_LINE:
                if state == _ScanState.IDLE:
                    state = _ScanState.RUN_OPEN
                    start = element.span.start
                end = element.span.end
            elif kind in (TriviaKind.COMMENT, TriviaKind.OTHER):
                if state == _ScanState.RUN_OPEN:
                    candidates.append(TextSpan(start, end))
                    state = _ScanState.IDLE
            else:
                raise ValueError(f"Unhandled trivia kind: {kind}")

        # The token itself terminates a run still open at the end
        if state == _ScanState.RUN_OPEN:
            candidates.append(TextSpan(start, end))

        return candidates

    def measure(self, span: TextSpan, line_index: LineIndex) -> Optional[BlankRun]:
        """Count the fully blank lines of a candidate and apply the threshold.

        A run that starts after content on its first line (a comment, or the
        end of a directive) does not own that line; likewise for a run that
        ends mid-line.

        Args:
            span: Candidate span from ``find_candidates``.
            line_index: Line index of the tree's text.

        Returns:
            BlankRun if the candidate is redundant, None otherwise.
        """
        start, end = line_index.line_span(span)
        first_empty_line = start.line if start.character == 0 else start.line + 1
        last_empty_line = end.line if end.character == 0 else end.line - 1
        blank_lines = last_empty_line - first_empty_line

        if blank_lines < self.threshold:
            return None

        report_start = span.start
        if start.character != 0:
            report_start = line_index.line_start(first_empty_line)
        report_end = span.end - end.character

        return BlankRun(
            span=span,
            report_span=TextSpan(report_start, report_end),
            blank_lines=blank_lines,
        )

    def _message(self, blank_lines: int) -> str:
        return (
            f"Remove multiple sequential empty lines "
            f"({blank_lines} found, at most {self.threshold - 1} allowed)"
        )
