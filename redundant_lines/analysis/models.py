"""Data models for diagnostics and fix results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..syntax.models import SyntaxTree, TextSpan


RULE_ID = "empty-lines-redundant"
RULE_TITLE = "Multiple redundant empty lines"


class Severity(Enum):
    """Severity of a reported diagnostic."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Diagnostic:
    """A redundant blank-line run found in one analysis unit.

    ``span`` covers only the fully blank lines of the run. ``anchor`` is the
    start offset of the token whose leading trivia holds the run; the fixer
    uses it to find the token to rewrite.
    """
    span: TextSpan
    anchor: int
    blank_lines: int
    message: str
    rule_id: str = RULE_ID
    severity: Severity = Severity.ERROR
    path: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
            "span": self.span.to_dict(),
            "anchor": self.anchor,
            "blank_lines": self.blank_lines,
        }


@dataclass
class FixResult:
    """Outcome of applying a batch of fixes to one tree."""
    tree: SyntaxTree
    applied: list[Diagnostic] = field(default_factory=list)
    skipped: list[Diagnostic] = field(default_factory=list)

    @property
    def text(self) -> str:
        return self.tree.to_text()

    @property
    def changed(self) -> bool:
        return bool(self.applied)

    def to_dict(self) -> dict:
        return {
            "path": self.tree.path,
            "applied": [d.to_dict() for d in self.applied],
            "skipped": [d.to_dict() for d in self.skipped],
        }
