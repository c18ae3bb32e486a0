"""Analysis module: blank-run detection and trivia rewriting."""

from .detector import BlankRun, BlankRunDetector, DetectorConfig, MIN_THRESHOLD
from .fixer import BatchFixer
from .models import Diagnostic, FixResult, RULE_ID, Severity
from .rewriter import TriviaRewriter

__all__ = [
    "BlankRunDetector",
    "DetectorConfig",
    "BlankRun",
    "MIN_THRESHOLD",
    "TriviaRewriter",
    "BatchFixer",
    "Diagnostic",
    "FixResult",
    "Severity",
    "RULE_ID",
]
