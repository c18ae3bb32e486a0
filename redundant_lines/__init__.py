"""redundant-lines: find and remove redundant blank lines in source code."""

from .analysis import (
    BatchFixer,
    BlankRunDetector,
    DetectorConfig,
    Diagnostic,
    FixResult,
    RULE_ID,
    Severity,
    TriviaRewriter,
)
from .errors import (
    RedundantLinesError,
    StaleLocation,
    ThresholdMisconfiguration,
    UnknownLexerError,
)
from .pipeline import FileReport, LintPipeline, PipelineConfig, check_source, fix_source
from .syntax import (
    CFamilyLexer,
    LexerBase,
    LineIndex,
    SyntaxTree,
    TextSpan,
    Token,
    Trivia,
    TriviaKind,
)

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "LintPipeline",
    "PipelineConfig",
    "FileReport",
    "check_source",
    "fix_source",
    # Analysis
    "BlankRunDetector",
    "DetectorConfig",
    "TriviaRewriter",
    "BatchFixer",
    "Diagnostic",
    "FixResult",
    "Severity",
    "RULE_ID",
    # Syntax
    "LexerBase",
    "CFamilyLexer",
    "LineIndex",
    "SyntaxTree",
    "TextSpan",
    "Token",
    "Trivia",
    "TriviaKind",
    # Errors
    "RedundantLinesError",
    "ThresholdMisconfiguration",
    "StaleLocation",
    "UnknownLexerError",
]
