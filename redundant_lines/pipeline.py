"""Main lint pipeline orchestrating lexing, detection and fixing."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from .analysis import (
    BatchFixer,
    BlankRunDetector,
    DetectorConfig,
    Diagnostic,
    FixResult,
    TriviaRewriter,
)
from .errors import UnknownLexerError
from .syntax import CFamilyLexer, LexerBase, LineIndex, SyntaxTree


logger = logging.getLogger(__name__)


LEXERS: dict[str, Callable[[], LexerBase]] = {
    "c-family": CFamilyLexer,
}


@dataclass
class PipelineConfig:
    """Configuration for the lint pipeline."""
    # Detection settings (threshold, severity)
    detector_config: DetectorConfig = field(default_factory=DetectorConfig)

    # Lexer backend (default: C-family languages)
    lexer: str = "c-family"

    # Skip files marked or named as generated code
    skip_generated: bool = True

    # Glob patterns used when a directory is given; empty means
    # "every file the lexer supports"
    file_patterns: list[str] = field(default_factory=list)

    # Output settings
    output_format: str = "text"  # "text" or "json"
    encoding: str = "utf-8"

    # Worker threads for multi-file runs
    jobs: int = 1


@dataclass
class FileReport:
    """Result of checking or fixing one file."""
    path: Path
    diagnostics: list[Diagnostic] = field(default_factory=list)
    fixed: int = 0
    skipped: int = 0
    error: Optional[str] = None
    # Text the diagnostic positions refer to
    text: str = ""
    # Text after fixing (fix runs only)
    fixed_text: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None and not self.diagnostics

    def format_lines(self) -> list[str]:
        if self.error is not None:
            return [f"{self.path}: error: {self.error}"]
        line_index = LineIndex(self.text)
        return [format_diagnostic(d, line_index) for d in self.diagnostics]

    def to_dict(self) -> dict:
        line_index = LineIndex(self.text)
        diagnostics = []
        for diagnostic in self.diagnostics:
            entry = diagnostic.to_dict()
            start = line_index.position(diagnostic.span.start)
            end = line_index.position(diagnostic.span.end)
            entry["start"] = {"line": start.line + 1, "column": start.character + 1}
            entry["end"] = {"line": end.line + 1, "column": end.character + 1}
            diagnostics.append(entry)
        return {
            "path": str(self.path),
            "diagnostics": diagnostics,
            "fixed": self.fixed,
            "skipped": self.skipped,
            "error": self.error,
        }


def format_diagnostic(diagnostic: Diagnostic, line_index: LineIndex) -> str:
    """Render a diagnostic as ``path:line:col: severity rule: message``.

    Args:
        diagnostic: Diagnostic to render.
        line_index: Line index of the text the diagnostic was reported on.

    Returns:
        Single-line, 1-based description.
    """
    position = line_index.position(diagnostic.span.start)
    path = diagnostic.path or "<text>"
    return (
        f"{path}:{position.line + 1}:{position.character + 1}: "
        f"{diagnostic.severity.value} {diagnostic.rule_id}: {diagnostic.message}"
    )


class LintPipeline:
    """Orchestrates redundant blank-line checks and fixes.

    Pipeline stages:
    1. Lexing - Split source into tokens with trivia
    2. Detection - Find redundant blank-line runs per token
    3. Fixing - Rewrite the anchor tokens' trivia and re-emit text

    Files are independent analysis units and may be processed in parallel.
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        """Initialize the pipeline.

        Args:
            config: Pipeline configuration.
        """
        self.config = config or PipelineConfig()
        self.detector = BlankRunDetector(self.config.detector_config)
        self.rewriter = TriviaRewriter(self.config.detector_config)
        self.fixer = BatchFixer(self.rewriter)
        self._lexer: Optional[LexerBase] = None

    @property
    def lexer(self) -> LexerBase:
        """Get or create the lexer backend."""
        if self._lexer is None:
            factory = LEXERS.get(self.config.lexer)
            if factory is None:
                raise UnknownLexerError(f"Unknown lexer: {self.config.lexer}")
            self._lexer = factory()
        return self._lexer

    def parse(self, text: str, path: Optional[Union[str, Path]] = None) -> SyntaxTree:
        """Lex text into a syntax tree, applying the generated-code policy."""
        tree = self.lexer.lex(text, path)
        if tree.is_generated and not self.config.skip_generated:
            tree = replace(tree, is_generated=False)
        return tree

    def check_text(self, text: str, path: Optional[Union[str, Path]] = None) -> list[Diagnostic]:
        """Report redundant blank-line runs in source text.

        Args:
            text: Source text.
            path: Optional path used for generated-code checks and reporting.

        Returns:
            Diagnostics in source order.
        """
        return self.detector.analyze(self.parse(text, path))

    def fix_text(self, text: str, path: Optional[Union[str, Path]] = None) -> FixResult:
        """Remove redundant blank lines from source text.

        Args:
            text: Source text.
            path: Optional path used for generated-code checks and reporting.

        Returns:
            FixResult; ``result.text`` is the rewritten source.
        """
        tree = self.parse(text, path)
        diagnostics = self.detector.analyze(tree)
        if not diagnostics:
            return FixResult(tree=tree)
        return self.fixer.fix_all(tree, diagnostics)

    def check_file(self, path: Union[str, Path]) -> FileReport:
        """Check a single file."""
        path = Path(path)
        try:
            text = self._read(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            return FileReport(path=path, error=str(e))

        diagnostics = self.check_text(text, path)
        return FileReport(path=path, diagnostics=diagnostics, text=text)

    def fix_file(self, path: Union[str, Path], write: bool = True) -> FileReport:
        """Fix a single file.

        Args:
            path: File to fix.
            write: Write the result back to ``path``.

        Returns:
            FileReport whose diagnostics are those found before fixing.
        """
        path = Path(path)
        try:
            text = self._read(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            return FileReport(path=path, error=str(e))

        result = self.fix_text(text, path)
        report = FileReport(
            path=path,
            diagnostics=result.applied + result.skipped,
            fixed=len(result.applied),
            skipped=len(result.skipped),
            text=text,
            fixed_text=result.text,
        )
        report.diagnostics.sort(key=lambda d: d.span.start)

        if write and result.changed:
            try:
                self._write(path, result.text)
            except OSError as e:
                logger.error(f"Failed to write {path}: {e}")
                report.error = str(e)
                return report
            logger.info(f"Fixed {report.fixed} runs in {path}")
        return report

    def collect_files(self, paths: Iterable[Union[str, Path]]) -> list[Path]:
        """Expand directories into the source files they contain.

        Args:
            paths: Files and directories.

        Returns:
            Sorted, de-duplicated file list. Explicit files are always kept.
        """
        files = set()
        for entry in paths:
            entry = Path(entry)
            if not entry.is_dir():
                files.add(entry)
                continue
            if self.config.file_patterns:
                for pattern in self.config.file_patterns:
                    files.update(p for p in entry.rglob(pattern) if p.is_file())
            else:
                files.update(
                    p for p in entry.rglob("*") if p.is_file() and self.lexer.supports(p)
                )
        return sorted(files)

    def check_paths(self, paths: Iterable[Union[str, Path]]) -> list[FileReport]:
        """Check every file under the given paths."""
        files = self.collect_files(paths)
        logger.info(f"Checking {len(files)} files")
        return self._run_each(self.check_file, files)

    def fix_paths(self, paths: Iterable[Union[str, Path]], write: bool = True) -> list[FileReport]:
        """Fix every file under the given paths."""
        files = self.collect_files(paths)
        logger.info(f"Fixing {len(files)} files")
        return self._run_each(lambda p: self.fix_file(p, write=write), files)

    def _run_each(self, func: Callable[[Path], FileReport], files: list[Path]) -> list[FileReport]:
        if self.config.jobs <= 1 or len(files) <= 1:
            return [func(f) for f in files]
        with ThreadPoolExecutor(max_workers=self.config.jobs) as executor:
            return list(executor.map(func, files))

    def _read(self, path: Path) -> str:
        # newline='' keeps \r\n intact so positions and rewrites match the file
        with open(path, 'r', encoding=self.config.encoding, newline='') as f:
            return f.read()

    def _write(self, path: Path, text: str) -> None:
        with open(path, 'w', encoding=self.config.encoding, newline='') as f:
            f.write(text)


def check_source(text: str, min_blank_lines: int = 2) -> list[Diagnostic]:
    """Quick check for simple use cases.

    Args:
        text: Source text.
        min_blank_lines: Blank lines in one run that trigger a diagnostic.

    Returns:
        Diagnostics in source order.
    """
    config = PipelineConfig(detector_config=DetectorConfig(min_blank_lines=min_blank_lines))
    return LintPipeline(config).check_text(text)


def fix_source(text: str, min_blank_lines: int = 2) -> str:
    """Quick fix for simple use cases.

    Args:
        text: Source text.
        min_blank_lines: Blank lines in one run that trigger a diagnostic.

    Returns:
        Source text with redundant blank lines removed.
    """
    config = PipelineConfig(detector_config=DetectorConfig(min_blank_lines=min_blank_lines))
    return LintPipeline(config).fix_text(text).text
