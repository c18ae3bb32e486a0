"""Classification of generated (machine-written) source files."""

from pathlib import Path
from typing import Iterable, Optional, Union

from .models import Trivia, TriviaKind


GENERATED_SUFFIXES = (
    ".g.cs",
    ".g.i.cs",
    ".designer.cs",
    ".generated.cs",
)

GENERATED_PREFIXES = (
    "TemporaryGeneratedFile_",
)

GENERATED_MARKERS = (
    "<auto-generated",
    "<autogenerated",
)


def is_generated_path(path: Optional[Union[str, Path]]) -> bool:
    """Check if a file name follows a generated-code naming convention."""
    if path is None:
        return False
    name = Path(path).name
    lowered = name.lower()
    if any(lowered.endswith(suffix) for suffix in GENERATED_SUFFIXES):
        return True
    return any(name.startswith(prefix) for prefix in GENERATED_PREFIXES)


def has_generated_header(leading_trivia: Iterable[Trivia]) -> bool:
    """Check the comments before the first token for an auto-generated marker."""
    for trivia in leading_trivia:
        if trivia.kind != TriviaKind.COMMENT:
            continue
        lowered = trivia.text.lower()
        if any(marker in lowered for marker in GENERATED_MARKERS):
            return True
    return False


def is_generated(path: Optional[Union[str, Path]], leading_trivia: Iterable[Trivia]) -> bool:
    """Decide whether an analysis unit should be skipped as generated code.

    Args:
        path: Path of the unit, if it came from a file.
        leading_trivia: Leading trivia of the unit's first token.

    Returns:
        True if either the file name or the header comment marks it generated.
    """
    return is_generated_path(path) or has_generated_header(leading_trivia)
