"""Exception types raised by redundant-lines."""


class RedundantLinesError(Exception):
    """Base class for all redundant-lines errors."""


class ThresholdMisconfiguration(RedundantLinesError, ValueError):
    """Raised when the blank-line threshold is below the allowed floor."""

    def __init__(self, value: int, minimum: int = 2):
        self.value = value
        self.minimum = minimum
        super().__init__(
            f"min_blank_lines must be >= {minimum}, got {value}"
        )


class StaleLocation(RedundantLinesError):
    """Raised when a diagnostic's anchor token no longer resolves in a tree."""

    def __init__(self, anchor: int, reason: str = "token not found"):
        self.anchor = anchor
        self.reason = reason
        super().__init__(f"Stale anchor at offset {anchor}: {reason}")


class UnknownLexerError(RedundantLinesError, ValueError):
    """Raised when a lexer backend name is not registered."""
