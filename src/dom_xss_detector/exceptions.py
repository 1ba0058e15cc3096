"""
Exception hierarchy for DomTaint.

Parse and pattern errors are terminal for an analysis call. Emulation
errors are recovered by the analyzer and never reach the caller.
"""

from typing import Optional


class DomTaintError(Exception):
    """Base class for every error raised by the package."""


class ParseError(DomTaintError):
    """JavaScript source could not be parsed."""

    def __init__(self, message: str, filename: str = "<string>"):
        super().__init__(f"{filename}: {message}")
        self.filename = filename


class PatternError(DomTaintError):
    """A source or sink regular expression failed to compile."""

    def __init__(self, pattern: str, kind: str, reason: Optional[str] = None):
        message = f"Invalid {kind} pattern {pattern!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.pattern = pattern
        self.kind = kind


class EmulationError(DomTaintError):
    """The sandboxed execution of a script failed or timed out."""
