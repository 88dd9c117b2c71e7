"""
Error taxonomy for highlite.

Every failure the tool knows how to report derives from HighliteError.
The classes split into two groups:

    Fatal, raised before any line is processed:
        - ConfigError: malformed rules, bad YAML, unknown preset
        - SourceSetupError: the input file or journal cannot be opened

    Per-line or terminal, raised while the pipeline is running:
        - LineDecodeError: one line's bytes are not valid text
        - FollowInterruptedError: a follow wait was cancelled
"""

from typing import Optional


class HighliteError(Exception):
    """Base class for all highlite errors."""


class ConfigError(HighliteError):
    """A rule, rule file or preset could not be turned into rules."""


class SourceSetupError(HighliteError):
    """The requested input source is unavailable or inaccessible."""


class LineDecodeError(HighliteError):
    """
    A single line could not be decoded as text.

    Attributes:
        raw: The line's bytes with the terminator stripped.
        line_number: 1-based position of the line in its source, if known.
    """

    def __init__(self, raw: bytes, line_number: Optional[int] = None, reason: str = ""):
        self.raw = raw
        self.line_number = line_number
        self.reason = reason
        where = f"line {line_number}" if line_number is not None else "line"
        super().__init__(f"{where}: cannot decode as UTF-8 ({reason})")


class FollowInterruptedError(HighliteError):
    """A follow source was cancelled while waiting for more input."""
