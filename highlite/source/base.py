"""
Common interface for line sources.

A LineSource hands out one line at a time through next_line(). Static
sources (stdin, a file) return None once their input is used up; follow
sources never do, they block until more input arrives.
"""

from typing import Optional

from ..errors import LineDecodeError


def decode_line(raw: bytes, line_number: Optional[int] = None) -> str:
    """
    Strip the line terminator and decode the line as UTF-8.

    Both "\\n" and "\\r\\n" terminators are removed. Sources that split on
    b"\\n" themselves pass lines without it; a leftover "\\r" is still
    dropped.

    Raises:
        LineDecodeError: If the bytes are not valid UTF-8. The error carries
                         the stripped bytes so callers can pass them on.
    """
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise LineDecodeError(raw, line_number, exc.reason) from exc


class LineSource:
    """
    Base class for all line sources.

    Attributes:
        name: Short label used in log messages.
        follows: True for sources that never end on their own.
        live: True when output should be flushed after every line, because
              input may arrive slowly (a pipe, a followed file).
        line_number: Number of lines handed out so far, including lines
                     that failed to decode.
    """

    name = "source"
    follows = False
    live = False

    def __init__(self):
        self.line_number = 0
        self.exhausted = False

    def next_line(self) -> Optional[str]:
        """
        Return the next line without its terminator, or None at the end.

        Raises:
            LineDecodeError: The next line is not valid text. The line is
                             consumed; the following call moves on.
            FollowInterruptedError: A follow wait was cancelled.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release file handles or child processes held by the source."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
