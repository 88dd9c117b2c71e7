"""
Sources that read a byte stream to its end: standard input and files.
"""

import sys
from pathlib import Path
from typing import BinaryIO, Optional

from ..errors import SourceSetupError
from .base import LineSource, decode_line


class StreamSource(LineSource):
    """
    Read lines from a binary stream until EOF.

    Once readline() returns no data the source is exhausted for good and
    every later call returns None without touching the stream again.
    """

    def __init__(self, stream: BinaryIO, name: str = "stream"):
        super().__init__()
        self.stream = stream
        self.name = name

    def next_line(self) -> Optional[str]:
        if self.exhausted:
            return None

        raw = self.stream.readline()
        if not raw:
            self.exhausted = True
            return None

        self.line_number += 1
        return decode_line(raw, self.line_number)


class StdinSource(StreamSource):
    """
    Standard input.

    Input may come from a live pipe, so output is flushed line by line.
    The stream is not closed by close(); it belongs to the process.
    """

    live = True

    def __init__(self, stream: Optional[BinaryIO] = None):
        super().__init__(stream if stream is not None else sys.stdin.buffer, name="stdin")

    @property
    def interactive(self) -> bool:
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())


class FileSource(StreamSource):
    """
    A regular file, read once from start to end.

    Raises:
        SourceSetupError: If the file is missing, a directory or unreadable.
    """

    def __init__(self, path):
        self.path = Path(path)
        try:
            stream = self.path.open("rb")
        except FileNotFoundError as exc:
            raise SourceSetupError(f"File not found: {self.path}") from exc
        except IsADirectoryError as exc:
            raise SourceSetupError(f"Is a directory: {self.path}") from exc
        except PermissionError as exc:
            raise SourceSetupError(f"Permission denied: {self.path}") from exc
        except OSError as exc:
            raise SourceSetupError(f"Cannot open {self.path}: {exc.strerror or exc}") from exc
        super().__init__(stream, name=str(self.path))

    def close(self) -> None:
        self.stream.close()
