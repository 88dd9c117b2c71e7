"""
Line sources for highlite.

This subpackage provides everything the pipeline can read lines from.

Modules:
    - base: the LineSource interface and per-line decoding
    - stream: standard input and static files, read to EOF
    - tailer: a growing file, followed like `tail -F`
    - journal: the systemd journal, followed via journalctl

Every source hands out lines through next_line(); static sources
return None when done, follow sources block until more input arrives.
"""

from .base import LineSource, decode_line
from .journal import FollowedJournalSource
from .stream import FileSource, StdinSource, StreamSource
from .tailer import FollowedFileSource

__all__ = [
    "FileSource",
    "FollowedFileSource",
    "FollowedJournalSource",
    "LineSource",
    "StdinSource",
    "StreamSource",
    "decode_line",
]
