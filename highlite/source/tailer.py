"""
Follow mode for growing files.

This module provides FollowedFileSource, which behaves like `tail -F`:
it emits the last few lines of a file, then blocks and emits new lines
as another process appends them.

Design Decisions:
    - Uses polling rather than inotify for cross-platform simplicity
    - Handles file truncation and rotation gracefully
    - Buffers partial lines to handle incomplete writes
    - Works on bytes and decodes line by line, so one bad line does not
      spoil its neighbours
"""

import os
import time
from collections import deque
from pathlib import Path
from typing import Callable, Deque, List, Optional, Tuple

from ..errors import FollowInterruptedError, SourceSetupError
from ..utils.log import get_logger
from .base import LineSource, decode_line

log = get_logger("tailer")

# Block size used when scanning backwards for the initial lines
TAIL_BLOCK_SIZE = 8192

# Bytes from the start of the file kept to recognise a rewritten file
HEAD_SIZE = 64

DEFAULT_POLL_INTERVAL = 0.25
DEFAULT_INITIAL_LINES = 10


class FollowedFileSource(LineSource):
    """
    Tail a single file and hand out lines as they are appended.

    Tracks the read offset and polls for new content. A file that shrinks
    below the offset, or whose already-read bytes have changed (truncated
    and refilled between polls, as with copytruncate), is read again from
    the start; a file replaced by a new one (log rotation) is re-opened.

    Attributes:
        path: Path to the file being followed.
        offset: Current read position in the file.
        partial: Incomplete final line (no trailing newline yet).
        poll_interval: Seconds to sleep when no new data is available.

    Example:
        >>> with FollowedFileSource("/var/log/app.log") as source:
        ...     while True:
        ...         print(source.next_line())
    """

    follows = True
    live = True

    def __init__(
        self,
        path,
        initial_lines: int = DEFAULT_INITIAL_LINES,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Open the file and queue its last `initial_lines` lines.

        Args:
            path: File to follow. It must exist when following starts.
            initial_lines: How many existing lines to emit before following.
                           0 starts at the current end of the file.
            poll_interval: Seconds between checks for new data.
            sleep: Wait function, replaceable in tests.

        Raises:
            SourceSetupError: If the file is missing, a directory or
                              unreadable.
        """
        super().__init__()
        if initial_lines < 0:
            raise ValueError("initial_lines must not be negative")

        self.path = Path(path)
        self.name = str(self.path)
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._file = None
        self._identity: Optional[Tuple[int, int]] = None
        # Track where we left off reading in the file
        self.offset = 0
        # Buffer for an incomplete line that doesn't end with a newline yet
        self.partial = b""
        # First bytes of the file and the last byte read, as of self.offset
        self._head = b""
        self._last_byte = b""
        # Complete lines read from the file but not handed out yet
        self.pending: Deque[bytes] = deque()

        try:
            if self.path.is_dir():
                raise SourceSetupError(f"Is a directory: {self.path}")
            self._open()
        except FileNotFoundError as exc:
            raise SourceSetupError(f"File not found: {self.path}") from exc
        except PermissionError as exc:
            raise SourceSetupError(f"Permission denied: {self.path}") from exc
        except OSError as exc:
            raise SourceSetupError(f"Cannot open {self.path}: {exc.strerror or exc}") from exc

        size = os.fstat(self._file.fileno()).st_size
        lines, self.partial = self._read_tail(size, initial_lines)
        self.pending.extend(lines)
        self.offset = size
        self._remember_content()

    def _open(self) -> None:
        """(Re)open the file and remember which file we have open."""
        handle = self.path.open("rb")
        if self._file is not None:
            self._file.close()
        self._file = handle
        info = os.fstat(handle.fileno())
        self._identity = (info.st_dev, info.st_ino)

    def _read_tail(self, size: int, count: int) -> Tuple[List[bytes], bytes]:
        """
        Return the last `count` complete lines before `size`, plus any
        trailing bytes after the last newline.

        Reads backwards in blocks until enough newlines have been seen,
        so following a large log doesn't read the whole file.
        """
        if count == 0 or size == 0:
            return [], b""

        pos = size
        data = b""
        # count lines need count + 1 newlines to be sure the first is whole
        while pos > 0 and data.count(b"\n") <= count:
            step = min(TAIL_BLOCK_SIZE, pos)
            pos -= step
            self._file.seek(pos)
            data = self._file.read(step) + data

        lines = data.split(b"\n")
        partial = lines.pop()
        return lines[-count:], partial

    def _check_file(self) -> Optional[os.stat_result]:
        """
        Stat the path and react to rotation or truncation.

        Returns:
            The stat result for the open file, or None if the path is
            currently missing (rotated away and not yet recreated).
        """
        try:
            info = self.path.stat()
        except FileNotFoundError:
            return None

        if (info.st_dev, info.st_ino) != self._identity:
            # A different file now lives at the path - start it from the top
            try:
                self._open()
            except OSError as exc:
                log.warning("Cannot reopen %s: %s", self.path, exc)
                return None
            log.info("%s was replaced; following the new file", self.path)
            self._restart()
            return os.fstat(self._file.fileno())

        # Detect truncation, or a rewrite that left the file shorter than
        # what we've read. Either way the old offset is meaningless now.
        if info.st_size < self.offset:
            log.info("%s was truncated; reading from the start", self.path)
            self._restart()
        # Truncated and then written past the old offset between two polls
        elif info.st_size > self.offset and self._rewritten():
            log.info("%s was rewritten; reading from the start", self.path)
            self._restart()

        return info

    def _restart(self) -> None:
        self.offset = 0
        self.partial = b""
        self._remember_content()

    def _remember_content(self) -> None:
        """Record the file's first bytes and the byte just before offset."""
        if self.offset == 0:
            self._head = b""
            self._last_byte = b""
            return
        self._file.seek(0)
        self._head = self._file.read(min(HEAD_SIZE, self.offset))
        self._file.seek(self.offset - 1)
        self._last_byte = self._file.read(1)

    def _rewritten(self) -> bool:
        """Whether bytes already read have changed since they were read."""
        if self.offset == 0:
            return False
        self._file.seek(0)
        head = self._file.read(len(self._head))
        self._file.seek(self.offset - 1)
        return head != self._head or self._file.read(1) != self._last_byte

    def poll(self) -> bool:
        """
        Read any new complete lines into the pending queue.

        Returns:
            bool: True if at least one line is ready to be handed out.
        """
        info = self._check_file()
        if info is None or info.st_size == self.offset:
            return bool(self.pending)

        # Read new content from where we left off
        self._file.seek(self.offset)
        data = self._file.read()
        # The file may have grown since stat(); count what was really read
        self.offset += len(data)
        self._remember_content()

        # Prepend any buffered partial line from the last poll
        parts = (self.partial + data).split(b"\n")
        # Whatever follows the last newline is incomplete - keep it for later
        self.partial = parts.pop()
        self.pending.extend(parts)

        return bool(self.pending)

    def next_line(self) -> Optional[str]:
        """
        Return the next line, waiting for one to be appended if needed.

        Never returns None; following only ends when interrupted.

        Raises:
            LineDecodeError: The next line is not valid UTF-8.
            FollowInterruptedError: Interrupted while waiting for data.
        """
        while not self.pending and not self.poll():
            try:
                self._sleep(self.poll_interval)
            except KeyboardInterrupt as exc:
                raise FollowInterruptedError(f"Stopped following {self.path}") from exc

        raw = self.pending.popleft()
        self.line_number += 1
        return decode_line(raw, self.line_number)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
