"""
The main read-highlight-write loop.

This module picks the line source for an invocation and drives it:
one line is read, highlighted and written before the next is read.

Purpose:
    Keeping the loop separate from the CLI lets it run against any
    source and any byte sink, which is how the tests exercise it.

Design Decisions:
    - Undecodable lines are reported on stderr and written through as
      raw bytes, so no input line ever disappears from the output
    - Live sources (stdin, follow modes) flush after every line; static
      files flush once at the end
    - Interrupting a follow source is a normal way to stop, not an error
"""

from dataclasses import dataclass
from typing import BinaryIO, Optional

from .errors import FollowInterruptedError, LineDecodeError
from .highlight import LineHighlighter
from .source import (
    FileSource,
    FollowedFileSource,
    FollowedJournalSource,
    LineSource,
    StdinSource,
)
from .source.tailer import DEFAULT_INITIAL_LINES, DEFAULT_POLL_INTERVAL
from .utils.log import get_logger

log = get_logger("pipeline")

NEWLINE = b"\n"


@dataclass
class PipelineStats:
    """
    Summary of one pipeline run.

    Attributes:
        lines_read: Lines taken from the source, including undecodable ones.
        lines_written: Lines written to the output.
        decode_warnings: Lines passed through raw because they weren't UTF-8.
        interrupted: The run ended because a follow source was interrupted.
        broken_pipe: The run ended because the reader closed the output.
    """

    lines_read: int = 0
    lines_written: int = 0
    decode_warnings: int = 0
    interrupted: bool = False
    broken_pipe: bool = False


def select_source(
    follow_journal: bool = False,
    follow_file=None,
    file=None,
    journal_unit: Optional[str] = None,
    initial_lines: int = DEFAULT_INITIAL_LINES,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    stdin: Optional[BinaryIO] = None,
) -> LineSource:
    """
    Open the one source requested for this invocation.

    Priority, highest first:
        1. follow_journal - the systemd journal
        2. follow_file    - a growing file
        3. file           - a static file
        4. standard input

    Raises:
        SourceSetupError: If the chosen source can't be opened.
    """
    if follow_journal:
        return FollowedJournalSource(unit=journal_unit, initial_lines=initial_lines)
    if follow_file is not None:
        return FollowedFileSource(
            follow_file,
            initial_lines=initial_lines,
            poll_interval=poll_interval,
        )
    if file is not None:
        return FileSource(file)
    return StdinSource(stdin)


def run_pipeline(
    source: LineSource,
    highlighter: Optional[LineHighlighter],
    out: BinaryIO,
) -> PipelineStats:
    """
    Copy every line from source to out, highlighted.

    Args:
        source: Where lines come from. Not closed here; the caller owns it.
        highlighter: Highlighter to apply, or None to pass lines through
                     uncolored.
        out: Byte sink, e.g. sys.stdout.buffer.

    Returns:
        PipelineStats: Counters describing the run.

    Raises:
        KeyboardInterrupt: If a static source is interrupted. Follow sources
                           end the run normally instead.
    """
    stats = PipelineStats()
    live = source.live

    try:
        while True:
            try:
                line = source.next_line()
            except LineDecodeError as exc:
                stats.lines_read += 1
                stats.decode_warnings += 1
                log.warning("%s: %s", source.name, exc)
                out.write(exc.raw + NEWLINE)
            else:
                if line is None:
                    break
                stats.lines_read += 1
                if highlighter is not None:
                    line = highlighter.render(line)
                out.write(line.encode("utf-8") + NEWLINE)

            stats.lines_written += 1
            if live:
                out.flush()

    except FollowInterruptedError as exc:
        log.debug("%s", exc)
        stats.interrupted = True
    except KeyboardInterrupt:
        if not source.follows:
            raise
        stats.interrupted = True
    except BrokenPipeError:
        stats.broken_pipe = True

    if not stats.broken_pipe:
        try:
            out.flush()
        except BrokenPipeError:
            stats.broken_pipe = True

    return stats
