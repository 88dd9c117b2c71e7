"""
Follow mode for the systemd journal.

The journal is read through `journalctl --follow`, run as a child
process, one record per output line.
"""

import subprocess
from typing import Callable, List, Optional

from ..errors import FollowInterruptedError, SourceSetupError
from ..utils.log import get_logger
from .base import LineSource, decode_line

log = get_logger("journal")

JOURNALCTL = "journalctl"

# Seconds to wait for journalctl to exit after SIGTERM before killing it
TERMINATE_TIMEOUT = 2.0


def journalctl_command(unit: Optional[str] = None, initial_lines: int = 10) -> List[str]:
    """
    Build the journalctl invocation.

    Example:
        >>> journalctl_command("sshd", 5)
        ['journalctl', '--follow', '--lines=5', '--unit', 'sshd']
    """
    command = [JOURNALCTL, "--follow", f"--lines={initial_lines}"]
    if unit:
        command += ["--unit", unit]
    return command


class FollowedJournalSource(LineSource):
    """
    Stream journal records from a journalctl child process.

    Attributes:
        command: The argument list journalctl was started with.
        process: The running child process.
    """

    name = "journal"
    follows = True
    live = True

    def __init__(
        self,
        unit: Optional[str] = None,
        initial_lines: int = 10,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ):
        """
        Start journalctl.

        Args:
            unit: Only show records for this systemd unit.
            initial_lines: Existing records to show before following.
            popen: Process factory, replaceable in tests.

        Raises:
            SourceSetupError: If journalctl is not installed or cannot run.
        """
        super().__init__()
        self.command = journalctl_command(unit, initial_lines)
        try:
            self.process = popen(
                self.command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise SourceSetupError(
                f"{JOURNALCTL} not found; following the journal needs systemd"
            ) from exc
        except OSError as exc:
            raise SourceSetupError(f"Cannot start {JOURNALCTL}: {exc}") from exc

    def next_line(self) -> Optional[str]:
        """
        Return the next journal record, blocking until one is written.

        Returns None only if journalctl exits, which is logged as a warning.

        Raises:
            SourceSetupError: journalctl failed before writing any record.
            LineDecodeError: The record is not valid UTF-8.
            FollowInterruptedError: Interrupted while waiting for a record.
        """
        if self.exhausted:
            return None

        try:
            raw = self.process.stdout.readline()
        except KeyboardInterrupt as exc:
            raise FollowInterruptedError("Stopped following the journal") from exc

        if not raw:
            self.exhausted = True
            status = self.process.wait()
            if status != 0 and self.line_number == 0:
                # Failed before printing anything, e.g. no access to the journal
                raise SourceSetupError(
                    f"{JOURNALCTL} exited with status {status} before any record was read"
                )
            log.warning("%s exited with status %s", JOURNALCTL, status)
            return None

        self.line_number += 1
        return decode_line(raw, self.line_number)

    def close(self) -> None:
        """Stop journalctl if it is still running and reap it."""
        process = self.process
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=TERMINATE_TIMEOUT)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
        if process.stdout is not None:
            process.stdout.close()
