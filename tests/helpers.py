"""Small helpers shared by the test modules."""

import io
import re
import subprocess

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE.sub("", text)


class ScriptedSleep:
    """
    Stand-in for time.sleep that runs one scripted action per call.

    Once the script is used up it raises KeyboardInterrupt, which is how
    a follow session is normally stopped.
    """

    def __init__(self, *actions):
        self.actions = list(actions)
        self.calls = 0

    def __call__(self, seconds: float) -> None:
        self.calls += 1
        if not self.actions:
            raise KeyboardInterrupt
        self.actions.pop(0)()


def append(path, data: bytes):
    """Return an action that appends data to path."""
    def _append():
        with path.open("ab") as f:
            f.write(data)
    return _append


class FakeProcess:
    """Just enough of subprocess.Popen for the journal source."""

    def __init__(self, output: bytes = b"", returncode: int = 0, hang: bool = False):
        self.stdout = io.BytesIO(output)
        self.returncode = returncode
        self.running = True
        self.hang = hang
        self.terminated = False
        self.killed = False

    def poll(self):
        return None if self.running else self.returncode

    def wait(self, timeout=None):
        if self.hang and not self.killed:
            raise subprocess.TimeoutExpired("journalctl", timeout)
        self.running = False
        return self.returncode

    def terminate(self):
        self.terminated = True

    def kill(self):
        self.killed = True


class FakePopen:
    def __init__(self, process):
        self.process = process
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append((args, kwargs))
        return self.process

