"""Raw-ish keyboard input: cbreak mode and key polling with a bounded timeout."""

from __future__ import annotations

import os
import select
import sys
import termios
import time
import tty
from typing import IO, Any, Optional

ESC = "\x1b"
CTRL_C = "\x03"
EXIT_KEYS = {"q", "Q", ESC, CTRL_C}
ESCAPE_SEQUENCE_WAIT = 0.05


def is_exit_key(key: str | None) -> bool:
    return key in EXIT_KEYS


class KeyReader:
    """Puts the terminal in cbreak mode while in use and restores it after.

    When the stream is not a terminal (piped input, tests) nothing is changed
    and ``poll`` only waits for data.
    """

    def __init__(self, stream: Optional[IO[Any]] = None):
        self.stream = stream if stream is not None else sys.stdin
        self._saved_settings = None
        self._eof = False

    def __enter__(self) -> KeyReader:
        if self.stream.isatty():
            fd = self.stream.fileno()
            self._saved_settings = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        return self

    def __exit__(self, *exc_info) -> None:
        self.restore()

    def restore(self) -> None:
        if self._saved_settings is not None:
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._saved_settings)
            self._saved_settings = None

    def _readable(self, timeout: float) -> bool:
        return bool(select.select([self.stream], [], [], max(0.0, timeout))[0])

    def poll(self, timeout: float) -> str | None:
        """Wait up to ``timeout`` seconds for a key. Returns None on timeout.

        A lone Esc is returned as ``ESC``; escape sequences (arrow keys and
        the like) come back whole so they are not mistaken for Esc.
        """
        if self._eof:
            time.sleep(max(0.0, timeout))
            return None
        if not self._readable(timeout):
            return None
        # read the fd directly; a buffered read(1) would swallow the rest of an
        # escape sequence and hide it from select
        fd = self.stream.fileno()
        chunk = os.read(fd, 1)
        if not chunk:
            self._eof = True
            return None
        key = chunk.decode(errors="replace")
        if key == ESC and self._readable(ESCAPE_SEQUENCE_WAIT):
            key += os.read(fd, 2).decode(errors="replace")
        return key
