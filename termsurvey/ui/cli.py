from __future__ import annotations

import codecs
import io
import os
import sys
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO, Tuple

from termsurvey.ui.base import Terminal, TerminalCapabilities

if sys.platform != 'win32':
    import termios
else:
    termios = None

DEFAULT_WIDTH = 80


def _fileno(stream) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation, ValueError):
        return None


def _isatty(stream) -> bool:
    return bool(hasattr(stream, 'isatty') and stream.isatty())


class StreamTerminal(Terminal):
    """Terminal over plain text streams, with cbreak mode when stdin is a TTY.

    Any readable/writable text streams work, which is what the tests use
    (io.StringIO for both sides). Raw mode is only applied to a real TTY.
    """

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        *,
        width: Optional[int] = None,
    ) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self._width = width
        self._in_fd = _fileno(self.stdin) if _isatty(self.stdin) else None
        self._saved_attrs = None
        self._decoder = codecs.getincrementaldecoder('utf-8')('replace')
        self._buffered = ''
        self.capabilities = TerminalCapabilities(
            is_tty=self._in_fd is not None and _isatty(self.stdout),
            raw_mode=False,
        )

    # Input ---------------------------------------------------------------
    def read_char(self) -> str:
        if self._in_fd is None:
            return self.stdin.read(1)
        # Bypass the text layer's buffering so single keystrokes arrive immediately
        while not self._buffered:
            data = os.read(self._in_fd, 1)
            if not data:
                return ''
            self._buffered = self._decoder.decode(data)
        ch, self._buffered = self._buffered[0], self._buffered[1:]
        return ch

    # Output --------------------------------------------------------------
    def write(self, text: str) -> None:
        if not text:
            return
        self.stdout.write(text)
        self.stdout.flush()

    def width(self) -> int:
        if self._width:
            return self._width
        fd = _fileno(self.stdout)
        if fd is not None and _isatty(self.stdout):
            try:
                return os.get_terminal_size(fd).columns or DEFAULT_WIDTH
            except OSError:
                return DEFAULT_WIDTH
        return DEFAULT_WIDTH

    # Modes ---------------------------------------------------------------
    @contextmanager
    def raw(self) -> Iterator[None]:
        if termios is None or self._in_fd is None or self._saved_attrs is not None:
            yield
            return
        self._saved_attrs = termios.tcgetattr(self._in_fd)
        self._set_cbreak()
        self.capabilities.raw_mode = True
        try:
            yield
        finally:
            termios.tcsetattr(self._in_fd, termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None
            self.capabilities.raw_mode = False

    @contextmanager
    def cooked(self) -> Iterator[None]:
        if termios is None or self._in_fd is None or self._saved_attrs is None:
            yield
            return
        termios.tcsetattr(self._in_fd, termios.TCSADRAIN, self._saved_attrs)
        self.capabilities.raw_mode = False
        try:
            yield
        finally:
            self._set_cbreak()
            self.capabilities.raw_mode = True

    def _set_cbreak(self) -> None:
        """No echo, no line buffering, no signal keys; output processing stays on."""
        new = termios.tcgetattr(self._in_fd)
        new[3] &= ~(termios.ICANON | termios.ECHO | termios.ECHONL | termios.ISIG | termios.IEXTEN)
        new[1] &= ~termios.ICRNL
        new[6][termios.VMIN] = 1
        new[6][termios.VTIME] = 0
        termios.tcsetattr(self._in_fd, termios.TCSANOW, new)

    def child_stdio(self) -> Tuple[Optional[int], Optional[int], Optional[int]]:
        return _fileno(self.stdin), _fileno(self.stdout), _fileno(self.stderr)
