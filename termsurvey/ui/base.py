from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple


@dataclass
class TerminalCapabilities:
    is_tty: bool = False
    raw_mode: bool = False  # True when keystrokes arrive unbuffered and unechoed


class Terminal:
    """Abstract terminal adapter.

    Prompts only talk to this interface: they read one character at a time,
    write text (including ANSI control sequences), and ask for the width so
    soft-wrapped rows can be erased. Implementations decide how the underlying
    streams are switched between raw and line-buffered mode.
    """

    capabilities: TerminalCapabilities = TerminalCapabilities()

    # Input ---------------------------------------------------------------
    def read_char(self) -> str:
        """Return the next character, or '' at end of input."""
        raise NotImplementedError

    # Output --------------------------------------------------------------
    def write(self, text: str) -> None:
        raise NotImplementedError

    def width(self) -> int:
        raise NotImplementedError

    # Modes ---------------------------------------------------------------
    @contextmanager
    def raw(self) -> Iterator[None]:
        yield

    @contextmanager
    def cooked(self) -> Iterator[None]:
        yield

    def child_stdio(self) -> Tuple[Optional[int], Optional[int], Optional[int]]:
        """File descriptors a child process should inherit, None where the stream has none."""
        return None, None, None

    def hide_cursor(self) -> None:
        self.write('\x1b[?25l')

    def show_cursor(self) -> None:
        self.write('\x1b[?25h')
