"""
Incremental erase-and-redraw of a prompt's output.

The renderer remembers how many rows its previous pass advanced the cursor
(soft wraps included) and erases exactly those rows before drawing again. After
finalize() the frame is reset, so the finalized answer stays in scrollback.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Optional

from termsurvey.ui.base import Terminal
from termsurvey.utils.logging_utils import LoggingHandler

_ANSI_RE = re.compile(r'\x1b\[[0-9;?]*[A-Za-z]')

ERASE_LINE = '\x1b[2K'
CURSOR_UP = '\x1b[1A'


@dataclass(frozen=True)
class RenderFrame:
    line_count: int = 0  # rows the cursor advanced while writing the pass
    byte_count: int = 0


def char_width(ch: str) -> int:
    """Display width of a character in terminal cells."""
    o = ord(ch)
    if 0x20 <= o <= 0x7E:
        return 1
    if o < 0x20 or o == 0x7F:
        return 0
    if unicodedata.east_asian_width(ch) in ('W', 'F'):
        return 2
    if unicodedata.category(ch).startswith('M'):
        return 0
    return 1


def text_width(text: str) -> int:
    return sum(char_width(ch) for ch in _ANSI_RE.sub('', text))


def count_rows(text: str, width: int) -> int:
    """Number of rows the cursor moves down while writing text at column 0."""
    if width <= 0:
        width = 1
    rows = 0
    segments = text.split('\n')
    for i, segment in enumerate(segments):
        w = text_width(segment)
        if w > 0:
            # A segment that exactly fills the row leaves the cursor on that row
            rows += (w - 1) // width
        if i < len(segments) - 1:
            rows += 1
    return rows


def erase_sequence(frame: RenderFrame) -> str:
    if frame.byte_count == 0 and frame.line_count == 0:
        return ''
    return '\r' + ERASE_LINE + (CURSOR_UP + ERASE_LINE) * frame.line_count


class Renderer:
    def __init__(self, terminal: Terminal, logger: Optional[LoggingHandler] = None) -> None:
        self.terminal = terminal
        self.logger = logger
        self.frame = RenderFrame()

    def render(self, text: str, cursor_back: int = 0) -> None:
        """Replace the previous pass with text, leaving the cursor cursor_back cells from its end."""
        out = erase_sequence(self.frame) + text
        if cursor_back > 0:
            out += f'\x1b[{cursor_back}D'
        self.terminal.write(out)
        self.frame = RenderFrame(
            line_count=count_rows(text, self.terminal.width()),
            byte_count=len(text.encode('utf-8')),
        )
        if self.logger is not None:
            self.logger.render_detail({'lines': self.frame.line_count, 'bytes': self.frame.byte_count})

    def finalize(self, text: str) -> None:
        """Draw the last pass and make it permanent."""
        if not text.endswith('\n'):
            text += '\n'
        self.render(text)
        self.reset()

    def reset(self) -> None:
        self.frame = RenderFrame()
