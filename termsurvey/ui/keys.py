"""
Decode a character stream into key events.

Printable characters come back as plain one-character strings; everything the
prompts treat specially comes back as a Key member.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Optional, Union


class Key(str, Enum):
    UP = 'key_up'
    DOWN = 'key_down'
    LEFT = 'key_left'
    RIGHT = 'key_right'
    HOME = 'key_home'
    END = 'key_end'
    DELETE = 'key_delete'
    ENTER = 'key_enter'
    BACKSPACE = 'key_backspace'
    TAB = 'key_tab'
    SPACE = 'key_space'
    ESCAPE = 'key_escape'
    INTERRUPT = 'key_interrupt'
    EOF = 'key_eof'


KeyEvent = Union[Key, str]

# Several entries per key to cover xterm, rxvt, tmux and application mode
_ESCAPE_SEQUENCES: Dict[str, Key] = {
    '\x1b[A': Key.UP,
    '\x1bOA': Key.UP,
    '\x1b[B': Key.DOWN,
    '\x1bOB': Key.DOWN,
    '\x1b[C': Key.RIGHT,
    '\x1bOC': Key.RIGHT,
    '\x1b[D': Key.LEFT,
    '\x1bOD': Key.LEFT,
    '\x1b[H': Key.HOME,
    '\x1bOH': Key.HOME,
    '\x1b[1~': Key.HOME,
    '\x1b[7~': Key.HOME,
    '\x1b[F': Key.END,
    '\x1bOF': Key.END,
    '\x1b[4~': Key.END,
    '\x1b[8~': Key.END,
    '\x1b[3~': Key.DELETE,
}

_CONTROL_KEYS: Dict[str, Key] = {
    '\r': Key.ENTER,
    '\n': Key.ENTER,
    '\t': Key.TAB,
    ' ': Key.SPACE,
    '\x7f': Key.BACKSPACE,
    '\x08': Key.BACKSPACE,
    '\x03': Key.INTERRUPT,
    '\x04': Key.EOF,
    '\x01': Key.HOME,
    '\x05': Key.END,
    '\x02': Key.LEFT,
    '\x06': Key.RIGHT,
    '\x0e': Key.DOWN,
    '\x10': Key.UP,
}


def _build_trie(sequences: Dict[str, Key]) -> dict:
    root: dict = {}
    for seq, key in sequences.items():
        node = root
        for ch in seq[:-1]:
            node = node.setdefault(ch, {})
        node[seq[-1]] = key
    return root


_ESCAPE_TRIE = _build_trie(_ESCAPE_SEQUENCES)


class KeyDecoder:
    """Turns single characters from read_char() into key events.

    read_char returns '' at end of input. A CR immediately followed by LF is
    reported as one ENTER.
    """

    def __init__(self, read_char: Callable[[], str]) -> None:
        self._read_char = read_char
        self._pending: Optional[str] = None
        self._after_cr = False

    def read_key(self) -> KeyEvent:
        ch = self._next_char()
        if self._after_cr:
            self._after_cr = False
            if ch == '\n':
                ch = self._next_char()
        if ch == '':
            return Key.EOF
        if ch == '\x1b':
            return self._read_escape()
        if ch == '\r':
            self._after_cr = True
        key = _CONTROL_KEYS.get(ch)
        if key is not None:
            return key
        return ch

    def _next_char(self) -> str:
        if self._pending is not None:
            ch, self._pending = self._pending, None
            return ch
        return self._read_char()

    def _read_escape(self) -> KeyEvent:
        node = _ESCAPE_TRIE['\x1b']
        while True:
            ch = self._read_char()
            nxt = node.get(ch) if ch else None
            if nxt is None:
                # Not a sequence we know: report ESC and replay the character
                if ch:
                    self._pending = ch
                return Key.ESCAPE
            if isinstance(nxt, Key):
                return nxt
            node = nxt


def is_printable(event: KeyEvent) -> bool:
    """True for a plain character the prompts may insert into a line or filter."""
    if isinstance(event, Key):
        return event is Key.SPACE
    return len(event) == 1 and event.isprintable()


def as_text(event: KeyEvent) -> str:
    return ' ' if event is Key.SPACE else str(event)
