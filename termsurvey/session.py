"""
One live terminal session per ask()/prompt() call.

The session owns everything a prompt needs while it holds the terminal: the
terminal adapter in raw mode, the background input exchange, the renderer, the
color theme and the diagnostic logger. Prompts run strictly one at a time
inside it.
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import Optional

from termsurvey.config import PromptConfig
from termsurvey.core.exchange import InputExchange
from termsurvey.errors import Interrupted
from termsurvey.renderer import Renderer
from termsurvey.ui.base import Terminal
from termsurvey.ui.cli import StreamTerminal
from termsurvey.ui.keys import Key, KeyDecoder, KeyEvent
from termsurvey.utils.logging_utils import LoggingHandler
from termsurvey.utils.output_utils import Theme


class PromptSession:
    def __init__(
        self,
        config: Optional[PromptConfig] = None,
        *,
        terminal: Optional[Terminal] = None,
        logger: Optional[LoggingHandler] = None,
    ) -> None:
        self.config = config or PromptConfig.build()
        self._terminal = terminal
        self.logger = logger or LoggingHandler(self.config.log_options)
        self._stack: Optional[ExitStack] = None
        self._exchange: Optional[InputExchange] = None
        self._renderer: Optional[Renderer] = None
        self._theme: Optional[Theme] = None

    # Lifecycle -----------------------------------------------------------
    def __enter__(self) -> 'PromptSession':
        if self._terminal is None:
            streams = self.config.streams()
            self._terminal = StreamTerminal(streams.stdin, streams.stdout, streams.stderr)
        self._theme = self.config.theme()
        self._renderer = Renderer(self._terminal, self.logger)
        self._stack = ExitStack()
        self._stack.enter_context(self._terminal.raw())
        decoder = KeyDecoder(self._terminal.read_char)
        self._exchange = InputExchange(decoder.read_key, self.config.cancel)
        self._stack.callback(self._exchange.close)
        settings = self.config.effective()
        settings['tty'] = self._terminal.capabilities.is_tty
        self.logger.settings(settings)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is not None and not isinstance(exc, Interrupted):
            self.logger.error('session', exc)
        stack, self._stack = self._stack, None
        if stack is not None:
            stack.close()

    # Accessors -----------------------------------------------------------
    @property
    def terminal(self) -> Terminal:
        self._require_open()
        return self._terminal

    @property
    def renderer(self) -> Renderer:
        self._require_open()
        return self._renderer

    @property
    def theme(self) -> Theme:
        self._require_open()
        return self._theme

    def _require_open(self) -> None:
        if self._stack is None:
            raise RuntimeError('prompt session is not open; use it as a context manager')

    # Input ---------------------------------------------------------------
    def read_key(self) -> KeyEvent:
        """Block for the next key. Ctrl-C, Ctrl-D, end of input and cancellation raise Interrupted."""
        self._require_open()
        key = self._exchange.get()
        if self.logger.is_enabled('input', 'detail'):
            # Typed characters are never logged; they may be a password
            self.logger.input_detail({'key': key.name if isinstance(key, Key) else 'CHAR'})
        if key is Key.INTERRUPT:
            raise Interrupted('interrupt')
        if key is Key.EOF:
            raise Interrupted('eof')
        return key
