"""
Prompt base classes and the per-question engine loop.

Every prompt kind runs the same state machine:

    RENDERING -> AWAITING_INPUT -> VALIDATING -> FINALIZING -> DONE
                       ^               |
                       +-- RENDERING <-+  (input error or validation rejection)

Subclasses only decide how a key changes their state, when an answer is
resolved, and which template draws them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Set, Tuple

from termsurvey.config import PromptConfig
from termsurvey.errors import InputError
from termsurvey.session import PromptSession
from termsurvey.templates import TemplateData
from termsurvey.ui.keys import Key, KeyEvent, as_text, is_printable

Validator = Callable[[Any], None]

# Returned by key handlers while the prompt has no answer yet
NO_ANSWER = object()


class PromptState(Enum):
    RENDERING = 'rendering'
    AWAITING_INPUT = 'awaiting_input'
    VALIDATING = 'validating'
    FINALIZING = 'finalizing'
    DONE = 'done'


class LineBuffer:
    """Single-line edit buffer with a cursor."""

    def __init__(self, text: str = '') -> None:
        self._chars: List[str] = list(text)
        self.pos = len(self._chars)

    @property
    def text(self) -> str:
        return ''.join(self._chars)

    @property
    def cursor_back(self) -> int:
        """Cells between the cursor and the end of the line."""
        return len(self._chars) - self.pos

    def __len__(self) -> int:
        return len(self._chars)

    def clear(self) -> None:
        self._chars = []
        self.pos = 0

    def apply(self, key: KeyEvent) -> bool:
        """Apply an editing key; False if the key does not edit lines."""
        if is_printable(key):
            self._chars.insert(self.pos, as_text(key))
            self.pos += 1
        elif key is Key.BACKSPACE:
            if self.pos > 0:
                self.pos -= 1
                del self._chars[self.pos]
        elif key is Key.DELETE:
            if self.pos < len(self._chars):
                del self._chars[self.pos]
        elif key is Key.LEFT:
            self.pos = max(0, self.pos - 1)
        elif key is Key.RIGHT:
            self.pos = min(len(self._chars), self.pos + 1)
        elif key is Key.HOME:
            self.pos = 0
        elif key is Key.END:
            self.pos = len(self._chars)
        else:
            return False
        return True


@dataclass
class EngineState:
    """Mutable state of one prompt while it owns the terminal."""
    error: Optional[str] = None
    show_help: bool = False
    line: LineBuffer = field(default_factory=LineBuffer)
    lines: List[str] = field(default_factory=list)
    filter: str = ''
    selected: int = 0
    checked: Set[int] = field(default_factory=set)
    seed: Optional[str] = None


class Prompt:
    """Base class for all prompt kinds.

    Subclasses are dataclasses carrying at least ``message`` and ``help``.
    """

    message: str
    help: str = ''
    # Answers of secret prompts are never written to the diagnostic log
    secret = False

    # Public entry point ---------------------------------------------------
    def prompt(self, config: Optional[PromptConfig] = None, **options: Any) -> Any:
        """Ask this prompt alone on its own terminal session and return the raw answer."""
        cfg = PromptConfig.build(config, **options)
        with PromptSession(cfg) as session:
            return self.run(session, cfg.validators)

    # Engine -----------------------------------------------------------------
    def run(self, session: PromptSession, validators: Sequence[Validator] = ()) -> Any:
        """Drive the state machine until an answer passes every validator."""
        self.check()
        state = self.initial_state(session)
        logger = session.logger
        logger.prompt_event('prompt_start', {'kind': self.kind, 'message': self.message})
        hidden = self.hides_cursor and not session.config.show_cursor
        if hidden:
            session.terminal.hide_cursor()
        phase = PromptState.RENDERING
        answer: Any = NO_ANSWER
        try:
            while phase is not PromptState.DONE:
                if phase is PromptState.RENDERING:
                    text, back = self.draw(session, state)
                    session.renderer.render(text, back)
                    phase = PromptState.AWAITING_INPUT
                elif phase is PromptState.AWAITING_INPUT:
                    key = session.read_key()
                    try:
                        answer = self.on_key(session, state, key)
                    except InputError as e:
                        state.error = str(e)
                        self.reset_input(state)
                        answer = NO_ANSWER
                    phase = PromptState.RENDERING if answer is NO_ANSWER else PromptState.VALIDATING
                elif phase is PromptState.VALIDATING:
                    try:
                        for validate in validators:
                            outcome = validate(answer)
                            # A returned exception rejects the answer like a raised one
                            if isinstance(outcome, BaseException):
                                raise ValueError(str(outcome))
                    except ValueError as e:
                        state.error = str(e)
                        logger.prompt_event('answer_rejected', {'kind': self.kind, 'error': state.error})
                        self.on_rejected(state, answer)
                        phase = PromptState.RENDERING
                    else:
                        state.error = None
                        phase = PromptState.FINALIZING
                elif phase is PromptState.FINALIZING:
                    session.renderer.finalize(self.draw_answer(session, state, answer))
                    phase = PromptState.DONE
        finally:
            if hidden:
                session.terminal.show_cursor()

        logger.prompt_event('prompt_done', {'kind': self.kind, 'answer_type': type(answer).__name__})
        if not self.secret:
            logger.prompt_detail('answer', {'kind': self.kind, 'answer': repr(answer)})
        return answer

    # Hooks ------------------------------------------------------------------
    kind = 'prompt'
    hides_cursor = False

    def check(self) -> None:
        """Raise ValueError when the prompt is misconfigured."""

    def initial_state(self, session: PromptSession) -> EngineState:
        return EngineState()

    def on_key(self, session: PromptSession, state: EngineState, key: KeyEvent) -> Any:
        raise NotImplementedError

    def reset_input(self, state: EngineState) -> None:
        state.line.clear()

    def on_rejected(self, state: EngineState, answer: Any) -> None:
        self.reset_input(state)

    def draw(self, session: PromptSession, state: EngineState) -> Tuple[str, int]:
        raise NotImplementedError

    def draw_answer(self, session: PromptSession, state: EngineState, answer: Any) -> str:
        raise NotImplementedError

    # Helpers ----------------------------------------------------------------
    def data(self, session: PromptSession, state: EngineState, **extra: Any) -> TemplateData:
        return TemplateData(
            message=self.message,
            config=session.config,
            theme=session.theme,
            help=self.help or '',
            show_help=state.show_help,
            error=state.error,
            **extra,
        )

    def wants_help(self, session: PromptSession, key: str) -> bool:
        return bool(self.help) and key == session.config.help_input


class LinePrompt(Prompt):
    """A prompt answered by one edited line, submitted with Enter."""

    accepts_help = True

    def on_key(self, session: PromptSession, state: EngineState, key: KeyEvent) -> Any:
        if key is Key.ENTER:
            text = state.line.text
            state.line.clear()
            if self.accepts_help and self.wants_help(session, text):
                state.show_help = True
                return NO_ANSWER
            return self.on_line(state, text)
        state.line.apply(key)
        return NO_ANSWER

    def on_line(self, state: EngineState, text: str) -> Any:
        raise NotImplementedError
