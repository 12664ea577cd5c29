from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Tuple

from termsurvey.errors import InputError
from termsurvey.prompts.base import EngineState, LinePrompt
from termsurvey.session import PromptSession
from termsurvey.templates import confirm_template

_YES_RE = re.compile(r'(?i)y(es)?')
_NO_RE = re.compile(r'(?i)no?')


@dataclass
class Confirm(LinePrompt):
    """Yes/no question; an empty line takes the default."""
    message: str
    default: bool = False
    help: str = ''

    kind = 'confirm'

    def on_line(self, state: EngineState, text: str) -> Any:
        if text == '':
            return self.default
        if _YES_RE.fullmatch(text):
            return True
        if _NO_RE.fullmatch(text):
            return False
        raise InputError(f'"{text}" is not a valid answer, please try again.')

    def draw(self, session: PromptSession, state: EngineState) -> Tuple[str, int]:
        d = self.data(session, state, buffer=state.line.text)
        return confirm_template(d, self.default), state.line.cursor_back

    def draw_answer(self, session: PromptSession, state: EngineState, answer: Any) -> str:
        d = self.data(session, state, show_answer=True, answer='Yes' if answer else 'No')
        return confirm_template(d, self.default)
