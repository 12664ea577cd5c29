from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

from termsurvey.prompts.base import EngineState, LinePrompt
from termsurvey.session import PromptSession
from termsurvey.templates import input_template


@dataclass
class Input(LinePrompt):
    """Free-text line; an empty line takes the default."""
    message: str
    default: str = ''
    help: str = ''

    kind = 'input'

    def on_line(self, state: EngineState, text: str) -> Any:
        return text if text else self.default

    def draw(self, session: PromptSession, state: EngineState) -> Tuple[str, int]:
        d = self.data(session, state, default=self.default, buffer=state.line.text)
        return input_template(d), state.line.cursor_back

    def draw_answer(self, session: PromptSession, state: EngineState, answer: Any) -> str:
        d = self.data(session, state, default=self.default, show_answer=True, answer=str(answer))
        return input_template(d)
