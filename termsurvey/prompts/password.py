from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

from termsurvey.prompts.base import EngineState, LinePrompt
from termsurvey.session import PromptSession
from termsurvey.templates import password_template


@dataclass
class Password(LinePrompt):
    """Hidden line input. Typed characters echo as the configured hide character."""
    message: str
    help: str = ''

    kind = 'password'
    secret = True

    def on_line(self, state: EngineState, text: str) -> Any:
        return text

    def draw(self, session: PromptSession, state: EngineState) -> Tuple[str, int]:
        mask = session.config.hide_character * len(state.line)
        d = self.data(session, state, buffer=mask)
        back = state.line.cursor_back if session.config.hide_character else 0
        return password_template(d), back

    def draw_answer(self, session: PromptSession, state: EngineState, answer: Any) -> str:
        return password_template(self.data(session, state, show_answer=True))
