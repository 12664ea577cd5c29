from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

from termsurvey.prompts.base import NO_ANSWER, EngineState, LinePrompt
from termsurvey.session import PromptSession
from termsurvey.templates import multiline_template


@dataclass
class Multiline(LinePrompt):
    """Several lines of text, finished by two consecutive empty lines.

    The two terminating empty lines are not part of the answer; blank lines
    inside the text are kept. The help key is ordinary text here.
    """
    message: str
    default: str = ''
    help: str = ''

    kind = 'multiline'
    accepts_help = False

    def on_line(self, state: EngineState, text: str) -> Any:
        if text == '' and state.lines and state.lines[-1] == '':
            answer = '\n'.join(state.lines[:-1])
            state.lines.clear()
            return answer if answer else self.default
        state.lines.append(text)
        return NO_ANSWER

    def reset_input(self, state: EngineState) -> None:
        state.line.clear()
        state.lines.clear()

    def draw(self, session: PromptSession, state: EngineState) -> Tuple[str, int]:
        d = self.data(
            session, state,
            default=self.default,
            lines=tuple(state.lines),
            buffer=state.line.text,
        )
        return multiline_template(d), state.line.cursor_back

    def draw_answer(self, session: PromptSession, state: EngineState, answer: Any) -> str:
        return multiline_template(self.data(session, state, show_answer=True, answer=str(answer)))
