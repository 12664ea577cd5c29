from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from termsurvey.core.option_answer import OptionAnswer
from termsurvey.prompts.base import NO_ANSWER, EngineState
from termsurvey.prompts.select import DescriptionFunc, ListPrompt
from termsurvey.session import PromptSession
from termsurvey.templates import multiselect_template
from termsurvey.ui.keys import Key, KeyEvent


@dataclass
class MultiSelect(ListPrompt):
    """Pick any number of options. The answer lists OptionAnswers in original order."""
    message: str
    options: Sequence[str] = ()
    default: Optional[Sequence[Any]] = None
    help: str = ''
    page_size: int = 0
    description: Optional[DescriptionFunc] = None

    kind = 'multiselect'

    def initial_state(self, session: PromptSession) -> EngineState:
        defaults = self.default
        if defaults is None:
            defaults = ()
        elif isinstance(defaults, (str, int, OptionAnswer)):
            defaults = (defaults,)
        return EngineState(checked={self.option_index(d) for d in defaults})

    def on_key(self, session: PromptSession, state: EngineState, key: KeyEvent) -> Any:
        entries = self.entries(session, state)
        keep_filter = session.config.keep_filter
        if key is Key.ENTER:
            return [OptionAnswer(index=i, value=self.options[i]) for i in sorted(state.checked)]
        if key is Key.SPACE:
            if entries:
                index = entries[state.selected][0]
                state.checked ^= {index}
                if state.filter and not keep_filter:
                    self.drop_filter(state, index)
        elif key is Key.RIGHT:
            state.checked.update(i for i, _ in entries)
            self._after_bulk(state, entries, keep_filter)
        elif key is Key.LEFT:
            state.checked.difference_update(i for i, _ in entries)
            self._after_bulk(state, entries, keep_filter)
        else:
            self.navigate(session, state, key, entries)
        return NO_ANSWER

    def _after_bulk(self, state: EngineState, entries: List[Tuple[int, str]], keep_filter: bool) -> None:
        if state.filter and not keep_filter:
            self.drop_filter(state, entries[state.selected][0] if entries else 0)

    def draw(self, session: PromptSession, state: EngineState) -> Tuple[str, int]:
        entries = self.entries(session, state)
        data = self.page_data(session, state, entries, checked=frozenset(state.checked))
        return multiselect_template(data), 0

    def draw_answer(self, session: PromptSession, state: EngineState, answer: Any) -> str:
        text = ', '.join(o.value for o in answer)
        return multiselect_template(self.data(session, state, show_answer=True, answer=text))
