from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from termsurvey.core.option_answer import OptionAnswer
from termsurvey.core.paginator import paginate
from termsurvey.prompts.base import NO_ANSWER, EngineState, Prompt
from termsurvey.session import PromptSession
from termsurvey.templates import PageEntry, TemplateData, select_template
from termsurvey.ui.keys import Key, KeyEvent, as_text, is_printable

DescriptionFunc = Callable[[str, int], str]
Entry = Tuple[int, str]


class ListPrompt(Prompt):
    """Shared navigation and filtering for prompts that pick from a list of options."""

    options: Sequence[str]
    page_size: int = 0
    description: Optional[DescriptionFunc] = None

    hides_cursor = True

    def check(self) -> None:
        if not self.options:
            raise ValueError('please provide options to select from')

    def option_index(self, default: Any) -> int:
        """Resolve a default given as an option value, an index or an OptionAnswer."""
        if isinstance(default, OptionAnswer):
            default = default.index
        if isinstance(default, bool):
            raise ValueError(f'default value {default!r} is not an option')
        if isinstance(default, int):
            if 0 <= default < len(self.options):
                return default
            raise ValueError(f'default index {default} is out of range for {len(self.options)} options')
        try:
            return list(self.options).index(default)
        except ValueError:
            raise ValueError(f'default value {default!r} not found in options') from None

    def entries(self, session: PromptSession, state: EngineState) -> List[Entry]:
        if not state.filter:
            return list(enumerate(self.options))
        keep = session.config.filter_func()
        return [(i, v) for i, v in enumerate(self.options) if keep(state.filter, v, i)]

    def navigate(self, session: PromptSession, state: EngineState, key: KeyEvent, entries: List[Entry]) -> None:
        """Movement, help and filter editing common to every list prompt."""
        n = len(entries)
        if key is Key.UP:
            if n:
                state.selected = (state.selected - 1) % n
        elif key in (Key.DOWN, Key.TAB):
            if n:
                state.selected = (state.selected + 1) % n
        elif key is Key.HOME:
            state.selected = 0
        elif key is Key.END:
            state.selected = max(0, n - 1)
        elif key in (Key.BACKSPACE, Key.DELETE):
            if state.filter:
                state.filter = state.filter[:-1]
                state.selected = 0
        elif not isinstance(key, Key) and self.wants_help(session, key) and not state.show_help:
            state.show_help = True
        elif is_printable(key):
            state.filter += as_text(key)
            state.selected = 0

    def drop_filter(self, state: EngineState, keep_index: int) -> None:
        """Clear the filter while keeping the cursor on the same option."""
        state.filter = ''
        state.selected = keep_index

    def page_data(self, session: PromptSession, state: EngineState, entries: List[Entry], **extra: Any) -> TemplateData:
        if entries:
            state.selected = min(state.selected, len(entries) - 1)
        size = self.page_size or session.config.page_size
        window, rel = paginate(size, entries, state.selected)
        page = tuple(
            PageEntry(index=i, value=v, description=self.description(v, i) if self.description else '')
            for i, v in window
        )
        return self.data(session, state, filter=state.filter, page=page, selected=rel if entries else -1, **extra)

    def reset_input(self, state: EngineState) -> None:
        pass


@dataclass
class Select(ListPrompt):
    """Pick one option. The answer is an OptionAnswer carrying the original index."""
    message: str
    options: Sequence[str] = ()
    default: Any = None
    help: str = ''
    page_size: int = 0
    description: Optional[DescriptionFunc] = None

    kind = 'select'

    def initial_state(self, session: PromptSession) -> EngineState:
        start = 0 if self.default is None else self.option_index(self.default)
        return EngineState(selected=start)

    def on_key(self, session: PromptSession, state: EngineState, key: KeyEvent) -> Any:
        entries = self.entries(session, state)
        if key is Key.ENTER:
            if not entries:
                return NO_ANSWER
            index, value = entries[state.selected]
            return OptionAnswer(index=index, value=value)
        self.navigate(session, state, key, entries)
        return NO_ANSWER

    def draw(self, session: PromptSession, state: EngineState) -> Tuple[str, int]:
        return select_template(self.page_data(session, state, self.entries(session, state))), 0

    def draw_answer(self, session: PromptSession, state: EngineState, answer: Any) -> str:
        return select_template(self.data(session, state, show_answer=True, answer=str(answer)))
