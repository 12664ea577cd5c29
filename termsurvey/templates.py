"""
Deterministic text for every prompt kind.

Each template is a pure function of a frozen TemplateData snapshot: the same
snapshot always yields the same string, which is what lets the renderer erase
exactly what it drew last time. Color comes from the snapshot's Theme, so a
plain theme produces bytes identical to the uncolored layout below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from termsurvey.config import IconSet, PromptConfig
from termsurvey.utils.output_utils import Theme, plain_theme

SELECT_HINT = 'Use arrows to move, type to filter'
MULTISELECT_HINT = 'Use arrows to move, space to select, <right> to all, <left> to none, type to filter'
MULTILINE_HINT = '[Enter 2 empty lines to finish]'
EDITOR_HINT = '[Enter to launch editor] '
EDITOR_RECEIVED = '<Received>'


@dataclass(frozen=True)
class PageEntry:
    index: int  # position in the unfiltered option list
    value: str
    description: str = ''


@dataclass(frozen=True)
class TemplateData:
    message: str
    config: PromptConfig = field(default_factory=PromptConfig)
    theme: Theme = field(default_factory=plain_theme)
    help: str = ''
    default: str = ''
    hide_default: bool = False
    show_help: bool = False
    show_answer: bool = False
    answer: str = ''
    error: Optional[str] = None
    buffer: str = ''
    lines: Tuple[str, ...] = ()
    filter: str = ''
    page: Tuple[PageEntry, ...] = ()
    selected: int = -1  # index into page
    checked: FrozenSet[int] = frozenset()

    @property
    def icons(self) -> IconSet:
        return self.config.icons


# Shared pieces -----------------------------------------------------------

def error_line(d: TemplateData) -> str:
    if not d.error:
        return ''
    return (
        d.theme.paint('error_icon', d.icons.error) + ' '
        + d.theme.paint('error', f'Sorry, your reply was invalid: {d.error}') + '\n'
    )


def help_line(d: TemplateData) -> str:
    if not (d.show_help and d.help):
        return ''
    return d.theme.paint('help_icon', d.icons.help) + ' ' + d.theme.paint('help', d.help) + '\n'


def question(d: TemplateData, message: Optional[str] = None) -> str:
    return d.theme.paint('question_icon', d.icons.question) + ' ' + d.theme.paint('message', d.message if message is None else message)


def help_hint(d: TemplateData) -> str:
    if d.help and not d.show_help:
        return d.theme.paint('hint', f'[{d.config.help_input} for help]') + ' '
    return ''


def default_hint(d: TemplateData) -> str:
    if d.default and not d.hide_default:
        return d.theme.paint('default', f'({d.default})') + ' '
    return ''


def _header(d: TemplateData) -> str:
    # The finalized pass is the answer line alone
    if d.show_answer:
        return ''
    return error_line(d) + help_line(d)


# Line prompts ------------------------------------------------------------

def confirm_template(d: TemplateData, default: bool) -> str:
    out = _header(d) + question(d) + ' '
    if d.show_answer:
        return out + d.theme.paint('answer', d.answer) + '\n'
    return out + help_hint(d) + d.theme.paint('default', '(Y/n) ' if default else '(y/N) ') + d.buffer


def input_template(d: TemplateData) -> str:
    out = _header(d) + question(d) + ' '
    if d.show_answer:
        return out + d.theme.paint('answer', d.answer) + '\n'
    return out + help_hint(d) + default_hint(d) + d.buffer


def password_template(d: TemplateData) -> str:
    out = _header(d) + question(d) + ' '
    if d.show_answer:
        # The secret is never drawn, not even masked
        return out + '\n'
    return out + help_hint(d) + d.buffer


def multiline_template(d: TemplateData) -> str:
    out = _header(d) + question(d) + ' '
    if d.show_answer:
        return out + '\n' + d.theme.paint('answer', d.answer) + ('\n' if d.answer else '')
    out += default_hint(d) + d.theme.paint('hint', MULTILINE_HINT)
    for line in d.lines:
        out += '\n' + line
    return out + '\n' + d.buffer


def editor_template(d: TemplateData) -> str:
    out = _header(d) + question(d) + ' '
    if d.show_answer:
        return out + d.theme.paint('answer', d.answer) + '\n'
    return out + help_hint(d) + default_hint(d) + d.theme.paint('hint', EDITOR_HINT)


# List prompts ------------------------------------------------------------

def _filter_message(d: TemplateData) -> str:
    return ' ' + d.theme.paint('filter', d.filter) if d.filter else ''


def _list_hint(d: TemplateData, text: str) -> str:
    if d.help and not d.show_help:
        text += f', {d.config.help_input} for more help'
    return '  ' + d.theme.paint('hint', f'[{text}]') + '\n'


def _description(d: TemplateData, entry: PageEntry) -> str:
    return ' - ' + d.theme.paint('hint', entry.description) if entry.description else ''


def select_template(d: TemplateData) -> str:
    out = _header(d) + question(d) + _filter_message(d)
    if d.show_answer:
        return out + ' ' + d.theme.paint('answer', d.answer) + '\n'
    out += _list_hint(d, SELECT_HINT)
    for i, entry in enumerate(d.page):
        if i == d.selected:
            out += d.theme.paint('focus', f'{d.icons.select_focus} {entry.value}')
        else:
            out += f'  {entry.value}'
        out += _description(d, entry) + '\n'
    return out


def multiselect_template(d: TemplateData) -> str:
    out = _header(d) + question(d) + _filter_message(d)
    if d.show_answer:
        return out + ' ' + d.theme.paint('answer', d.answer) + '\n'
    out += _list_hint(d, MULTISELECT_HINT)
    for i, entry in enumerate(d.page):
        focus = d.theme.paint('focus', d.icons.select_focus) if i == d.selected else ' '
        if entry.index in d.checked:
            mark = d.theme.paint('marked', f' {d.icons.marked} ')
        else:
            mark = d.theme.paint('unmarked', f' {d.icons.unmarked} ')
        out += f'{focus}{mark} {entry.value}' + _description(d, entry) + '\n'
    return out
