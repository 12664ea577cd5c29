from __future__ import annotations

import io
import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from termsurvey.core.option_answer import OptionAnswer
from termsurvey.prompts import MultiSelect, Select
from termsurvey.validators import min_items

COLORS = ['red', 'blue', 'green']
DAYS = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']
HIDE = '\x1b[?25l'
SHOW = '\x1b[?25h'


def run(prompt, keys, **options):
    out = io.StringIO()
    answer = prompt.prompt(stdio=(io.StringIO(keys), out, io.StringIO()), color=False, **options)
    return answer, out.getvalue()


# Select --------------------------------------------------------------------

def test_select_first_frame_and_answer():
    answer, out = run(Select('Choose a color:', COLORS), '\n')
    assert answer == OptionAnswer(0, 'red')
    assert out.startswith(
        HIDE
        + '? Choose a color:  [Use arrows to move, type to filter]\n'
        + '> red\n  blue\n  green\n'
    )
    assert out.endswith('? Choose a color: red\n' + SHOW)


def test_select_arrow_navigation():
    assert run(Select('Color', COLORS), '\x1b[B\x1b[B\n')[0] == OptionAnswer(2, 'green')
    # Movement wraps at both ends
    assert run(Select('Color', COLORS), '\x1b[A\n')[0] == OptionAnswer(2, 'green')
    assert run(Select('Color', COLORS), '\x1b[B\x1b[B\x1b[B\n')[0] == OptionAnswer(0, 'red')
    assert run(Select('Color', COLORS), '\t\n')[0] == OptionAnswer(1, 'blue')


def test_select_default_by_value_or_index():
    assert run(Select('Color', COLORS, default='blue'), '\n')[0] == OptionAnswer(1, 'blue')
    assert run(Select('Color', COLORS, default=2), '\n')[0] == OptionAnswer(2, 'green')


def test_select_bad_default():
    with pytest.raises(ValueError):
        run(Select('Color', COLORS, default='purple'), '\n')
    with pytest.raises(ValueError):
        run(Select('Color', COLORS, default=5), '\n')


def test_select_without_options():
    with pytest.raises(ValueError, match='please provide options'):
        run(Select('Color', []), '\n')


def test_select_filter_keeps_original_index():
    answer, out = run(Select('Color', COLORS), 'gr\n')
    assert answer == OptionAnswer(2, 'green')
    assert '? Color gr  [Use arrows to move, type to filter]\n> green\n' in out


def test_select_enter_on_empty_filter_result_does_nothing():
    answer, out = run(Select('Color', COLORS), 'zz\n\x7f\x7f\n')
    assert answer == OptionAnswer(0, 'red')
    assert '? Color zz  [Use arrows to move, type to filter]\n' in out


def test_select_custom_filter():
    def starts_with(text, value, index):
        return value.startswith(text)

    assert run(Select('Color', ['red', 'green', 'eggshell']), 'e\n', filter=starts_with)[0] == OptionAnswer(2, 'eggshell')


def test_select_help():
    answer, out = run(Select('Color', COLORS, help='pick one'), '?\x1b[B\n')
    assert answer == OptionAnswer(1, 'blue')
    assert '[Use arrows to move, type to filter, ? for more help]' in out
    assert '? pick one\n? Color  [Use arrows to move, type to filter]\n' in out
    assert out.endswith('\x1b[2K? Color blue\n' + SHOW)
    assert '? pick one\n? Color blue' not in out


def test_select_question_mark_filters_without_help():
    answer, out = run(Select('Color', ['what?', 'red']), '?\n')
    assert answer == OptionAnswer(0, 'what?')
    assert '? Color ?  [' in out


def test_select_pagination():
    letters = list('abcdefghij')
    answer, out = run(Select('Letter', letters, page_size=3), '\n')
    assert answer == OptionAnswer(0, 'a')
    assert '> a\n  b\n  c\n' in out
    assert '  d\n' not in out

    answer, out = run(Select('Letter', letters), '\x1b[F\n', page_size=4)
    assert answer == OptionAnswer(9, 'j')
    assert '  g\n  h\n  i\n> j\n' in out


def test_select_descriptions():
    answer, out = run(Select('Color', COLORS, description=lambda v, i: f'#{i + 1}'), '\n')
    assert '> red - #1\n  blue - #2\n  green - #3\n' in out


def test_select_custom_icons():
    _, out = run(Select('Color', COLORS), '\n', icons={'select_focus': '->', 'question': '??'})
    assert '-> red\n' in out
    assert out.endswith('?? Color red\n' + SHOW)


def test_select_show_cursor():
    _, out = run(Select('Color', COLORS), '\n', show_cursor=True)
    assert HIDE not in out and SHOW not in out


# MultiSelect ---------------------------------------------------------------

def test_multiselect_toggle_with_space():
    answer, out = run(MultiSelect('Days:', DAYS), '\x1b[B \x1b[B\x1b[B \n')
    assert answer == [OptionAnswer(1, 'Monday'), OptionAnswer(3, 'Wednesday')]
    assert out.startswith(
        HIDE
        + '? Days:  [Use arrows to move, space to select, <right> to all, <left> to none, type to filter]\n'
        + '> [ ]  Sunday\n  [ ]  Monday\n'
    )
    assert '  [x]  Monday\n' in out
    assert out.endswith('? Days: Monday, Wednesday\n' + SHOW)


def test_multiselect_space_twice_unchecks():
    assert run(MultiSelect('Days:', DAYS), '  \n')[0] == []


def test_multiselect_defaults():
    answer, out = run(MultiSelect('Days:', DAYS, default=['Saturday', 1]), '\n')
    assert answer == [OptionAnswer(1, 'Monday'), OptionAnswer(6, 'Saturday')]
    assert '  [x]  Saturday\n' in out
    assert run(MultiSelect('Days:', DAYS, default='Friday'), '\n')[0] == [OptionAnswer(5, 'Friday')]


def test_multiselect_bad_default():
    with pytest.raises(ValueError):
        run(MultiSelect('Days:', DAYS, default=['Caturday']), '\n')


def test_multiselect_right_selects_all_left_selects_none():
    answer, _ = run(MultiSelect('Days:', DAYS), '\x1b[C\n')
    assert [a.index for a in answer] == list(range(7))
    assert run(MultiSelect('Days:', DAYS), '\x1b[C\x1b[D\n')[0] == []


def test_multiselect_right_respects_filter():
    answer, _ = run(MultiSelect('Days:', DAYS), 'tu\x1b[C\n')
    assert answer == [OptionAnswer(2, 'Tuesday'), OptionAnswer(6, 'Saturday')]


def test_multiselect_space_drops_filter():
    answer, out = run(MultiSelect('Days:', DAYS), 'fri \n')
    assert answer == [OptionAnswer(5, 'Friday')]
    # After the toggle the full list is back with the cursor on Friday
    assert '> [x]  Friday\n' in out
    assert '  [ ]  Saturday\n' in out.split('> [x]  Friday\n', 1)[1]


def test_multiselect_keep_filter():
    answer, out = run(MultiSelect('Days:', DAYS), 'fri \n', keep_filter=True)
    assert answer == [OptionAnswer(5, 'Friday')]
    assert '? Days: fri  [' in out.split('> [x]  Friday\n', 1)[0].rsplit('\r', 1)[1]


def test_multiselect_validation_rejects_empty_selection():
    answer, out = run(MultiSelect('Days:', DAYS), '\n \n', validators=min_items(1))
    assert answer == [OptionAnswer(0, 'Sunday')]
    assert 'X Sorry, your reply was invalid: value is too short. Min items is 1\n' in out
