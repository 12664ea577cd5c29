from __future__ import annotations

import io
import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from termsurvey.renderer import RenderFrame, Renderer, count_rows, erase_sequence, text_width
from termsurvey.ui.cli import StreamTerminal


def make(width=80):
    out = io.StringIO()
    term = StreamTerminal(io.StringIO(''), out, io.StringIO(), width=width)
    return Renderer(term), out


def test_text_width_ignores_ansi_and_counts_wide_chars():
    assert text_width('\x1b[1;32mhello\x1b[0m') == 5
    assert text_width('日本') == 4
    assert text_width('é') == 1


def test_count_rows():
    assert count_rows('', 80) == 0
    assert count_rows('one line', 80) == 0
    assert count_rows('a\nb\n', 80) == 2
    assert count_rows('x' * 10, 10) == 0
    assert count_rows('x' * 11, 10) == 1
    assert count_rows('x' * 25 + '\n', 10) == 3
    assert count_rows('日本語', 4) == 1


def test_erase_sequence():
    assert erase_sequence(RenderFrame()) == ''
    assert erase_sequence(RenderFrame(line_count=0, byte_count=3)) == '\r\x1b[2K'
    assert erase_sequence(RenderFrame(line_count=2, byte_count=9)) == (
        '\r\x1b[2K' + '\x1b[1A\x1b[2K' * 2
    )


def test_first_render_writes_text_only():
    r, out = make()
    r.render('? Name ')
    assert out.getvalue() == '? Name '
    assert r.frame == RenderFrame(line_count=0, byte_count=7)


def test_second_render_erases_previous_rows():
    r, out = make()
    r.render('? Pick\n> a\n  b\n')
    assert r.frame.line_count == 3
    r.render('? Pick\n  a\n> b\n')
    assert out.getvalue() == (
        '? Pick\n> a\n  b\n'
        + '\r\x1b[2K' + '\x1b[1A\x1b[2K' * 3
        + '? Pick\n  a\n> b\n'
    )


def test_soft_wrapped_rows_are_erased():
    r, out = make(width=10)
    r.render('x' * 25)
    assert r.frame.line_count == 2
    r.render('y')
    assert out.getvalue().endswith('\r\x1b[2K' + '\x1b[1A\x1b[2K' * 2 + 'y')


def test_cursor_back():
    r, out = make()
    r.render('? Name abc', cursor_back=2)
    assert out.getvalue() == '? Name abc\x1b[2D'


def test_finalize_resets_frame():
    r, out = make()
    r.render('? Name a')
    r.finalize('? Name Ann')
    assert out.getvalue() == '? Name a' + '\r\x1b[2K' + '? Name Ann\n'
    assert r.frame == RenderFrame()
    r.render('? Next ')
    assert out.getvalue().endswith('? Name Ann\n? Next ')
