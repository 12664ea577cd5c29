from __future__ import annotations

import json
import os
import sys

from click.testing import CliRunner

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from termsurvey.main import DEMOS, cli


def answers_from(stdout: str) -> dict:
    return json.loads(stdout[stdout.index('{\n'):])


def test_demos_lists_every_survey():
    result = CliRunner().invoke(cli, ['demos'])
    assert result.exit_code == 0
    assert result.output.split() == sorted(DEMOS)


def test_simple_demo_prints_answers():
    result = CliRunner().invoke(cli, ['demo', 'simple', '--no-color'], input='ann lee\ny\n\n')
    assert result.exit_code == 0, result.output
    # The prompt shows what was typed; the transform only changes the stored value
    assert '? What is your name? ann lee\n' in result.stdout
    assert answers_from(result.stdout) == {'name': 'Ann Lee', 'pizza': True, 'color': 'blue'}


def test_validation_demo_masks_password():
    keys = 'al\nalice\nshort\nlongenough\nhello\n\n\n'
    result = CliRunner().invoke(cli, ['demo', 'validation', '--no-color'], input=keys)
    assert result.exit_code == 0, result.output
    assert 'value is too short. Min length is 3' in result.stdout
    assert 'value is too short. Min length is 8' in result.stdout
    answers = answers_from(result.stdout)
    assert answers == {'username': 'alice', 'password': '**********', 'bio': 'hello'}
    assert 'longenough' not in result.stdout


def test_multiselect_demo_keeps_default():
    result = CliRunner().invoke(cli, ['demo', 'multiselect', '--no-color'], input=' \n')
    assert result.exit_code == 0, result.output
    assert answers_from(result.stdout) == {'days': ['Sunday', 'Saturday']}


def test_page_size_option_limits_long_list():
    result = CliRunner().invoke(cli, ['demo', 'longlist', '--no-color', '--page-size', '3'], input='\n')
    assert result.exit_code == 0, result.output
    assert '> red - color #1\n  orange - color #2\n  yellow - color #3\n' in result.stdout
    assert '  green - color #4' not in result.stdout
    assert answers_from(result.stdout) == {'color': 'red'}


def test_end_of_input_exits_130():
    result = CliRunner().invoke(cli, ['demo', 'simple', '--no-color'], input='')
    assert result.exit_code == 130
    assert 'Interrupted (eof)' in result.output


def test_bad_help_key_is_a_usage_error():
    result = CliRunner().invoke(cli, ['demo', 'simple', '--help-key', '??'])
    assert result.exit_code == 2
    assert 'help_input must be a single character' in result.output


def test_unknown_demo():
    result = CliRunner().invoke(cli, ['demo', 'nope'])
    assert result.exit_code == 2
