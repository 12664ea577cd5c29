import json
from typing import Callable, Dict, List

import click

from termsurvey.config import PromptConfig
from termsurvey.errors import Interrupted, SurveyError
from termsurvey.prompts import Confirm, Editor, Input, Multiline, MultiSelect, Password, Select
from termsurvey.survey import Question, ask
from termsurvey.transformers import title
from termsurvey.validators import compose_validators, max_length, min_items, min_length, required

DAYS = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']
COLORS = ['red', 'orange', 'yellow', 'green', 'blue', 'indigo', 'violet', 'black',
          'white', 'gray', 'brown', 'pink', 'cyan', 'magenta', 'teal', 'olive']


def _simple() -> List[Question]:
    return [
        Question('name', Input('What is your name?'), validate=required, transform=title),
        Question('pizza', Confirm('Is pizza your favorite food?', help='It probably is')),
        Question('color', Select('Choose a color:', ['red', 'blue', 'green', 'yellow'], default='blue')),
    ]


def _longlist() -> List[Question]:
    return [
        Question('color', Select(
            'Choose a color:',
            COLORS,
            help='Type to filter the list',
            description=lambda value, index: f'color #{index + 1}',
        )),
    ]


def _validation() -> List[Question]:
    return [
        Question('username', Input('Pick a username (3-12 chars):'), validate=compose_validators(min_length(3), max_length(12))),
        Question('password', Password('Choose a password:', help='At least 8 characters'), validate=min_length(8)),
        Question('bio', Multiline('Tell us about yourself:'), validate=required),
    ]


def _editor() -> List[Question]:
    return [
        Question('message', Editor('Write a commit message', default='Initial commit', file_name='COMMIT-*.txt')),
    ]


def _multiselect() -> List[Question]:
    return [
        Question('days', MultiSelect('What days do you prefer:', DAYS, default=['Saturday']), validate=min_items(1)),
    ]


DEMOS: Dict[str, Callable[[], List[Question]]] = {
    'simple': _simple,
    'longlist': _longlist,
    'validation': _validation,
    'editor': _editor,
    'multiselect': _multiselect,
}


@click.group()
def cli():
    """
    termsurvey: interactive terminal prompts
    """


@cli.command()
@click.argument('name', type=click.Choice(sorted(DEMOS)))
@click.option('--page-size', type=click.IntRange(min=1), default=7, show_default=True, help='Options shown at once in lists')
@click.option('--help-key', default='?', show_default=True, help='Key that expands help text')
@click.option('--no-color', is_flag=True, default=False, help='Disable ANSI colors')
def demo(name, page_size, help_key, no_color):
    """
    Run a bundled survey and print the answers as JSON
    """
    options = {'page_size': page_size, 'help_input': help_key}
    if no_color:
        options['color'] = False
    try:
        config = PromptConfig.build(**options)
    except ValueError as e:
        raise click.BadParameter(str(e))

    answers = {}
    try:
        ask(DEMOS[name](), answers, config)
    except Interrupted as e:
        click.echo(f"\nInterrupted ({e.reason})", err=True)
        raise SystemExit(130)
    except SurveyError as e:
        raise click.ClickException(str(e))

    if 'password' in answers:
        answers['password'] = '*' * len(answers['password'])
    click.echo(json.dumps(answers, indent=2, default=str))


@cli.command()
def demos():
    """
    List the bundled surveys
    """
    for name in sorted(DEMOS):
        click.echo(name)


if __name__ == '__main__':
    cli()
