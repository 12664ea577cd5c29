"""
Run a sequence of questions and store the answers.

    answers = {}
    ask([
        Question('name', Input('What is your name?'), validate=required),
        Question('color', Select('Favourite color:', ['red', 'blue'])),
    ], answers)

Questions run strictly one after another on a single terminal session. A
rejected answer re-renders the same prompt with the error inline; anything
else that goes wrong (interruption, editor failure, a destination that cannot
hold the answer) stops the survey and propagates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from termsurvey.config import PromptConfig
from termsurvey.core.writer import ensure_destination, write_answer
from termsurvey.errors import Interrupted
from termsurvey.prompts.base import Prompt
from termsurvey.session import PromptSession

Validator = Callable[[Any], None]
Transformer = Callable[[Any], Optional[Any]]


@dataclass
class Question:
    name: str
    prompt: Prompt
    validate: Optional[Validator] = None
    transform: Optional[Transformer] = None


def ask(
    questions: Iterable[Question],
    response: Any,
    config: Optional[PromptConfig] = None,
    **options: Any,
) -> None:
    """Ask each question in order and write its answer into response under the question's name.

    response may be a dict, a record (dataclass or annotated class instance), a
    Ref, a list or a Settable. It is checked before anything is drawn.
    Raises Interrupted, EditorError, ConversionError or a DestinationError.
    """
    ensure_destination(response)
    questions = list(questions)
    cfg = PromptConfig.build(config, **options)
    with PromptSession(cfg) as session:
        logger = session.logger
        logger.survey_event('survey_start', {'questions': [q.name for q in questions]})
        try:
            for q in questions:
                _ask_question(session, q, response)
        except Interrupted as e:
            logger.survey_event('survey_interrupted', {'reason': e.reason})
            raise
        logger.survey_event('survey_done', {'questions': len(questions)})


def ask_one(prompt: Prompt, response: Any, config: Optional[PromptConfig] = None, **options: Any) -> None:
    """Ask a single prompt and write the answer into response (a Ref, list, record or Settable)."""
    validate = options.pop('validate', None)
    transform = options.pop('transform', None)
    ask([Question('', prompt, validate=validate, transform=transform)], response, config, **options)


def _ask_question(session: PromptSession, q: Question, response: Any) -> None:
    validators: List[Validator] = []
    if q.validate is not None:
        validators.append(q.validate)
    validators.extend(session.config.validators)

    answer = q.prompt.run(session, validators)
    if q.transform is not None:
        transformed = q.transform(answer)
        if transformed is not None:
            answer = transformed

    try:
        write_answer(response, q.name, answer)
    except Exception as e:
        session.logger.error('core.writer', e)
        raise
    session.logger.writer_event('answer_written', {'name': q.name, 'type': type(answer).__name__})
