"""
Reusable answer validators.

A validator is any callable taking the answer and raising ValueError (usually
ValidationError) to reject it; whatever it returns is ignored.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sized

from termsurvey.core.option_answer import OptionAnswer
from termsurvey.errors import ValidationError

Validator = Callable[[Any], None]


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        # False is a real answer to a yes/no question
        return False
    if isinstance(value, OptionAnswer):
        return value.value == ''
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def required(value: Any) -> None:
    """Reject empty answers: None, '', 0, empty collections or an empty OptionAnswer."""
    if _is_zero(value):
        raise ValidationError('Value is required')


def max_length(length: int) -> Validator:
    def validate(value: Any) -> None:
        if not isinstance(value, str):
            raise ValidationError(f'cannot enforce length on response of type {type(value).__name__}')
        if len(value) > length:
            raise ValidationError(f'value is too long. Max length is {length}')
    return validate


def min_length(length: int) -> Validator:
    def validate(value: Any) -> None:
        if not isinstance(value, str):
            raise ValidationError(f'cannot enforce length on response of type {type(value).__name__}')
        if len(value) < length:
            raise ValidationError(f'value is too short. Min length is {length}')
    return validate


def max_items(count: int) -> Validator:
    def validate(value: Any) -> None:
        if not isinstance(value, (list, tuple)):
            raise ValidationError(f'cannot impose the limit on items on response of type {type(value).__name__}')
        if len(value) > count:
            raise ValidationError(f'value is too long. Max items is {count}')
    return validate


def min_items(count: int) -> Validator:
    def validate(value: Any) -> None:
        if not isinstance(value, (list, tuple)):
            raise ValidationError(f'cannot impose the limit on items on response of type {type(value).__name__}')
        if len(value) < count:
            raise ValidationError(f'value is too short. Min items is {count}')
    return validate


def compose_validators(*validators: Validator) -> Validator:
    """Run validators in order; the first rejection wins."""
    def validate(value: Any) -> Optional[BaseException]:
        for v in validators:
            outcome = v(value)
            if isinstance(outcome, BaseException):
                return outcome
        return None
    return validate
