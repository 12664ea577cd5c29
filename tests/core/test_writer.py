from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from termsurvey.core.kinds import Float32, Int8, Int16, Uint8, Uint64, ScalarKind, parse_duration
from termsurvey.core.option_answer import OptionAnswer
from termsurvey.core.writer import TAG_KEY, Ref, Settable, ensure_destination, find_field, write_answer
from termsurvey.errors import (
    ConversionError,
    FieldNotMatch,
    MapType,
    NeedsPointer,
    NoDestination,
    UnsupportedType,
)


@dataclass
class Person:
    name: str = ''
    age: int = 0
    height: float = 0.0
    _secret: str = ''


@dataclass
class Tagged:
    name: str = ''
    alias: str = field(default='', metadata={TAG_KEY: 'name'})


@dataclass(frozen=True)
class Frozen:
    name: str = ''


class Plain:
    color: str

    def __init__(self) -> None:
        self.color = ''


class Recorder(Settable):
    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []

    def write_answer(self, name: str, value: Any) -> None:
        self.calls.append((name, value))


class Exploding(Settable):
    def write_answer(self, name: str, value: Any) -> None:
        raise RuntimeError('boom')


@dataclass
class Holder:
    custom: Recorder = field(default_factory=Recorder)


# Scalars ---------------------------------------------------------------

@pytest.mark.parametrize('hint, literal, expected', [
    (bool, 'true', True),
    (bool, 'F', False),
    (int, '-42', -42),
    (Int8, '-128', -128),
    (Int16, '32767', 32767),
    (Uint8, '255', 255),
    (Uint64, '18446744073709551615', 18446744073709551615),
    (float, '2.5', 2.5),
    (timedelta, '30s', timedelta(seconds=30)),
    (timedelta, '1h15m', timedelta(hours=1, minutes=15)),
    (str, 'hello', 'hello'),
])
def test_string_literals_parse_into_scalars(hint, literal, expected):
    ref = Ref(hint)
    write_answer(ref, '', literal)
    assert ref.value == expected
    assert type(ref.value) is type(expected)


def test_duration_matches_parser():
    ref = Ref(timedelta)
    write_answer(ref, '', '1.5h')
    assert ref.value == parse_duration('1.5h') == timedelta(minutes=90)


def test_duration_range_is_asymmetric():
    assert parse_duration('-9223372036854775808ns') == -timedelta(seconds=9223372036, microseconds=854776)
    with pytest.raises(OverflowError):
        parse_duration('9223372036854775808ns')
    assert parse_duration('9223372036854775807ns') == timedelta(seconds=9223372036, microseconds=854776)


def test_float32_is_rounded():
    ref = Ref(Float32)
    write_answer(ref, '', '0.1')
    assert ref.value != 0.1
    assert abs(ref.value - 0.1) < 1e-7


def test_overflow_wraps_parser_error():
    ref = Ref(Int8)
    with pytest.raises(ConversionError) as ei:
        write_answer(ref, '', '128')
    assert isinstance(ei.value.__cause__, OverflowError)
    assert ei.value.error is ei.value.__cause__
    assert ref.value == 0


def test_unsigned_rejects_negative():
    with pytest.raises(ConversionError):
        write_answer(Ref(Uint8), '', '-1')


def test_bad_bool_literal():
    with pytest.raises(ConversionError) as ei:
        write_answer(Ref(bool), '', 'yes')
    assert isinstance(ei.value.__cause__, ValueError)


def test_same_type_values_assign_directly():
    ref = Ref(float)
    write_answer(ref, '', 3)
    assert ref.value == 3.0 and isinstance(ref.value, float)

    ref = Ref(bool)
    write_answer(ref, '', True)
    assert ref.value is True


def test_bool_is_not_an_integer():
    with pytest.raises(ConversionError):
        write_answer(Ref(int), '', True)


def test_optional_hint_is_unwrapped():
    ref = Ref(Optional[int])
    assert ref.value == 0
    write_answer(ref, '', '7')
    assert ref.value == 7


def test_any_slot_takes_value_verbatim():
    ref = Ref(Any)
    answer = OptionAnswer(1, 'b')
    write_answer(ref, '', answer)
    assert ref.value is answer


# OptionAnswer ------------------------------------------------------------

def test_option_answer_into_int_writes_index():
    ref = Ref(int)
    write_answer(ref, '', OptionAnswer(index=10, value='x'))
    assert ref.value == 10


def test_option_answer_into_str_writes_value():
    ref = Ref(str)
    write_answer(ref, '', OptionAnswer(index=10, value='x'))
    assert ref.value == 'x'


def test_option_answer_into_option_answer_copies():
    original = OptionAnswer(index=10, value='x')
    ref = Ref(OptionAnswer)
    write_answer(ref, '', original)
    assert ref.value == original


def test_option_answer_into_bool_fails():
    with pytest.raises(ConversionError):
        write_answer(Ref(bool), '', OptionAnswer(0, 'a'))


def test_option_answer_list_unwraps_elementwise():
    answers = [OptionAnswer(1, 'Monday'), OptionAnswer(3, 'Wednesday')]
    names = Ref(List[str])
    write_answer(names, '', answers)
    assert names.value == ['Monday', 'Wednesday']

    indexes = Ref(List[int])
    write_answer(indexes, '', answers)
    assert indexes.value == [1, 3]


# Sequences -----------------------------------------------------------------

def test_fixed_tuple_requires_equal_length():
    ref = Ref(Tuple[int, int, int])
    assert ref.value == (0, 0, 0)
    write_answer(ref, '', ['1', '2', '3'])
    assert ref.value == (1, 2, 3)
    with pytest.raises(ConversionError):
        write_answer(ref, '', ['1', '2'])


def test_growable_tuple_takes_source_length():
    ref = Ref(Tuple[str, ...])
    write_answer(ref, '', ['a', 'b', 'c'])
    assert ref.value == ('a', 'b', 'c')


def test_list_destination_is_replaced_in_place():
    target = ['old', 'values', 'here']
    same = target
    write_answer(target, '', ['a', 'b'])
    assert same == ['a', 'b']


def test_string_is_not_a_sequence_answer():
    with pytest.raises(ConversionError):
        write_answer(Ref(List[str]), '', 'abc')


# Mappings --------------------------------------------------------------------

def test_dict_destination_stores_under_name():
    answers: Dict[str, Any] = {}
    write_answer(answers, 'name', 'Johnny')
    choice = OptionAnswer(2, 'green')
    write_answer(answers, 'color', choice)
    assert answers == {'name': 'Johnny', 'color': choice}


def test_dict_with_non_string_keys_fails():
    with pytest.raises(MapType):
        write_answer({1: 'a'}, 'name', 'x')


def test_typed_mapping_converts_values():
    ref = Ref(Dict[str, int])
    write_answer(ref, 'age', '31')
    assert ref.value == {'age': 31}


def test_typed_mapping_key_must_be_string():
    with pytest.raises(MapType):
        write_answer(Ref(Dict[int, str]), 'age', '31')


def test_mapping_needs_a_name():
    with pytest.raises(FieldNotMatch) as ei:
        write_answer({}, '', 'x')
    assert ei.value.name == ''


# Records ---------------------------------------------------------------------

def test_record_field_case_insensitive():
    p = Person()
    write_answer(p, 'NAME', 'Larry')
    write_answer(p, 'Age', '33')
    write_answer(p, 'height', '1.8')
    assert (p.name, p.age, p.height) == ('Larry', 33, 1.8)


def test_tag_wins_over_literal_name():
    t = Tagged()
    write_answer(t, 'Name', 'x')
    assert t.alias == 'x'
    assert t.name == ''


def test_find_field():
    assert find_field(Person, 'AGE').name == 'age'
    assert find_field(Tagged, 'name').name == 'alias'
    with pytest.raises(FieldNotMatch) as ei:
        find_field(Tagged, 'alias')
    assert ei.value == FieldNotMatch('alias')
    with pytest.raises(FieldNotMatch):
        find_field(Person, 'unknown')
    with pytest.raises(FieldNotMatch) as ei:
        find_field(Person, '')
    assert ei.value.name == ''


def test_private_fields_are_skipped():
    with pytest.raises(FieldNotMatch):
        write_answer(Person(), '_secret', 'x')


def test_annotated_class_is_a_record():
    obj = Plain()
    write_answer(obj, 'color', 'red')
    assert obj.color == 'red'


def test_conversion_error_in_record_field():
    p = Person()
    with pytest.raises(ConversionError):
        write_answer(p, 'age', 'old')
    assert p.age == 0


# Settable ----------------------------------------------------------------------

def test_settable_takes_over_the_write():
    r = Recorder()
    write_answer(r, 'name', 'value')
    assert r.calls == [('name', 'value')]


def test_settable_field_of_record_is_delegated():
    h = Holder()
    write_answer(h, 'custom', 42)
    assert h.custom.calls == [('custom', 42)]


def test_settable_errors_pass_through():
    with pytest.raises(RuntimeError, match='boom'):
        write_answer(Exploding(), 'x', 1)


def test_registered_settable():
    class Legacy:
        def __init__(self) -> None:
            self.value = None

        def write_answer(self, name: str, value: Any) -> None:
            self.value = (name, value)

    Settable.register(Legacy)
    target = Legacy()
    write_answer(target, 'n', 'v')
    assert target.value == ('n', 'v')


# Destinations --------------------------------------------------------------------

def test_none_is_no_destination():
    with pytest.raises(NoDestination):
        ensure_destination(None)


@pytest.mark.parametrize('target', [5, 'text', ('a',), Frozen()])
def test_immutable_targets_need_a_reference(target):
    with pytest.raises(NeedsPointer):
        write_answer(target, 'name', 'x')


def test_unsupported_slot_type():
    with pytest.raises(UnsupportedType):
        write_answer(Ref(set), '', 'x')


def test_scalar_kind_flags():
    assert ScalarKind.INT8.is_integer and ScalarKind.INT8.is_numeric
    assert ScalarKind.FLOAT32.is_float and not ScalarKind.FLOAT32.is_integer
    assert not ScalarKind.DURATION.is_numeric
