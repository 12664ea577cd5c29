"""
Write a dynamically-typed answer into a caller-owned destination.

Python has no pointers, so "addressable" destinations are the mutable shapes:

- a Settable instance, which takes over the write entirely;
- a Ref cell (Ref(int), Ref(Int8), Ref(list[int]), Ref(tuple[int, int]), ...);
- a dict with string keys (answers land under the question name);
- a list (replaced in place by the answer sequence);
- a record: a dataclass instance or an instance of an annotated class, whose
  field is found by name (case-insensitive, tag override first).

Every slot is classified once into a closed Shape and dispatched on it. Writes
are not atomic: a failure part way through a nested record or a Settable that
already mutated itself leaves those earlier changes in place.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import types
import typing
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Generic, List, Optional, Tuple, TypeVar, Union

from termsurvey.core.kinds import ScalarKind, convert_scalar, kind_for
from termsurvey.core.option_answer import OptionAnswer
from termsurvey.errors import (
    ConversionError,
    FieldNotMatch,
    MapType,
    NeedsPointer,
    NoDestination,
    UnsupportedType,
)

T = TypeVar('T')

# dataclasses.field(metadata={TAG_KEY: 'name'}) overrides the matched name
TAG_KEY = 'survey'

_MISSING = object()
_UNION_TYPES = (Union, getattr(types, 'UnionType', Union))


class Settable(ABC):
    """Capability for destinations that want full control over how answers are stored.

    Opt in by subclassing or with Settable.register(cls). Whatever write_answer
    raises propagates to the caller unchanged.
    """

    @abstractmethod
    def write_answer(self, name: str, value: Any) -> None:
        raise NotImplementedError


class Ref(Generic[T]):
    """A typed, addressable cell for answers that are not containers or records.

    >>> age = Ref(int)
    >>> write_answer(age, '', '42')
    >>> age.value
    42
    """

    def __init__(self, hint: Any, value: Any = _MISSING) -> None:
        self.hint = hint
        self.value = _zero_value(hint) if value is _MISSING else value

    def __repr__(self) -> str:
        return f'Ref({_hint_name(self.hint)}, {self.value!r})'


class Shape(Enum):
    SETTABLE = 'settable'
    SCALAR = 'scalar'
    OPTION = 'option'
    MAPPING = 'mapping'
    SEQUENCE = 'sequence'
    RECORD = 'record'
    ANY = 'any'


@dataclass(frozen=True)
class _Target:
    shape: Shape
    hint: Any = None
    kind: Optional[ScalarKind] = None
    key: Any = Any
    elem: Any = Any
    fixed: Optional[Tuple[Any, ...]] = None
    container: type = list


@dataclass(frozen=True)
class RecordField:
    index: int
    name: str
    hint: Any
    tag: Optional[str] = None


# Public API ------------------------------------------------------------

def write_answer(target: Any, name: str, value: Any) -> None:
    """Store value in target under name, converting it to the target's type.

    Raises NoDestination, NeedsPointer, MapType, UnsupportedType, FieldNotMatch or
    ConversionError; a Settable's own exceptions pass through.
    """
    ensure_destination(target)
    if isinstance(target, Settable):
        target.write_answer(name, value)
    elif isinstance(target, Ref):
        target.value = _write_slot(target.hint, target.value, name, value)
    elif isinstance(target, dict):
        _write_mapping(target, None, name, value)
    elif isinstance(target, list):
        target[:] = _write_sequence(_Target(Shape.SEQUENCE), name, value)
    else:
        _write_record(target, name, value)


def ensure_destination(target: Any) -> None:
    """Raise unless target is a shape write_answer can mutate."""
    if target is None:
        raise NoDestination()
    if isinstance(target, Settable):
        return
    if isinstance(target, dict):
        if any(not isinstance(k, str) for k in target):
            raise MapType()
        return
    if isinstance(target, (Ref, list)):
        return
    if _is_record_instance(target) and not _is_frozen(target):
        return
    raise NeedsPointer(target)


def record_fields(record: Any) -> List[RecordField]:
    """List the writable fields of a record type (or instance) in declaration order."""
    cls = record if isinstance(record, type) else type(record)
    hints = typing.get_type_hints(cls, include_extras=True)
    if dataclasses.is_dataclass(cls):
        named = [(f.name, f.metadata.get(TAG_KEY)) for f in dataclasses.fields(cls)]
    else:
        named = [(n, None) for n in hints]
    out: List[RecordField] = []
    for name, tag in named:
        hint = hints.get(name, Any)
        if name.startswith('_') or typing.get_origin(hint) is typing.ClassVar:
            continue
        out.append(RecordField(index=len(out), name=name, hint=hint, tag=tag or None))
    return out


def find_field(record: Any, name: str) -> RecordField:
    """Resolve an answer name to a record field.

    Matching is case-insensitive. A field's tag, when present, replaces its
    attribute name and is checked before any plain name.
    """
    if not name:
        raise FieldNotMatch(name)
    wanted = name.casefold()
    fields = record_fields(record)
    for f in fields:
        if f.tag is not None and f.tag.casefold() == wanted:
            return f
    for f in fields:
        if f.tag is None and f.name.casefold() == wanted:
            return f
    raise FieldNotMatch(name)


# Classification --------------------------------------------------------

def _classify(hint: Any, current: Any) -> _Target:
    if isinstance(current, Settable):
        return _Target(Shape.SETTABLE, hint)
    hint = _unwrap_optional(hint)
    if hint is None or hint is Any or hint is object:
        return _Target(Shape.ANY)

    kind = kind_for(hint)
    if kind is not None:
        return _Target(Shape.SCALAR, hint, kind=kind)
    if hint is OptionAnswer:
        return _Target(Shape.OPTION, hint)

    origin = typing.get_origin(hint) or hint
    args = typing.get_args(hint)
    if origin is dict or _is_abc(origin, 'Mapping'):
        key, val = (args + (Any, Any))[:2] if args else (Any, Any)
        return _Target(Shape.MAPPING, hint, key=key, elem=val)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return _Target(Shape.SEQUENCE, hint, elem=args[0], container=tuple)
        if args and args != ((),):
            return _Target(Shape.SEQUENCE, hint, fixed=tuple(args), container=tuple)
        return _Target(Shape.SEQUENCE, hint, container=tuple)
    if origin is list or _is_abc(origin, 'Sequence'):
        return _Target(Shape.SEQUENCE, hint, elem=args[0] if args else Any)

    if isinstance(hint, type):
        if issubclass(hint, Settable):
            return _Target(Shape.SETTABLE, hint)
        if dataclasses.is_dataclass(hint) or _has_annotations(hint):
            return _Target(Shape.RECORD, hint)
    raise UnsupportedType(hint)


def _unwrap_optional(hint: Any) -> Any:
    if typing.get_origin(hint) in _UNION_TYPES:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        return args[0] if len(args) == 1 else Any
    return hint


def _is_abc(origin: Any, name: str) -> bool:
    abc_type = getattr(cabc, name)
    mutable = getattr(cabc, 'Mutable' + name)
    return origin in (abc_type, mutable)


def _has_annotations(cls: type) -> bool:
    try:
        return bool(typing.get_type_hints(cls))
    except (NameError, TypeError):
        return False


def _is_record_instance(obj: Any) -> bool:
    if isinstance(obj, type):
        return False
    if dataclasses.is_dataclass(obj):
        return True
    return hasattr(obj, '__dict__') and _has_annotations(type(obj))


def _is_frozen(obj: Any) -> bool:
    params = getattr(type(obj), '__dataclass_params__', None)
    return bool(params and params.frozen)


# Writers ---------------------------------------------------------------

def _write_slot(hint: Any, current: Any, name: str, value: Any) -> Any:
    """Return the new content of a slot of type hint that currently holds current."""
    target = _classify(hint, current)
    shape = target.shape
    if shape is Shape.SETTABLE:
        obj = current if isinstance(current, Settable) else _instantiate(target.hint)
        obj.write_answer(name, value)
        return obj
    if shape is Shape.SCALAR:
        return _write_scalar(target.kind, value)
    if shape is Shape.OPTION:
        if isinstance(value, OptionAnswer):
            return dataclasses.replace(value)
        raise ConversionError(f'cannot convert {type(value).__name__} to OptionAnswer')
    if shape is Shape.MAPPING:
        mapping = current if isinstance(current, dict) else {}
        _write_mapping(mapping, target, name, value)
        return mapping
    if shape is Shape.SEQUENCE:
        return _write_sequence(target, name, value)
    if shape is Shape.RECORD:
        obj = current if current is not None else _instantiate(target.hint)
        _write_record(obj, name, value)
        return obj
    if shape is Shape.ANY:
        return value
    raise UnsupportedType(hint)


def _write_scalar(kind: ScalarKind, value: Any) -> Any:
    if isinstance(value, OptionAnswer):
        if kind.is_numeric:
            return convert_scalar(kind, value.index)
        if kind is ScalarKind.STRING:
            return value.value
        raise ConversionError(f'cannot convert OptionAnswer to {kind.value}')
    return convert_scalar(kind, value)


def _write_mapping(mapping: dict, target: Optional[_Target], name: str, value: Any) -> None:
    if target is not None:
        key = _unwrap_optional(target.key)
        if key not in (str, Any):
            raise MapType()
        value_hint = target.elem
    else:
        value_hint = Any
    if not name:
        raise FieldNotMatch(name)
    mapping[name] = _write_slot(value_hint, mapping.get(name), name, value)


def _write_sequence(target: _Target, name: str, value: Any) -> Any:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise ConversionError(f'cannot write {type(value).__name__} into a sequence')
    if target.fixed is not None:
        if len(value) != len(target.fixed):
            raise ConversionError(
                f'cannot write {len(value)} values into a sequence of length {len(target.fixed)}'
            )
        return tuple(_write_slot(h, None, name, v) for h, v in zip(target.fixed, value))
    items = [_write_slot(target.elem, None, name, v) for v in value]
    return tuple(items) if target.container is tuple else items


def _write_record(obj: Any, name: str, value: Any) -> None:
    if _is_frozen(obj):
        raise NeedsPointer(obj)
    field = find_field(obj, name)
    current = getattr(obj, field.name, None)
    setattr(obj, field.name, _write_slot(field.hint, current, name, value))


def _instantiate(hint: Any) -> Any:
    try:
        return hint()
    except TypeError as e:
        raise UnsupportedType(hint) from e


def _zero_value(hint: Any) -> Any:
    hint = _unwrap_optional(hint)
    kind = kind_for(hint)
    if kind is not None:
        return {
            ScalarKind.BOOL: False,
            ScalarKind.STRING: '',
            ScalarKind.DURATION: timedelta(0),
        }.get(kind, 0.0 if kind.is_float else 0)
    origin = typing.get_origin(hint) or hint
    if origin is list:
        return []
    if origin is dict:
        return {}
    if origin is tuple:
        args = typing.get_args(hint)
        if args and not (len(args) == 2 and args[1] is Ellipsis) and args != ((),):
            return tuple(_zero_value(a) for a in args)
        return ()
    return None


def _hint_name(hint: Any) -> str:
    if isinstance(hint, type):
        return hint.__name__
    return repr(hint).replace('typing.', '')
