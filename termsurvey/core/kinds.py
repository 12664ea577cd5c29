"""
Scalar kinds understood by the answer writer, with their textual grammars.

Python has a single int and float type, so the fixed-width families are spelled
with typing.Annotated aliases (Int8, Uint32, Float32, ...). Parsing follows the
usual strconv rules: booleans accept 1/t/true/0/f/false in their common casings,
integers are base 10 with overflow checks, durations look like "30s" or "1h15m".
"""

from __future__ import annotations

import math
import re
import struct
import typing
from datetime import timedelta
from enum import Enum
from fractions import Fraction
from typing import Any, Annotated, Dict, Optional, Tuple

from termsurvey.errors import ConversionError


class ScalarKind(Enum):
    BOOL = 'bool'
    INT = 'int'
    INT8 = 'int8'
    INT16 = 'int16'
    INT32 = 'int32'
    INT64 = 'int64'
    UINT = 'uint'
    UINT8 = 'uint8'
    UINT16 = 'uint16'
    UINT32 = 'uint32'
    UINT64 = 'uint64'
    FLOAT32 = 'float32'
    FLOAT64 = 'float64'
    DURATION = 'duration'
    STRING = 'string'

    @property
    def is_integer(self) -> bool:
        return self in _INT_RANGES

    @property
    def is_float(self) -> bool:
        return self in (ScalarKind.FLOAT32, ScalarKind.FLOAT64)

    @property
    def is_numeric(self) -> bool:
        return self.is_integer or self.is_float


_INT_RANGES: Dict[ScalarKind, Tuple[int, int]] = {
    ScalarKind.INT: (-(1 << 63), (1 << 63) - 1),
    ScalarKind.INT8: (-(1 << 7), (1 << 7) - 1),
    ScalarKind.INT16: (-(1 << 15), (1 << 15) - 1),
    ScalarKind.INT32: (-(1 << 31), (1 << 31) - 1),
    ScalarKind.INT64: (-(1 << 63), (1 << 63) - 1),
    ScalarKind.UINT: (0, (1 << 64) - 1),
    ScalarKind.UINT8: (0, (1 << 8) - 1),
    ScalarKind.UINT16: (0, (1 << 16) - 1),
    ScalarKind.UINT32: (0, (1 << 32) - 1),
    ScalarKind.UINT64: (0, (1 << 64) - 1),
}

Int8 = Annotated[int, ScalarKind.INT8]
Int16 = Annotated[int, ScalarKind.INT16]
Int32 = Annotated[int, ScalarKind.INT32]
Int64 = Annotated[int, ScalarKind.INT64]
Uint = Annotated[int, ScalarKind.UINT]
Uint8 = Annotated[int, ScalarKind.UINT8]
Uint16 = Annotated[int, ScalarKind.UINT16]
Uint32 = Annotated[int, ScalarKind.UINT32]
Uint64 = Annotated[int, ScalarKind.UINT64]
Float32 = Annotated[float, ScalarKind.FLOAT32]
Float64 = Annotated[float, ScalarKind.FLOAT64]

_PLAIN_KINDS = {
    bool: ScalarKind.BOOL,
    int: ScalarKind.INT,
    float: ScalarKind.FLOAT64,
    str: ScalarKind.STRING,
    timedelta: ScalarKind.DURATION,
}


def kind_for(hint: Any) -> Optional[ScalarKind]:
    """Return the scalar kind a type hint denotes, or None for non-scalars."""
    if isinstance(hint, ScalarKind):
        return hint
    if typing.get_origin(hint) is Annotated:
        for meta in hint.__metadata__:
            if isinstance(meta, ScalarKind):
                return meta
        return kind_for(typing.get_args(hint)[0])
    if isinstance(hint, type):
        return _PLAIN_KINDS.get(hint)
    return None


# Parsers ---------------------------------------------------------------

_TRUE_LITERALS = ('1', 't', 'T', 'TRUE', 'true', 'True')
_FALSE_LITERALS = ('0', 'f', 'F', 'FALSE', 'false', 'False')
_SIGNED_RE = re.compile(r'[+-]?[0-9]+')
_UNSIGNED_RE = re.compile(r'[0-9]+')
_FLOAT32_MAX = 3.4028234663852886e38


def parse_bool(text: str) -> bool:
    if text in _TRUE_LITERALS:
        return True
    if text in _FALSE_LITERALS:
        return False
    raise ValueError(f'ParseBool: parsing {text!r}: invalid syntax')


def parse_int(text: str, kind: ScalarKind = ScalarKind.INT) -> int:
    low, high = _INT_RANGES[kind]
    pattern = _SIGNED_RE if low < 0 else _UNSIGNED_RE
    if not pattern.fullmatch(text):
        raise ValueError(f'ParseInt: parsing {text!r}: invalid syntax')
    return _check_int_range(int(text), kind)


def _check_int_range(value: int, kind: ScalarKind) -> int:
    low, high = _INT_RANGES[kind]
    if not low <= value <= high:
        raise OverflowError(f'value {value} out of range for {kind.value}')
    return value


def parse_float(text: str, kind: ScalarKind = ScalarKind.FLOAT64) -> float:
    # float() is more lenient than the usual grammar about padding and separators
    if not text or text != text.strip() or '_' in text:
        raise ValueError(f'ParseFloat: parsing {text!r}: invalid syntax')
    try:
        value = float(text)
    except ValueError:
        raise ValueError(f'ParseFloat: parsing {text!r}: invalid syntax') from None
    return _as_float(value, kind)


def _as_float(value: float, kind: ScalarKind) -> float:
    value = float(value)
    if kind is ScalarKind.FLOAT32 and math.isfinite(value):
        if abs(value) > _FLOAT32_MAX:
            raise OverflowError(f'value {value} out of range for float32')
        value = struct.unpack('f', struct.pack('f', value))[0]
    return value


_DURATION_UNITS = {
    'ns': 1,
    'us': 1_000,
    'µs': 1_000,
    'μs': 1_000,
    'ms': 1_000_000,
    's': 1_000_000_000,
    'm': 60 * 1_000_000_000,
    'h': 3600 * 1_000_000_000,
}
_DURATION_PART_RE = re.compile(r'([0-9]*(?:\.[0-9]*)?)(ns|us|µs|μs|ms|s|m|h)')
_MAX_DURATION_NS = (1 << 63) - 1


def parse_duration(text: str) -> timedelta:
    """Parse strings such as "300ms", "-1.5h" or "2h45m" into a timedelta."""
    orig = text
    sign = 1
    if text[:1] in ('+', '-'):
        if text[0] == '-':
            sign = -1
        text = text[1:]
    if text == '0':
        return timedelta(0)
    if not text:
        raise ValueError(f'time: invalid duration {orig!r}')

    total = Fraction(0)
    pos = 0
    while pos < len(text):
        match = _DURATION_PART_RE.match(text, pos)
        if not match or match.group(1) in ('', '.'):
            raise ValueError(f'time: invalid duration {orig!r}')
        total += Fraction(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()

    nanos = int(total)
    # The negative range reaches one nanosecond further
    if nanos > _MAX_DURATION_NS + (sign < 0):
        raise OverflowError(f'time: invalid duration {orig!r}')
    seconds, rem = divmod(nanos, 1_000_000_000)
    return sign * timedelta(seconds=seconds, microseconds=rem / 1000)


# Conversion --------------------------------------------------------------

def convert_scalar(kind: ScalarKind, value: Any) -> Any:
    """Convert value to the given scalar kind, parsing strings with the kind's grammar.

    Raises ConversionError wrapping the underlying parser error.
    """
    try:
        if isinstance(value, str) and kind is not ScalarKind.STRING:
            return _parse(kind, value)
        return _coerce(kind, value)
    except (ValueError, OverflowError, TypeError) as e:
        raise ConversionError(f'cannot convert {value!r} to {kind.value}: {e}', error=e) from e


def _parse(kind: ScalarKind, text: str) -> Any:
    if kind is ScalarKind.BOOL:
        return parse_bool(text)
    if kind.is_integer:
        return parse_int(text, kind)
    if kind.is_float:
        return parse_float(text, kind)
    if kind is ScalarKind.DURATION:
        return parse_duration(text)
    raise TypeError(f'no parser for {kind.value}')


def _coerce(kind: ScalarKind, value: Any) -> Any:
    if kind is ScalarKind.BOOL and isinstance(value, bool):
        return value
    if kind is ScalarKind.STRING and isinstance(value, str):
        return value
    if kind is ScalarKind.DURATION and isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise TypeError(f'incompatible type {type(value).__name__}')
    if kind.is_integer and isinstance(value, int):
        return _check_int_range(value, kind)
    if kind.is_float and isinstance(value, (int, float)):
        return _as_float(value, kind)
    raise TypeError(f'incompatible type {type(value).__name__}')


__all__ = [
    'ScalarKind', 'kind_for', 'convert_scalar',
    'parse_bool', 'parse_int', 'parse_float', 'parse_duration',
    'Int8', 'Int16', 'Int32', 'Int64', 'Uint', 'Uint8', 'Uint16', 'Uint32', 'Uint64',
    'Float32', 'Float64',
]
