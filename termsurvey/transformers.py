"""
Reusable answer transformers.

A transformer maps the validated answer to the value that gets stored. Returning
None means "leave the answer unchanged".
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional

Transformer = Callable[[Any], Optional[Any]]

_WORD_START_RE = re.compile(r"(?<![\w'])\w")


def transform_string(func: Callable[[str], str]) -> Transformer:
    """Apply func to non-empty string answers; other answers pass through untouched."""
    def transform(value: Any) -> Optional[Any]:
        if not isinstance(value, str) or value == '':
            return None
        return func(value)
    return transform


def _title(text: str) -> str:
    # Unlike str.title() the rest of each word keeps its case
    return _WORD_START_RE.sub(lambda m: m.group(0).upper(), text)


to_lower = transform_string(str.lower)
title = transform_string(_title)


def compose_transformers(*transformers: Transformer) -> Transformer:
    """Feed the answer through each transformer in turn."""
    def transform(value: Any) -> Optional[Any]:
        for t in transformers:
            out = t(value)
            if out is not None:
                value = out
        return value
    return transform
