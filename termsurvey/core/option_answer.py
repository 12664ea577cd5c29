from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OptionAnswer:
    """A chosen option: its position in the original (unfiltered) list and its display text."""
    index: int
    value: str

    def __str__(self) -> str:
        return self.value
