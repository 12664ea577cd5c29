from __future__ import annotations

from typing import List, Sequence, Tuple, TypeVar

T = TypeVar('T')


def paginate(page_size: int, options: Sequence[T], selected: int) -> Tuple[List[T], int]:
    """Return the visible window of options around selected and the selection's index in it.

    The window is centred on the selection where possible and clamped so it
    never runs past either end of the list.
    """
    if page_size <= 0:
        raise ValueError('page size must be at least 1')
    if len(options) <= page_size:
        return list(options), selected

    start = selected - page_size // 2
    start = max(0, min(start, len(options) - page_size))
    return list(options[start:start + page_size]), selected - start
