from __future__ import annotations

import threading
from typing import Callable, List, Optional

from termsurvey.errors import Interrupted


class CancellationToken:
    """Cancels one ask() call from any thread.

    The first cancel() wins: its reason sticks and the registered cleanups
    (typically wake-ups for a blocked reader or a kill for an editor child)
    run exactly once, on the cancelling thread.
    """

    def __init__(self) -> None:
        self._done = threading.Event()
        self._why: Optional[str] = None
        self._pending: List[Callable[[], None]] = []
        self._guard = threading.Lock()

    def cancel(self, reason: Optional[str] = None) -> None:
        with self._guard:
            if self._done.is_set():
                return
            self._why = reason or 'interrupt'
            self._done.set()
            to_run, self._pending = self._pending, []
        # A cleanup may query the token, so the lock is released first
        for fn in to_run:
            fn()

    def is_cancelled(self) -> bool:
        return self._done.is_set()

    def reason(self) -> Optional[str]:
        return self._why

    def raise_if_cancelled(self) -> None:
        if self.is_cancelled():
            raise Interrupted(self._why)

    def register_cleanup(self, fn: Callable[[], None]) -> None:
        with self._guard:
            late = self._done.is_set()
            if not late:
                self._pending.append(fn)
        if late:
            fn()

    def unregister_cleanup(self, fn: Callable[[], None]) -> None:
        with self._guard:
            self._pending = [f for f in self._pending if f != fn]
