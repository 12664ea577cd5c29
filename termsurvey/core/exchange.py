"""
Demand-driven handoff of input units from a background reader to the prompt engine.

The engine asks for one unit at a time. Only then does the reader thread read
from the terminal, so nothing is consumed while a child process (the editor)
owns the terminal. The slot holds at most one unit.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

from termsurvey.core.cancellation import CancellationToken
from termsurvey.errors import Interrupted

_EMPTY = object()


class InputExchange:
    """Depth-1 exchange between a daemon reader thread and the engine.

    - get() blocks until a unit is ready or the token is cancelled.
    - A KeyboardInterrupt raised while waiting becomes Interrupted.
    - An error raised by the reader ends it and is re-raised from every later get().
    - close() stops the reader once its current read returns; it is never joined.
    """

    def __init__(
        self,
        read_unit: Callable[[], Any],
        cancel: Optional[CancellationToken] = None,
        *,
        name: str = 'termsurvey-reader',
    ) -> None:
        self._read_unit = read_unit
        self._cancel = cancel
        self._name = name
        self._cond = threading.Condition()
        self._slot: Any = _EMPTY
        self._error: Optional[BaseException] = None
        self._wanted = False
        self._closed = False
        self._thread: Optional[threading.Thread] = None
        if cancel is not None:
            cancel.register_cleanup(self._wake)

    def get(self) -> Any:
        with self._cond:
            self._check_cancelled()
            if self._slot is _EMPTY and self._error is None:
                self._wanted = True
                self._ensure_reader()
                self._cond.notify_all()
            try:
                while self._slot is _EMPTY and self._error is None:
                    self._check_cancelled()
                    if self._closed:
                        raise Interrupted('closed')
                    self._cond.wait()
            except KeyboardInterrupt:
                if self._cancel is not None:
                    self._cancel.cancel('interrupt')
                raise Interrupted('interrupt') from None
            if self._slot is not _EMPTY:
                unit, self._slot = self._slot, _EMPTY
                return unit
            # The reader has stopped, so the error stays for later calls too
            raise self._error

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()
        if self._cancel is not None:
            self._cancel.unregister_cleanup(self._wake)

    @property
    def closed(self) -> bool:
        return self._closed

    # Internals ---------------------------------------------------------

    def _check_cancelled(self) -> None:
        if self._cancel is not None and self._cancel.is_cancelled():
            raise Interrupted(self._cancel.reason())

    def _wake(self) -> None:
        with self._cond:
            self._cond.notify_all()

    def _ensure_reader(self) -> None:
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()

    def _run(self) -> None:
        while True:
            with self._cond:
                while not self._wanted and not self._closed:
                    self._cond.wait()
                if self._closed:
                    return
            try:
                unit = self._read_unit()
            except Exception as e:
                with self._cond:
                    self._error = e
                    self._wanted = False
                    self._cond.notify_all()
                return
            with self._cond:
                self._slot = unit
                self._wanted = False
                self._cond.notify_all()
