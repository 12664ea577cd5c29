"""
Exception classes raised by termsurvey.

Recoverable errors (InputError, ValidationError) are handled inside a prompt and
shown inline; everything else propagates to the caller of ask()/prompt().
"""

from __future__ import annotations

from typing import Optional


class SurveyError(Exception):
    """Base class for every error raised by this package."""


class InputError(SurveyError):
    """Malformed input for the current prompt; the prompt asks again."""


class ValidationError(SurveyError, ValueError):
    """A validator rejected the answer; shown inline and the prompt asks again."""


class ConversionError(SurveyError):
    """An answer could not be converted to the destination's type."""

    def __init__(self, message: str, *, error: Optional[BaseException] = None):
        super().__init__(message)
        self.error = error


class DestinationError(SurveyError):
    """The destination cannot receive answers."""


class NoDestination(DestinationError):
    def __init__(self) -> None:
        super().__init__("cannot write answers: no destination was provided")


class NeedsPointer(DestinationError):
    def __init__(self, target: object) -> None:
        super().__init__(
            f"cannot write answers into immutable {type(target).__name__}; "
            "pass a Ref, dict, list, record or Settable instead"
        )
        self.target_type = type(target)


class MapType(DestinationError):
    def __init__(self) -> None:
        super().__init__("answer maps must have string keys")


class UnsupportedType(DestinationError):
    def __init__(self, target: object) -> None:
        name = getattr(target, '__name__', None) or repr(target)
        super().__init__(f"cannot write answers into type {name}")
        self.target = target


class FieldNotMatch(DestinationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"could not find field matching {name!r}")
        self.name = name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldNotMatch):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash((FieldNotMatch, self.name))


class Interrupted(SurveyError):
    """The user (or a cancellation token) aborted the survey."""

    def __init__(self, reason: Optional[str] = None) -> None:
        super().__init__(reason or "interrupt")
        self.reason = reason or "interrupt"


class EditorError(SurveyError):
    """The external editor could not be run or exited unsuccessfully."""

    def __init__(self, message: str, *, command: Optional[list] = None, returncode: Optional[int] = None):
        super().__init__(message)
        self.command = list(command or [])
        self.returncode = returncode
