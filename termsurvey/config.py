"""
Immutable per-call prompt configuration.

A PromptConfig is built once per ask()/prompt() call from keyword options and
passed down explicitly; nothing here is a process global. Environment variables
only supply defaults (NO_COLOR/TERM for color, VISUAL/EDITOR for the editor,
TERMSURVEY_LOG_* for diagnostics).
"""

from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, TextIO, Tuple, Union

from termsurvey.core.cancellation import CancellationToken
from termsurvey.utils.logging_utils import env_log_options
from termsurvey.utils.output_utils import Theme, color_theme, plain_theme, supports_color

# filter(filter_text, option_value, option_index) -> keep?
FilterFunc = Callable[[str, str, int], bool]
Validator = Callable[[Any], None]


@dataclass(frozen=True)
class IconSet:
    question: str = '?'
    help: str = '?'
    error: str = 'X'
    select_focus: str = '>'
    marked: str = '[x]'
    unmarked: str = '[ ]'

    def merged(self, overrides: Mapping[str, str]) -> 'IconSet':
        unknown = set(overrides) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise ValueError(f"unknown icon(s): {', '.join(sorted(unknown))}")
        return dataclasses.replace(self, **overrides)


@dataclass(frozen=True)
class Stdio:
    """Input/output/error streams; None means the process stream at the time of use."""
    stdin: Optional[TextIO] = None
    stdout: Optional[TextIO] = None
    stderr: Optional[TextIO] = None

    def resolved(self) -> 'Stdio':
        return Stdio(
            stdin=self.stdin if self.stdin is not None else sys.stdin,
            stdout=self.stdout if self.stdout is not None else sys.stdout,
            stderr=self.stderr if self.stderr is not None else sys.stderr,
        )


def default_filter(filter_text: str, value: str, index: int) -> bool:
    return filter_text.lower() in value.lower()


@dataclass(frozen=True)
class PromptConfig:
    help_input: str = '?'
    page_size: int = 7
    icons: IconSet = field(default_factory=IconSet)
    stdio: Stdio = field(default_factory=Stdio)
    color: Optional[bool] = None  # None: detect from the output stream
    styles: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    filter: Optional[FilterFunc] = None
    keep_filter: bool = False
    hide_character: str = '*'
    show_cursor: bool = False
    editor: Optional[Union[str, Sequence[str]]] = None
    validators: Tuple[Validator, ...] = ()
    cancel: Optional[CancellationToken] = None
    log_options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.page_size, bool) or not isinstance(self.page_size, int) or self.page_size < 1:
            raise ValueError(f"page_size must be a positive integer, got {self.page_size!r}")
        if not isinstance(self.help_input, str) or len(self.help_input) != 1:
            raise ValueError(f"help_input must be a single character, got {self.help_input!r}")
        if not isinstance(self.hide_character, str) or len(self.hide_character) > 1:
            raise ValueError(f"hide_character must be at most one character, got {self.hide_character!r}")
        if not isinstance(self.icons, IconSet):
            raise ValueError("icons must be an IconSet or a mapping of icon overrides")
        if not isinstance(self.stdio, Stdio):
            raise ValueError("stdio must be a Stdio instance or a (stdin, stdout, stderr) tuple")
        if self.filter is not None and not callable(self.filter):
            raise ValueError("filter must be callable")
        if self.cancel is not None and not isinstance(self.cancel, CancellationToken):
            raise ValueError("cancel must be a CancellationToken")
        validators = tuple(self.validators or ())
        for v in validators:
            if not callable(v):
                raise ValueError(f"validator {v!r} is not callable")
        object.__setattr__(self, 'validators', validators)

    # Construction ------------------------------------------------------
    @classmethod
    def build(cls, base: Optional['PromptConfig'] = None, **options: Any) -> 'PromptConfig':
        """Return a new config from base (or the defaults) with options applied.

        Accepts the same names as the fields, plus friendlier spellings:
        icons may be a mapping of overrides, stdio a (stdin, stdout, stderr)
        tuple, validators a single callable. Unknown names raise TypeError,
        bad values ValueError.
        """
        names = {f.name for f in dataclasses.fields(cls)}
        unknown = set(options) - names
        if unknown:
            raise TypeError(f"unknown prompt option(s): {', '.join(sorted(unknown))}")
        cfg = base if base is not None else cls()
        values: Dict[str, Any] = {}
        for key, val in options.items():
            if key == 'icons' and isinstance(val, Mapping):
                val = cfg.icons.merged(val)
            elif key == 'stdio' and isinstance(val, (tuple, list)):
                if len(val) != 3:
                    raise ValueError("stdio must have three streams: stdin, stdout, stderr")
                val = Stdio(*val)
            elif key == 'validators' and callable(val):
                val = cfg.validators + (val,)
            elif key == 'validators':
                val = cfg.validators + tuple(val or ())
            values[key] = val
        if base is None or 'log_options' in values:
            merged_log = env_log_options()
            merged_log.update(cfg.log_options)
            merged_log.update(values.get('log_options') or {})
            values['log_options'] = merged_log
        return dataclasses.replace(cfg, **values)

    # Derived views -----------------------------------------------------
    def streams(self) -> Stdio:
        return self.stdio.resolved()

    def theme(self) -> Theme:
        enabled = self.color
        if enabled is None:
            enabled = supports_color(self.streams().stdout)
        theme = color_theme() if enabled else plain_theme()
        if self.styles:
            theme = theme.with_overrides(self.styles)
        return theme

    def filter_func(self) -> FilterFunc:
        return self.filter or default_filter

    def effective(self) -> Dict[str, Any]:
        """Loggable summary of the settings (no streams, no callables)."""
        return {
            'help_input': self.help_input,
            'page_size': self.page_size,
            'color': self.color,
            'keep_filter': self.keep_filter,
            'show_cursor': self.show_cursor,
            'custom_filter': self.filter is not None,
            'editor': self.editor if isinstance(self.editor, str) or self.editor is None else list(self.editor),
            'validators': len(self.validators),
            'cancellable': self.cancel is not None,
        }
