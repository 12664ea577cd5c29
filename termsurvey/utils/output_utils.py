from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Mapping, Optional

RESET = '\033[0m'

# Foreground SGR codes; the matching background is always +10
_NAMED = dict(zip(
    ('black', 'red', 'green', 'yellow', 'blue', 'magenta', 'cyan', 'white'),
    range(30, 38),
))
_NAMED.update({'gray': 90})
_NAMED.update({f'bright_{name}': code + 60 for name, code in list(_NAMED.items()) if code < 38 and name != 'black'})

_EFFECTS = (('bold', 1), ('dim', 2), ('italic', 3), ('underline', 4), ('reverse', 7))


def _color_param(spec: str, background: bool) -> Optional[str]:
    """SGR parameter for a named color or a #rrggbb hex code, None when unknown."""
    if spec.startswith('#'):
        digits = spec[1:]
        if len(digits) != 6:
            return None
        try:
            rgb = [int(digits[i:i + 2], 16) for i in range(0, 6, 2)]
        except ValueError:
            return None
        return ';'.join(str(p) for p in [48 if background else 38, 2] + rgb)
    code = _NAMED.get(spec.lower())
    if code is None:
        return None
    return str(code + 10) if background else str(code)


@dataclass(frozen=True)
class Style:
    """Colors (named or hex) plus on/off text effects for one rendering role."""
    fg: Optional[str] = None
    bg: Optional[str] = None
    bold: bool = False
    dim: bool = False
    italic: bool = False
    underline: bool = False
    reverse: bool = False

    def params(self) -> List[str]:
        out: List[str] = []
        for spec, background in ((self.fg, False), (self.bg, True)):
            if spec:
                param = _color_param(spec, background)
                if param:
                    out.append(param)
        out.extend(str(code) for name, code in _EFFECTS if getattr(self, name))
        return out


class ColorSystem:
    """Turns a Style into escape sequences around a piece of text."""

    @staticmethod
    def enable_ansi_on_windows() -> bool:
        # Older Windows consoles need virtual terminal processing switched on
        if sys.platform != 'win32':
            return True
        import ctypes
        try:
            handle = ctypes.windll.kernel32.GetStdHandle(-11)
            return bool(ctypes.windll.kernel32.SetConsoleMode(handle, 0x0007))
        except (AttributeError, OSError):
            return False

    @staticmethod
    def style_text(text: str, style: Style) -> str:
        params = style.params() if text else []
        if not params:
            return text
        return '\033[' + ';'.join(params) + 'm' + text + RESET


def supports_color(stream: Any) -> bool:
    """True when stream is a terminal that accepts color, honoring NO_COLOR and TERM=dumb."""
    if os.environ.get('NO_COLOR'):
        return False
    isatty = getattr(stream, 'isatty', None)
    if isatty is None or not isatty():
        return False
    return os.environ.get('TERM', '').lower() not in ('', 'dumb', 'unknown')


def _default_styles() -> Dict[str, Style]:
    cyan = Style(fg='cyan')
    return {
        'question_icon': Style(fg='green', bold=True),
        'message': Style(bold=True),
        'default': Style(fg='white'),
        'hint': cyan,
        'help_icon': cyan,
        'help': cyan,
        'answer': cyan,
        'error_icon': Style(fg='red', bold=True),
        'error': Style(fg='red'),
        'focus': Style(fg='cyan', bold=True),
        'marked': Style(fg='green'),
        'unmarked': Style(dim=True),
        'filter': cyan,
    }


@dataclass(frozen=True)
class Theme:
    """
    Maps rendering roles (question icon, answer, error, ...) to styles.
    A disabled theme returns text unchanged, so plain output stays byte-for-byte stable.
    """
    enabled: bool = False
    styles: Mapping[str, Style] = field(default_factory=_default_styles)

    def paint(self, role: str, text: str) -> str:
        style = self.styles.get(role) if self.enabled else None
        return ColorSystem.style_text(text, style) if style is not None else text

    def with_overrides(self, overrides: Mapping[str, Mapping[str, Any]]) -> 'Theme':
        """Merge per-role overrides like {'answer': {'fg': 'magenta'}} into a new Theme."""
        allowed = {f.name for f in fields(Style)}
        merged = dict(self.styles)
        for role, attrs in overrides.items():
            bad = sorted(set(attrs) - allowed)
            if bad:
                raise ValueError(f"Invalid style attribute '{bad[0]}' for role '{role}'")
            merged[role] = replace(merged.get(role, Style()), **attrs)
        return Theme(enabled=self.enabled, styles=merged)


def plain_theme() -> Theme:
    return Theme(enabled=False)


def color_theme() -> Theme:
    ColorSystem.enable_ansi_on_windows()
    return Theme(enabled=True)
