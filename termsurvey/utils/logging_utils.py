from __future__ import annotations

import json
import os
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

ENV_PREFIX = 'TERMSURVEY_LOG_'
REDACTED = '***redacted***'

_TRUE = ('1', 'true', 'yes', 'on')
_FALSE = ('0', 'false', 'no', 'off', '')
_BOOL_OPTIONS = ('active', 'redact', 'per_run', 'symlink_latest')


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%fZ')


def _safe_str(x: Any) -> str:
    try:
        return str(x)
    except Exception:
        return '<unprintable>'


def _as_bool(raw: Any, default: bool) -> bool:
    if raw is None:
        return default
    if not isinstance(raw, str):
        return bool(raw)
    low = raw.strip().lower()
    if low in _TRUE:
        return True
    if low in _FALSE:
        return False
    return default


def env_log_options(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect TERMSURVEY_LOG_* variables into log option keys.

    TERMSURVEY_LOG_ACTIVE=1 -> {'active': True}; TERMSURVEY_LOG_PROMPT=detail -> {'log_prompt': 'detail'}.
    """
    env = os.environ if environ is None else environ
    out: Dict[str, Any] = {}
    for name, raw in env.items():
        if not name.startswith(ENV_PREFIX):
            continue
        key = name[len(ENV_PREFIX):].lower()
        if key in LoggingHandler.ASPECTS:
            key = 'log_' + key
        value: Any = raw.strip()
        if key in _BOOL_OPTIONS:
            value = value.lower() in _TRUE
        elif key == 'truncate_chars':
            value = int(value) if value.isdigit() else None
        out[key] = value
    return out


def scrub(obj: Any, redact_keys: Iterable[str], limit: int) -> Any:
    """Copy obj with values under redact_keys masked and long strings cut to limit chars."""
    keys = {k.lower() for k in redact_keys}
    if isinstance(obj, str):
        return obj[:limit] + '…' if limit and len(obj) > limit else obj
    if isinstance(obj, dict):
        return {
            _safe_str(k): REDACTED if _safe_str(k).lower() in keys else scrub(v, keys, limit)
            for k, v in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [scrub(item, keys, limit) for item in obj]
    return obj


def resolve_levels(options: Mapping[str, Any], defaults: Mapping[str, str], levels: Mapping[str, int]) -> Dict[str, int]:
    """Per-aspect numeric level: explicit log_<aspect>, else global verbosity, else the default."""
    verbosity = options.get('verbosity')
    base = verbosity.strip().lower() if isinstance(verbosity, str) and verbosity.strip() else None
    resolved: Dict[str, int] = {}
    for aspect, default in defaults.items():
        raw = options.get(f'log_{aspect}')
        name = raw.strip().lower() if isinstance(raw, str) and raw.strip() else (base or default)
        resolved[aspect] = levels.get(name, 0)
    return resolved


class LoggingHandler:
    """
    Diagnostic log sink for survey runs, off unless options['active'] is true.

    - Format: one JSON object per line, or a plain text line
    - Files: a per-run timestamped file under options['dir'], or options['file']
    - Payloads: redacted and truncated before they are written
    - Aspects: survey, prompt, render, input, writer, editor, errors; each
      gated by its own level (off, basic, detail, trace)
    """

    LEVELS = {'off': 0, 'minimal': 1, 'basic': 1, 'detail': 2, 'trace': 3}

    # Used when neither log_<aspect> nor verbosity is given
    ASPECTS = {
        'survey': 'basic',
        'prompt': 'basic',
        'render': 'off',
        'input': 'off',
        'writer': 'basic',
        'editor': 'basic',
        'errors': 'basic',
    }

    REDACT_KEYS = ('password', 'secret', 'token', 'api_key', 'authorization')

    def __init__(self, options: Optional[Mapping[str, Any]] = None) -> None:
        self._options: Dict[str, Any] = {k: v for k, v in dict(options or {}).items() if v is not None}
        opts = self._options
        self._enabled = _as_bool(opts.get('active'), False)
        fmt = str(opts.get('format') or 'json').strip().lower()
        self._json = fmt != 'text'
        self._redact = _as_bool(opts.get('redact'), True)
        self._limit = int(opts.get('truncate_chars') or 2000)
        raw_keys = opts.get('redact_keys')
        if isinstance(raw_keys, str) and raw_keys.strip():
            self._redact_keys: Tuple[str, ...] = tuple(k.strip() for k in raw_keys.split(',') if k.strip())
        else:
            self._redact_keys = self.REDACT_KEYS
        self._levels = resolve_levels(opts, self.ASPECTS, self.LEVELS)
        self._run_id = datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')
        self._path: Optional[str] = self._open_logfile() if self._enabled else None

    # --- Queries --------------------------------------------------------
    def active(self) -> bool:
        return self._enabled and self._path is not None

    @property
    def path(self) -> Optional[str]:
        return self._path

    def is_enabled(self, aspect: str, min_level: str = 'basic') -> bool:
        """True when logging is on and aspect is at least min_level."""
        return self.active() and self._levels.get(aspect, 0) >= self.LEVELS.get(min_level, 1)

    # --- Events ---------------------------------------------------------
    def settings(self, effective: dict) -> None:
        self._emit('survey', 'basic', 'settings', 'survey', 'info', effective)

    def survey_event(self, kind: str, details: dict) -> None:
        self._emit('survey', 'basic', kind, 'survey', 'info', details)

    def prompt_event(self, kind: str, details: dict, component: str = 'prompt') -> None:
        self._emit('prompt', 'basic', kind, component, 'info', details)

    def prompt_detail(self, kind: str, details: dict, component: str = 'prompt') -> None:
        self._emit('prompt', 'detail', kind, component, 'debug', details)

    def render_detail(self, details: dict) -> None:
        self._emit('render', 'detail', 'render', 'renderer', 'debug', details)

    def input_detail(self, details: dict) -> None:
        self._emit('input', 'detail', 'key', 'input', 'debug', details)

    def writer_event(self, kind: str, details: dict) -> None:
        self._emit('writer', 'basic', kind, 'core.writer', 'info', details)

    def editor_event(self, kind: str, details: dict) -> None:
        self._emit('editor', 'basic', kind, 'prompts.editor', 'info', details)

    def error(self, where: str, exc: BaseException, *, stack: Optional[str] = None) -> None:
        if not self.is_enabled('errors'):
            return
        if stack is None:
            stack = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        self._emit('errors', 'basic', 'error', where, 'error', {
            'type': type(exc).__name__,
            'message': _safe_str(exc),
            'stack': stack,
        })

    # --- Internals ------------------------------------------------------
    def _emit(self, aspect: str, level: str, event: str, component: str, severity: str, data: Mapping[str, Any]) -> None:
        if not self.is_enabled(aspect, level):
            return
        record = {
            'ts': _timestamp(),
            'run_id': self._run_id,
            'event': event,
            'component': component,
            'aspect': aspect,
            'severity': severity,
            'data': scrub(dict(data or {}), self._redact_keys if self._redact else (), self._limit),
        }
        line = self._format_line(record)
        try:
            with open(self._path, 'a', encoding='utf-8') as f:
                f.write(line + '\n')
        except OSError:
            # A log file that vanished mid-run never interrupts a prompt
            pass

    def _format_line(self, record: Dict[str, Any]) -> str:
        if self._json:
            try:
                return json.dumps(record, ensure_ascii=False)
            except (TypeError, ValueError):
                return json.dumps(dict(record, data=_safe_str(record['data'])), ensure_ascii=False)
        pairs = []
        for key, value in record['data'].items():
            if isinstance(value, (dict, list)):
                try:
                    value = json.dumps(value, ensure_ascii=False)
                except (TypeError, ValueError):
                    value = _safe_str(value)
            pairs.append(f'{key}={value}')
        head = f"[{record['ts']}] {record['component']} {record['aspect']}:{record['event']}"
        return ' '.join([head] + pairs)

    def _open_logfile(self) -> Optional[str]:
        opts = self._options
        log_dir = os.path.abspath(os.path.expanduser(opts.get('dir') or 'logs'))
        explicit = os.path.expanduser(str(opts.get('file') or '').strip())
        if explicit:
            path = explicit if os.path.isabs(explicit) else os.path.join(log_dir, explicit)
        elif _as_bool(opts.get('per_run'), True):
            path = os.path.join(log_dir, f'termsurvey-{self._run_id}.log')
        else:
            path = os.path.join(log_dir, 'termsurvey.log')
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            # Touch so an unwritable location is found before the first event
            open(path, 'a', encoding='utf-8').close()
        except OSError:
            return None
        if _as_bool(opts.get('symlink_latest'), False):
            self._link_latest(log_dir, path)
        return path

    @staticmethod
    def _link_latest(log_dir: str, path: str) -> None:
        latest = os.path.join(log_dir, 'latest.log')
        try:
            if os.path.lexists(latest):
                os.remove(latest)
            os.symlink(path, latest)
        except OSError:
            pass
