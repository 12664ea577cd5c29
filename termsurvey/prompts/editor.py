"""
Editor prompt: Enter opens an external editor on a scratch file and the saved
file becomes the answer.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
import tempfile
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from termsurvey.core.cancellation import CancellationToken
from termsurvey.errors import EditorError, Interrupted
from termsurvey.prompts.base import NO_ANSWER, EngineState, Prompt
from termsurvey.session import PromptSession
from termsurvey.templates import EDITOR_RECEIVED, editor_template
from termsurvey.ui.keys import Key, KeyEvent
from termsurvey.utils.logging_utils import LoggingHandler

_BOM = '\ufeff'

EditorCommand = Union[str, Sequence[str]]


def default_editor(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    for var in ('VISUAL', 'EDITOR'):
        if env.get(var):
            return env[var]
    return 'notepad' if sys.platform == 'win32' else 'vim'


def editor_command(*candidates: Optional[EditorCommand], environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """First non-empty candidate as an argv list, else $VISUAL, $EDITOR or the platform editor."""
    for cmd in candidates:
        if cmd:
            return _split(cmd)
    return _split(default_editor(environ))


def _split(cmd: EditorCommand) -> List[str]:
    if isinstance(cmd, str):
        argv = shlex.split(cmd, posix=sys.platform != 'win32')
    else:
        argv = [str(a) for a in cmd]
    if not argv:
        raise EditorError('editor command is empty', command=argv)
    return argv


def run_editor(
    argv: Sequence[str],
    stdio: Tuple[Optional[int], Optional[int], Optional[int]] = (None, None, None),
    cancel: Optional[CancellationToken] = None,
) -> None:
    """Run argv to completion. The child is killed and reaped on every abnormal exit."""
    argv = list(argv)
    stdin, stdout, stderr = stdio
    try:
        proc = subprocess.Popen(argv, stdin=stdin, stdout=stdout, stderr=stderr)
    except OSError as e:
        raise EditorError(f'could not start editor {argv[0]!r}: {e}', command=argv) from e

    with proc:
        if cancel is not None:
            cancel.register_cleanup(proc.kill)
        try:
            returncode = proc.wait()
        except KeyboardInterrupt:
            proc.kill()
            proc.wait()
            raise Interrupted('interrupt') from None
        except BaseException:
            proc.kill()
            proc.wait()
            raise
        finally:
            if cancel is not None:
                cancel.unregister_cleanup(proc.kill)

    if cancel is not None and cancel.is_cancelled():
        raise Interrupted(cancel.reason())
    if returncode != 0:
        raise EditorError(
            f'editor {argv[0]!r} exited with status {returncode}',
            command=argv,
            returncode=returncode,
        )


def _temp_name_parts(pattern: str) -> Tuple[str, str]:
    """Split a file name pattern like 'commit-*.md' into mkstemp's prefix and suffix."""
    pattern = os.path.basename(pattern or '*.txt')
    if '*' in pattern:
        prefix, _, suffix = pattern.rpartition('*')
        return prefix.replace('*', ''), suffix
    return pattern, ''


def edit_text(
    argv: Sequence[str],
    initial: str = '',
    *,
    file_name: str = '*.txt',
    stdio: Tuple[Optional[int], Optional[int], Optional[int]] = (None, None, None),
    cancel: Optional[CancellationToken] = None,
    logger: Optional[LoggingHandler] = None,
) -> str:
    """Write initial to a scratch file, let the editor change it and return the saved text."""
    prefix, suffix = _temp_name_parts(file_name)
    fd, path = tempfile.mkstemp(prefix=prefix or 'survey', suffix=suffix)
    command = list(argv) + [path]
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(initial)
        if logger is not None:
            logger.editor_event('editor_start', {'command': command[:-1], 'seeded': bool(initial)})
        run_editor(command, stdio, cancel)
        with open(path, 'r', encoding='utf-8', newline='') as f:
            text = f.read()
    finally:
        os.remove(path)
    if logger is not None:
        logger.editor_event('editor_done', {'chars': len(text)})
    if text.startswith(_BOM):
        text = text[len(_BOM):]
    return text


@dataclass
class Editor(Prompt):
    """Longer free text written in an external editor."""
    message: str
    default: str = ''
    help: str = ''
    editor: Optional[EditorCommand] = None
    hide_default: bool = False
    append_default: bool = False
    file_name: str = '*.txt'

    kind = 'editor'

    def on_key(self, session: PromptSession, state: EngineState, key: KeyEvent) -> Any:
        if key is Key.ENTER:
            return self.launch(session, state)
        if self.wants_help(session, key):
            state.show_help = True
        return NO_ANSWER

    def launch(self, session: PromptSession, state: EngineState) -> str:
        if state.seed is not None:
            initial = state.seed
        else:
            initial = self.default if self.append_default else ''
        argv = editor_command(self.editor, session.config.editor)
        with session.terminal.cooked():
            text = edit_text(
                argv,
                initial,
                file_name=self.file_name,
                stdio=session.terminal.child_stdio(),
                cancel=session.config.cancel,
                logger=session.logger,
            )
        return self.normalize(text)

    def normalize(self, text: str) -> str:
        body = text.rstrip('\r\n')
        if not body:
            return '' if self.append_default else self.default
        return body + '\n'

    def reset_input(self, state: EngineState) -> None:
        state.seed = None

    def on_rejected(self, state: EngineState, answer: Any) -> None:
        # The next launch starts from the rejected text so it can be corrected
        state.seed = answer if isinstance(answer, str) else None

    def draw(self, session: PromptSession, state: EngineState) -> Tuple[str, int]:
        d = self.data(session, state, default=self.default, hide_default=self.hide_default)
        return editor_template(d), 0

    def draw_answer(self, session: PromptSession, state: EngineState, answer: Any) -> str:
        d = self.data(session, state, show_answer=True, answer=EDITOR_RECEIVED)
        return editor_template(d)
