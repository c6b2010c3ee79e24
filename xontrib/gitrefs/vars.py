'''
Shared context-local settings for gitrefs.

The default git executable and the environment consulted for trace flags are
kept in a `ContextLocal`, allowing separate values for different contexts,
e.g. with different threads or asyncio tasks.

Note that the `extracontext` module handles async tasks and generators, avoiding
the issue with threading.ContextVar, which is not inherited to new threads.
'''

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Mapping, Optional
import os
import shutil
import sys

from extracontext import ContextLocal

from xontrib.gitrefs.types import GitValueError

_CONTEXT = ContextLocal()
"""
Holds `git` (an explicit git executable) and `env` (the xonsh session
environment, when loaded as a xontrib).
"""

TRACE_COMMANDS = 'GITREFS_TRACE_COMMANDS'
TRACE_REFS = 'GITREFS_TRACE_REFS'
TRACE_LOAD = 'GITREFS_TRACE_LOAD'


def _env() -> Mapping:
    env = getattr(_CONTEXT, 'env', None)
    if env is None:
        return os.environ
    return env


def set_env(env: Optional[Mapping]) -> None:
    '''
    Use `env` (normally a xonsh session's `env`) for trace flags.
    `None` reverts to `os.environ`.
    '''
    _CONTEXT.env = env


def tracing(flag: str) -> bool:
    value = _env().get(flag)
    if isinstance(value, str):
        return value.strip().lower() not in ('', '0', 'false', 'no')
    return bool(value)


def trace(flag: str, message: str) -> None:
    """
    Print a diagnostic to stderr if `flag` is set in the environment.
    """
    if tracing(flag):
        print(message, file=sys.stderr)


@contextmanager
def git_executable(git: str|Path) -> Generator[Path, None, None]:
    '''
    Use `git` as the default git executable within this context.

    Repositories opened inside the `with` block pick it up; an explicit
    `git=` argument still wins.
    '''
    old = getattr(_CONTEXT, 'git', None)
    _CONTEXT.git = Path(git)
    try:
        yield _CONTEXT.git
    finally:
        _CONTEXT.git = old


def default_git() -> Path:
    '''
    The git executable to use when none is given explicitly.
    '''
    git = getattr(_CONTEXT, 'git', None)
    if git is not None:
        return git
    found = shutil.which('git')
    if found is None:
        raise GitValueError("git command not found")
    return Path(found)
