'''
Auxiliary types for the gitrefs package: type aliases and the exception hierarchy.

Types for public use are re-exported from `xontrib.gitrefs` via `__init__.py`
and its `__all__` variable.
'''

from pathlib import Path
from typing import Literal, Optional, Sequence, TypeAlias

GitHash: TypeAlias = str
"""
A git hash. Defined as a string to make the code more self-documenting.

Treated as opaque: a raw ref may carry any revision expression here.
"""

RefKind: TypeAlias = Literal['branch', 'tag']
"""
The kinds of ref that can be created.
"""

StatusCode: TypeAlias = Literal[' ', 'M', 'A', 'D', 'R', 'C', 'U', '?', '!']
"""
A single-character code from `git status --porcelain`.
"""

DirectoryKind: TypeAlias = Literal['repository', 'directory']


class GitException(Exception):
    """
    A base class for exceptions in the gitrefs package.
    """
    def __init__(self, message: str, /):
        super().__init__(message)
        self.message = message


class GitError(GitException):
    '''
    Thrown when a recoverable error is detected. The caller decides what to do.
    '''


class RefNotFoundError(GitError, LookupError):
    '''
    Thrown when a ref, name, or remote lookup finds nothing.
    '''
    name: str
    def __init__(self, name: str, message: Optional[str]=None):
        super().__init__(message or f'No ref for {name}')
        self.name = name


class GitInvalidOperationError(GitError):
    '''
    Thrown when an operation is not allowed for a ref's classification,
    such as deleting HEAD or a remote-tracking ref.
    '''


class RefExistsError(GitError):
    '''
    Thrown when creating a ref whose name is already taken.
    '''
    name: str
    def __init__(self, name: str):
        super().__init__(f'{name} already exists.')
        self.name = name


class GitCommandError(GitError):
    '''
    Thrown when the git command exits with a non-zero status.

    Carries the command line, exit status, and captured error stream.
    '''
    command: tuple[str, ...]
    returncode: int
    stderr: str
    def __init__(self, command: Sequence[str], returncode: int, stderr: str=''):
        cmdline = ' '.join(command)
        detail = stderr.strip()
        message = f'{cmdline} failed with exit status {returncode}'
        if detail:
            message = f'{message}: {detail}'
        super().__init__(message)
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr


class GitValueError(GitError, ValueError):
    '''
    Thrown when a value supplied to Git is invalid.
    '''
    def __init__(self, message: str, /):
        super().__init__(message)


class GitDirNotFoundError(GitError):
    '''
    Thrown when a git directory is not found.
    '''
    path: Path
    kind: DirectoryKind
    def __init__(self, path: Path, kind: DirectoryKind='directory',
                 message: Optional[str]=None):
        super().__init__(message or f'Git {kind} not found: {path}')
        self.path = path
        self.kind = kind


class RepositoryNotFoundError(GitDirNotFoundError):
    '''
    Thrown when no repository owns a path or any of its parents.

    Implies `GitDirNotFoundError`.
    '''
    def __init__(self, path: Path):
        super().__init__(path, 'repository',
            f'Could not find a Git repository in {path} or any of its parents!')


class GitInternalError(GitException):
    '''
    Thrown when git output or the filesystem is in a shape we cannot explain.

    This is not a `GitError`: it signals a broken invariant rather than a
    condition the caller can fix, but it can still be caught and reported.
    '''
