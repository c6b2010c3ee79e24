"""
Structured access to a git repository's refs and working tree status.

`gitrefs` runs the `git` command and turns its output into objects: a
`Repository` with a cache of `Ref`s that can be resolved by name, created,
deleted, checked out, compared for ancestry, and linked to remote-tracking
branches, plus a parser for `git status --porcelain -z`.

It is also a [xonsh](https://xon.sh) xontrib: `xontrib load gitrefs` makes
`git_open` available in the shell.
"""

from xontrib.gitrefs.types import (
    GitHash,
    RefKind,
    StatusCode,
    GitException,
    GitError,
    RefNotFoundError,
    GitInvalidOperationError,
    RefExistsError,
    GitCommandError,
    GitValueError,
    GitDirNotFoundError,
    RepositoryNotFoundError,
    GitInternalError,
)
from xontrib.gitrefs.vars import git_executable
from xontrib.gitrefs.config import ConfigStore
from xontrib.gitrefs.ref import Ref, RefCache
from xontrib.gitrefs.status import StatLine, StatusLines, parse_status
from xontrib.gitrefs.repository import (
    Repository,
    open_repository,
    init_repository,
    clone_repository,
)
from xontrib.gitrefs.main import (
    _load_xontrib_,
    _unload_xontrib_,
)

__all__ = (
    "_load_xontrib_",
    "_unload_xontrib_",
    "GitHash",
    "RefKind",
    "StatusCode",
    "GitException",
    "GitError",
    "RefNotFoundError",
    "GitInvalidOperationError",
    "RefExistsError",
    "GitCommandError",
    "GitValueError",
    "GitDirNotFoundError",
    "RepositoryNotFoundError",
    "GitInternalError",
    "git_executable",
    "ConfigStore",
    "Ref",
    "RefCache",
    "StatLine",
    "StatusLines",
    "parse_status",
    "Repository",
    "open_repository",
    "init_repository",
    "clone_repository",
)
