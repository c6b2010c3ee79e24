'''
Implementation of the `Repository` class, and ways to obtain one.
'''

from pathlib import Path
from typing import Optional

from xonsh.lib.pretty import RepresentationPrinter

from xontrib.gitrefs.config import ConfigStore
from xontrib.gitrefs.git_cmd import _GitCmd
from xontrib.gitrefs.ref import Ref, RefCache, HEADS, TAGS
from xontrib.gitrefs.status import StatusLines, parse_status
from xontrib.gitrefs.types import (
    GitInternalError, GitInvalidOperationError, GitValueError,
    RefExistsError, RefKind, RefNotFoundError, RepositoryNotFoundError,
)


class Repository(_GitCmd):
    """
    A git repository: its refs, its configuration, and its working tree status.

    Commands run in the working tree if there is one, else in the metadata
    directory. One instance must not be used from several threads at once.
    """

    __git_dir: Path
    @property
    def git_dir(self) -> Path:
        """
        The directory holding the git metadata.
        """
        return self.__git_dir

    __work_dir: Path|None
    @property
    def work_dir(self) -> Path|None:
        """
        The directory holding the working tree, or `None` for a bare repository.
        """
        return self.__work_dir

    __refs: RefCache
    @property
    def refs(self) -> RefCache:
        return self.__refs

    __config: ConfigStore
    @property
    def config(self) -> ConfigStore:
        return self.__config

    def __init__(self, git_dir: Path|str,
                 work_dir: Optional[Path|str]=None,
                 *,
                 git: Optional[str|Path]=None):
        self.__git_dir = Path(git_dir)
        self.__work_dir = Path(work_dir) if work_dir else None
        super().__init__(self.path, git=git)
        self.__refs = RefCache(self)
        self.__config = ConfigStore(self)

    @property
    def is_raw(self) -> bool:
        '''
        True for a bare repository, which has no working tree.
        '''
        return self.__work_dir is None

    @property
    def path(self) -> Path:
        '''
        Our best idea of the path to the repository: the working tree,
        or the metadata directory for a bare repository.
        '''
        if self.__work_dir is None:
            return self.__git_dir
        return self.__work_dir

    def get(self, key: str) -> Optional[str]:
        '''
        Get a git config value, or `None` if it is not set.
        '''
        return self.__config.get(key)

    def set(self, key: str, value: str) -> None:
        self.__config.set(key, value)

    def reload_refs(self) -> None:
        '''
        Reload all the refs lazily. Never fails; errors show up on next use.
        '''
        self.__refs.invalidate()

    def has_ref(self, name: str) -> bool:
        '''
        Test to see if a ref exists, without asking git to parse `name`.
        '''
        return self.__refs.find(name) is not None

    def ref(self, name: str) -> Ref:
        '''
        Given a string that should represent a ref, return that ref.

        Tried as a full path, a branch, a tag, and a remote-tracking ref, in
        that order. Failing those, if git accepts `name` as a revision, a raw
        ref is returned whose `sha` and `path` are both `name`.
        '''
        found = self.__refs.find(name)
        if found is not None:
            return found
        # Not a symbolic ref. See if it is a raw one.
        if self.git_ok('rev-parse', '-q', '--verify', name):
            return Ref(name, name, self)
        raise RefNotFoundError(name)

    def _make_ref(self, kind: RefKind, name: str, base: Ref|str) -> Ref:
        if kind not in ('branch', 'tag'):
            raise GitValueError(f"Unknown ref type: {kind!r}")
        if name == 'HEAD':
            raise GitInvalidOperationError(f"Cannot create a {kind} named HEAD.")
        path = (HEADS if kind == 'branch' else TAGS) + name
        if self.__refs.by_name(name) is not None or path in self.__refs:
            raise RefExistsError(name)
        match base:
            case Ref():
                # A short name may be ambiguous between a branch and a tag.
                start = base.sha if base.is_raw else base.path
            case str():
                start = base
            case _:
                raise GitValueError(f"Unknown type for base: {type(base).__name__}")
        self.run(kind, name, start)
        self.__refs.invalidate()
        ref = self.__refs.get(path)
        if ref is None:
            raise RefNotFoundError(path, f"{kind} {name} was created but git does not show it.")
        return ref

    def branch(self, name: str, base: Ref|str) -> Ref:
        '''
        Create a branch named `name` at `base`.
        '''
        return self._make_ref('branch', name, base)

    def tag(self, name: str, base: Ref|str) -> Ref:
        '''
        Create a lightweight tag named `name` at `base`.
        '''
        return self._make_ref('tag', name, base)

    def checkout(self, ref: Ref|str) -> None:
        match ref:
            case Ref():
                ref.checkout()
            case str():
                self.run('checkout', '-q', ref)
                # HEAD has moved.
                self.__refs.invalidate()
            case _:
                raise GitValueError(f"Cannot check out {ref!r}")

    def status(self) -> StatusLines:
        '''
        The status of every changed, untracked, or conflicted path.
        '''
        return parse_status(self.run('status', '--porcelain', '-z').stdout)

    def is_clean(self) -> tuple[bool, StatusLines]:
        '''
        Checks to see if there are any uncommitted or untracked changes.
        Also returns the status lines, so a dirty repository can be reported on.
        '''
        lines = self.status()
        return len(lines) == 0, lines

    def __repr__(self):
        return f"Repository({str(self.path)!r})"

    def _repr_pretty_(self, p: RepresentationPrinter, cycle: bool):
        if cycle:
            p.text(f"Repository({self.path})")
            return
        with p.group(4, "Repository:"):
            p.break_()
            p.text(f"git_dir: {self.git_dir}")
            p.break_()
            p.text(f"work_dir: {self.work_dir or '-'}")
            p.break_()
            p.text(f"refs: {self.refs!r}")


def _read_gitfile(path: Path) -> Path|None:
    '''
    Follow a `.git` file (as used by linked worktrees and submodules).
    '''
    try:
        text = path.read_text().strip()
    except (OSError, UnicodeDecodeError) as ex:
        raise GitInternalError(f"Could not read {path}: {ex}") from ex
    if not text.startswith('gitdir:'):
        return None
    target = Path(text[len('gitdir:'):].strip())
    if not target.is_absolute():
        target = path.parent / target
    return target.resolve()


def find_repository(path: Path) -> tuple[Path, Path|None] | None:
    '''
    Check whether `path` itself is a repository.

    RETURNS
    -------
    (git_dir, work_dir), with `work_dir` `None` for a bare repository,
    or `None` if `path` is not a repository.
    '''
    try:
        is_dir = path.is_dir()
        exists = is_dir or path.exists()
    except OSError as ex:
        raise GitInternalError(f"Could not stat {path}: {ex}") from ex
    if not exists:
        raise GitInternalError(f"Could not stat {path}")
    if not is_dir:
        raise GitInternalError(f"{path} is not a directory!")
    if path.name == '.git' and (path / 'config').is_file():
        return path, path.parent
    if path.name.endswith('.git') and (path / 'config').is_file():
        return path, None
    dot_git = path / '.git'
    if dot_git.is_file():
        git_dir = _read_gitfile(dot_git)
        if git_dir is not None and git_dir.is_dir():
            return git_dir, path
        return None
    if (dot_git / 'config').is_file():
        return dot_git, path
    return None


def open_repository(path: Optional[Path|str]=None, *,
                    git: Optional[str|Path]=None) -> Repository:
    '''
    Open the first git repository that "owns" `path` (default: the current
    directory), looking at `path` and then each of its parents.
    '''
    if path is None or path == '':
        path = '.'
    base = Path(path).resolve()
    for candidate in (base, *base.parents):
        found = find_repository(candidate)
        if found is not None:
            git_dir, work_dir = found
            return Repository(git_dir, work_dir, git=git)
    raise RepositoryNotFoundError(base)


def init_repository(path: Path|str, *args: str,
                    git: Optional[str|Path]=None) -> Repository:
    '''
    Initialize new git metadata at `path`.
    The rest of the args are passed to `git init` unchanged.
    '''
    _run_outside(git, 'init', *args, str(Path(path).resolve()))
    return open_repository(path, git=git)


def clone_repository(source: str|Path, target: Path|str, *args: str,
                     git: Optional[str|Path]=None) -> Repository:
    '''
    Clone `source` into `target`. The rest of the args are passed to
    `git clone` unchanged.
    '''
    _run_outside(git, 'clone', *args, str(source), str(Path(target).resolve()))
    return open_repository(target, git=git)


def _run_outside(git: Optional[str|Path], subcmd: str, *args: str) -> None:
    '''
    Run git in the current directory, where there is no repository yet.
    '''
    _GitCmd(Path.cwd(), git=git).run(subcmd, *args)
