'''
Refs, and the cache of refs known to a repository.

Refs are the basic way to point at an individual commit in Git.
'''

from typing import Iterator, Optional, TYPE_CHECKING

from xonsh.lib.pretty import RepresentationPrinter

from xontrib.gitrefs.types import (
    GitCommandError, GitHash, GitInternalError, GitInvalidOperationError, GitValueError,
    RefNotFoundError,
)
from xontrib.gitrefs.vars import trace, TRACE_REFS

if TYPE_CHECKING:
    from xontrib.gitrefs.repository import Repository

HEADS = 'refs/heads/'
TAGS = 'refs/tags/'
REMOTES = 'refs/remotes/'
HEAD = 'HEAD'

RESOLVE_PREFIXES = ('', HEADS, TAGS, REMOTES)
'''
The order in which a bare name is tried against the cache.
'''


class Ref:
    """
    A resolved pointer: a symbolic path and the commit it points at.

    The `sha`/`path` pair never changes. A ref that moves is a new `Ref`,
    obtained by reloading the repository's refs.
    """
    __slots__ = ('__sha', '__path', '__repository')

    def __init__(self, sha: GitHash, path: str, repository: 'Repository'):
        self.__sha = sha
        self.__path = path
        self.__repository = repository

    @property
    def sha(self) -> GitHash:
        return self.__sha

    @property
    def path(self) -> str:
        '''
        The fully-qualified path, e.g. `refs/heads/main`, or `HEAD`.
        Same as `sha` for a raw ref.
        '''
        return self.__path

    @property
    def repository(self) -> 'Repository':
        return self.__repository

    @property
    def is_local(self) -> bool:
        '''
        True for a branch. Only local refs are mutable.
        '''
        return self.__path.startswith(HEADS)

    @property
    def is_remote(self) -> bool:
        '''
        True for a remote-tracking ref. These change only through fetch or push.
        '''
        return self.__path.startswith(REMOTES)

    @property
    def is_tag(self) -> bool:
        return self.__path.startswith(TAGS)

    @property
    def is_head(self) -> bool:
        return self.__path == HEAD

    @property
    def is_raw(self) -> bool:
        '''
        True if no symbolic path was found for this ref.
        '''
        return self.__sha == self.__path

    @property
    def name(self) -> str:
        '''
        The path without its `refs/<kind>/` prefix: `refs/heads/feature/x`
        is `feature/x`, `refs/remotes/origin/main` is `origin/main`.
        '''
        return self.__path.split('/', 2)[-1]

    def remote(self) -> str:
        '''
        The name of the remote a remote-tracking ref belongs to.
        '''
        if not self.is_remote:
            raise GitInvalidOperationError(f"{self.path} is not a remote ref!")
        return self.__path.split('/', 3)[2]

    def delete(self) -> None:
        '''
        Delete a branch or tag.

        A branch that is not fully merged is refused by git, and that failure
        is raised as `GitCommandError`.
        '''
        if self.is_remote:
            raise GitInvalidOperationError("Cannot delete a remote ref!")
        if self.is_head:
            raise GitInvalidOperationError("Cannot delete HEAD!")
        if self.is_tag:
            cmd = 'tag'
        elif self.is_local:
            cmd = 'branch'
        else:
            raise GitInvalidOperationError(f"Cannot delete {self.path}: not a branch or tag.")
        self.__repository.run(cmd, '-d', self.name)
        self.__repository.refs.discard(self.__path)

    def checkout(self) -> None:
        '''
        Check out this ref. Branches and tags are checked out by name,
        anything else by commit.
        '''
        if self.is_local or self.is_tag:
            target = self.name
        else:
            target = self.sha
        self.__repository.checkout(target)

    def tracks(self) -> str:
        '''
        The remote this branch tracks.
        '''
        if not self.is_local:
            raise GitInvalidOperationError(
                f"{self.path} is not a branch, it does not track anything.")
        remote = self.__repository.config.get(f"branch.{self.name}.remote")
        if remote is None:
            raise RefNotFoundError(self.path, f"{self.path} does not track a remote")
        return remote

    def remote_branch(self, remote: str) -> 'Ref':
        '''
        The remote-tracking ref for this branch on `remote`.

        Looks only at refs already loaded; it does not reload them.
        '''
        if not self.is_local:
            raise GitInvalidOperationError(
                f"{self.path} is not a branch, cannot find remote tracking branch.")
        found = self.__repository.refs.peek(f"{REMOTES}{remote}/{self.name}")
        if found is None:
            raise RefNotFoundError(self.path, f"{self.path} has no remote branch at {remote}")
        return found

    def has_remote_ref(self, remote: str) -> bool:
        if not self.is_local:
            return False
        return self.__repository.has_ref(f"{REMOTES}{remote}/{self.name}")

    def track_remote(self, remote: str) -> None:
        '''
        Make this branch track the identically-named branch on `remote`.
        '''
        if not self.is_local:
            raise GitInvalidOperationError(f"{self.path} is not a branch, we cannot track it.")
        config = self.__repository.config
        section = f"branch.{self.name}"
        if (config.get(f"{section}.remote") == remote
                and config.get(f"{section}.merge") == self.path):
            return
        # Partial or stale settings are cleared before both keys are written.
        if config.has_section(section):
            config.remove_section(section)
        config.set(f"{section}.remote", remote)
        config.set(f"{section}.merge", self.path)

    def contains(self, other: 'Ref') -> bool:
        '''
        True if every commit reachable from `other` is reachable from this ref.
        '''
        if other.repository is not self.__repository:
            raise GitValueError(f"{other.path} belongs to a different repository.")
        # A ref always contains itself.
        if self.sha == other.sha:
            return True
        # Anything reachable from other but not from us means no.
        return self.__repository.git('rev-list', other.sha, f"^{self.sha}") == ''

    def __eq__(self, other):
        if not isinstance(other, Ref):
            return NotImplemented
        return (self.sha, self.path) == (other.sha, other.path)

    def __hash__(self):
        return hash((self.sha, self.path))

    def __str__(self):
        return self.path

    def __repr__(self):
        return f"Ref({self.path!r}, {self.sha!r})"

    def _repr_pretty_(self, p: RepresentationPrinter, cycle: bool):
        if self.is_raw:
            p.text(f"Ref(raw {self.sha})")
        else:
            p.text(f"Ref({self.path} -> {self.sha})")


def _name_rank(ref: Ref) -> int:
    if ref.is_local:
        return 0
    if ref.is_tag:
        return 1
    if ref.is_remote:
        return 2
    return 3


class RefCache:
    """
    The refs of a repository, loaded lazily from `git show-ref --head`.

    Keyed by full path. A secondary index maps short names to refs, preferring
    branches, then tags, then remote-tracking refs, when names collide.

    Not synchronized: a reader racing a reload may see either state.
    """
    __repository: 'Repository'
    __refs: Optional[dict[str, Ref]]
    __names: dict[str, Ref]

    def __init__(self, repository: 'Repository'):
        self.__repository = repository
        self.__refs = None
        self.__names = {}

    @property
    def loaded(self) -> bool:
        return self.__refs is not None

    def load(self) -> None:
        '''
        Populate the cache if it is not already.
        '''
        if self.__refs is not None:
            return
        result = self.__repository.run('show-ref', '--head', check=False)
        # show-ref exits 1, silently, when there are no refs at all.
        if result.returncode != 0 and (result.returncode != 1 or result.stdout.strip()):
            raise GitCommandError(['git', 'show-ref', '--head'],
                                  result.returncode, result.stderr)
        refs: dict[str, Ref] = {}
        for line in result.stdout.splitlines():
            line = line.strip()
            if not line:
                continue
            parts = line.split(None, 1)
            if len(parts) != 2:
                raise GitInternalError(f"Unexpected show-ref line: {line!r}")
            sha, path = parts
            refs[path] = Ref(sha, path, self.__repository)
        self.__refs = refs
        self.__reindex()
        trace(TRACE_REFS, f"Loaded {len(refs)} refs from {self.__repository.path}")

    def __reindex(self) -> None:
        names: dict[str, Ref] = {}
        for ref in sorted(self.__refs.values() if self.__refs else (), key=_name_rank):
            names.setdefault(ref.name, ref)
        self.__names = names

    def invalidate(self) -> None:
        '''
        Drop all cached refs. They are reloaded on next access.
        '''
        self.__refs = None
        self.__names = {}
        trace(TRACE_REFS, f"Invalidated refs for {self.__repository.path}")

    def peek(self, path: str) -> Optional[Ref]:
        '''
        Look up a full path without loading.
        '''
        if self.__refs is None:
            return None
        return self.__refs.get(path)

    def get(self, path: str) -> Optional[Ref]:
        self.load()
        return self.peek(path)

    def by_name(self, name: str) -> Optional[Ref]:
        '''
        Look up a ref by its short name.
        '''
        self.load()
        return self.__names.get(name)

    def find(self, name: str) -> Optional[Ref]:
        '''
        Try `name` as a full path, then as a branch, tag, and remote-tracking ref.
        '''
        self.load()
        for prefix in RESOLVE_PREFIXES:
            ref = self.peek(prefix + name)
            if ref is not None:
                return ref
        return None

    def discard(self, path: str) -> None:
        '''
        Remove one ref, if loaded, without reloading the rest.
        '''
        if self.__refs is not None and self.__refs.pop(path, None) is not None:
            self.__reindex()

    def __contains__(self, path: object) -> bool:
        self.load()
        return path in (self.__refs or {})

    def __iter__(self) -> Iterator[Ref]:
        self.load()
        return iter(list((self.__refs or {}).values()))

    def __len__(self) -> int:
        self.load()
        return len(self.__refs or {})

    def __repr__(self):
        if self.__refs is None:
            return 'RefCache(unloaded)'
        return f'RefCache({len(self.__refs)} refs)'
