'''
A scripted stand-in for the git command, for tests that need no real repository.
'''

from pathlib import Path
from subprocess import CompletedProcess

from xontrib.gitrefs.repository import Repository
from xontrib.gitrefs.types import GitCommandError


class FakeGit:
    '''
    Canned git results, keyed by the full argument tuple.

    Each key holds a queue of results; the last one repeats once the
    others are used up. Unscripted commands succeed with no output.
    '''
    def __init__(self):
        self.calls: list[tuple[str, ...]] = []
        self.responses: dict[tuple[str, ...], list[CompletedProcess]] = {}

    def respond(self, *args: str,
                stdout: str='',
                stderr: str='',
                returncode: int=0) -> 'FakeGit':
        result = CompletedProcess(['git', *args], returncode, stdout, stderr)
        self.responses.setdefault(tuple(args), []).append(result)
        return self

    def __call__(self, args: tuple[str, ...]) -> CompletedProcess:
        self.calls.append(args)
        queue = self.responses.get(args)
        if not queue:
            return CompletedProcess(['git', *args], 0, '', '')
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    def called(self, *prefix: str) -> list[tuple[str, ...]]:
        '''
        The calls whose arguments start with `prefix`.
        '''
        return [c for c in self.calls if c[:len(prefix)] == prefix]


class FakeRepository(Repository):
    '''
    A `Repository` whose git commands are answered by a `FakeGit`.
    '''
    def __init__(self, fake: FakeGit, path: Path):
        super().__init__(path / '.git', path, git='git')
        self.fake = fake

    def run(self, subcmd: str, *args, check: bool=True):
        cmd = (subcmd, *(str(a) for a in args))
        result = self.fake(cmd)
        if check and result.returncode != 0:
            raise GitCommandError(['git', *cmd], result.returncode, result.stderr)
        return result


SHA_MAIN = 'a' * 40
SHA_DEV = 'b' * 40
SHA_TAG = 'c' * 40
SHA_ORIGIN = 'd' * 40

SHOW_REF = '\n'.join([
    f'{SHA_MAIN} HEAD',
    f'{SHA_MAIN} refs/heads/main',
    f'{SHA_DEV} refs/heads/feature/dev',
    f'{SHA_TAG} refs/tags/v1',
    f'{SHA_ORIGIN} refs/remotes/origin/main',
    f'{SHA_ORIGIN} refs/remotes/origin/HEAD',
]) + '\n'
