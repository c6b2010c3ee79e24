'''
A mixin class for running git commands on a repository.
'''

from pathlib import Path
from subprocess import run, PIPE, CompletedProcess
from typing import Optional

from xontrib.gitrefs.types import GitCommandError
from xontrib.gitrefs.vars import default_git, trace, TRACE_COMMANDS


class _GitCmd:
    """
    Runs git commands in a fixed directory.

    Every call blocks until git exits. There is no timeout: a hung git hangs
    the caller.
    """
    __path: Path
    __git: Path
    '''
    The path to the git command.
    '''

    def __init__(self, path: Path, git: Optional[str|Path]=None):
        self.__path = Path(path)
        self.__git = Path(git) if git is not None else default_git()

    @property
    def git_command(self) -> Path:
        return self.__git

    @property
    def cwd(self) -> Path:
        '''
        The directory git commands are run in.
        '''
        return self.__path

    def run(self, subcmd: str, *args: str|Path,
            check: bool=True,
            ) -> CompletedProcess:
        '''
        Run a git subcommand, capturing its output as text.

        PARAMETERS
        ----------
        subcmd: str
            The git subcommand to run.
        args: str|Path
            The arguments to the subcommand.
        check: bool
            If true, a non-zero exit raises `GitCommandError`.

        RETURNS
        -------
        CompletedProcess
        '''
        cmd = [str(self.__git), subcmd, *(str(a) for a in args)]
        trace(TRACE_COMMANDS, f"Running {' '.join(cmd[1:])} in {self.__path}")
        result = run(cmd,
                     stdout=PIPE,
                     stderr=PIPE,
                     text=True,
                     cwd=self.__path,
                     )
        if check and result.returncode != 0:
            raise GitCommandError(['git', *cmd[1:]], result.returncode, result.stderr)
        return result

    def git(self, subcmd: str, *args: str|Path, **kwargs) -> str:
        return self.run(subcmd, *args, **kwargs).stdout.strip()

    def git_ok(self, subcmd: str, *args: str|Path) -> bool:
        '''
        Run a git subcommand for its exit status only.
        '''
        return self.run(subcmd, *args, check=False).returncode == 0
