'''
Fixtures that work with an actual repository, using the installed git.
'''

from pathlib import Path
from shutil import which
from collections.abc import Callable

import pytest

from xontrib.gitrefs.repository import Repository, init_repository

GIT_CONFIG = '''
[user]
    email =  bogons@bogus.com
    name = Fake Name
[init]
    defaultBranch = main
'''


@pytest.fixture()
def f_home(tmp_path, monkeypatch) -> Path:
    '''
    Fixture to make the top of our test directory hierarchy our $HOME,
    with a known git configuration and no system configuration.
    '''
    home = tmp_path / 'home'
    home.mkdir()
    (home / '.gitconfig').write_text(GIT_CONFIG)
    monkeypatch.setenv('HOME', str(home))
    monkeypatch.setenv('GIT_CONFIG_NOSYSTEM', '1')
    monkeypatch.delenv('GIT_DIR', raising=False)
    monkeypatch.delenv('GIT_WORK_TREE', raising=False)
    monkeypatch.delenv('XDG_CONFIG_HOME', raising=False)
    return home


@pytest.fixture()
def f_git(f_home) -> Callable[..., str]:
    '''
    Fixture to run git commands directly, bypassing the code under test.
    '''
    from subprocess import run, PIPE
    _git = which('git')
    if _git is None:
        pytest.skip("git is not installed")
    def git(*args, cwd: Path|str, check=True, **kwargs) -> str:
        return run([_git, *args],
                   check=check,
                   stdout=PIPE,
                   text=True,
                   cwd=str(cwd),
                   **kwargs
                ).stdout.rstrip()
    return git


@pytest.fixture()
def f_repo(f_git, f_home, f_chdir) -> Repository:
    '''
    Fixture for a new repository with two commits on `main`.
    '''
    path = f_home / 'repo'
    path.mkdir()
    f_chdir(f_home)
    repo = init_repository(path)
    f_git('symbolic-ref', 'HEAD', 'refs/heads/main', cwd=path)
    (path / 'a.txt').write_text('first\n')
    f_git('add', 'a.txt', cwd=path)
    f_git('commit', '-q', '-m', 'first', cwd=path)
    (path / 'b.txt').write_text('second\n')
    f_git('add', 'b.txt', cwd=path)
    f_git('commit', '-q', '-m', 'second', cwd=path)
    return repo
