'''
Fixtures shared by all tests.
'''

from pathlib import Path
from threading import RLock

import pytest

from tests.fake_git import FakeGit, FakeRepository, SHOW_REF


@pytest.fixture()
def fake_git() -> FakeGit:
    '''
    Fixture for a fresh, unscripted fake git.
    '''
    return FakeGit()


@pytest.fixture()
def fake_repo(fake_git, tmp_path) -> FakeRepository:
    '''
    Fixture for a repository with a main branch, a feature branch,
    a tag, and an origin remote.
    '''
    fake_git.respond('show-ref', '--head', stdout=SHOW_REF)
    return FakeRepository(fake_git, tmp_path)


CWD_LOCK = RLock()
@pytest.fixture()
def f_chdir(monkeypatch):
    '''
    Change the working directory for the duration of the test.
    Locks to prevent simultaneous changes.
    '''
    with CWD_LOCK:
        def chdir(path) -> Path:
            path = Path(path)
            monkeypatch.chdir(path)
            return path
        yield chdir
