'''
Tests for `ConfigStore`.
'''

from pytest import raises

from xontrib.gitrefs.config import parse_config_list
from xontrib.gitrefs.types import GitCommandError

CONFIG = (
    'core.bare\nfalse\0'
    'remote.origin.url\nhttps://example.com/repo.git\0'
    'branch.Feature/X.remote\norigin\0'
    'branch.Feature/X.merge\nrefs/heads/Feature/X\0'
    'core.flag\0'
)


def test_parse_config_list():
    values = parse_config_list(CONFIG)
    assert values['core.bare'] == 'false'
    assert values['remote.origin.url'] == 'https://example.com/repo.git'
    assert values['core.flag'] == ''
    assert len(values) == 5


def test_parse_config_list_multiline_value():
    values = parse_config_list('alias.lg\nlog\n--oneline\0')
    assert values['alias.lg'] == 'log\n--oneline'


def test_get_loads_once(fake_repo, fake_git):
    fake_git.respond('config', '-z', '--list', stdout=CONFIG)
    assert fake_repo.get('core.bare') == 'false'
    assert fake_repo.get('core.missing') is None
    assert fake_repo.config.get('CORE.Bare') == 'false'
    assert 'remote.origin.url' in fake_repo.config
    assert len(fake_git.called('config')) == 1


def test_subsection_case_kept(fake_repo, fake_git):
    fake_git.respond('config', '-z', '--list', stdout=CONFIG)
    assert fake_repo.get('Branch.Feature/X.Remote') == 'origin'
    assert fake_repo.get('branch.feature/x.remote') is None


def test_set_writes_through(fake_repo, fake_git):
    fake_git.respond('config', '-z', '--list', stdout=CONFIG)
    fake_repo.set('user.name', 'Fake Name')
    assert fake_git.called('config', 'user.name') == [('config', 'user.name', 'Fake Name')]
    assert fake_repo.get('user.name') == 'Fake Name'
    assert len(fake_git.called('config', '-z')) == 1


def test_set_failure_leaves_cache(fake_repo, fake_git):
    fake_git.respond('config', '-z', '--list', stdout=CONFIG)
    fake_git.respond('config', 'bad key', 'x', returncode=1, stderr='error: invalid key: bad key')
    with raises(GitCommandError):
        fake_repo.set('bad key', 'x')
    assert fake_repo.get('bad key') is None


def test_delete(fake_repo, fake_git):
    fake_git.respond('config', '-z', '--list', stdout=CONFIG)
    fake_repo.config.delete('core.bare')
    assert fake_git.called('config', '--unset') == [('config', '--unset', 'core.bare')]
    assert fake_repo.get('core.bare') is None


def test_sections(fake_repo, fake_git):
    fake_git.respond('config', '-z', '--list', stdout=CONFIG)
    config = fake_repo.config
    assert dict(config.section('branch.Feature/X')) == {
        'remote': 'origin',
        'merge': 'refs/heads/Feature/X',
    }
    assert config.has_section('remote.origin')
    assert not config.has_section('branch.main')
    assert config.get('remote.origin.url') == 'https://example.com/repo.git'


def test_remove_local_section(fake_repo, fake_git):
    fake_git.respond('config', '-z', '--list', stdout=CONFIG)
    fake_git.respond('config', '-z', '--list', stdout='remote.origin.url\nhttps://example.com/repo.git\0')
    fake_git.respond('config', '--local', '-z', '--name-only', '--list',
                     stdout='branch.Feature/X.remote\0branch.Feature/X.merge\0')
    config = fake_repo.config
    assert config.has_section('branch.Feature/X')
    config.remove_section('branch.Feature/X')
    assert fake_git.called('config', '--remove-section') == [
        ('config', '--remove-section', 'branch.Feature/X')]
    assert not config.has_section('branch.Feature/X')
    assert config.get('remote.origin.url') == 'https://example.com/repo.git'


def test_remove_section_only_in_global_config(fake_repo, fake_git):
    fake_git.respond('config', '-z', '--list', stdout='branch.main.rebase\ntrue\0')
    config = fake_repo.config
    assert config.has_section('branch.main')
    config.remove_section('branch.main')
    assert fake_git.called('config', '--remove-section') == []
    assert fake_git.called('config', '--local') == [
        ('config', '--local', '-z', '--name-only', '--list')]
    # Still set globally.
    assert config.get('branch.main.rebase') == 'true'


def test_reload(fake_repo, fake_git):
    fake_git.respond('config', '-z', '--list', stdout=CONFIG)
    fake_git.respond('config', '-z', '--list', stdout='core.bare\ntrue\0')
    assert fake_repo.get('core.bare') == 'false'
    fake_repo.config.reload()
    assert repr(fake_repo.config) == 'ConfigStore(unloaded)'
    assert fake_repo.get('core.bare') == 'true'
    assert len(fake_repo.config) == 1
