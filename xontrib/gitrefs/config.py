'''
Cached access to a repository's git configuration.
'''

from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from xontrib.gitrefs.git_cmd import _GitCmd


def _normalize(key: str) -> str:
    '''
    Lower-case the section and variable names, as `git config --list` does.
    The subsection (between the first and last dot) keeps its case.
    '''
    section, dot, rest = key.partition('.')
    if not dot:
        return key.lower()
    subsection, dot2, variable = rest.rpartition('.')
    if not dot2:
        return f'{section.lower()}.{rest.lower()}'
    return f'{section.lower()}.{subsection}.{variable.lower()}'


def parse_config_list(output: str) -> dict[str, str]:
    '''
    Parse the output of `git config -z --list`.

    Each NUL-terminated record is `key\\nvalue`; a key with no value has no
    newline and maps to the empty string. Later entries win, matching git's
    own precedence for single-valued keys.
    '''
    values: dict[str, str] = {}
    for record in output.split('\0'):
        if not record:
            continue
        key, _, value = record.partition('\n')
        values[key] = value
    return values


class ConfigStore(Mapping[str, str]):
    """
    Section-aware get/set/delete over `git config`, with a write-through cache.

    The cache is filled by a single `git config -z --list` on first access.
    Writes go to git first and update the cache only if git succeeds.
    """
    __git: _GitCmd
    __values: Optional[dict[str, str]]

    def __init__(self, git: _GitCmd):
        self.__git = git
        self.__values = None

    def __load(self) -> dict[str, str]:
        if self.__values is None:
            self.__values = parse_config_list(self.__git.git('config', '-z', '--list'))
        return self.__values

    def reload(self) -> None:
        '''
        Forget the cached values. They are re-read on next access.
        '''
        self.__values = None

    def __getitem__(self, key: str) -> str:
        return self.__load()[_normalize(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self.__load())

    def __len__(self) -> int:
        return len(self.__load())

    def get(self, key: str, default: Optional[str]=None) -> Optional[str]:
        return self.__load().get(_normalize(key), default)

    def set(self, key: str, value: str) -> None:
        self.__git.run('config', key, value)
        self.__load()[_normalize(key)] = value

    def delete(self, key: str) -> None:
        self.__git.run('config', '--unset', key)
        self.__load().pop(_normalize(key), None)

    def section(self, name: str) -> Mapping[str, str]:
        '''
        The keys in section `name` (e.g. `branch.main`), without the section prefix.
        '''
        prefix = _normalize(f'{name}.x')[:-1]
        return MappingProxyType({
            k[len(prefix):]: v
            for k, v in self.__load().items()
            if k.startswith(prefix)
        })

    def has_section(self, name: str) -> bool:
        return len(self.section(name)) > 0

    def local_keys(self) -> list[str]:
        '''
        The keys set in the repository's own config file.
        '''
        output = self.__git.git('config', '--local', '-z', '--name-only', '--list')
        return [k for k in output.split('\0') if k]

    def remove_section(self, name: str) -> None:
        '''
        Remove section `name` from the repository's own config.

        Keys for the section in global or system config stay in effect,
        so the cache is reloaded rather than pruned.
        '''
        prefix = _normalize(f'{name}.x')[:-1]
        if any(_normalize(k).startswith(prefix) for k in self.local_keys()):
            self.__git.run('config', '--remove-section', name)
        self.reload()

    def __repr__(self):
        state = 'unloaded' if self.__values is None else f'{len(self.__values)} keys'
        return f'ConfigStore({state})'
