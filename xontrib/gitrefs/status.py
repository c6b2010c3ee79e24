'''
Parsing of `git status --porcelain -z` into per-path status records.
'''

from dataclasses import dataclass
import re
from typing import Iterable, Optional

from xonsh.lib.pretty import RepresentationPrinter

from xontrib.gitrefs.types import GitInternalError, StatusCode

STATUS_RE = re.compile(r'^([ MADRCU!?])([ MADRCU!?]) (.*)$', re.DOTALL)

STAT_MAP: dict[str, str] = {
    " ": "unmodified",
    "M": "modified",
    "A": "added",
    "D": "deleted",
    "R": "renamed",
    "C": "copied",
    "U": "unmerged",
    "?": "untracked",
    "!": "ignored",
}
'''
Human labels for the porcelain status codes.
'''


@dataclass(frozen=True)
class StatLine:
    """
    The status of one path. For a rename or copy, `old_path` is the source
    and `new_path` the destination; otherwise they are the same.
    """
    index_stat: StatusCode
    work_stat: StatusCode
    old_path: str
    new_path: str

    @property
    def index_state(self) -> str:
        return STAT_MAP[self.index_stat]

    @property
    def work_state(self) -> str:
        return STAT_MAP[self.work_stat]

    @property
    def is_rename(self) -> bool:
        return 'R' in (self.index_stat, self.work_stat)

    @property
    def is_copy(self) -> bool:
        return 'C' in (self.index_stat, self.work_stat)

    def describe(self) -> str:
        '''
        Render this status in human readable form.
        '''
        res = ''
        if self.is_rename:
            res = f"{self.old_path} was renamed to {self.new_path}\n"
        elif self.is_copy:
            res = f"{self.old_path} was copied to {self.new_path}\n"
        return (f"{res}{self.new_path} is {self.index_state} in the index "
                f"and {self.work_state} in the working tree.")

    def __str__(self):
        return self.describe()

    def _repr_pretty_(self, p: RepresentationPrinter, cycle: bool):
        if self.old_path != self.new_path:
            p.text(f"{self.index_stat}{self.work_stat} {self.old_path} -> {self.new_path}")
        else:
            p.text(f"{self.index_stat}{self.work_stat} {self.new_path}")


class StatusLines(tuple[StatLine, ...]):
    '''
    The status records of a repository, in the order git reported them.
    '''
    def describe(self) -> str:
        return '\n'.join(s.describe() for s in self)

    def __repr__(self):
        return f'StatusLines({list(self)!r})'

    def _repr_pretty_(self, p: RepresentationPrinter, cycle: bool):
        if cycle:
            p.text('StatusLines(...)')
            return
        if not self:
            p.text('Status: clean')
            return
        with p.group(4, 'Status:'):
            for line in self:
                p.break_()
                p.pretty(line)


def _records(data: str|bytes) -> Iterable[str]:
    if isinstance(data, bytes):
        data = data.decode('utf-8', errors='surrogateescape')
    records = data.split('\0')
    # The output is NUL-terminated, so the last split is always empty.
    if records and records[-1] == '':
        records.pop()
    return records


def parse_status(data: str|bytes) -> StatusLines:
    '''
    Parse the output of `git status --porcelain -z`.

    A rename or copy takes two records: the status line with the destination
    path, then the bare source path.
    '''
    result: list[StatLine] = []
    pending: Optional[list[str]] = None
    awaiting_source = False

    def flush():
        if pending is not None:
            index_stat, work_stat, old_path, new_path = pending
            result.append(StatLine(index_stat, work_stat, old_path, new_path))  # type: ignore[arg-type]

    for record in _records(data):
        match = None if awaiting_source else STATUS_RE.match(record)
        if match is not None:
            flush()
            index_stat, work_stat, path = match.groups()
            pending = [index_stat, work_stat, path, path]
            awaiting_source = 'R' in (index_stat, work_stat) or 'C' in (index_stat, work_stat)
        elif pending is not None:
            pending[2] = record
            awaiting_source = False
        else:
            raise GitInternalError(f'Unexpected status record: {record!r}')
    flush()
    return StatusLines(result)
