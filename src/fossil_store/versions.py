"""
Object version model.

The store reports versions as flat ``VersionEntry`` records. Adapter logic
works on the ``ObjectState`` sum type derived from the newest entry of a name.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Union


class VersionAction(str, Enum):
    """What a stored version represents."""
    ACTIVE = "active"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class Active:
    """Newest version holds real content."""
    version_id: str
    size: int


@dataclass(frozen=True)
class Hidden:
    """Newest version is a hide marker shadowing older history."""
    version_id: str
    size: int = 0


ObjectState = Union[Active, Hidden]


@dataclass(frozen=True)
class VersionEntry:
    """One version of a stored name as returned by the versioned client."""
    name: str
    version_id: str
    action: VersionAction
    size: int = 0

    @property
    def is_hidden(self) -> bool:
        return self.action is VersionAction.HIDDEN

    @property
    def state(self) -> ObjectState:
        if self.is_hidden:
            return Hidden(version_id=self.version_id, size=self.size)
        return Active(version_id=self.version_id, size=self.size)


def newest_state(entries: Iterable[VersionEntry], name: str) -> Optional[ObjectState]:
    """State of *name* according to the first (newest) entry.

    Returns None when there are no entries or the newest entry belongs to a
    different name, which happens because listings are prefix based.
    """
    for entry in entries:
        if entry.name != name:
            return None
        return entry.state
    return None


def newest_per_name(entries: Iterable[VersionEntry]) -> Iterator[VersionEntry]:
    """Yield the first entry of every run of equal names.

    Entries are expected newest-first within a name, so this is the newest
    version of each name.
    """
    last_name = None
    for entry in entries:
        if entry.name == last_name:
            continue
        last_name = entry.name
        yield entry
