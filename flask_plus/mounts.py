"""Ledger of registries mounted under an enhanced application or blueprint.

Every enhanced target owns one ledger recording its direct mounts. The
ledger is append-only; nested mounts are reached through the mounted
registry's own ledger when documents are composed.
"""
import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


def normalize_mount_path(mount_path: Optional[str]) -> str:
    """Return mount_path starting with '/' and without a trailing '/' (except root)."""
    path = mount_path or '/'
    if not path.startswith('/'):
        path = '/' + path
    if path.endswith('/') and len(path) > 1:
        path = path[:-1]
    return path


@dataclass(frozen=True)
class MountEntry:
    mount_path: str
    registry: Any


class MountLedger:
    def __init__(self):
        self._entries: List[MountEntry] = []

    def record(self, mount_path: Optional[str], registry: Any) -> MountEntry:
        entry = MountEntry(normalize_mount_path(mount_path), registry)
        self._entries.append(entry)
        logger.debug('Recorded mount at %s', entry.mount_path)
        return entry

    def entries(self) -> Tuple[MountEntry, ...]:
        return tuple(self._entries)

    def __iter__(self) -> Iterator[MountEntry]:
        return iter(self.entries())

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ['MountEntry', 'MountLedger', 'normalize_mount_path']
