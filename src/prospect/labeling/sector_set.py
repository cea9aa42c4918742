"""Ordered, duplicate-free set of sectors attached to one lesion."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from prospect.errors import SectorIndexError
from prospect.schema.sectors import SectorKey


class SectorSet:
    """Insertion-ordered sequence of SectorKey with no two equal entries.

    Every mutation goes through the equality check, so duplicates can't be
    introduced and never need to be cleaned up afterwards.
    """

    def __init__(self, keys: Optional[Iterable[SectorKey]] = None):
        self._keys: List[SectorKey] = []
        for key in keys or ():
            self.add_if_absent(key)

    def _index(self, key: SectorKey) -> int:
        for i, existing in enumerate(self._keys):
            if existing == key:
                return i
        return -1

    def toggle(self, key: SectorKey) -> bool:
        """Remove ``key`` if present, else append it. Returns True if added."""
        i = self._index(key)
        if i >= 0:
            del self._keys[i]
            return False
        self._keys.append(key)
        return True

    def add_if_absent(self, key: SectorKey) -> bool:
        if self._index(key) >= 0:
            return False
        self._keys.append(key)
        return True

    def remove_at(self, index: int) -> SectorKey:
        if not 0 <= index < len(self._keys):
            raise SectorIndexError(index, len(self._keys))
        return self._keys.pop(index)

    def as_list(self) -> List[SectorKey]:
        return list(self._keys)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, SectorKey) and self._index(key) >= 0

    def __iter__(self) -> Iterator[SectorKey]:
        return iter(list(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __getitem__(self, index: int) -> SectorKey:
        return self._keys[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SectorSet):
            return self._keys == other._keys
        return NotImplemented

    def __repr__(self) -> str:
        return f"SectorSet([{', '.join(k.label() for k in self._keys)}])"
