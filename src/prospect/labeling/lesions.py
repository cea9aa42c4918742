"""Lesion store: ordered lesions keyed by numeric id."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from pydantic import ValidationError

from prospect.errors import InvalidValue, LesionNotFound, UnknownField
from prospect.labeling.sector_set import SectorSet
from prospect.logging_config import get_logger
from prospect.schema.models import Lesion
from prospect.schema.sectors import SectorKey

log = get_logger(__name__)


class LesionStore:
    """Lesions in creation order.

    New ids are max(existing) + 1. Removing the lesion with the highest id
    frees that id for the next ``add``; gaps below the maximum stay unused.
    """

    def __init__(self, size_field: str = "size"):
        self.size_field = size_field
        self._lesions: List[Lesion] = []

    def add(self) -> Lesion:
        new_id = max((l.id for l in self._lesions), default=0) + 1
        lesion = Lesion(id=new_id)
        self._lesions.append(lesion)
        log.debug("lesion added", extra={"lesion_id": new_id})
        return lesion

    def remove(self, lesion_id: int) -> None:
        before = len(self._lesions)
        self._lesions = [l for l in self._lesions if l.id != lesion_id]
        if len(self._lesions) != before:
            log.debug("lesion removed", extra={"lesion_id": lesion_id})

    def find(self, lesion_id: int) -> Optional[Lesion]:
        for lesion in self._lesions:
            if lesion.id == lesion_id:
                return lesion
        return None

    def get(self, lesion_id: int) -> Lesion:
        lesion = self.find(lesion_id)
        if lesion is None:
            raise LesionNotFound(lesion_id)
        return lesion

    def update(self, lesion_id: int, **fields: Any) -> Lesion:
        """Merge ``fields`` into the lesion. Nothing is applied unless all are valid.

        Accepted names: ``pirads``, ``size`` (or the schema's size field name)
        and ``sectors`` (iterable of SectorKey, deduplicated in order).
        """
        lesion = self.get(lesion_id)
        values: Dict[str, Any] = {
            "id": lesion.id,
            "pirads": lesion.pirads,
            "size": lesion.size,
            "sectors": lesion.sectors,
        }
        for name, value in fields.items():
            if name == self.size_field:
                name = "size"
            if name not in ("pirads", "size", "sectors"):
                raise UnknownField(name)
            if name == "sectors":
                value = list(value)
                if not all(isinstance(k, SectorKey) for k in value):
                    raise InvalidValue(f"lesion {lesion_id}: sectors must be SectorKey values")
                value = SectorSet(value)
            values[name] = value

        try:
            checked = Lesion(**values)
        except ValidationError as e:
            raise InvalidValue(f"lesion {lesion_id}: {e.errors()[0]['msg']}") from e

        lesion.pirads = checked.pirads
        lesion.size = checked.size
        lesion.sectors = checked.sectors
        log.debug("lesion updated", extra={"lesion_id": lesion_id, "fields": sorted(fields)})
        return lesion

    def adopt(self, lesion: Lesion) -> None:
        """Append an already built lesion, e.g. one read back from a saved label."""
        if self.find(lesion.id) is not None:
            raise InvalidValue(f"duplicate lesion id {lesion.id}")
        self._lesions.append(lesion)

    def ids(self) -> List[int]:
        return [l.id for l in self._lesions]

    def __iter__(self) -> Iterator[Lesion]:
        return iter(list(self._lesions))

    def __len__(self) -> int:
        return len(self._lesions)
