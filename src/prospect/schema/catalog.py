"""Sector catalog: the fixed table of clickable sectors on the PI-RADS map.

Each entry places one SectorKey on the reference image of its region as a
rectangle in percentage units (0-100) of that image. The values are
calibration data for the three map images (base, mid, apex) and are not
computed. ``CATALOG`` is built once at import and only read afterwards.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from prospect.errors import IncompleteSelection
from prospect.schema.sectors import REGIONS, SectorKey, sector_key


class SectorCatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    key: SectorKey
    x: float = Field(ge=0, le=100)
    y: float = Field(ge=0, le=100)
    width: float = Field(ge=0, le=100)
    height: float = Field(ge=0, le=100)

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height


# (id, region, side, zone, section, x, y, width, height)
_LAYOUT = [
    # ---------------- base ----------------
    ("base-afs-left", "base", "left", "anterior_fibromuscular_stroma", None, 35, 4, 12, 8),
    ("base-afs-right", "base", "right", "anterior_fibromuscular_stroma", None, 53, 4, 12, 8),
    ("base-left-tz-anterior", "base", "left", "transition", "anterior", 23, 24, 20, 20),
    ("base-left-tz-posterior", "base", "left", "transition", "posterior", 24, 50, 15, 8),
    ("base-left-pz-anterior", "base", "left", "peripheral", "anterior", 3, 42, 15, 6),
    ("base-left-pz-posterior-lateral", "base", "left", "peripheral", "posterior_lateral", 8, 62, 15, 15),
    ("base-left-pz-posterior-medial", "base", "left", "peripheral", "posterior_medial", 19, 86, 15, 10),
    ("base-left-cz", "base", "left", "central", None, 27, 60, 15, 10),
    ("base-right-tz-anterior", "base", "right", "transition", "anterior", 57, 24, 20, 20),
    ("base-right-tz-posterior", "base", "right", "transition", "posterior", 61, 50, 15, 8),
    ("base-right-pz-anterior", "base", "right", "peripheral", "anterior", 82, 42, 15, 6),
    ("base-right-pz-posterior-lateral", "base", "right", "peripheral", "posterior_lateral", 77, 62, 15, 15),
    ("base-right-pz-posterior-medial", "base", "right", "peripheral", "posterior_medial", 66, 86, 15, 10),
    ("base-right-cz", "base", "right", "central", None, 58, 60, 15, 10),
    # ---------------- mid ----------------
    ("mid-afs-left", "mid", "left", "anterior_fibromuscular_stroma", None, 36, 6, 12, 8),
    ("mid-afs-right", "mid", "right", "anterior_fibromuscular_stroma", None, 52, 6, 12, 8),
    ("mid-left-tz-anterior", "mid", "left", "transition", "anterior", 24, 26, 20, 20),
    ("mid-left-tz-posterior", "mid", "left", "transition", "posterior", 26, 47, 14, 11),
    ("mid-left-pz-anterior", "mid", "left", "peripheral", "anterior", 7, 39, 12, 8),
    ("mid-left-pz-posterior-lateral", "mid", "left", "peripheral", "posterior_lateral", 11, 60, 12, 10),
    ("mid-left-pz-posterior-medial", "mid", "left", "peripheral", "posterior_medial", 33, 62, 15, 20),
    ("mid-right-tz-anterior", "mid", "right", "transition", "anterior", 56, 26, 20, 20),
    ("mid-right-tz-posterior", "mid", "right", "transition", "posterior", 60, 47, 14, 11),
    ("mid-right-pz-anterior", "mid", "right", "peripheral", "anterior", 81, 39, 12, 8),
    ("mid-right-pz-posterior-lateral", "mid", "right", "peripheral", "posterior_lateral", 77, 60, 12, 10),
    ("mid-right-pz-posterior-medial", "mid", "right", "peripheral", "posterior_medial", 52, 62, 15, 20),
    # ---------------- apex ----------------
    ("apex-afs-left", "apex", "left", "anterior_fibromuscular_stroma", None, 35, 12, 14, 8),
    ("apex-afs-right", "apex", "right", "anterior_fibromuscular_stroma", None, 51, 12, 14, 8),
    ("apex-left-tz-anterior", "apex", "left", "transition", "anterior", 34, 27, 12, 8),
    ("apex-left-tz-posterior", "apex", "left", "transition", "posterior", 32, 40, 13, 12),
    ("apex-left-pz-anterior", "apex", "left", "peripheral", "anterior", 15, 25, 15, 9),
    ("apex-left-pz-posterior-lateral", "apex", "left", "peripheral", "posterior_lateral", 11, 56, 12, 10),
    ("apex-left-pz-posterior-medial", "apex", "left", "peripheral", "posterior_medial", 30, 63, 18, 12),
    ("apex-right-tz-anterior", "apex", "right", "transition", "anterior", 54, 27, 12, 8),
    ("apex-right-tz-posterior", "apex", "right", "transition", "posterior", 55, 40, 13, 12),
    ("apex-right-pz-anterior", "apex", "right", "peripheral", "anterior", 70, 25, 15, 9),
    ("apex-right-pz-posterior-lateral", "apex", "right", "peripheral", "posterior_lateral", 77, 56, 12, 10),
    ("apex-right-pz-posterior-medial", "apex", "right", "peripheral", "posterior_medial", 52, 63, 18, 12),
]


def _build_catalog() -> Tuple[SectorCatalogEntry, ...]:
    entries = []
    for entry_id, region, side, zone, section, x, y, w, h in _LAYOUT:
        entries.append(
            SectorCatalogEntry(
                id=entry_id,
                key=sector_key(region, side, zone, section),
                x=x, y=y, width=w, height=h,
            )
        )
    return tuple(entries)


CATALOG: Tuple[SectorCatalogEntry, ...] = _build_catalog()

_BY_REGION: Dict[str, Tuple[SectorCatalogEntry, ...]] = {
    region: tuple(e for e in CATALOG if e.key.region == region) for region in REGIONS
}
_BY_ID: Dict[str, SectorCatalogEntry] = {e.id: e for e in CATALOG}


def entries_for_region(region: str) -> Tuple[SectorCatalogEntry, ...]:
    if region not in _BY_REGION:
        raise IncompleteSelection("region", region)
    return _BY_REGION[region]


def lookup_by_geometry(region: str, x: float, y: float) -> Optional[SectorCatalogEntry]:
    """Return the entry of ``region`` whose rectangle holds (x, y).

    Entries are tested in catalog order, so on overlap the lowest index wins.
    """
    for entry in entries_for_region(region):
        if entry.contains(x, y):
            return entry
    return None


def lookup_by_id(entry_id: str) -> Optional[SectorCatalogEntry]:
    return _BY_ID.get(entry_id)
