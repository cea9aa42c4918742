"""Checks for sectors entered field by field instead of picked on the map."""

from __future__ import annotations

from typing import Optional

from prospect.errors import IncompleteSelection
from prospect.schema.sectors import REGIONS, SIDES, ZONES, SectorKey, sector_key


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def validate_sector(
    region: Optional[str],
    side: Optional[str],
    zone: Optional[str],
    section: Optional[str] = None,
) -> SectorKey:
    """Return the canonical SectorKey for a manual entry.

    Raises IncompleteSelection when region, side or zone is empty or unknown,
    and MissingRequiredSection when a transition/peripheral zone has no valid
    section. A section given for central or AFS zones is dropped silently.
    """
    region, side, zone, section = _clean(region), _clean(side), _clean(zone), _clean(section)

    for field, value, allowed in (("region", region, REGIONS), ("side", side, SIDES), ("zone", zone, ZONES)):
        if value not in allowed:
            raise IncompleteSelection(field, value or None)

    return sector_key(region, side, zone, section or None)
