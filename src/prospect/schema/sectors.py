"""Sector identity: vocabularies, the SectorKey value type and its constructor.

A sector is named by region, side, zone and, for the transition and peripheral
zones only, a section. ``sector_key`` is the one place that turns loose values
into a SectorKey; the catalog table and the manual-entry validator both go
through it.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from prospect.errors import MissingRequiredSection

Region = Literal["apex", "mid", "base"]
Side = Literal["left", "right"]
Zone = Literal["transition", "peripheral", "central", "anterior_fibromuscular_stroma"]
Section = Literal["anterior", "posterior_medial", "posterior_lateral", "posterior"]

REGIONS = ("apex", "mid", "base")
SIDES = ("left", "right")
ZONES = ("transition", "peripheral", "central", "anterior_fibromuscular_stroma")
SECTIONS = ("anterior", "posterior_medial", "posterior_lateral", "posterior")

# only these zones are subdivided into sections
SECTIONED_ZONES = frozenset({"transition", "peripheral"})


class SectorKey(BaseModel):
    """Structural identity of a sector. Equal iff all four fields are equal."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    region: Region
    side: Side
    zone: Zone
    section: Optional[Section] = None

    @model_validator(mode="after")
    def _section_matches_zone(self) -> "SectorKey":
        if self.zone in SECTIONED_ZONES and self.section is None:
            raise ValueError(f"zone {self.zone!r} requires a section")
        if self.zone not in SECTIONED_ZONES and self.section is not None:
            raise ValueError(f"zone {self.zone!r} takes no section")
        return self

    def label(self) -> str:
        tag = f"{self.region[0].upper()}-{self.side[0].upper()}-{self.zone.upper()}"
        if self.section:
            tag += f"-{self.section}"
        return tag


def sector_key(region: str, side: str, zone: str, section: Optional[str] = None) -> SectorKey:
    """Build a SectorKey, normalizing ``section`` against ``zone``.

    Sectioned zones need one of SECTIONS, else MissingRequiredSection.
    Any section given for the other zones is dropped.
    """
    if zone in SECTIONED_ZONES:
        if section not in SECTIONS:
            raise MissingRequiredSection(zone, section or None)
    else:
        section = None
    return SectorKey(region=region, side=side, zone=zone, section=section)
