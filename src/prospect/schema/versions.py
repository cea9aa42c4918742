"""Export schema versions.

The downstream dataset has seen two incompatible label layouts. Each one is
pinned here under an explicit name; a record is always created against one
of them and the exporter never guesses.

Any change to a version's field lists MUST add a new version rather than edit
an existing one.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from prospect.errors import UnknownSchema


class SchemaVersion(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    binary_fields: Tuple[str, ...]
    size_field: str
    # free-text narrative key, None when the version has none
    text_field: Optional[str] = None
    # emit "section": null for zones without sections instead of omitting it
    null_section: bool = False


PROSPECT_V1 = SchemaVersion(
    name="prospect-v1",
    binary_fields=(
        "epe",
        "svi",
        "enlarged_lymph_nodes",
        "neurovascular_bundle_involvement",
        "bladder_neck_involvement",
        "rectal_wall_involvement",
    ),
    size_field="maximum_diameter",
)

PROSPECT_V2 = SchemaVersion(
    name="prospect-v2",
    binary_fields=("epe", "svi", "enlarged_lymph_nodes"),
    size_field="volume",
    text_field="main_findings",
    null_section=True,
)

SCHEMAS: Dict[str, SchemaVersion] = {s.name: s for s in (PROSPECT_V1, PROSPECT_V2)}
DEFAULT_SCHEMA = PROSPECT_V1.name


def get_schema(name: str) -> SchemaVersion:
    try:
        return SCHEMAS[name]
    except KeyError:
        raise UnknownSchema(f"unknown schema version {name!r}; known: {sorted(SCHEMAS)}") from None
