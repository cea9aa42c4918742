"""
Canonical export of a LabelRecord.

The output shape is fixed by the downstream dataset and is selected by the
record's schema version (see prospect.schema.versions):

  {
    "psa": 7.2, "prostate_volume": null,
    "epe": true, "svi": null, ...,          # every binary flag of the version
    "main_findings": null,                  # only for versions with free text
    "lesions": [
      {"id": 1, "pirads": 4, "maximum_diameter": 12.5,
       "sectors": [{"region": "base", "side": "left",
                    "zone": "peripheral", "section": "posterior_medial"}]}
    ]
  }

``import_record`` reads the same shape back, strictly, so saved labels can be
checked before they go into a dataset.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from prospect.errors import InvalidInputFormat, LabelingError
from prospect.labeling.record import MEASUREMENTS, LabelRecord
from prospect.labeling.sector_set import SectorSet
from prospect.schema.models import Lesion
from prospect.schema.sectors import SECTIONED_ZONES, SectorKey, sector_key
from prospect.schema.versions import SchemaVersion

DEFAULT_LABEL_NAME = "label"

_TO_BOOL = {"yes": True, "no": False}
_FROM_BOOL = {True: "yes", False: "no", None: ""}


# -------------------------- export --------------------------

def export_sector(key: SectorKey, schema: SchemaVersion) -> Dict[str, Any]:
    out: Dict[str, Any] = {"region": key.region, "side": key.side, "zone": key.zone}
    if key.zone in SECTIONED_ZONES:
        out["section"] = key.section
    elif schema.null_section:
        out["section"] = None
    return out


def export_lesion(lesion: Lesion, schema: SchemaVersion) -> Dict[str, Any]:
    return {
        "id": lesion.id,
        "pirads": lesion.pirads,
        schema.size_field: lesion.size,
        "sectors": [export_sector(k, schema) for k in lesion.sectors],
    }


def export_record(record: LabelRecord) -> Dict[str, Any]:
    """Pure transform from a LabelRecord to the canonical output dict."""
    schema = record.schema
    out: Dict[str, Any] = {
        "psa": record.psa,
        "prostate_volume": record.prostate_volume,
    }
    for name in schema.binary_fields:
        out[name] = _TO_BOOL.get(record.findings.get(name, ""))
    if schema.text_field:
        out[schema.text_field] = record.main_findings
    out["lesions"] = [export_lesion(l, schema) for l in record.lesions]
    return out


def to_json(record: LabelRecord) -> str:
    return json.dumps(export_record(record), indent=2)


def output_filename(input_filename: Optional[str], default: str = DEFAULT_LABEL_NAME) -> str:
    """``report_01.txt`` -> ``report_01.json``; no usable stem -> ``label.json``."""
    name = Path(input_filename).name if input_filename else ""
    stem, dot, _ = name.rpartition(".")
    if not dot:
        stem = name
    return f"{stem or default}.json"


# -------------------------- import --------------------------

def _require_keys(obj: Any, expected: List[str], where: str, optional: tuple = ()) -> None:
    if not isinstance(obj, dict):
        raise InvalidInputFormat(f"{where}: expected an object, got {type(obj).__name__}")
    missing = [k for k in expected if k not in obj and k not in optional]
    unknown = [k for k in obj if k not in expected]
    if missing:
        raise InvalidInputFormat(f"{where}: missing keys {missing}")
    if unknown:
        raise InvalidInputFormat(f"{where}: unknown keys {unknown}")


def _import_sector(data: Any, schema: SchemaVersion, where: str) -> SectorKey:
    optional = () if schema.null_section else ("section",)
    _require_keys(data, ["region", "side", "zone", "section"], where, optional=optional)
    if not all(isinstance(data[k], str) for k in ("region", "side", "zone")):
        raise InvalidInputFormat(f"{where}: region, side and zone must be strings")
    zone = data["zone"]
    if zone not in SECTIONED_ZONES and data.get("section") is not None:
        raise InvalidInputFormat(f"{where}: zone {zone!r} takes no section")
    try:
        return sector_key(data["region"], data["side"], zone, data.get("section"))
    except (ValidationError, LabelingError) as e:
        raise InvalidInputFormat(f"{where}: {e}") from e


def import_record(data: Any, schema: SchemaVersion) -> LabelRecord:
    """Rebuild a LabelRecord from its canonical export under ``schema``."""
    top = ["psa", "prostate_volume", *schema.binary_fields]
    if schema.text_field:
        top.append(schema.text_field)
    top.append("lesions")
    _require_keys(data, top, "record")

    record = LabelRecord(schema)
    try:
        for name in MEASUREMENTS:
            record.set_measurement(name, data[name])
        for name in schema.binary_fields:
            if data[name] is not None and not isinstance(data[name], bool):
                raise InvalidInputFormat(f"record: {name} must be true, false or null")
            record.set_finding(name, _FROM_BOOL[data[name]])
        if schema.text_field:
            record.set_main_findings(data[schema.text_field])

        if not isinstance(data["lesions"], list):
            raise InvalidInputFormat("record: lesions must be a list")
        for i, item in enumerate(data["lesions"]):
            where = f"lesions[{i}]"
            _require_keys(item, ["id", "pirads", schema.size_field, "sectors"], where)
            if not isinstance(item["sectors"], list):
                raise InvalidInputFormat(f"{where}: sectors must be a list")
            sectors = [_import_sector(s, schema, f"{where}.sectors[{j}]") for j, s in enumerate(item["sectors"])]
            if len(set(sectors)) != len(sectors):
                raise InvalidInputFormat(f"{where}: duplicate sectors")
            record.lesions.adopt(
                Lesion(id=item["id"], pirads=item["pirads"], size=item[schema.size_field], sectors=SectorSet(sectors))
            )
    except ValidationError as e:
        raise InvalidInputFormat(f"record: {e.errors()[0]['msg']}") from e
    except InvalidInputFormat:
        raise
    except LabelingError as e:
        raise InvalidInputFormat(f"record: {e}") from e
    return record
