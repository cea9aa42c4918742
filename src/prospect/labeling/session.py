"""One report and its labels, as edited by a single user.

Loading a report always starts a fresh LabelRecord. Sectors arrive either
from the map (catalog entry id or a click position) or typed in field by
field, in which case they are validated before anything changes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from prospect.errors import DuplicateSector, InvalidInputFormat, LabelingError, NoReportLoaded
from prospect.export.exporter import DEFAULT_LABEL_NAME, export_record, output_filename, to_json
from prospect.labeling.record import LabelRecord
from prospect.labeling.validator import validate_sector
from prospect.logging_config import get_logger
from prospect.schema.catalog import SectorCatalogEntry, lookup_by_geometry, lookup_by_id
from prospect.schema.models import Lesion
from prospect.schema.sectors import SectorKey
from prospect.schema.versions import DEFAULT_SCHEMA

log = get_logger(__name__)

TEXT_MEDIA_TYPE = "text/plain"


def read_report_file(path: Union[str, Path]) -> str:
    """Read a ``.txt`` report as UTF-8 text."""
    path = Path(path)
    if path.suffix.lower() != ".txt":
        raise InvalidInputFormat(f"{path.name}: please select a .txt file")
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InvalidInputFormat(f"{path.name}: not UTF-8 text") from e


class AnnotationSession:
    def __init__(self, schema: str = DEFAULT_SCHEMA, default_label_name: str = DEFAULT_LABEL_NAME):
        self.schema = schema
        self.default_label_name = default_label_name
        self.report_text: str = ""
        self.report_filename: Optional[str] = None
        self.record = LabelRecord(schema)

    @property
    def loaded(self) -> bool:
        return bool(self.report_text)

    # ------------------------- report -------------------------

    def load_report(self, text: str, filename: Optional[str] = None, media_type: str = TEXT_MEDIA_TYPE) -> None:
        if media_type != TEXT_MEDIA_TYPE:
            log.warning("report rejected", extra={"filename": filename, "media_type": media_type})
            raise InvalidInputFormat(f"please select a .txt file (got {media_type})")
        self.report_text = text
        self.report_filename = filename
        self.record = LabelRecord(self.schema)
        log.info("report loaded", extra={"filename": filename, "chars": len(text)})

    def load_report_file(self, path: Union[str, Path]) -> None:
        self.load_report(read_report_file(path), Path(path).name)

    # ------------------------- lesions -------------------------

    def add_lesion(self) -> Lesion:
        return self.record.lesions.add()

    def remove_lesion(self, lesion_id: int) -> None:
        self.record.lesions.remove(lesion_id)

    def update_lesion(self, lesion_id: int, **fields: Any) -> Lesion:
        return self.record.lesions.update(lesion_id, **fields)

    # ------------------------- sectors -------------------------

    def toggle_catalog_sector(self, lesion_id: int, entry_id: str) -> bool:
        """Toggle the sector of a map entry on the lesion. True if it was added."""
        lesion = self.record.lesions.get(lesion_id)
        entry = lookup_by_id(entry_id)
        if entry is None:
            raise LabelingError(f"no catalog sector {entry_id!r}")
        return lesion.sectors.toggle(entry.key)

    def click(self, lesion_id: int, region: str, x: float, y: float) -> Optional[SectorCatalogEntry]:
        """Toggle whatever sector lies under (x, y) on the region's map."""
        lesion = self.record.lesions.get(lesion_id)
        entry = lookup_by_geometry(region, x, y)
        if entry is not None:
            lesion.sectors.toggle(entry.key)
        return entry

    def add_manual_sector(
        self,
        lesion_id: int,
        region: Optional[str],
        side: Optional[str],
        zone: Optional[str],
        section: Optional[str] = None,
    ) -> SectorKey:
        lesion = self.record.lesions.get(lesion_id)
        try:
            key = validate_sector(region, side, zone, section)
        except LabelingError as e:
            log.warning("manual sector rejected", extra={"lesion_id": lesion_id, "reason": str(e)})
            raise
        if not lesion.sectors.add_if_absent(key):
            raise DuplicateSector(lesion_id, key.label())
        return key

    def remove_sector(self, lesion_id: int, index: int) -> SectorKey:
        return self.record.lesions.get(lesion_id).sectors.remove_at(index)

    # ------------------------- export -------------------------

    def export(self) -> Dict[str, Any]:
        return export_record(self.record)

    def export_filename(self) -> str:
        return output_filename(self.report_filename, self.default_label_name)

    def save(self, out_dir: Union[str, Path]) -> Path:
        if not self.loaded:
            raise NoReportLoaded("load a report before saving labels")
        out_dir = Path(out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = out_dir / self.export_filename()
        out_path.write_text(to_json(self.record), encoding="utf-8")
        log.info("labels saved", extra={"path": str(out_path), "lesions": len(self.record.lesions)})
        return out_path
