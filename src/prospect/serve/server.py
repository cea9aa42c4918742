from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from prospect.config import AnnotatorConfig, load_config
from prospect.errors import (
    DuplicateSector,
    InvalidInputFormat,
    LabelingError,
    LesionNotFound,
    NoReportLoaded,
    SectorIndexError,
)
from prospect.labeling.session import TEXT_MEDIA_TYPE, AnnotationSession
from prospect.logging_config import configure_logging, get_logger
from prospect.schema.catalog import entries_for_region
from prospect.schema.models import Lesion

log = get_logger(__name__)

app = FastAPI(title="PROSPECT annotator")

# one user, one report
session = AnnotationSession()
output_dir = Path(".")


class ReportIn(BaseModel):
    text: str
    filename: Optional[str] = None
    media_type: str = TEXT_MEDIA_TYPE

class FindingIn(BaseModel):
    value: Optional[str] = None

class MeasurementsIn(BaseModel):
    psa: Optional[float] = None
    prostate_volume: Optional[float] = None
    main_findings: Optional[str] = None

class LesionPatch(BaseModel):
    # extra keys go to LesionStore.update, which knows the schema's size name
    model_config = ConfigDict(extra="allow")

    pirads: Optional[int] = None
    size: Optional[float] = None

class CatalogToggle(BaseModel):
    entry_id: str

class MapClick(BaseModel):
    region: str
    x: float = Field(ge=0, le=100)
    y: float = Field(ge=0, le=100)

class ManualSector(BaseModel):
    region: Optional[str] = None
    side: Optional[str] = None
    zone: Optional[str] = None
    section: Optional[str] = None


_STATUS = [
    (LesionNotFound, 404),
    (SectorIndexError, 404),
    (DuplicateSector, 409),
    (NoReportLoaded, 409),
    (InvalidInputFormat, 415),
]


@app.exception_handler(LabelingError)
async def labeling_error(request: Request, exc: LabelingError):
    status = next((code for kind, code in _STATUS if isinstance(exc, kind)), 422)
    return JSONResponse({"error": type(exc).__name__, "detail": str(exc)}, status_code=status)


def lesion_json(lesion: Lesion):
    size_field = session.record.schema.size_field
    return {
        "id": lesion.id,
        "pirads": lesion.pirads,
        size_field: lesion.size,
        "sectors": [k.model_dump() | {"label": k.label()} for k in lesion.sectors],
    }


@app.post("/report")
def load_report(report: ReportIn):
    session.load_report(report.text, report.filename, report.media_type)
    return {"filename": report.filename, "schema": session.schema}

@app.get("/report")
def get_report():
    return {"filename": session.report_filename, "text": session.report_text}

@app.put("/findings/{name}")
def set_finding(name: str, body: FindingIn):
    session.record.set_finding(name, body.value)
    return {name: session.record.findings[name]}

@app.put("/measurements")
def set_measurements(body: MeasurementsIn):
    record = session.record
    record.update_measurements(**{name: getattr(body, name) for name in body.model_fields_set})
    return {"psa": record.psa, "prostate_volume": record.prostate_volume, "main_findings": record.main_findings}

@app.get("/catalog/{region}")
def catalog(region: str):
    return [e.model_dump() for e in entries_for_region(region)]


@app.get("/lesions")
def list_lesions():
    return [lesion_json(l) for l in session.record.lesions]

@app.post("/lesions", status_code=201)
def add_lesion():
    return lesion_json(session.add_lesion())

@app.patch("/lesions/{lesion_id}")
def update_lesion(lesion_id: int, body: LesionPatch):
    fields = {name: getattr(body, name) for name in body.model_fields_set}
    fields.update(body.model_extra or {})
    return lesion_json(session.update_lesion(lesion_id, **fields))

@app.delete("/lesions/{lesion_id}", status_code=204)
def remove_lesion(lesion_id: int):
    session.remove_lesion(lesion_id)


@app.post("/lesions/{lesion_id}/sectors/toggle")
def toggle_sector(lesion_id: int, body: CatalogToggle):
    added = session.toggle_catalog_sector(lesion_id, body.entry_id)
    return {"added": added, "lesion": lesion_json(session.record.lesions.get(lesion_id))}

@app.post("/lesions/{lesion_id}/sectors/click")
def click_sector(lesion_id: int, body: MapClick):
    entry = session.click(lesion_id, body.region, body.x, body.y)
    return {
        "hit": entry.id if entry else None,
        "lesion": lesion_json(session.record.lesions.get(lesion_id)),
    }

@app.post("/lesions/{lesion_id}/sectors", status_code=201)
def add_sector(lesion_id: int, body: ManualSector):
    session.add_manual_sector(lesion_id, body.region, body.side, body.zone, body.section)
    return lesion_json(session.record.lesions.get(lesion_id))

@app.delete("/lesions/{lesion_id}/sectors/{index}")
def remove_sector(lesion_id: int, index: int):
    session.remove_sector(lesion_id, index)
    return lesion_json(session.record.lesions.get(lesion_id))


@app.get("/export")
def export():
    return {"filename": session.export_filename(), "record": session.export()}

@app.post("/save")
def save():
    return {"path": str(session.save(output_dir))}


def configure(cfg: AnnotatorConfig) -> None:
    global session, output_dir
    configure_logging(cfg.log_level, structured=cfg.structured_logs)
    session = AnnotationSession(cfg.schema_version, cfg.default_label_name)
    output_dir = cfg.output_dir
    log.info("annotator configured", extra={"schema": cfg.schema_version})


if __name__ == "__main__":
    import uvicorn, argparse
    ap = argparse.ArgumentParser(); ap.add_argument("--config", default=None)
    ap.add_argument("--port", type=int, default=None)
    args = ap.parse_args()
    cfg = load_config(args.config)
    configure(cfg)
    uvicorn.run(app, host=cfg.host, port=args.port or cfg.port)
