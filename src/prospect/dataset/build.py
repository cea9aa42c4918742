"""
Assemble annotated reports into a JSONL dataset.

Pairs every <name>.txt report in --in_dir with the <name>.json label saved by
the annotator, checks the label against the export schema, and writes one line
per pair:

  {"report_text": "...", "label": {...canonical record...}}

Usage:
  python -m prospect.dataset.build \
    --in_dir data/reports --out_path data/dataset/labels.jsonl \
    --config configs/annotator.yaml
"""

from __future__ import annotations

import argparse
import glob
import json
import os
from dataclasses import dataclass, field
from typing import Dict, List

from prospect.config import load_config
from prospect.errors import InvalidInputFormat
from prospect.export.exporter import export_record, import_record
from prospect.labeling.session import read_report_file
from prospect.logging_config import configure_logging, get_logger
from prospect.schema.versions import SchemaVersion, get_schema

log = get_logger(__name__)


@dataclass
class BuildStats:
    written: int = 0
    unlabeled: List[str] = field(default_factory=list)
    invalid: Dict[str, str] = field(default_factory=dict)


def build_dataset(in_dir: str, out_path: str, schema: SchemaVersion) -> BuildStats:
    stats = BuildStats()
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    with open(out_path, "w", encoding="utf-8") as out:
        for fp in sorted(glob.glob(os.path.join(in_dir, "*.txt"))):
            name = os.path.splitext(os.path.basename(fp))[0]
            label_fp = os.path.join(in_dir, name + ".json")
            if not os.path.exists(label_fp):
                stats.unlabeled.append(name)
                continue
            try:
                text = read_report_file(fp)
                with open(label_fp, encoding="utf-8") as f:
                    raw = json.load(f)
                record = import_record(raw, schema)
            except (InvalidInputFormat, json.JSONDecodeError) as e:
                log.warning("label skipped", extra={"report": name, "reason": str(e)})
                stats.invalid[name] = str(e)
                continue
            out.write(json.dumps({"report_text": text.strip(), "label": export_record(record)}) + "\n")
            stats.written += 1

    log.info(
        "dataset written",
        extra={"path": out_path, "written": stats.written, "unlabeled": len(stats.unlabeled), "invalid": len(stats.invalid)},
    )
    return stats


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--in_dir", required=True)
    ap.add_argument("--out_path", required=True)
    ap.add_argument("--config", default=None)
    ap.add_argument("--schema", default=None, help="override the config's schema_version")
    args = ap.parse_args()

    cfg = load_config(args.config)
    configure_logging(cfg.log_level, structured=cfg.structured_logs)
    stats = build_dataset(args.in_dir, args.out_path, get_schema(args.schema or cfg.schema_version))
    print(f"Wrote {stats.written} examples ({len(stats.unlabeled)} unlabeled, {len(stats.invalid)} invalid).")


if __name__ == "__main__":
    main()
