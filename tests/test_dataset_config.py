import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from prospect.config import AnnotatorConfig, load_config
from prospect.dataset.build import build_dataset
from prospect.labeling.session import AnnotationSession
from prospect.logging_config import StructuredFormatter, get_logger
from prospect.schema.versions import PROSPECT_V1


def _annotate(in_dir: Path, name: str, text: str) -> None:
    (in_dir / f"{name}.txt").write_text(text, encoding="utf-8")
    s = AnnotationSession()
    s.load_report(text, f"{name}.txt")
    lesion = s.add_lesion()
    s.update_lesion(lesion.id, pirads=3)
    s.save(in_dir)


def test_build_dataset(tmp_path: Path):
    in_dir = tmp_path / "reports"
    in_dir.mkdir()
    _annotate(in_dir, "a", "report a\n")
    _annotate(in_dir, "b", "report b\n")
    (in_dir / "c.txt").write_text("unlabeled", encoding="utf-8")
    (in_dir / "d.txt").write_text("broken label", encoding="utf-8")
    (in_dir / "d.json").write_text(json.dumps({"psa": 1}), encoding="utf-8")
    (in_dir / "e.txt").write_text("bad json", encoding="utf-8")
    (in_dir / "e.json").write_text("{not json", encoding="utf-8")

    out_path = tmp_path / "out" / "labels.jsonl"
    stats = build_dataset(str(in_dir), str(out_path), PROSPECT_V1)

    assert stats.written == 2
    assert stats.unlabeled == ["c"]
    assert sorted(stats.invalid) == ["d", "e"]
    rows = [json.loads(l) for l in out_path.read_text(encoding="utf-8").splitlines()]
    assert [r["report_text"] for r in rows] == ["report a", "report b"]
    assert rows[0]["label"]["lesions"][0]["pirads"] == 3


def test_config_defaults():
    cfg = load_config()
    assert cfg.schema_version == "prospect-v1"
    assert cfg.default_label_name == "label"


def test_load_config_yaml(tmp_path: Path):
    fp = tmp_path / "annotator.yaml"
    fp.write_text("schema_version: prospect-v2\nlog_level: debug\nport: 9000\n", encoding="utf-8")
    cfg = load_config(fp)
    assert cfg.schema_version == "prospect-v2"
    assert cfg.log_level == "DEBUG"
    assert cfg.port == 9000


def test_empty_config_file(tmp_path: Path):
    fp = tmp_path / "empty.yaml"
    fp.write_text("", encoding="utf-8")
    assert load_config(fp) == AnnotatorConfig()


def test_shipped_config_loads():
    cfg = load_config(Path(__file__).resolve().parents[1] / "configs" / "annotator.yaml")
    assert cfg.schema_version == "prospect-v1"


@pytest.mark.parametrize("body", [{"schema_version": "v3"}, {"colour": "red"}, {"port": 0}])
def test_config_rejects(body):
    with pytest.raises(ValidationError):
        AnnotatorConfig(**body)


def test_structured_formatter():
    log = get_logger("prospect.test", component="tests")
    record = logging.LogRecord("prospect.test", logging.INFO, __file__, 1, "lesion added", None, None)
    _, kwargs = log.process("lesion added", {"extra": {"lesion_id": 2}})
    record.extra_fields = kwargs["extra"]["extra_fields"]
    out = json.loads(StructuredFormatter().format(record))
    assert out["message"] == "lesion added"
    assert out["lesion_id"] == 2
    assert out["component"] == "tests"
    assert out["level"] == "INFO"
