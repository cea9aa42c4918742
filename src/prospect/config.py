"""Annotator settings, read from a YAML file.

Example (configs/annotator.yaml):

  schema_version: prospect-v1
  default_label_name: label
  output_dir: data/labels
  log_level: INFO
  structured_logs: true
  host: 127.0.0.1
  port: 8080
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from prospect.schema.versions import DEFAULT_SCHEMA, SCHEMAS


class AnnotatorConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    schema_version: str = DEFAULT_SCHEMA
    default_label_name: str = "label"
    output_dir: Path = Path(".")
    log_level: str = "INFO"
    structured_logs: bool = True
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=1, le=65535)

    @field_validator("schema_version")
    @classmethod
    def _known_schema(cls, v: str) -> str:
        if v not in SCHEMAS:
            raise ValueError(f"unknown schema version {v!r}; known: {sorted(SCHEMAS)}")
        return v

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()


def load_config(path: Optional[Union[str, Path]] = None) -> AnnotatorConfig:
    """Load settings from ``path``; defaults when no path is given."""
    if path is None:
        return AnnotatorConfig()
    with open(path, encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    return AnnotatorConfig(**cfg)
