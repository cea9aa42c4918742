"""LabelRecord: the full annotation of one report."""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

from prospect.errors import InvalidValue, UnknownField
from prospect.labeling.lesions import LesionStore
from prospect.logging_config import get_logger
from prospect.schema.models import UNSET
from prospect.schema.versions import DEFAULT_SCHEMA, SchemaVersion, get_schema

log = get_logger(__name__)

MEASUREMENTS = ("psa", "prostate_volume")
BINARY_CHOICES = ("yes", "no", UNSET)


def _check_measurement(name: str, value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidValue(f"{name} must be a number, got {value!r}")
    # inf would serialize as the non-JSON token Infinity
    if not math.isfinite(value) or value < 0:
        raise InvalidValue(f"{name} must be a finite non-negative number, got {value!r}")
    return float(value)


class LabelRecord:
    """Global findings plus lesions, bound to one export schema version."""

    def __init__(self, schema: SchemaVersion | str = DEFAULT_SCHEMA):
        if isinstance(schema, str):
            schema = get_schema(schema)
        self.schema = schema
        self.findings: Dict[str, str] = {name: UNSET for name in schema.binary_fields}
        self.psa: Optional[float] = None
        self.prostate_volume: Optional[float] = None
        self.main_findings: Optional[str] = None
        self.lesions = LesionStore(size_field=schema.size_field)

    def set_finding(self, name: str, value: Optional[str]) -> None:
        if name not in self.findings:
            raise UnknownField(name, self.schema.name)
        value = value or UNSET
        if value not in BINARY_CHOICES:
            raise InvalidValue(f"{name} must be one of 'yes', 'no' or unset, got {value!r}")
        self.findings[name] = value
        log.debug("finding set", extra={"field": name, "value": value})

    def set_measurement(self, name: str, value: Optional[float]) -> None:
        if name not in MEASUREMENTS:
            raise UnknownField(name, self.schema.name)
        setattr(self, name, _check_measurement(name, value))

    def _check_text(self, text: Optional[str]) -> Optional[str]:
        if self.schema.text_field is None:
            raise UnknownField("main_findings", self.schema.name)
        if text is not None and not isinstance(text, str):
            raise InvalidValue(f"main_findings must be text, got {type(text).__name__}")
        return text or None

    def set_main_findings(self, text: Optional[str]) -> None:
        self.main_findings = self._check_text(text)

    def update_measurements(self, **fields: Any) -> None:
        """Set any of psa, prostate_volume and main_findings together.

        Every value is checked first; if one is rejected none are applied.
        """
        checked: Dict[str, Any] = {}
        for name, value in fields.items():
            if name == "main_findings":
                checked[name] = self._check_text(value)
            elif name in MEASUREMENTS:
                checked[name] = _check_measurement(name, value)
            else:
                raise UnknownField(name, self.schema.name)
        for name, value in checked.items():
            setattr(self, name, value)
        log.debug("measurements set", extra={"fields": sorted(checked)})
