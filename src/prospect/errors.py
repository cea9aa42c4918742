"""Exception hierarchy for the annotator."""

from __future__ import annotations

from typing import Optional


class LabelingError(Exception):
    """Base error for label editing and export."""

    pass


class SectorValidationError(LabelingError):
    """A manually entered sector was rejected."""

    pass


class IncompleteSelection(SectorValidationError):
    """Region, side or zone is missing or not recognized."""

    def __init__(self, field: str, value: Optional[str] = None):
        self.field = field
        self.value = value
        if value:
            super().__init__(f"unrecognized {field}: {value!r}")
        else:
            super().__init__(f"{field} is required")


class MissingRequiredSection(SectorValidationError):
    """Transition and peripheral zones need a section."""

    def __init__(self, zone: str, section: Optional[str] = None):
        self.zone = zone
        self.section = section
        super().__init__(f"zone {zone!r} requires a section (got {section!r})")


class DuplicateSector(LabelingError):
    """The sector is already attached to the lesion."""

    def __init__(self, lesion_id: int, label: str):
        self.lesion_id = lesion_id
        self.label = label
        super().__init__(f"lesion {lesion_id} already has sector {label}")


class SectorIndexError(LabelingError, IndexError):
    """No sector at that position in the lesion's list."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"sector index {index} out of range (have {size})")


class LesionNotFound(LabelingError):
    def __init__(self, lesion_id: int):
        self.lesion_id = lesion_id
        super().__init__(f"no lesion with id {lesion_id}")


class InvalidInputFormat(LabelingError):
    """Report or label input is not in an accepted format."""

    pass


class UnknownField(LabelingError):
    def __init__(self, name: str, schema: Optional[str] = None):
        self.name = name
        self.schema = schema
        where = f" in schema {schema}" if schema else ""
        super().__init__(f"unknown field {name!r}{where}")


class InvalidValue(LabelingError):
    """A field value failed its type or range constraint."""

    pass


class UnknownSchema(LabelingError):
    pass


class NoReportLoaded(LabelingError):
    pass
