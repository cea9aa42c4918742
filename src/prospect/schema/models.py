from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal

from prospect.labeling.sector_set import SectorSet

BinaryChoice = Literal["yes", "no", ""]

UNSET = ""


class Lesion(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: int = Field(ge=1)
    pirads: Optional[int] = Field(default=None, ge=1, le=5)
    # maximum diameter (mm) or volume (cc), named by the export schema
    size: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    sectors: SectorSet = Field(default_factory=SectorSet)
