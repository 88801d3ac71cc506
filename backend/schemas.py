from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from inspection_core.src.models import InspectionStatus


class ResultSubmit(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    item_id: str = Field(..., min_length=1)
    status: InspectionStatus
    note: Optional[str] = None


class InspectionCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    fleet_number: str = Field(..., min_length=1)
    inspector_name: str = Field(..., min_length=1)
    results: List[ResultSubmit] = Field(..., min_length=1)
    date: Optional[datetime] = Field(None, description="Defaults to now (UTC)")
    ai_summary: Optional[str] = None
