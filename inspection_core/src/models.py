"""Unified data models for fleet inspections."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VehicleType(str, Enum):
    BUS = "BUS"
    TRAM = "TRAM"


class InspectionStatus(str, Enum):
    OK = "OK"
    NOK = "NOK"


class _Record(BaseModel):
    # camelCase on the wire, snake_case in Python; frozen once built
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ─── Catalog ───

class ChecklistItem(_Record):
    """One inspectable point of a vehicle type's checklist."""
    id: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    label: str


# ─── Fleet ───

class Vehicle(_Record):
    """Fleet vehicle. Identity is the fleet number."""
    fleet_number: str = Field(..., min_length=1)
    license_plate: str
    type: VehicleType
    station: str = ""
    model: str = ""
    last_inspection_date: str = ""  # empty = never inspected


# ─── Inspections ───

class InspectionResult(_Record):
    """Outcome of a single checklist item, category/label copied at inspection time."""
    item_id: str
    category: str
    label: str
    status: InspectionStatus
    note: Optional[str] = None


class InspectionRecord(_Record):
    """One physical inspection event. Append-only."""
    id: str
    vehicle: Vehicle  # snapshot at inspection time
    date: datetime
    inspector_name: str
    results: list[InspectionResult] = Field(default_factory=list)
    ai_summary: Optional[str] = None

    @property
    def status(self) -> InspectionStatus:
        """Overall status, always derived from the results."""
        from .classifier import classify

        return classify(self)
