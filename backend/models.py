from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from inspection_core.src.models import InspectionRecord, Vehicle, VehicleType


class VehicleRow(SQLModel, table=True):
    __tablename__ = "vehicle"

    fleet_number: str = Field(primary_key=True)
    license_plate: str
    type: VehicleType
    station: str = ""
    model: str = ""
    last_inspection_date: str = ""

    def to_vehicle(self) -> Vehicle:
        return Vehicle(
            fleet_number=self.fleet_number,
            license_plate=self.license_plate,
            type=self.type,
            station=self.station,
            model=self.model,
            last_inspection_date=self.last_inspection_date or "",
        )


class InspectionRow(SQLModel, table=True):
    __tablename__ = "inspection"

    id: str = Field(primary_key=True)
    fleet_number: str = Field(index=True)
    date: str = Field(index=True)
    inspector_name: str
    vehicle: dict = Field(sa_column=Column(JSON, nullable=False))
    results: list = Field(sa_column=Column(JSON, nullable=False))
    ai_summary: Optional[str] = None

    @classmethod
    def from_record(cls, record: InspectionRecord) -> "InspectionRow":
        payload = record.model_dump(mode="json")
        return cls(
            id=record.id,
            fleet_number=record.vehicle.fleet_number,
            date=payload["date"],
            inspector_name=record.inspector_name,
            vehicle=payload["vehicle"],
            results=payload["results"],
            ai_summary=record.ai_summary,
        )

    def to_record(self) -> InspectionRecord:
        return InspectionRecord.model_validate(
            {
                "id": self.id,
                "vehicle": self.vehicle,
                "date": self.date,
                "inspector_name": self.inspector_name,
                "results": self.results,
                "ai_summary": self.ai_summary,
            }
        )
