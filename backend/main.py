from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
from io import BytesIO
from typing import Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlmodel import Session, SQLModel, create_engine, select

from backend.models import InspectionRow, VehicleRow
from backend.schemas import InspectionCreate
from inspection_core.config.settings import DATABASE_URL, configure_logging, ensure_dirs
from inspection_core.src.analytics import aggregate, alert_to_dict
from inspection_core.src.catalog import ChecklistCatalog, load_catalog
from inspection_core.src.date_filter import filter_by_range, newest_first
from inspection_core.src.errors import ConfigurationError, InvalidDateBound, MalformedRecord
from inspection_core.src.fleet import with_last_inspection
from inspection_core.src.models import InspectionRecord, InspectionResult, VehicleType
from inspection_core.src.pipeline import records_to_frame
from inspection_core.src.validation import validate_record


connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging()
    if DATABASE_URL.startswith("sqlite"):
        ensure_dirs()
    SQLModel.metadata.create_all(engine)
    logger.info(f"Inspection service ready ({engine.url.render_as_string(hide_password=True)})")
    yield


app = FastAPI(title="Fleet Inspection Analytics", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_session():
    with Session(engine) as session:
        yield session


@lru_cache(maxsize=1)
def get_catalog() -> ChecklistCatalog:
    return load_catalog()


def load_history(
    session: Session,
    start: Optional[str],
    end: Optional[str],
) -> list[InspectionRecord]:
    records = [row.to_record() for row in session.exec(select(InspectionRow)).all()]
    try:
        selected = filter_by_range(records, start, end)
    except InvalidDateBound as e:
        raise HTTPException(status_code=400, detail=str(e))
    return newest_first(selected)


def record_payload(record: InspectionRecord) -> dict:
    payload = record.model_dump(mode="json")
    payload["status"] = record.status.value
    return payload


@app.get("/checklists/{vehicle_type}")
def checklist(vehicle_type: VehicleType, catalog: ChecklistCatalog = Depends(get_catalog)):
    try:
        items = catalog.items_for(vehicle_type)
    except ConfigurationError as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail=str(e))
    return [item.model_dump() for item in items]


@app.get("/vehicles")
def vehicles(session: Session = Depends(get_session)):
    rows = session.exec(select(VehicleRow).order_by(VehicleRow.fleet_number)).all()
    return [row.to_vehicle().model_dump(mode="json") for row in rows]


@app.get("/inspections")
def inspections(
    start: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    end: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    session: Session = Depends(get_session),
):
    return [record_payload(record) for record in load_history(session, start, end)]


@app.post("/inspections", status_code=201)
def create_inspection(
    payload: InspectionCreate,
    session: Session = Depends(get_session),
    catalog: ChecklistCatalog = Depends(get_catalog),
):
    vehicle_row = session.get(VehicleRow, payload.fleet_number)
    if not vehicle_row:
        raise HTTPException(status_code=404, detail="No vehicle found with that fleet number.")
    vehicle = vehicle_row.to_vehicle()

    results = []
    for submitted in payload.results:
        try:
            item = catalog.get_item(vehicle.type, submitted.item_id)
        except ConfigurationError as e:
            logger.error(str(e))
            raise HTTPException(status_code=500, detail=str(e))
        results.append(
            InspectionResult(
                item_id=submitted.item_id,
                category=item.category if item else "",
                label=item.label if item else submitted.item_id,
                status=submitted.status,
                note=submitted.note,
            )
        )

    record = InspectionRecord(
        id=uuid4().hex,
        vehicle=vehicle,
        date=payload.date or datetime.now(timezone.utc),
        inspector_name=payload.inspector_name,
        results=results,
        ai_summary=payload.ai_summary,
    )
    try:
        validate_record(record, catalog)
    except MalformedRecord as e:
        raise HTTPException(
            status_code=422,
            detail={
                "message": str(e),
                "missing_ids": e.missing_ids,
                "unknown_ids": e.unknown_ids,
                "duplicate_ids": e.duplicate_ids,
            },
        )

    session.add(InspectionRow.from_record(record))
    updated = with_last_inspection(vehicle, record.date.date().isoformat())
    vehicle_row.last_inspection_date = updated.last_inspection_date
    session.add(vehicle_row)
    session.commit()

    logger.info(f"Inspection {record.id} for fleet {vehicle.fleet_number}: {record.status.value}")
    return record_payload(record)


@app.get("/dashboard")
def dashboard(
    start: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    end: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    limit: Optional[int] = Query(None, ge=0, description="Recent alerts to include"),
    session: Session = Depends(get_session),
    catalog: ChecklistCatalog = Depends(get_catalog),
):
    history = load_history(session, start, end)
    return aggregate(history, alert_limit=limit, catalog=catalog).to_dict()


@app.get("/alerts")
def alerts(
    limit: Optional[int] = Query(None, ge=0),
    session: Session = Depends(get_session),
    catalog: ChecklistCatalog = Depends(get_catalog),
):
    stats = aggregate(load_history(session, None, None), alert_limit=limit, catalog=catalog)
    return [alert_to_dict(record) for record in stats.recent_alerts]


@app.get("/export")
def export(
    start: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    end: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    format: str = Query("csv", pattern="^(csv|xlsx)$"),
    session: Session = Depends(get_session),
):
    df = records_to_frame(load_history(session, start, end))
    if format == "xlsx":
        buffer = BytesIO()
        df.to_excel(buffer, index=False, sheet_name="Inspections", engine="openpyxl")
        return Response(
            content=buffer.getvalue(),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": 'attachment; filename="inspections.xlsx"'},
        )
    return Response(
        content=df.to_csv(index=False),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="inspections.csv"'},
    )
