from pathlib import Path

import pandas as pd
from loguru import logger
from sqlmodel import Session, SQLModel, create_engine, select

from backend.models import InspectionRow, VehicleRow
from inspection_core.config.settings import DATABASE_URL, configure_logging, ensure_dirs
from inspection_core.src.analytics import last_inspection_dates
from inspection_core.src.fleet import build_roster, with_last_inspection
from inspection_core.src.models import Vehicle


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [col.strip().lower() for col in df.columns]
    return df


def validate_columns(df: pd.DataFrame) -> None:
    required = {
        "fleet_number",
        "license_plate",
        "type",
        "station",
        "model",
    }
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {sorted(missing)}")


def ensure_required_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    if "last_inspection_date" not in df.columns:
        df["last_inspection_date"] = ""

    df["fleet_number"] = df["fleet_number"].astype(str).str.strip()
    df["type"] = df["type"].astype(str).str.strip().str.upper()
    df = df.fillna("")
    return df


def parse_vehicles(df: pd.DataFrame) -> list[Vehicle]:
    return [
        Vehicle.model_validate(
            {
                "fleet_number": row["fleet_number"],
                "license_plate": str(row["license_plate"]),
                "type": row["type"],
                "station": str(row["station"]),
                "model": str(row["model"]),
                "last_inspection_date": str(row["last_inspection_date"]),
            }
        )
        for row in df.to_dict(orient="records")
    ]


def seed_vehicles(session: Session, csv_path: Path) -> int:
    df = pd.read_csv(csv_path, dtype=str)
    df = normalize_columns(df)
    validate_columns(df)
    df = ensure_required_columns(df)

    roster = build_roster(parse_vehicles(df))
    inspected = last_inspection_dates(row.to_record() for row in session.exec(select(InspectionRow)).all())
    for vehicle in roster.values():
        # Re-seeding never moves a date behind a stored row or inspection
        existing = session.get(VehicleRow, vehicle.fleet_number)
        if existing is not None:
            vehicle = with_last_inspection(vehicle, existing.last_inspection_date or "")
        vehicle = with_last_inspection(vehicle, inspected.get(vehicle.fleet_number, ""))
        session.merge(VehicleRow(**vehicle.model_dump()))
    session.commit()
    return len(roster)


def main() -> None:
    configure_logging()
    csv_path = Path(__file__).resolve().parent / "data" / "default_vehicles.csv"
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV not found at {csv_path}")

    if DATABASE_URL.startswith("sqlite"):
        ensure_dirs()
    engine = create_engine(DATABASE_URL)
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        count = seed_vehicles(session, csv_path)
    logger.info(f"Seeded {count} vehicles into {DATABASE_URL}")


if __name__ == "__main__":
    main()
