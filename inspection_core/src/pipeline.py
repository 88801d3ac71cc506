"""
Report Pipeline

Runs the reporting flow over an inspection history:
1. Load plain records (JSON export of the data store)
2. Filter by date range
3. Order newest first and aggregate
4. Export one row per checklist result (CSV / Excel)
"""

import json
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd
from loguru import logger

from ..config.settings import OUTPUT_DIR
from .analytics import FleetStats, aggregate
from .catalog import ChecklistCatalog
from .classifier import classify
from .date_filter import DateBound, filter_by_range, newest_first
from .models import InspectionRecord

EXPORT_COLUMNS = [
    "inspection_id",
    "fleet_number",
    "license_plate",
    "vehicle_type",
    "station",
    "date",
    "inspector",
    "overall_status",
    "item_id",
    "category",
    "item",
    "status",
    "note",
    "ai_summary",
]


def load_records(path: Path) -> list[InspectionRecord]:
    """Read a JSON list of inspection records."""
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    records = [InspectionRecord.model_validate(item) for item in raw]
    logger.info(f"Loaded {len(records)} inspections from {path}")
    return records


def build_report(
    records: Iterable[InspectionRecord],
    start: DateBound = None,
    end: DateBound = None,
    alert_limit: Optional[int] = None,
    catalog: Optional[ChecklistCatalog] = None,
) -> FleetStats:
    """
    Filter then aggregate an inspection history.

    Args:
        records: Inspection history in any order
        start, end: Optional inclusive calendar-day bounds
        alert_limit: Alert feed size (default from settings)
        catalog: Optional catalog for defensive category counting

    Returns:
        FleetStats over the filtered records, alerts newest first
    """
    selected = newest_first(filter_by_range(records, start, end))
    stats = aggregate(selected, alert_limit=alert_limit, catalog=catalog)
    logger.info(
        f"Report {start or '*'}..{end or '*'}: {stats.total} inspections, "
        f"{stats.ok_count} OK, {stats.nok_count} NOK"
    )
    return stats


def records_to_frame(records: Iterable[InspectionRecord]) -> pd.DataFrame:
    """Flatten inspections to one row per checklist result."""
    rows = []
    for record in records:
        vehicle = record.vehicle
        overall = classify(record).value
        for result in record.results:
            rows.append(
                {
                    "inspection_id": record.id,
                    "fleet_number": vehicle.fleet_number,
                    "license_plate": vehicle.license_plate,
                    "vehicle_type": vehicle.type.value,
                    "station": vehicle.station,
                    "date": record.date.isoformat(),
                    "inspector": record.inspector_name,
                    "overall_status": overall,
                    "item_id": result.item_id,
                    "category": result.category,
                    "item": result.label,
                    "status": result.status.value,
                    "note": result.note or "",
                    "ai_summary": record.ai_summary or "",
                }
            )
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_records(records: Iterable[InspectionRecord], path: Path | None = None) -> Path:
    """Write inspections to .csv or .xlsx (chosen by suffix)."""
    out_path = Path(path) if path else OUTPUT_DIR / "inspections.csv"
    out_path.parent.mkdir(parents=True, exist_ok=True)

    df = records_to_frame(records)
    suffix = out_path.suffix.lower()
    if suffix == ".xlsx":
        df.to_excel(out_path, index=False, sheet_name="Inspections", engine="openpyxl")
    elif suffix == ".csv":
        df.to_csv(out_path, index=False)
    else:
        raise ValueError(f"Unsupported export format: {out_path.suffix or '(none)'}")

    logger.info(f"Exported {len(df)} result rows to {out_path}")
    return out_path
