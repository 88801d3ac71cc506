"""Inspection data model, status classification and fleet analytics."""

from .analytics import FleetStats, aggregate, last_inspection_dates
from .catalog import ChecklistCatalog, load_catalog
from .classifier import classify, failed_results, has_anomaly
from .date_filter import filter_by_range, newest_first, parse_date_bound
from .models import (
    ChecklistItem,
    InspectionRecord,
    InspectionResult,
    InspectionStatus,
    Vehicle,
    VehicleType,
)
from .validation import validate_record

__all__ = [
    "ChecklistCatalog",
    "ChecklistItem",
    "FleetStats",
    "InspectionRecord",
    "InspectionResult",
    "InspectionStatus",
    "Vehicle",
    "VehicleType",
    "aggregate",
    "classify",
    "failed_results",
    "filter_by_range",
    "has_anomaly",
    "last_inspection_dates",
    "load_catalog",
    "newest_first",
    "parse_date_bound",
    "validate_record",
]
