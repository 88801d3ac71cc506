"""Error types raised at the boundaries of the inspection core."""

from typing import Iterable


class InspectionError(Exception):
    """Base class for all inspection core errors."""


# ─── Configuration ───

class ConfigurationError(InspectionError):
    """Catalog or roster configuration is unusable."""


class UnresolvedVehicleType(ConfigurationError):
    def __init__(self, vehicle_type):
        self.vehicle_type = vehicle_type
        super().__init__(f"No checklist configured for vehicle type {vehicle_type!r}")


class DuplicateChecklistItem(ConfigurationError):
    def __init__(self, vehicle_type, item_id: str):
        self.vehicle_type = vehicle_type
        self.item_id = item_id
        super().__init__(f"Checklist item {item_id!r} defined twice for {vehicle_type!r}")


class UnknownCategory(ConfigurationError):
    def __init__(self, item_id: str, category: str):
        self.item_id = item_id
        self.category = category
        super().__init__(f"Checklist item {item_id!r} uses unknown category {category!r}")


class DuplicateFleetNumber(ConfigurationError):
    def __init__(self, fleet_number: str):
        self.fleet_number = fleet_number
        super().__init__(f"Fleet number {fleet_number!r} appears more than once in the roster")


# ─── Records ───

class MalformedRecord(InspectionError):
    """An inspection record does not match its vehicle type's checklist."""

    def __init__(
        self,
        record_id: str,
        missing_ids: Iterable[str] = (),
        unknown_ids: Iterable[str] = (),
        duplicate_ids: Iterable[str] = (),
        reason: str | None = None,
    ):
        self.record_id = record_id
        self.missing_ids = sorted(missing_ids)
        self.unknown_ids = sorted(unknown_ids)
        self.duplicate_ids = sorted(duplicate_ids)
        parts = []
        if reason:
            parts.append(reason)
        if self.missing_ids:
            parts.append(f"missing items {self.missing_ids}")
        if self.unknown_ids:
            parts.append(f"unknown items {self.unknown_ids}")
        if self.duplicate_ids:
            parts.append(f"duplicate items {self.duplicate_ids}")
        super().__init__(f"Inspection {record_id!r} is malformed: " + "; ".join(parts))


# ─── Filters ───

class InvalidDateBound(InspectionError, ValueError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid date bound {value!r}, expected YYYY-MM-DD")
