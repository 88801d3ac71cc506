"""Write-path checks for inspection records."""

from collections import Counter

from .catalog import ChecklistCatalog
from .errors import MalformedRecord
from .models import InspectionRecord


def validate_record(record: InspectionRecord, catalog: ChecklistCatalog) -> InspectionRecord:
    """
    Check that a record has exactly one result per checklist item of its vehicle type.

    No default status is ever filled in for a missing item.

    Raises:
        MalformedRecord: empty results, missing, unknown or repeated item ids
        UnresolvedVehicleType: the vehicle type has no checklist
    """
    expected = catalog.item_ids(record.vehicle.type)

    if not record.results:
        raise MalformedRecord(record.id, missing_ids=expected, reason="no results")

    counts = Counter(r.item_id for r in record.results)
    missing = expected - counts.keys()
    unknown = counts.keys() - expected
    duplicates = [item_id for item_id, n in counts.items() if n > 1]

    if missing or unknown or duplicates:
        raise MalformedRecord(
            record.id,
            missing_ids=missing,
            unknown_ids=unknown,
            duplicate_ids=duplicates,
        )
    return record
